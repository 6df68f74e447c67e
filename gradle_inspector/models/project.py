"""Project, scope, and dependency tree types."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from gradle_inspector.models.identifier import Identifier
from gradle_inspector.models.issue import Issue
from gradle_inspector.models.vcs import VcsInfo


class PackageLinkage(Enum):
    """How a dependency is linked into its consumer's build output."""

    PROJECT_STATIC = "PROJECT_STATIC"
    PROJECT_DYNAMIC = "PROJECT_DYNAMIC"
    STATIC = "STATIC"
    DYNAMIC = "DYNAMIC"


@dataclass
class PackageReference:
    """A node in a scope's dependency tree.

    The same identifier may occur in several branches; the tree is never
    collapsed into a graph.
    """

    id: Identifier
    linkage: PackageLinkage = PackageLinkage.DYNAMIC
    dependencies: list[PackageReference] = field(default_factory=list)
    issues: list[Issue] = field(default_factory=list)

    def walk(self):
        """Yield this reference and all transitive references, depth first."""
        yield self
        for dep in self.dependencies:
            yield from dep.walk()


@dataclass
class Scope:
    name: str
    dependencies: list[PackageReference] = field(default_factory=list)

    def collect_ids(self) -> set[Identifier]:
        return {ref.id for root in self.dependencies for ref in root.walk()}


@dataclass
class Project:
    id: Identifier
    definition_file_path: str = ""
    vcs: VcsInfo = VcsInfo.EMPTY
    vcs_processed: VcsInfo = VcsInfo.EMPTY
    homepage_url: str = ""
    scopes: list[Scope] = field(default_factory=list)

    def collect_ids(self) -> set[Identifier]:
        ids: set[Identifier] = set()
        for scope in self.scopes:
            ids |= scope.collect_ids()
        return ids
