"""GraphBuilder — raw Gradle trees to canonical scopes and package references."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

import structlog

from gradle_inspector.engines.issues import log_issue
from gradle_inspector.engines.tooling.models import RawDependency, RawModel
from gradle_inspector.models import (
    Identifier,
    Issue,
    PackageLinkage,
    PackageReference,
    Scope,
    Severity,
)

log = structlog.get_logger("gradle_inspector.engine")

PROJECT_TYPE = "Gradle"
PACKAGE_TYPE = "Maven"


@dataclass
class GraphBuildResult:
    """Scopes plus what metadata resolution needs to know about them.

    ``descriptor_locations`` maps each external identifier to the first POM
    location seen for it and is read-only. ``external_ids`` lists every
    external identifier reached, in first-seen order, with or without a
    known POM location. ``unresolved_ids`` holds the external identifiers
    Gradle failed to resolve wherever they occur.
    """

    scopes: list[Scope]
    descriptor_locations: Mapping[Identifier, str]
    external_ids: list[Identifier]
    issues: list[Issue] = field(default_factory=list)
    unresolved_ids: frozenset[Identifier] = frozenset()


@dataclass
class _Traversal:
    """Mutable state of one :meth:`GraphBuilder.build` call."""

    locations: dict[Identifier, str] = field(default_factory=dict)
    external: dict[Identifier, None] = field(default_factory=dict)
    failed: set[Identifier] = field(default_factory=set)
    resolved: set[Identifier] = field(default_factory=set)
    issues: list[Issue] = field(default_factory=list)
    reported: set[tuple[Severity, str]] = field(default_factory=set)

    def report(self, issue: Issue) -> None:
        """Collect and log *issue* unless an equal one was already collected."""
        key = (issue.severity, issue.message)
        if key not in self.reported:
            self.reported.add(key)
            self.issues.append(issue)
            log_issue(issue)


class GraphBuilder:
    """Build canonical dependency trees from a :class:`RawModel`.

    *excludes* is a predicate on scope names; excluded scopes are dropped
    before their trees are visited. Scopes without dependencies are left out.
    Issues attach to every reference they concern but are collected once.
    """

    def __init__(
        self,
        excludes: Callable[[str], bool] | None = None,
        source: str = PROJECT_TYPE,
    ) -> None:
        self._excludes = excludes
        self._source = source

    def build(self, model: RawModel) -> GraphBuildResult:
        state = _Traversal()
        scopes: dict[str, Scope] = {}

        for config in model.configurations:
            if self._excludes is not None and self._excludes(config.name):
                log.debug("graph.scope_excluded", scope=config.name)
                continue
            if config.name in scopes:
                log.debug("graph.duplicate_scope", scope=config.name)
                continue
            refs = self._to_package_refs(config.dependencies, (), state)
            if not refs:
                log.debug("graph.empty_scope", scope=config.name)
                continue
            scopes[config.name] = Scope(name=config.name, dependencies=refs)

        return GraphBuildResult(
            scopes=[scopes[name] for name in sorted(scopes)],
            descriptor_locations=MappingProxyType(state.locations),
            external_ids=list(state.external),
            issues=state.issues,
            unresolved_ids=frozenset(state.failed - state.resolved),
        )

    def _to_package_refs(
        self,
        deps: list[RawDependency],
        ancestors: tuple[Identifier, ...],
        state: _Traversal,
    ) -> list[PackageReference]:
        refs: list[PackageReference] = []
        seen: set[Identifier] = set()

        for dep in deps:
            if dep.local_path is not None:
                id = Identifier(PROJECT_TYPE, dep.group_id, dep.artifact_id, dep.version)
                linkage = PackageLinkage.PROJECT_DYNAMIC
            else:
                id = Identifier(PACKAGE_TYPE, dep.group_id, dep.artifact_id, dep.version)
                linkage = PackageLinkage.DYNAMIC
                state.external.setdefault(id, None)
                (state.failed if dep.error else state.resolved).add(id)
                if dep.pom_file:
                    state.locations.setdefault(id, dep.pom_file)

            # Siblings are a set: a repeated identifier under one parent is dropped.
            if id in seen:
                continue
            seen.add(id)

            ref_issues = self._node_issues(id, dep)
            for issue in ref_issues:
                state.report(issue)

            if id in ancestors:
                state.report(
                    Issue(
                        self._source,
                        f"Dependency cycle detected at '{id.to_coordinates()}'; "
                        "its dependencies are not listed again.",
                        Severity.WARNING,
                    )
                )
                children: list[PackageReference] = []
            else:
                children = self._to_package_refs(dep.dependencies, (*ancestors, id), state)

            refs.append(
                PackageReference(id=id, linkage=linkage, dependencies=children, issues=ref_issues)
            )

        return refs

    def _node_issues(self, id: Identifier, dep: RawDependency) -> list[Issue]:
        node_issues = []
        if dep.error:
            node_issues.append(
                Issue(self._source, f"{id.to_coordinates()}: {dep.error}", Severity.ERROR)
            )
        if dep.warning:
            node_issues.append(
                Issue(self._source, f"{id.to_coordinates()}: {dep.warning}", Severity.WARNING)
            )
        return node_issues
