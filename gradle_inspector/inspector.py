"""GradleInspector — resolve a Gradle project's dependencies end to end."""

from __future__ import annotations

import asyncio
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import httpx
import structlog

from gradle_inspector.config import InspectorConfig
from gradle_inspector.engines.graph import GraphBuilder, ScopeExcludes
from gradle_inspector.engines.issues import IssueCollector, merge_packages
from gradle_inspector.engines.metadata import ArtifactCache, MetadataResolver
from gradle_inspector.engines.tooling import RawModel, load_dependency_tree
from gradle_inspector.models import (
    Identifier,
    Package,
    Project,
    ProjectAnalyzerResult,
    Severity,
    VcsInfo,
)
from gradle_inspector.vcs import detect_working_tree

log = structlog.get_logger("gradle_inspector.engine")

MANAGER_NAME = "GradleInspector"
PACKAGE_SOURCE = "Gradle"

# Build files come before settings files: a settings file only counts for a
# directory that has no build file.
GRADLE_BUILD_FILES = ("build.gradle", "build.gradle.kts")
GRADLE_SETTINGS_FILES = ("settings.gradle", "settings.gradle.kts")
DEFINITION_FILES = GRADLE_BUILD_FILES + GRADLE_SETTINGS_FILES


def find_definition_file(project_dir: Path) -> Path | None:
    for name in DEFINITION_FILES:
        candidate = project_dir / name
        if candidate.is_file():
            return candidate
    return None


class GradleInspector:
    """Pipeline: Gradle tooling session → graph builder → metadata resolver.

    Only :class:`~gradle_inspector.exceptions.ToolingFailure` escapes
    :meth:`resolve_dependencies`; everything else ends up as issues on the
    returned result.
    """

    def __init__(
        self,
        config: InspectorConfig | None = None,
        *,
        analysis_root: Path | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or InspectorConfig()
        self.analysis_root = analysis_root
        self._transport = transport
        self._excludes = ScopeExcludes(self.config.exclude_scopes)
        self._locks: dict[Path, asyncio.Lock] = {}
        self._lock_users: dict[Path, int] = {}

    async def resolve_dependencies(self, definition_file: Path) -> list[ProjectAnalyzerResult]:
        """Resolve the project defined by *definition_file* (or a project directory)."""
        project_dir = definition_file if definition_file.is_dir() else definition_file.parent
        project_dir = project_dir.resolve()

        async with self._directory_lock(project_dir):
            model = await asyncio.to_thread(
                load_dependency_tree,
                project_dir,
                gradle_version=self.config.gradle_version,
                timeout=self.config.timeout,
                gradle_home=self.config.gradle_home,
                cache_dir=self.config.cache_dir,
            )

        return [await self._analyze(definition_file, project_dir, model)]

    @asynccontextmanager
    async def _directory_lock(self, project_dir: Path) -> AsyncIterator[None]:
        """Serialize Gradle runs per directory; the lock is dropped with its last user."""
        lock = self._locks.setdefault(project_dir, asyncio.Lock())
        self._lock_users[project_dir] = self._lock_users.get(project_dir, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[project_dir] -= 1
            if not self._lock_users[project_dir]:
                del self._lock_users[project_dir]
                del self._locks[project_dir]

    async def _analyze(
        self, definition_file: Path, project_dir: Path, model: RawModel
    ) -> ProjectAnalyzerResult:
        issues = IssueCollector()
        for message in dict.fromkeys(model.errors):
            issues.add(MANAGER_NAME, message, Severity.ERROR)
        for message in dict.fromkeys(model.warnings):
            issues.add(MANAGER_NAME, message, Severity.WARNING)

        graph = GraphBuilder(self._excludes, source=PACKAGE_SOURCE).build(model)
        issues.extend(graph.issues)

        project = Project(
            id=Identifier(MANAGER_NAME, model.group, model.name, model.version),
            definition_file_path=self._definition_file_path(definition_file),
            vcs=VcsInfo.EMPTY,
            vcs_processed=await asyncio.to_thread(detect_working_tree, project_dir),
            scopes=graph.scopes,
        )

        log.info(
            "inspector.graph_built",
            project=project.id.to_coordinates(),
            scopes=len(graph.scopes),
            external_ids=len(graph.external_ids),
        )

        # Gradle already reported these; their POMs were never downloaded.
        unresolved = [Package.placeholder(id) for id in sorted(graph.unresolved_ids)]

        async with httpx.AsyncClient(
            timeout=self.config.checksum_timeout,
            follow_redirects=True,
            transport=self._transport,
        ) as client:
            resolver = MetadataResolver(
                ArtifactCache(self.config.maven_repository, self.config.gradle_home),
                client,
                checksum_algorithm=self.config.checksum_algorithm,
                source=PACKAGE_SOURCE,
            )
            packages, package_issues = await resolver.resolve_all(
                [id for id in graph.external_ids if id not in graph.unresolved_ids],
                graph.descriptor_locations,
                concurrency=self.config.concurrency,
            )
        issues.extend(package_issues)

        return ProjectAnalyzerResult(
            project=project,
            packages=merge_packages([*packages, *unresolved]),
            issues=issues.issues,
        )

    def _definition_file_path(self, definition_file: Path) -> str:
        if definition_file.is_dir():
            definition_file = find_definition_file(definition_file) or definition_file
        if self.analysis_root is None:
            return definition_file.name
        try:
            return Path(
                os.path.relpath(definition_file.resolve(), self.analysis_root.resolve())
            ).as_posix()
        except ValueError:
            return definition_file.as_posix()
