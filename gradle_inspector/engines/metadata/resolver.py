"""MetadataResolver — POM metadata and remote artifacts for external identifiers."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path

import httpx
import structlog

from gradle_inspector.engines.issues import create_and_log_issue
from gradle_inspector.engines.metadata.artifacts import ArtifactCache
from gradle_inspector.engines.metadata.checksum import DEFAULT_ALGORITHM, create_remote_artifact
from gradle_inspector.engines.metadata.pom import EffectiveModel, PomModelBuilder
from gradle_inspector.exceptions import DescriptorNotFound, DescriptorParseError
from gradle_inspector.models import Identifier, Issue, Package, RemoteArtifact, VcsInfo
from gradle_inspector.vcs import parse_scm_connection, process_package_vcs

log = structlog.get_logger("gradle_inspector.engine")

_POM_EXTENSION = ".pom"
_BINARY_EXTENSION = ".jar"
_SOURCES_MARKER = "-sources"


@dataclass
class Resolution:
    """Outcome for one identifier: a package plus the issues met on the way."""

    package: Package
    issues: list[Issue] = field(default_factory=list)


def derive_artifact_urls(pom_url: str) -> tuple[str, str]:
    """Return ``(binary_url, sources_url)`` for a remote POM location."""
    base = pom_url.removesuffix(_POM_EXTENSION)
    return f"{base}{_BINARY_EXTENSION}", f"{base}{_SOURCES_MARKER}{_BINARY_EXTENSION}"


def parse_authors(model: EffectiveModel) -> set[str]:
    authors = set()
    if model.organization:
        authors.add(model.organization)
    for dev in model.developers:
        author = dev.organization or dev.name
        if author:
            authors.add(author)
    return authors


def parse_licenses(model: EffectiveModel) -> set[str]:
    """Declared licenses as a raw set; Maven lists alternatives, not a conjunction."""
    licenses = set()
    for lic in model.licenses:
        declared = lic.name or lic.url or lic.comments
        if declared:
            licenses.add(declared)
    return licenses


class MetadataResolver:
    """Resolve package metadata for external Maven identifiers.

    Failures are kept local: a missing or broken POM turns into a
    placeholder package plus an ERROR issue, a missing checksum into
    ``Hash.NONE``.
    """

    def __init__(
        self,
        cache: ArtifactCache,
        client: httpx.AsyncClient,
        *,
        checksum_algorithm: str = DEFAULT_ALGORITHM,
        source: str = "Gradle",
    ) -> None:
        self._cache = cache
        self._client = client
        self._algorithm = checksum_algorithm
        self._source = source
        self._model_builder = PomModelBuilder(cache.find_pom)

    # ── public ─────────────────────────────────────────────────────────────

    async def resolve(self, id: Identifier, pom_location: str | None = None) -> Resolution:
        """Resolve one identifier. *pom_location* is the remote POM URL, if known."""
        try:
            model = await asyncio.to_thread(self._load_model, id)
        except DescriptorNotFound as exc:
            return self._placeholder(id, str(exc))
        except DescriptorParseError as exc:
            return self._placeholder(
                id, f"Unable to build the Maven model for '{id.to_coordinates()}': {exc}"
            )

        package = self._to_package(id, model)

        if pom_location:
            binary_url, sources_url = derive_artifact_urls(pom_location)
            package.binary_artifact, package.source_artifact = await asyncio.gather(
                create_remote_artifact(self._client, binary_url, self._algorithm),
                create_remote_artifact(self._client, sources_url, self._algorithm),
            )
        else:
            package.binary_artifact = RemoteArtifact.EMPTY
            package.source_artifact = RemoteArtifact.EMPTY

        return Resolution(package=package)

    async def resolve_all(
        self,
        ids: Iterable[Identifier],
        pom_locations: Mapping[Identifier, str],
        *,
        concurrency: int,
    ) -> tuple[list[Package], list[Issue]]:
        """Resolve *ids* with at most *concurrency* identifiers in flight.

        Each identifier gets its own issue buffer; the buffers are merged in
        identifier order once all work is done, so the result does not depend
        on scheduling.
        """
        sem = asyncio.Semaphore(concurrency)

        async def _resolve_one(id: Identifier) -> Resolution:
            async with sem:
                try:
                    return await self.resolve(id, pom_locations.get(id))
                except Exception as exc:
                    log.exception("metadata.resolve_failed", id=id.to_coordinates())
                    return self._placeholder(
                        id, f"Unable to resolve metadata for '{id.to_coordinates()}': {exc}"
                    )

        unique_ids = sorted(dict.fromkeys(ids))
        resolutions = await asyncio.gather(*(_resolve_one(id) for id in unique_ids))

        packages = [r.package for r in resolutions]
        issues = [issue for r in resolutions for issue in r.issues]
        log.info(
            "metadata.resolved",
            packages=len(packages),
            placeholders=sum(1 for p in packages if p.is_placeholder),
        )
        return packages, issues

    # ── internal ───────────────────────────────────────────────────────────

    def _load_model(self, id: Identifier) -> EffectiveModel:
        pom_file: Path | None = self._cache.find_artifact(id, "pom")
        if pom_file is None:
            raise DescriptorNotFound(id.to_coordinates())
        return self._model_builder.build(pom_file)

    def _placeholder(self, id: Identifier, message: str) -> Resolution:
        issue = create_and_log_issue(self._source, message)
        return Resolution(package=Package.placeholder(id), issues=[issue])

    @staticmethod
    def _to_package(id: Identifier, model: EffectiveModel) -> Package:
        scm = model.original_scm
        browsable_scm_url = scm.url if scm else ""
        vcs = (
            parse_scm_connection(scm.connection or scm.developer_connection, scm.tag)
            if scm
            else VcsInfo.EMPTY
        )
        vcs_processed = process_package_vcs(vcs, browsable_scm_url, model.url)

        return Package(
            id=id,
            authors=parse_authors(model),
            declared_licenses=parse_licenses(model),
            description=model.description,
            homepage_url=model.url,
            vcs=vcs,
            vcs_processed=vcs_processed,
        )
