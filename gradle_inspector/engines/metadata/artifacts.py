"""Find artifacts in the local Maven repository and the Gradle cache."""

from __future__ import annotations

from pathlib import Path

from gradle_inspector.models import Identifier


class ArtifactCache:
    """Read-only view of the local artifact caches.

    Gradle only downloads an artifact when it is not already present in the
    local Maven repository, so that is searched first.
    """

    def __init__(self, maven_repository: Path, gradle_home: Path) -> None:
        self.maven_repository = maven_repository
        self.gradle_cache = gradle_home / "caches" / "modules-2" / "files-2.1"

    def find_artifact(self, id: Identifier, extension: str = "pom") -> Path | None:
        return self.find_in_maven_repository(id, extension) or self.find_in_gradle_cache(
            id, extension
        )

    def find_pom(self, group_id: str, artifact_id: str, version: str) -> Path | None:
        return self.find_artifact(Identifier("Maven", group_id, artifact_id, version))

    def find_in_maven_repository(self, id: Identifier, extension: str = "pom") -> Path | None:
        if not (id.namespace and id.name and id.version):
            return None
        path = (
            self.maven_repository.joinpath(*id.namespace.split("."))
            / id.name
            / id.version
            / f"{id.name}-{id.version}.{extension}"
        )
        return path if path.is_file() else None

    def find_in_gradle_cache(self, id: Identifier, extension: str = "pom") -> Path | None:
        if not (id.namespace and id.name and id.version):
            return None
        # Each file sits in a directory named after its SHA-1.
        version_dir = self.gradle_cache / id.namespace / id.name / id.version
        for candidate in sorted(version_dir.glob(f"*/{id.name}-{id.version}.{extension}")):
            if candidate.is_file():
                return candidate
        return None
