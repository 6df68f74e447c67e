"""Shared pytest fixtures for gradle-inspector tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from gradle_inspector.engines.metadata import ArtifactCache


def pom_xml(
    group_id: str = "com.x",
    artifact_id: str = "lib",
    version: str = "1.0",
    *,
    body: str = "",
    parent: tuple[str, str, str] | None = None,
    namespaced: bool = True,
    project_attrs: str = "",
) -> str:
    """Render a minimal POM; *body* is inserted verbatim inside <project>."""
    ns = ' xmlns="http://maven.apache.org/POM/4.0.0"' if namespaced else ""
    parent_xml = ""
    if parent is not None:
        parent_xml = (
            f"<parent><groupId>{parent[0]}</groupId><artifactId>{parent[1]}</artifactId>"
            f"<version>{parent[2]}</version></parent>"
        )
    coords = f"<groupId>{group_id}</groupId>" if group_id else ""
    coords += f"<artifactId>{artifact_id}</artifactId>"
    coords += f"<version>{version}</version>" if version else ""
    return (
        f'<?xml version="1.0" encoding="UTF-8"?>\n'
        f"<project{ns}{project_attrs}><modelVersion>4.0.0</modelVersion>"
        f"{parent_xml}{coords}{body}</project>\n"
    )


@pytest.fixture
def maven_repo(tmp_path) -> Path:
    repo = tmp_path / "m2"
    repo.mkdir()
    return repo


@pytest.fixture
def gradle_home(tmp_path) -> Path:
    home = tmp_path / "gradle-home"
    home.mkdir()
    return home


@pytest.fixture
def artifact_cache(maven_repo, gradle_home) -> ArtifactCache:
    return ArtifactCache(maven_repo, gradle_home)


@pytest.fixture
def install_pom(maven_repo):
    """Write a POM into the local Maven repository layout and return its path."""

    def _install(group_id: str, artifact_id: str, version: str, content: str) -> Path:
        target = maven_repo.joinpath(*group_id.split(".")) / artifact_id / version
        target.mkdir(parents=True, exist_ok=True)
        path = target / f"{artifact_id}-{version}.pom"
        path.write_text(content)
        return path

    return _install


@pytest.fixture
def make_pom():
    return pom_xml
