"""Metadata resolver — POM metadata, artifact URLs and remote checksums."""

from gradle_inspector.engines.metadata.artifacts import ArtifactCache
from gradle_inspector.engines.metadata.checksum import (
    create_remote_artifact,
    fetch_checksum,
    parse_checksum,
)
from gradle_inspector.engines.metadata.pom import EffectiveModel, PomModelBuilder, parse_pom
from gradle_inspector.engines.metadata.resolver import (
    MetadataResolver,
    Resolution,
    derive_artifact_urls,
)

__all__ = [
    "ArtifactCache",
    "EffectiveModel",
    "MetadataResolver",
    "PomModelBuilder",
    "Resolution",
    "create_remote_artifact",
    "derive_artifact_urls",
    "fetch_checksum",
    "parse_checksum",
    "parse_pom",
]
