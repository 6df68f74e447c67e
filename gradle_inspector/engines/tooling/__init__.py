"""Gradle tooling session — run Gradle and load its raw dependency tree."""

from gradle_inspector.engines.tooling.models import RawConfiguration, RawDependency, RawModel
from gradle_inspector.engines.tooling.session import (
    ToolingResult,
    ToolingSession,
    load_dependency_tree,
)

__all__ = [
    "RawConfiguration",
    "RawDependency",
    "RawModel",
    "ToolingResult",
    "ToolingSession",
    "load_dependency_tree",
]
