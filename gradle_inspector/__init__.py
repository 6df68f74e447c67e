"""gradle-inspector: Gradle dependency graphs as a tool-agnostic package model."""

__version__ = "0.1.0"

from gradle_inspector.config import InspectorConfig
from gradle_inspector.exceptions import (
    ChecksumUnavailable,
    DescriptorNotFound,
    DescriptorParseError,
    InspectorError,
    ToolingFailure,
)
from gradle_inspector.inspector import GradleInspector

__all__ = [
    "ChecksumUnavailable",
    "DescriptorNotFound",
    "DescriptorParseError",
    "GradleInspector",
    "InspectorConfig",
    "InspectorError",
    "ToolingFailure",
]
