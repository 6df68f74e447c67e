"""Final per-project analyzer output."""

from __future__ import annotations

from dataclasses import dataclass, field

from gradle_inspector.models.issue import Issue
from gradle_inspector.models.package import Package
from gradle_inspector.models.project import Project


@dataclass
class ProjectAnalyzerResult:
    project: Project
    packages: list[Package] = field(default_factory=list)  # sorted by identifier
    issues: list[Issue] = field(default_factory=list)
