"""Canonical, tool-agnostic package model."""

from gradle_inspector.models.identifier import Identifier
from gradle_inspector.models.issue import Issue, Severity
from gradle_inspector.models.package import Hash, Package, RemoteArtifact
from gradle_inspector.models.project import PackageLinkage, PackageReference, Project, Scope
from gradle_inspector.models.result import ProjectAnalyzerResult
from gradle_inspector.models.vcs import VcsInfo

__all__ = [
    "Hash",
    "Identifier",
    "Issue",
    "Package",
    "PackageLinkage",
    "PackageReference",
    "Project",
    "ProjectAnalyzerResult",
    "RemoteArtifact",
    "Scope",
    "Severity",
    "VcsInfo",
]
