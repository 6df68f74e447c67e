"""Graph builder — canonical scopes and the identifier to POM lookup table."""

from gradle_inspector.engines.graph.builder import GraphBuilder, GraphBuildResult
from gradle_inspector.engines.graph.excludes import ScopeExcludes

__all__ = ["GraphBuildResult", "GraphBuilder", "ScopeExcludes"]
