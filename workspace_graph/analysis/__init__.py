"""Graph construction and analysis."""

from workspace_graph.analysis.dependency_graph import (
    DependencyGraphBuilder,
    GraphAssembler,
    build_dependency_graph,
)
from workspace_graph.analysis.graph_analyzer import GraphAnalyzer

__all__ = [
    "DependencyGraphBuilder",
    "GraphAnalyzer",
    "GraphAssembler",
    "build_dependency_graph",
]
