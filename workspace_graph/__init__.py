"""workspace-graph: cross-repository dependency graphs for multi-repo workspaces."""

from workspace_graph.models import (
    BuildOptions,
    DependencyKind,
    EdgeType,
    Manifest,
    ManifestEntry,
    PackageManager,
    Repository,
)
from workspace_graph.analysis import (
    DependencyGraphBuilder,
    GraphAnalyzer,
    GraphAssembler,
    build_dependency_graph,
)

__version__ = "0.1.0"

__all__ = [
    "BuildOptions",
    "DependencyGraphBuilder",
    "DependencyKind",
    "EdgeType",
    "GraphAnalyzer",
    "GraphAssembler",
    "Manifest",
    "ManifestEntry",
    "PackageManager",
    "Repository",
    "build_dependency_graph",
]
