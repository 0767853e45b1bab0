"""Data models for the workspace dependency graph and the analyses over it."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Mapping

from workspace_graph.models import EdgeType, PackageManager


def make_node_id(repository: str, name: str, version: str) -> str:
    return f"{repository}:{name}@{version}"


@dataclass(frozen=True)
class DependencyNode:
    id: str
    name: str
    version: str
    repository: str
    package_manager: PackageManager = PackageManager.UNKNOWN
    dependencies: tuple[str, ...] = ()  # ids this node depends on
    dependents: tuple[str, ...] = ()    # ids depending on this node

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "version": self.version,
            "repository": self.repository,
            "package_manager": self.package_manager.value,
            "dependencies": list(self.dependencies),
            "dependents": list(self.dependents),
        }


@dataclass(frozen=True)
class DependencyEdge:
    source: str  # dependent
    target: str  # dependency
    edge_type: EdgeType = EdgeType.DIRECT
    version_constraint: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "from": self.source,
            "to": self.target,
            "type": self.edge_type.value,
            "version_constraint": self.version_constraint,
        }


@dataclass(frozen=True)
class GraphMetadata:
    workspace_id: str
    generated_at: datetime
    total_nodes: int = 0
    total_edges: int = 0
    cross_repo_links: int = 0

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["generated_at"] = self.generated_at.isoformat()
        return data


@dataclass(frozen=True)
class DependencyGraph:
    """Immutable snapshot produced by the graph builder."""
    nodes: Mapping[str, DependencyNode]
    edges: tuple[DependencyEdge, ...]
    metadata: GraphMetadata

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [node.to_dict() for node in self.nodes.values()],
            "edges": [edge.to_dict() for edge in self.edges],
            "metadata": self.metadata.to_dict(),
        }


# ── Analysis results ─────────────────────────────────────────


@dataclass
class DependencyCycle:
    nodes: list[str]
    length: int
    repositories: list[str]
    severity: str  # "low" | "medium" | "high"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class LinkedDependency:
    source: str
    target: str
    source_package: str
    target_package: str
    version: str
    edge_type: EdgeType = EdgeType.DIRECT


@dataclass
class CrossRepoLink:
    source_repo: str
    target_repo: str
    dependencies: list[LinkedDependency] = field(default_factory=list)
    link_type: str = "direct"  # "direct" | "transitive"

    def to_dict(self) -> dict[str, Any]:
        return {
            "source_repo": self.source_repo,
            "target_repo": self.target_repo,
            "link_type": self.link_type,
            "dependencies": [
                {
                    "from": dep.source,
                    "to": dep.target,
                    "from_package": dep.source_package,
                    "to_package": dep.target_package,
                    "version": dep.version,
                    "type": dep.edge_type.value,
                }
                for dep in self.dependencies
            ],
        }


@dataclass
class DependencyHealth:
    total_dependencies: int = 0
    direct_dependencies: int = 0
    dev_dependencies: int = 0
    peer_dependencies: int = 0
    transitive_dependencies: int = 0
    duplicate_count: int = 0
    max_dependency_depth: int = 0
    average_dependency_depth: float = 0.0


@dataclass
class RepositoryMetrics:
    repository: str
    package_manager: PackageManager = PackageManager.UNKNOWN
    dependency_count: int = 0
    dependent_count: int = 0
    cross_repo_dependencies: int = 0
    cyclomatic_complexity: int = 1
    health: DependencyHealth = field(default_factory=DependencyHealth)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["package_manager"] = self.package_manager.value
        return data


@dataclass
class ImpactAnalysis:
    target_node: str
    direct_impact: list[str] = field(default_factory=list)
    transitive_impact: list[str] = field(default_factory=list)
    affected_repositories: list[str] = field(default_factory=list)
    impact_score: int = 0  # 0-100
    critical_path: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class DuplicateEntry:
    version: str
    repository: str  # owner of the package
    node_id: str
    declared_by: list[str] = field(default_factory=list)  # repositories depending on this version


# ── Build results ────────────────────────────────────────────


@dataclass
class FetchFailure:
    repository: str
    error: str


@dataclass
class BuildResult:
    graph: DependencyGraph
    failures: list[FetchFailure] = field(default_factory=list)

    @property
    def failed_repositories(self) -> list[str]:
        return [f.repository for f in self.failures]

    def to_dict(self) -> dict[str, Any]:
        data = self.graph.to_dict()
        data["failures"] = [asdict(f) for f in self.failures]
        return data
