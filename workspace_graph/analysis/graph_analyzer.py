"""Graph analyzer: read-only analyses over a built workspace dependency graph."""

from __future__ import annotations

from typing import Any

from workspace_graph.models import EdgeType
from workspace_graph.analysis.cycles import detect_cycles
from workspace_graph.analysis.graph_models import (
    CrossRepoLink,
    DependencyCycle,
    DependencyGraph,
    DuplicateEntry,
    ImpactAnalysis,
    LinkedDependency,
    RepositoryMetrics,
)
from workspace_graph.analysis.health import (
    calculate_repository_metrics,
    find_duplicate_dependencies,
)
from workspace_graph.analysis.impact import (
    analyze_impact,
    find_all_paths,
    find_shortest_path,
)


class GraphAnalyzer:
    """Analyses over a DependencyGraph. Never mutates the graph."""

    def __init__(self, graph: DependencyGraph):
        self.graph = graph

    def detect_cycles(self) -> list[DependencyCycle]:
        return detect_cycles(self.graph)

    def find_cross_repo_links(self) -> list[CrossRepoLink]:
        """Group cross-repository edges by (source repo, target repo)."""
        links: dict[tuple[str, str], CrossRepoLink] = {}

        for edge in self.graph.edges:
            source = self.graph.nodes[edge.source]
            target = self.graph.nodes[edge.target]
            if source.repository == target.repository:
                continue

            key = (source.repository, target.repository)
            link = links.get(key)
            if link is None:
                link = links[key] = CrossRepoLink(
                    source_repo=source.repository,
                    target_repo=target.repository,
                )
            link.dependencies.append(LinkedDependency(
                source=source.id,
                target=target.id,
                source_package=source.name,
                target_package=target.name,
                version=target.version,
                edge_type=edge.edge_type,
            ))

        for link in links.values():
            if all(d.edge_type is EdgeType.TRANSITIVE for d in link.dependencies):
                link.link_type = "transitive"

        return list(links.values())

    def calculate_repository_metrics(self) -> list[RepositoryMetrics]:
        return calculate_repository_metrics(self.graph)

    def analyze_impact(self, node_id: str) -> ImpactAnalysis | None:
        return analyze_impact(self.graph, node_id)

    def find_duplicate_dependencies(self) -> dict[str, list[DuplicateEntry]]:
        return find_duplicate_dependencies(self.graph)

    def find_shortest_path(self, from_id: str, to_id: str) -> list[str] | None:
        return find_shortest_path(self.graph, from_id, to_id)

    def find_all_paths(self, from_id: str, max_depth: int = 10) -> list[list[str]]:
        return find_all_paths(self.graph, from_id, max_depth)

    def generate_summary(self, top_n: int = 10) -> dict[str, Any]:
        """Headline numbers plus the most connected nodes.

        Returns: {total_repositories, total_dependencies, cross_repo_links,
        cycles, average_dependencies_per_repo, most_depended_on, most_dependent}
        """
        nodes = self.graph.nodes
        repositories = {node.repository for node in nodes.values()}

        most_depended_on = sorted(
            ({"node": node_id, "count": len(node.dependents)} for node_id, node in nodes.items()),
            key=lambda x: -x["count"],
        )[:top_n]
        most_dependent = sorted(
            ({"node": node_id, "count": len(node.dependencies)} for node_id, node in nodes.items()),
            key=lambda x: -x["count"],
        )[:top_n]

        return {
            "total_repositories": len(repositories),
            "total_dependencies": len(nodes),
            "cross_repo_links": self.graph.metadata.cross_repo_links,
            "cycles": len(self.detect_cycles()),
            "average_dependencies_per_repo": (
                len(nodes) / len(repositories) if repositories else 0.0
            ),
            "most_depended_on": most_depended_on,
            "most_dependent": most_dependent,
        }

    def generate_visualization_data(self) -> dict[str, list[dict[str, Any]]]:
        """Project the graph into {nodes, edges} for a network-graph front end."""
        nodes = [
            {
                "id": node.id,
                "label": node.name,
                "group": node.repository,
                "value": len(node.dependents) + 1,  # size by dependents
            }
            for node in self.graph.nodes.values()
        ]
        edges = [
            {
                "from": edge.source,
                "to": edge.target,
                "label": None if edge.edge_type is EdgeType.DIRECT else edge.edge_type.value,
                "dashes": edge.edge_type is EdgeType.DEV,
            }
            for edge in self.graph.edges
        ]
        return {"nodes": nodes, "edges": edges}
