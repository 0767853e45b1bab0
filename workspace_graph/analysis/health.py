"""Repository health: dependency counts, depth, complexity and duplicate versions."""

from __future__ import annotations

from collections import deque

from workspace_graph.models import EdgeType
from workspace_graph.analysis.graph_models import (
    DependencyGraph,
    DuplicateEntry,
    RepositoryMetrics,
)


def calculate_repository_metrics(graph: DependencyGraph) -> list[RepositoryMetrics]:
    """One RepositoryMetrics per repository, in first-seen node order."""
    metrics: dict[str, RepositoryMetrics] = {}
    duplicated = set(find_duplicate_dependencies(graph))

    for node in graph.nodes.values():
        repo = metrics.get(node.repository)
        if repo is None:
            repo = metrics[node.repository] = RepositoryMetrics(
                repository=node.repository,
                package_manager=node.package_manager,
            )
        repo.dependent_count += len(node.dependents)
        repo.health.total_dependencies += 1
        if node.name in duplicated:
            repo.health.duplicate_count += 1

    for edge in graph.edges:
        source = graph.nodes[edge.source]
        repo = metrics[source.repository]
        repo.dependency_count += 1
        if graph.nodes[edge.target].repository != source.repository:
            repo.cross_repo_dependencies += 1

        if edge.edge_type is EdgeType.DIRECT:
            repo.health.direct_dependencies += 1
        elif edge.edge_type is EdgeType.DEV:
            repo.health.dev_dependencies += 1
        elif edge.edge_type is EdgeType.PEER:
            repo.health.peer_dependencies += 1
        else:
            repo.health.transitive_dependencies += 1

    calculator = DepthCalculator(graph)
    depths: dict[str, list[int]] = {name: [] for name in metrics}
    for node_id, node in graph.nodes.items():
        depths[node.repository].append(calculator.depth(node_id))

    for name, repo in metrics.items():
        repo_depths = depths[name]
        if repo_depths:
            repo.health.max_dependency_depth = max(repo_depths)
            repo.health.average_dependency_depth = sum(repo_depths) / len(repo_depths)
        # Simplified cyclomatic complexity: E - N + 2 (one component)
        repo.cyclomatic_complexity = max(
            1, repo.dependency_count - repo.health.total_dependencies + 2,
        )

    return list(metrics.values())


def find_duplicate_dependencies(graph: DependencyGraph) -> dict[str, list[DuplicateEntry]]:
    """Package names declared at more than one distinct version."""
    by_name: dict[str, list[DuplicateEntry]] = {}
    for node_id, node in graph.nodes.items():
        by_name.setdefault(node.name, []).append(DuplicateEntry(
            version=node.version,
            repository=node.repository,
            node_id=node_id,
            declared_by=list(dict.fromkeys(
                graph.nodes[dep_id].repository for dep_id in node.dependents
            )),
        ))

    return {
        name: entries for name, entries in by_name.items()
        if len({e.version for e in entries}) > 1
    }


class DepthCalculator:
    """Longest simple dependency chain below a node.

    A path-local visited set stops re-entry into a node already on the
    current chain, so a cycle caps that branch instead of recursing forever.
    Results are cached only for nodes from which no cycle is reachable;
    their depth does not depend on the path that led to them.
    """

    def __init__(self, graph: DependencyGraph):
        self.graph = graph
        self._cacheable = nodes_without_reachable_cycle(graph)
        self._cache: dict[str, int] = {}

    def depth(self, node_id: str, path: set[str] | None = None) -> int:
        if node_id in self._cache:
            return self._cache[node_id]

        path = set() if path is None else path
        path.add(node_id)
        best = 0
        for dep_id in self.graph.nodes[node_id].dependencies:
            if dep_id in path:
                continue
            best = max(best, self.depth(dep_id, path) + 1)
        path.discard(node_id)

        if node_id in self._cacheable:
            self._cache[node_id] = best
        return best


def nodes_without_reachable_cycle(graph: DependencyGraph, along_dependents: bool = False) -> set[str]:
    """Nodes from which no cycle can be reached along ``dependencies``
    (or along ``dependents`` when ``along_dependents`` is set)."""
    if along_dependents:
        outgoing = {node_id: node.dependents for node_id, node in graph.nodes.items()}
        incoming = {node_id: node.dependencies for node_id, node in graph.nodes.items()}
    else:
        outgoing = {node_id: node.dependencies for node_id, node in graph.nodes.items()}
        incoming = {node_id: node.dependents for node_id, node in graph.nodes.items()}

    # Peel sinks backwards; whatever is never peeled sits on or before a cycle
    remaining = {node_id: len(targets) for node_id, targets in outgoing.items()}
    queue = deque(node_id for node_id, count in remaining.items() if count == 0)
    peeled: set[str] = set()

    while queue:
        node_id = queue.popleft()
        peeled.add(node_id)
        for parent_id in incoming[node_id]:
            remaining[parent_id] -= 1
            if remaining[parent_id] == 0:
                queue.append(parent_id)

    return peeled
