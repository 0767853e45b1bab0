"""Circular dependency detection with canonical deduplication and severity tiers."""

from __future__ import annotations

from workspace_graph.analysis.graph_models import DependencyCycle, DependencyGraph

# Single-repository cycles with at least this many nodes are "medium"
MEDIUM_CYCLE_LENGTH = 6


def detect_cycles(graph: DependencyGraph) -> list[DependencyCycle]:
    """Detect circular dependencies.

    A DFS is started from every node; each back edge to a node on the active
    path yields the sub-path as a cycle. Cycles are rotated to begin at their
    smallest node id so the same cycle reached from several starts is
    reported once.
    """
    seen: set[tuple[str, ...]] = set()
    cycles: list[DependencyCycle] = []

    for start_id in graph.nodes:
        for cycle_nodes in _cycles_from(graph, start_id):
            key = _canonical(cycle_nodes)
            if key in seen:
                continue
            seen.add(key)
            cycles.append(_classify(graph, list(key)))

    return cycles


def classify_severity(length: int, repository_count: int) -> str:
    if repository_count > 1:
        return "high"
    if length >= MEDIUM_CYCLE_LENGTH:
        return "medium"
    return "low"


def _cycles_from(graph: DependencyGraph, start_id: str) -> list[list[str]]:
    found: list[list[str]] = []
    expanded: set[str] = set()
    path: list[str] = []
    on_path: set[str] = set()

    def dfs(node_id: str) -> None:
        expanded.add(node_id)
        path.append(node_id)
        on_path.add(node_id)

        for dep_id in graph.nodes[node_id].dependencies:
            if dep_id in on_path:
                found.append(path[path.index(dep_id):])
            elif dep_id not in expanded:
                dfs(dep_id)

        path.pop()
        on_path.discard(node_id)

    dfs(start_id)
    return found


def _canonical(cycle_nodes: list[str]) -> tuple[str, ...]:
    idx = cycle_nodes.index(min(cycle_nodes))
    return tuple(cycle_nodes[idx:] + cycle_nodes[:idx])


def _classify(graph: DependencyGraph, cycle_nodes: list[str]) -> DependencyCycle:
    repositories = list(dict.fromkeys(graph.nodes[n].repository for n in cycle_nodes))
    return DependencyCycle(
        nodes=cycle_nodes,
        length=len(cycle_nodes),
        repositories=repositories,
        severity=classify_severity(len(cycle_nodes), len(repositories)),
    )
