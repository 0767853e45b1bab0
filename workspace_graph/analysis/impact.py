"""Change-impact analysis and path queries."""

from __future__ import annotations

from collections import deque

from workspace_graph.analysis.graph_models import DependencyGraph, ImpactAnalysis
from workspace_graph.analysis.health import nodes_without_reachable_cycle

# impact_score weights; the score is normalised by their sum
DIRECT_IMPACT_WEIGHT = 2
TRANSITIVE_IMPACT_WEIGHT = 1


def analyze_impact(graph: DependencyGraph, node_id: str) -> ImpactAnalysis | None:
    """Who is affected if ``node_id`` changes. None for an unknown node."""
    node = graph.nodes.get(node_id)
    if node is None:
        return None

    direct = [dep_id for dep_id in node.dependents if dep_id != node_id]

    # BFS along dependents beyond the direct set
    transitive: list[str] = []
    visited = {node_id, *direct}
    queue = deque(direct)
    while queue:
        current = queue.popleft()
        for dependent_id in graph.nodes[current].dependents:
            if dependent_id in visited:
                continue
            visited.add(dependent_id)
            transitive.append(dependent_id)
            queue.append(dependent_id)

    affected_repositories = list(dict.fromkeys(
        graph.nodes[n].repository for n in direct + transitive
    ))

    return ImpactAnalysis(
        target_node=node_id,
        direct_impact=direct,
        transitive_impact=transitive,
        affected_repositories=affected_repositories,
        impact_score=compute_impact_score(len(direct), len(transitive), len(graph.nodes)),
        critical_path=_critical_path(graph, node_id),
    )


def compute_impact_score(direct_count: int, transitive_count: int, total_nodes: int) -> int:
    """Weighted share of the graph affected, 0-100."""
    if total_nodes <= 0:
        return 0
    weighted = DIRECT_IMPACT_WEIGHT * direct_count + TRANSITIVE_IMPACT_WEIGHT * transitive_count
    score = 100 * weighted / (DIRECT_IMPACT_WEIGHT + TRANSITIVE_IMPACT_WEIGHT) / total_nodes
    return max(0, min(100, round(score)))


def _critical_path(graph: DependencyGraph, node_id: str) -> list[str]:
    """Longest simple chain of dependents from ``node_id`` that changes repository.

    Below nodes that cannot reach a cycle the answer does not depend on the
    path taken, so those are solved once and memoized. Only the part of the
    walk that can reach a cycle enumerates simple paths.
    """
    acyclic = nodes_without_reachable_cycle(graph, along_dependents=True)
    longest: dict[str, list[str]] = {}
    crossing: dict[str, list[str] | None] = {}

    def solve(current: str) -> None:
        if current in longest:
            return
        node = graph.nodes[current]
        best_any = [current]
        best_crossing: list[str] | None = None
        for dependent_id in node.dependents:
            solve(dependent_id)
            if len(longest[dependent_id]) + 1 > len(best_any):
                best_any = [current] + longest[dependent_id]
            if graph.nodes[dependent_id].repository != node.repository:
                tail = longest[dependent_id]
            else:
                tail = crossing[dependent_id]
            if tail is not None and (best_crossing is None or len(tail) + 1 > len(best_crossing)):
                best_crossing = [current] + tail
        longest[current] = best_any
        crossing[current] = best_crossing

    best: list[str] = []
    path: list[str] = [node_id]
    on_path = {node_id}

    def dfs(current: str, crossed: bool) -> None:
        nonlocal best
        if current in acyclic:
            solve(current)
            tail = longest[current] if crossed else crossing[current]
            if tail is not None and len(path) - 1 + len(tail) > len(best):
                best = path[:-1] + tail
            return

        if crossed and len(path) > len(best):
            best = list(path)
        current_repo = graph.nodes[current].repository
        for dependent_id in graph.nodes[current].dependents:
            if dependent_id in on_path:
                continue
            path.append(dependent_id)
            on_path.add(dependent_id)
            dfs(dependent_id, crossed or graph.nodes[dependent_id].repository != current_repo)
            path.pop()
            on_path.discard(dependent_id)

    dfs(node_id, False)
    return best


def find_shortest_path(graph: DependencyGraph, from_id: str, to_id: str) -> list[str] | None:
    """BFS along dependencies; fewest hops, first discovered on ties."""
    if from_id not in graph.nodes or to_id not in graph.nodes:
        return None
    if from_id == to_id:
        return [from_id]

    parents: dict[str, str | None] = {from_id: None}
    queue = deque([from_id])
    while queue:
        current = queue.popleft()
        for dep_id in graph.nodes[current].dependencies:
            if dep_id in parents:
                continue
            parents[dep_id] = current
            if dep_id == to_id:
                return _unwind(parents, to_id)
            queue.append(dep_id)

    return None


def find_all_paths(graph: DependencyGraph, from_id: str, max_depth: int = 10) -> list[list[str]]:
    """Every simple dependency path from ``from_id``, each ending at a leaf or the depth limit."""
    if from_id not in graph.nodes:
        return []

    paths: list[list[str]] = []
    path: list[str] = []
    on_path: set[str] = set()

    def dfs(node_id: str, depth: int) -> None:
        path.append(node_id)
        on_path.add(node_id)

        next_ids = [d for d in graph.nodes[node_id].dependencies if d not in on_path]
        if not next_ids or depth >= max_depth:
            paths.append(list(path))
        else:
            for dep_id in next_ids:
                dfs(dep_id, depth + 1)

        path.pop()
        on_path.discard(node_id)

    dfs(from_id, 0)
    return paths


def _unwind(parents: dict[str, str | None], end_id: str) -> list[str]:
    path: list[str] = []
    current: str | None = end_id
    while current is not None:
        path.append(current)
        current = parents[current]
    path.reverse()
    return path
