"""Dependency graph builder: fetches manifests concurrently, resolves workspace packages, assembles the graph."""

from __future__ import annotations

import asyncio
import fnmatch
import logging
from collections.abc import Iterable
from datetime import datetime, timezone
from types import MappingProxyType

from workspace_graph.models import (
    BuildOptions,
    DependencyKind,
    EdgeType,
    Manifest,
    ManifestEntry,
    PackageManager,
    Repository,
)
from workspace_graph.manifests.base import ManifestSource
from workspace_graph.analysis.graph_models import (
    BuildResult,
    DependencyEdge,
    DependencyGraph,
    DependencyNode,
    FetchFailure,
    GraphMetadata,
    make_node_id,
)

logger = logging.getLogger(__name__)

DEFAULT_PACKAGE_VERSION = "1.0.0"


class GraphAssembler:
    """Single-threaded accumulator that produces an immutable DependencyGraph.

    Keeps ``dependencies``/``dependents`` symmetric and never accepts an edge
    whose endpoints are unknown.
    """

    def __init__(self):
        self._nodes: dict[str, tuple[str, str, str, PackageManager]] = {}
        self._forward: dict[str, list[str]] = {}
        self._reverse: dict[str, list[str]] = {}
        self._edges: list[DependencyEdge] = []

    def add_node(
        self,
        repository: str,
        name: str,
        version: str,
        package_manager: PackageManager = PackageManager.UNKNOWN,
        node_id: str | None = None,
    ) -> str:
        node_id = node_id or make_node_id(repository, name, version)
        if node_id not in self._nodes:
            self._nodes[node_id] = (name, version, repository, package_manager)
            self._forward[node_id] = []
            self._reverse[node_id] = []
        return node_id

    def has_node(self, node_id: str) -> bool:
        return node_id in self._nodes

    def add_edge(
        self,
        source_id: str,
        target_id: str,
        edge_type: EdgeType = EdgeType.DIRECT,
        version_constraint: str = "",
    ) -> bool:
        """Add ``source -> target``. Returns False if the edge already exists."""
        for node_id in (source_id, target_id):
            if node_id not in self._nodes:
                raise ValueError(f"Unknown node {node_id!r}")
        # Avoid duplicate edges
        if target_id in self._forward[source_id]:
            return False
        self._edges.append(DependencyEdge(
            source=source_id,
            target=target_id,
            edge_type=edge_type,
            version_constraint=version_constraint,
        ))
        self._forward[source_id].append(target_id)
        self._reverse[target_id].append(source_id)
        return True

    def freeze(self, workspace_id: str, generated_at: datetime | None = None) -> DependencyGraph:
        nodes: dict[str, DependencyNode] = {}
        for node_id, (name, version, repository, manager) in self._nodes.items():
            nodes[node_id] = DependencyNode(
                id=node_id,
                name=name,
                version=version,
                repository=repository,
                package_manager=manager,
                dependencies=tuple(self._forward[node_id]),
                dependents=tuple(self._reverse[node_id]),
            )

        cross_repo_links = sum(
            1 for edge in self._edges
            if nodes[edge.source].repository != nodes[edge.target].repository
        )
        metadata = GraphMetadata(
            workspace_id=workspace_id,
            generated_at=generated_at or datetime.now(timezone.utc),
            total_nodes=len(nodes),
            total_edges=len(self._edges),
            cross_repo_links=cross_repo_links,
        )
        return DependencyGraph(
            nodes=MappingProxyType(nodes),
            edges=tuple(self._edges),
            metadata=metadata,
        )


class DependencyGraphBuilder:
    """Build a workspace dependency graph from repository manifests."""

    def __init__(self, source: ManifestSource):
        self.source = source

    async def build(
        self,
        workspace_id: str,
        repositories: Iterable[Repository],
        options: BuildOptions | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> BuildResult:
        options = options or BuildOptions()
        repos = _unique_repositories(repositories)
        if not repos:
            logger.info("workspace %s has no repositories; returning empty graph", workspace_id)
            return BuildResult(graph=GraphAssembler().freeze(workspace_id))

        # Step 1: Fetch every manifest into per-repository buffers
        manifests, failures = await self._fetch_all(repos, options, cancel_event)

        # Step 2: Merge sequentially into the graph
        graph = self._assemble(workspace_id, repos, manifests, options)

        logger.info(
            "workspace %s: %d nodes, %d edges, %d cross-repo links (%d of %d repositories failed)",
            workspace_id,
            graph.metadata.total_nodes,
            graph.metadata.total_edges,
            graph.metadata.cross_repo_links,
            len(failures),
            len(repos),
        )
        return BuildResult(graph=graph, failures=failures)

    async def _fetch_all(
        self,
        repos: list[Repository],
        options: BuildOptions,
        cancel_event: asyncio.Event | None,
    ) -> tuple[dict[str, Manifest], list[FetchFailure]]:
        semaphore = asyncio.Semaphore(options.max_concurrency)

        async def fetch_one(repo: Repository) -> Manifest:
            async with semaphore:
                raw = await asyncio.wait_for(self.source.fetch(repo), options.fetch_timeout)
            if isinstance(raw, Manifest):
                return raw
            return Manifest.model_validate(raw)

        tasks = {asyncio.create_task(fetch_one(repo)): repo for repo in repos}
        pending = set(tasks)
        cancel_waiter = asyncio.create_task(cancel_event.wait()) if cancel_event else None

        try:
            while pending:
                waitables = pending | {cancel_waiter} if cancel_waiter else pending
                done, _ = await asyncio.wait(waitables, return_when=asyncio.FIRST_COMPLETED)
                pending -= done
                if cancel_waiter is not None and cancel_waiter in done:
                    logger.warning("build cancelled with %d manifest fetch(es) pending", len(pending))
                    break
        finally:
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)
            if cancel_waiter is not None:
                cancel_waiter.cancel()

        manifests: dict[str, Manifest] = {}
        failures: list[FetchFailure] = []
        for task, repo in tasks.items():
            if task in pending or task.cancelled():
                failures.append(FetchFailure(repository=repo.key, error="cancelled"))
                continue
            exc = task.exception()
            if exc is not None:
                error = _describe_error(exc, options)
                logger.warning("manifest fetch failed for %s: %s", repo.key, error)
                failures.append(FetchFailure(repository=repo.key, error=error))
                continue
            manifests[repo.key] = task.result()
        return manifests, failures

    def _assemble(
        self,
        workspace_id: str,
        repos: list[Repository],
        manifests: dict[str, Manifest],
        options: BuildOptions,
    ) -> DependencyGraph:
        assembler = GraphAssembler()
        owners: dict[str, str] = {}  # package name -> owning repository
        managers: dict[str, PackageManager] = {}
        roots: dict[str, str] = {}  # repository -> root node id

        # Step 1: One root node per repository for the package it publishes
        for repo in repos:
            manifest = manifests.get(repo.key)
            if manifest is None:
                continue
            package = manifest.package_name or repo.name
            version = manifest.package_version or DEFAULT_PACKAGE_VERSION
            if package in owners:
                logger.warning(
                    "%s also publishes %s (owned by %s); keeping the first owner",
                    repo.key, package, owners[package],
                )
            else:
                owners[package] = repo.key
            managers[repo.key] = manifest.package_manager
            roots[repo.key] = assembler.add_node(repo.key, package, version, manifest.package_manager)

        # Step 2: Keep only dependencies on workspace packages
        resolved: dict[str, list[tuple[ManifestEntry, str]]] = {
            repo_key: self._resolve(repo_key, manifests[repo_key], owners, options)
            for repo_key in roots
        }

        # Step 3: Declared edges
        for repo_key, entries in resolved.items():
            root_id = roots[repo_key]
            for entry, owner in entries:
                target_id = assembler.add_node(owner, entry.name, entry.version, managers[owner])
                assembler.add_edge(root_id, target_id, EdgeType(entry.kind.value), entry.version)

        # Step 4: Transitive edges, bounded by max_depth hops from each root
        if options.include_transitive_dependencies:
            for repo_key, root_id in roots.items():
                self._add_transitive(assembler, repo_key, root_id, resolved, managers, options.max_depth)

        return assembler.freeze(workspace_id)

    @staticmethod
    def _resolve(
        repo_key: str,
        manifest: Manifest,
        owners: dict[str, str],
        options: BuildOptions,
    ) -> list[tuple[ManifestEntry, str]]:
        entries: list[tuple[ManifestEntry, str]] = []
        external = 0
        for entry in manifest.dependencies:
            if entry.kind is DependencyKind.DEV and not options.include_dev_dependencies:
                continue
            if entry.kind is DependencyKind.PEER and not options.include_peer_dependencies:
                continue
            if any(fnmatch.fnmatch(entry.name, pattern) for pattern in options.ignore_patterns):
                continue
            owner = owners.get(entry.name)
            if owner is None:
                external += 1
                continue
            if owner == repo_key:
                continue
            entries.append((entry, owner))

        logger.debug(
            "%s: %d workspace dependencies, %d external dropped",
            repo_key, len(entries), external,
        )
        return entries

    @staticmethod
    def _add_transitive(
        assembler: GraphAssembler,
        repo_key: str,
        root_id: str,
        resolved: dict[str, list[tuple[ManifestEntry, str]]],
        managers: dict[str, PackageManager],
        max_depth: int,
    ) -> None:
        frontier = list(dict.fromkeys(owner for _, owner in resolved[repo_key]))
        seen = {repo_key, *frontier}

        for _hop in range(2, max_depth + 1):
            next_frontier: list[str] = []
            for owner in frontier:
                for entry, dep_owner in resolved.get(owner, []):
                    if dep_owner == repo_key:
                        continue
                    target_id = assembler.add_node(dep_owner, entry.name, entry.version, managers[dep_owner])
                    assembler.add_edge(root_id, target_id, EdgeType.TRANSITIVE, entry.version)
                    if dep_owner not in seen:
                        seen.add(dep_owner)
                        next_frontier.append(dep_owner)
            if not next_frontier:
                break
            frontier = next_frontier


async def build_dependency_graph(
    workspace_id: str,
    repositories: Iterable[Repository],
    source: ManifestSource,
    options: BuildOptions | None = None,
    cancel_event: asyncio.Event | None = None,
) -> BuildResult:
    """Build a workspace graph with a one-off DependencyGraphBuilder."""
    builder = DependencyGraphBuilder(source)
    return await builder.build(workspace_id, repositories, options, cancel_event)


def _unique_repositories(repositories: Iterable[Repository]) -> list[Repository]:
    seen: dict[str, Repository] = {}
    for repo in repositories:
        seen.setdefault(repo.key, repo)
    return list(seen.values())


def _describe_error(exc: BaseException, options: BuildOptions) -> str:
    if isinstance(exc, asyncio.TimeoutError):
        return f"timed out after {options.fetch_timeout}s"
    return str(exc) or exc.__class__.__name__
