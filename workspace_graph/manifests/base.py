"""Abstract manifest source."""

from __future__ import annotations

import abc
from typing import Any

from workspace_graph.errors import ManifestNotFoundError
from workspace_graph.models import Manifest, Repository


class ManifestSource(abc.ABC):
    """Supplies the declared dependencies of a repository.

    Implementations may raise any exception; the graph builder records it as a
    failure of that repository and carries on with the others.
    """

    @abc.abstractmethod
    async def fetch(self, repository: Repository) -> Manifest:
        """Return the parsed manifest of ``repository``."""


class InMemoryManifestSource(ManifestSource):
    """Serve manifests from a dict keyed by ``owner/name``."""

    def __init__(self, manifests: dict[str, Manifest | dict[str, Any]] | None = None):
        self._manifests: dict[str, Manifest] = {}
        for key, manifest in (manifests or {}).items():
            self.add(key, manifest)

    def add(self, key: str, manifest: Manifest | dict[str, Any]) -> None:
        if not isinstance(manifest, Manifest):
            manifest = Manifest.model_validate(manifest)
        self._manifests[key] = manifest

    async def fetch(self, repository: Repository) -> Manifest:
        try:
            return self._manifests[repository.key]
        except KeyError:
            raise ManifestNotFoundError(repository.key, "no manifest registered") from None
