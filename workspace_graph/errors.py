"""Exceptions raised while collecting manifests."""

from __future__ import annotations


class WorkspaceGraphError(Exception):
    """Base class for workspace-graph errors."""


class ManifestFetchError(WorkspaceGraphError):
    """A manifest could not be retrieved from its host."""

    def __init__(self, repository: str, message: str):
        self.repository = repository
        super().__init__(f"{repository}: {message}")


class ManifestNotFoundError(ManifestFetchError):
    """The repository exposes no manifest the source knows about."""


class ManifestParseError(WorkspaceGraphError):
    """A manifest file was retrieved but its content is malformed."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"{path}: {message}")
