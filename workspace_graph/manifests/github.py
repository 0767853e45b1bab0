"""GitHub manifest source: reads manifest files through the contents API."""

from __future__ import annotations

import base64
import binascii
import logging
import os
from dataclasses import dataclass

import httpx

from workspace_graph.errors import ManifestFetchError
from workspace_graph.models import Manifest, PackageManager, Repository
from workspace_graph.manifests.registry import MANIFEST_FILES, parse_manifest
from workspace_graph.manifests.base import ManifestSource

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"


@dataclass
class GitHubConfig:
    token: str = ""
    base_url: str = ""
    timeout: float = 30.0

    def __post_init__(self):
        if not self.token:
            self.token = os.getenv("GITHUB_TOKEN", "")
        if not self.base_url:
            self.base_url = os.getenv("GITHUB_API_URL", DEFAULT_API_URL)


class GitHubManifestSource(ManifestSource):
    """Async GitHub client that detects and parses a repository's manifest."""

    def __init__(self, config: GitHubConfig | None = None, client: httpx.AsyncClient | None = None):
        self.config = config or GitHubConfig()
        self.headers = {"Accept": "application/vnd.github+json"}
        if self.config.token:
            self.headers["Authorization"] = f"Bearer {self.config.token}"
        # Headers go on each request; a caller-supplied client is left untouched
        self.client = client or httpx.AsyncClient(
            base_url=self.config.base_url,
            timeout=self.config.timeout,
        )

    async def fetch(self, repository: Repository) -> Manifest:
        for path, manager in MANIFEST_FILES:
            content = await self._get_file(repository, path)
            if content is None:
                continue
            logger.debug("%s: parsing %s (%s)", repository.key, path, manager.value)
            return parse_manifest(manager, content, path)

        logger.info("%s: no recognised manifest on %s", repository.key, repository.default_branch)
        return Manifest(package_manager=PackageManager.UNKNOWN)

    async def _get_file(self, repository: Repository, path: str) -> str | None:
        """Return the decoded file, or None when it does not exist."""
        try:
            response = await self.client.get(
                f"/repos/{repository.owner}/{repository.name}/contents/{path}",
                params={"ref": repository.default_branch},
                headers=self.headers,
            )
        except httpx.HTTPError as e:
            raise ManifestFetchError(repository.key, f"GET {path} failed: {e}") from e

        if response.status_code == 404:
            return None
        if response.is_error:
            raise ManifestFetchError(
                repository.key, f"GET {path} returned HTTP {response.status_code}",
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ManifestFetchError(repository.key, f"{path} response is not JSON: {e}") from e
        if not isinstance(data, dict) or "content" not in data:
            raise ManifestFetchError(repository.key, f"{path} is not a file")
        try:
            return base64.b64decode(data["content"]).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise ManifestFetchError(repository.key, f"{path} could not be decoded: {e}") from e

    async def close(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> GitHubManifestSource:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
