"""Data models shared by the manifest sources and the graph builder."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from pydantic import BaseModel, Field, field_validator


class PackageManager(enum.Enum):
    NPM = "npm"
    MAVEN = "maven"
    GRADLE = "gradle"
    PIP = "pip"
    UNKNOWN = "unknown"


class DependencyKind(enum.Enum):
    """How a manifest declares a dependency."""
    DIRECT = "direct"
    DEV = "dev"
    PEER = "peer"


class EdgeType(enum.Enum):
    DIRECT = "direct"
    DEV = "dev"
    PEER = "peer"
    TRANSITIVE = "transitive"


class ManifestEntry(BaseModel):
    """One dependency as declared by a manifest."""
    name: str = Field(min_length=1)
    version: str = "latest"
    kind: DependencyKind = DependencyKind.DIRECT
    scope: str | None = None

    @field_validator("name", "version")
    @classmethod
    def _strip(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class Manifest(BaseModel):
    """Parsed manifest of a single repository."""
    package_manager: PackageManager = PackageManager.UNKNOWN
    package_name: str | None = None
    package_version: str | None = None
    dependencies: list[ManifestEntry] = Field(default_factory=list)

    def entries_of(self, kind: DependencyKind) -> list[ManifestEntry]:
        return [dep for dep in self.dependencies if dep.kind is kind]


@dataclass(frozen=True)
class Repository:
    """A repository tracked by a workspace."""
    owner: str
    name: str
    default_branch: str = "main"

    @property
    def key(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass
class BuildOptions:
    """Configuration for building a workspace dependency graph."""
    include_dev_dependencies: bool = False
    include_peer_dependencies: bool = True
    include_transitive_dependencies: bool = False
    max_depth: int = 3
    ignore_patterns: list[str] = field(default_factory=list)
    max_concurrency: int = 8
    fetch_timeout: float | None = 30.0

    def __post_init__(self):
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be >= 1, got {self.max_depth}")
        if self.max_concurrency < 1:
            raise ValueError(f"max_concurrency must be >= 1, got {self.max_concurrency}")
