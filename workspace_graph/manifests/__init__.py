"""Manifest sources and parsers."""

from workspace_graph.manifests.base import InMemoryManifestSource, ManifestSource
from workspace_graph.manifests.github import GitHubConfig, GitHubManifestSource
from workspace_graph.manifests.gradle_parser import parse_gradle
from workspace_graph.manifests.maven_parser import parse_pom
from workspace_graph.manifests.npm_parser import parse_package_json
from workspace_graph.manifests.pip_parser import parse_requirements
from workspace_graph.manifests.registry import MANIFEST_FILES, parse_manifest

__all__ = [
    "MANIFEST_FILES",
    "GitHubConfig",
    "GitHubManifestSource",
    "InMemoryManifestSource",
    "ManifestSource",
    "parse_gradle",
    "parse_manifest",
    "parse_package_json",
    "parse_pom",
    "parse_requirements",
]
