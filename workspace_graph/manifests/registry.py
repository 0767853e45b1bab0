"""Manifest detection order and parser dispatch."""

from __future__ import annotations

from workspace_graph.errors import ManifestParseError
from workspace_graph.models import Manifest, PackageManager
from workspace_graph.manifests.gradle_parser import parse_gradle
from workspace_graph.manifests.maven_parser import parse_pom
from workspace_graph.manifests.npm_parser import parse_package_json
from workspace_graph.manifests.pip_parser import parse_requirements

# Detection order: the first file present in a repository wins
MANIFEST_FILES: tuple[tuple[str, PackageManager], ...] = (
    ("package.json", PackageManager.NPM),
    ("pom.xml", PackageManager.MAVEN),
    ("build.gradle", PackageManager.GRADLE),
    ("build.gradle.kts", PackageManager.GRADLE),
    ("requirements.txt", PackageManager.PIP),
)


def parse_manifest(manager: PackageManager, content: str, path: str = "") -> Manifest:
    """Parse manifest ``content`` written for ``manager``."""
    if manager is PackageManager.NPM:
        return parse_package_json(content, path or "package.json")
    if manager is PackageManager.MAVEN:
        return parse_pom(content, path or "pom.xml")
    if manager is PackageManager.GRADLE:
        return parse_gradle(content)
    if manager is PackageManager.PIP:
        return parse_requirements(content)
    raise ManifestParseError(path or "<unknown>", f"no parser for {manager.value} manifests")
