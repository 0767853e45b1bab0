"""pom.xml parser: project coordinates and <dependencies>, scope=test maps to dev."""

from __future__ import annotations

import xml.etree.ElementTree as ET

from workspace_graph.errors import ManifestParseError
from workspace_graph.models import DependencyKind, Manifest, ManifestEntry, PackageManager


def parse_pom(content: str, path: str = "pom.xml") -> Manifest:
    try:
        root = ET.fromstring(content)
    except ET.ParseError as e:
        raise ManifestParseError(path, f"invalid XML: {e}") from e

    # POMs usually carry the maven namespace; match on local names only
    ns = root.tag[: root.tag.index("}") + 1] if root.tag.startswith("{") else ""

    def text(element: ET.Element | None, tag: str) -> str:
        if element is None:
            return ""
        child = element.find(f"{ns}{tag}")
        return (child.text or "").strip() if child is not None else ""

    entries: list[ManifestEntry] = []
    for dep in root.findall(f"{ns}dependencies/{ns}dependency"):
        group_id = text(dep, "groupId")
        artifact_id = text(dep, "artifactId")
        if not artifact_id:
            continue
        scope = text(dep, "scope") or "compile"
        entries.append(ManifestEntry(
            name=f"{group_id}:{artifact_id}",
            version=text(dep, "version") or "latest",
            kind=DependencyKind.DEV if scope == "test" else DependencyKind.DIRECT,
            scope=scope,
        ))

    return Manifest(
        package_manager=PackageManager.MAVEN,
        package_name=text(root, "artifactId") or None,
        package_version=text(root, "version") or None,
        dependencies=entries,
    )
