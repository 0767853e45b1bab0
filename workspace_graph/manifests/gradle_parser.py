"""Regex-based build.gradle / build.gradle.kts parser."""

from __future__ import annotations

import re

from workspace_graph.models import DependencyKind, Manifest, ManifestEntry, PackageManager

# implementation 'g:a:v'  |  implementation("g:a:v")
_DIRECT_RE = re.compile(r"""\b(?:implementation|api|compile)\s*\(?\s*['"]([^'"]+)['"]""")
_TEST_RE = re.compile(r"""\b(?:testImplementation|testCompile)\s*\(?\s*['"]([^'"]+)['"]""")


def parse_gradle(content: str) -> Manifest:
    entries: list[ManifestEntry] = []
    for regex, kind in ((_DIRECT_RE, DependencyKind.DIRECT), (_TEST_RE, DependencyKind.DEV)):
        for m in regex.finditer(content):
            entry = _coordinate_to_entry(m.group(1), kind)
            if entry:
                entries.append(entry)
    return Manifest(package_manager=PackageManager.GRADLE, dependencies=entries)


def _coordinate_to_entry(coordinate: str, kind: DependencyKind) -> ManifestEntry | None:
    parts = coordinate.split(":")
    if len(parts) < 2 or not parts[1]:
        return None
    version = parts[2] if len(parts) > 2 and parts[2] else "latest"
    return ManifestEntry(name=f"{parts[0]}:{parts[1]}", version=version, kind=kind)
