"""requirements.txt parser."""

from __future__ import annotations

import re

from workspace_graph.models import DependencyKind, Manifest, ManifestEntry, PackageManager

_REQUIREMENT_RE = re.compile(
    r"^(?P<name>[A-Za-z0-9][A-Za-z0-9._\-]*)"
    r"(?:\[[^\]]*\])?"
    r"\s*(?:(?P<op>===|==|>=|<=|~=|!=|>|<)\s*(?P<version>[^\s,;#]+))?"
)


def parse_requirements(content: str) -> Manifest:
    entries: list[ManifestEntry] = []
    for line in content.splitlines():
        line = line.split("#", 1)[0].strip()
        # Skip blanks and pip options (-r, -e, --index-url ...)
        if not line or line.startswith("-"):
            continue
        line = line.split(";", 1)[0].strip()
        m = _REQUIREMENT_RE.match(line)
        if not m:
            continue
        entries.append(ManifestEntry(
            name=m.group("name"),
            version=m.group("version") or "latest",
            kind=DependencyKind.DIRECT,
        ))
    return Manifest(package_manager=PackageManager.PIP, dependencies=entries)
