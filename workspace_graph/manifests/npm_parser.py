"""package.json parser."""

from __future__ import annotations

import json
from typing import Any

from workspace_graph.errors import ManifestParseError
from workspace_graph.models import DependencyKind, Manifest, ManifestEntry, PackageManager

_SECTIONS = (
    ("dependencies", DependencyKind.DIRECT),
    ("devDependencies", DependencyKind.DEV),
    ("peerDependencies", DependencyKind.PEER),
)


def parse_package_json(content: str, path: str = "package.json") -> Manifest:
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ManifestParseError(path, f"invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ManifestParseError(path, "top-level value is not an object")

    entries: list[ManifestEntry] = []
    for section, kind in _SECTIONS:
        declared = data.get(section) or {}
        if not isinstance(declared, dict):
            raise ManifestParseError(path, f"{section} is not an object")
        for name, version in declared.items():
            if not name.strip():
                continue
            entries.append(ManifestEntry(name=name, version=_scalar(version) or "latest", kind=kind))

    return Manifest(
        package_manager=PackageManager.NPM,
        package_name=_scalar(data.get("name")),
        package_version=_scalar(data.get("version")),
        dependencies=entries,
    )


def _scalar(value: Any) -> str | None:
    """Strings and numbers as stripped text; anything else (or blank) is None."""
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        return None
    return str(value).strip() or None
