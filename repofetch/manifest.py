"""Detection and parsing of package manifest files."""

from __future__ import annotations

import json
import tomllib
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any


class ManifestType(Enum):
    """Supported package managers."""

    NPM = "Npm"
    CARGO = "Cargo"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Manifest:
    manifest_type: ManifestType
    number_of_dependencies: int
    name: str
    description: str | None
    version: str
    license: str | None


_MANIFEST_FILE_NAMES = {
    "Cargo.toml": ManifestType.CARGO,
    "package.json": ManifestType.NPM,
}


def get_manifests(path: str | Path) -> list[Manifest]:
    """Return the manifests found directly inside the directory *path*.

    Files that cannot be parsed are skipped.
    """
    manifests = []
    for entry in sorted(Path(path).iterdir()):
        manifest_type = _MANIFEST_FILE_NAMES.get(entry.name)
        if manifest_type is None or not entry.is_file():
            continue
        parse = _parse_cargo_manifest if manifest_type is ManifestType.CARGO else _parse_npm_manifest
        try:
            manifests.append(parse(entry))
        except (OSError, ValueError):
            continue
    return manifests


def _required_string(table: dict[str, Any], key: str) -> str:
    value = table.get(key)
    if not isinstance(value, str):
        raise ValueError(f"missing or invalid field: {key}")
    return value


def _optional_string(table: dict[str, Any], key: str) -> str | None:
    value = table.get(key)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"invalid field: {key}")
    return value


def _mapping(table: dict[str, Any], key: str) -> dict[str, Any]:
    value = table.get(key, {})
    if not isinstance(value, dict):
        raise ValueError(f"invalid field: {key}")
    return value


def _parse_cargo_manifest(path: Path) -> Manifest:
    with path.open("rb") as handle:
        data = tomllib.load(handle)
    package = data.get("package")
    if not isinstance(package, dict):
        raise ValueError("Not a package (only a workspace)")
    version = package.get("version", "0.0.0")
    if not isinstance(version, str):
        raise ValueError("invalid field: version")
    return Manifest(
        manifest_type=ManifestType.CARGO,
        number_of_dependencies=len(_mapping(data, "dependencies")),
        name=_required_string(package, "name"),
        description=_optional_string(package, "description"),
        version=version,
        license=_optional_string(package, "license"),
    )


def _parse_npm_manifest(path: Path) -> Manifest:
    with path.open(encoding="utf-8") as handle:
        data = json.load(handle)
    if not isinstance(data, dict):
        raise ValueError("package.json must hold an object")
    return Manifest(
        manifest_type=ManifestType.NPM,
        number_of_dependencies=len(_mapping(data, "dependencies")),
        name=_required_string(data, "name"),
        description=_optional_string(data, "description"),
        version=_required_string(data, "version"),
        license=_optional_string(data, "license"),
    )