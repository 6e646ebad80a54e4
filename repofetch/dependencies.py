"""The "Dependencies" info line."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from repofetch.config import NumberSeparator, format_number
from repofetch.manifest import Manifest


@dataclass
class DependenciesInfo:
    """Number of dependencies declared by the manifest, with its type."""

    dependencies: str

    @classmethod
    def from_manifest(
        cls, manifest: Manifest | None, number_separator: NumberSeparator
    ) -> DependenciesInfo:
        if manifest is None or manifest.number_of_dependencies == 0:
            return cls("")
        count = format_number(manifest.number_of_dependencies, number_separator)
        return cls(f"{count} ({manifest.manifest_type})")

    def value(self) -> str:
        return self.dependencies

    def title(self) -> str:
        return "Dependencies"

    def serialize(self) -> dict[str, Any]:
        return {"dependencies": self.dependencies}