"""The "Created" info line."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class CreatedInfo:
    """The already formatted date of the first commit."""

    creation_date: str

    def value(self) -> str:
        return self.creation_date

    def title(self) -> str:
        return "Created"

    def serialize(self) -> dict[str, Any]:
        return {"creationDate": self.creation_date}