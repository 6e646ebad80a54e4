"""The "Contributors" info line."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from repofetch.config import NumberSeparator, format_number


@dataclass
class ContributorsInfo:
    """Total number of authors, shown only when not all of them are listed."""

    total_number_of_authors: int
    number_of_authors_to_display: int
    number_separator: NumberSeparator

    def value(self) -> str:
        if self.total_number_of_authors > self.number_of_authors_to_display:
            return format_number(self.total_number_of_authors, self.number_separator)
        return ""

    def title(self) -> str:
        return "Contributors"

    def serialize(self) -> dict[str, Any]:
        return {"totalNumberOfAuthors": self.total_number_of_authors}