"""The "Authors" info line: top contributors by number of commits."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from repofetch.config import NumberSeparator, format_number
from repofetch.signature import Sig


@dataclass(init=False)
class Author:
    name: str
    email: str | None
    nbr_of_commits: int
    contribution: int
    number_separator: NumberSeparator

    def __init__(
        self,
        name: str,
        email: str | None,
        nbr_of_commits: int,
        total_nbr_of_commits: int,
        number_separator: NumberSeparator,
    ) -> None:
        self.name = name
        self.email = email
        self.nbr_of_commits = nbr_of_commits
        self.contribution = _percentage(nbr_of_commits, total_nbr_of_commits)
        self.number_separator = number_separator

    def __str__(self) -> str:
        commits = format_number(self.nbr_of_commits, self.number_separator)
        if self.email is not None:
            return f"{self.contribution}% {self.name} <{self.email}> {commits}"
        return f"{self.contribution}% {self.name} {commits}"

    def serialize(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "email": self.email,
            "nbrOfCommits": self.nbr_of_commits,
            "contribution": self.contribution,
        }


def _percentage(part: int, total: int) -> int:
    """Share of *part* in *total* in percent, halves rounded away from zero."""
    if total == 0:
        return 0
    return math.floor(part * 100 / total + 0.5)


class AuthorsInfo:
    """The list of authors shown, aligned under the info title."""

    def __init__(self, authors: list[Author], separator_length: int) -> None:
        self.authors = list(authors)
        self.separator_length = separator_length

    @classmethod
    def from_counts(
        cls,
        number_of_commits_by_signature: Mapping[Sig, int],
        total_number_of_commits: int,
        number_of_authors_to_display: int,
        show_email: bool,
        number_separator: NumberSeparator,
        separator_length: int,
    ) -> AuthorsInfo:
        authors = compute_authors(
            number_of_commits_by_signature,
            total_number_of_commits,
            number_of_authors_to_display,
            show_email,
            number_separator,
        )
        return cls(authors, separator_length)

    def _top_contribution(self) -> int:
        return self.authors[0].contribution if self.authors else 0

    def value(self) -> str:
        pad = len(self.title()) + self.separator_length + 1
        top = self._top_contribution()
        lines = []
        for position, author in enumerate(self.authors):
            if position == 0:
                lines.append(str(author))
            else:
                indent = " " * (pad + digit_difference(top, author.contribution))
                lines.append(f"{indent}{author}")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.value()

    def title(self) -> str:
        return "Authors" if len(self.authors) > 1 else "Author"

    def serialize(self) -> dict[str, Any]:
        return {
            "authors": [author.serialize() for author in self.authors],
            "separator_length": self.separator_length,
        }


def compute_authors(
    number_of_commits_by_signature: Mapping[Sig, int],
    total_number_of_commits: int,
    number_of_authors_to_display: int,
    show_email: bool,
    number_separator: NumberSeparator,
) -> list[Author]:
    """Authors sorted by commit count (descending), then name, truncated."""
    ranked = sorted(
        number_of_commits_by_signature.items(),
        key=lambda item: (-item[1], item[0].name),
    )
    return [
        Author(
            sig.name,
            sig.email if show_email else None,
            count,
            total_number_of_commits,
            number_separator,
        )
        for sig, count in ranked[:number_of_authors_to_display]
    ]


def digit_difference(num1: int, num2: int) -> int:
    """Difference between the number of decimal digits of two numbers."""
    return abs(len(str(num1)) - len(str(num2)))