"""The "Commits" info line."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from repofetch.config import NumberSeparator, format_number
from repofetch.metrics import GitMetrics


@dataclass
class CommitsInfo:
    number_of_commits: int
    is_shallow: bool
    number_separator: NumberSeparator

    @classmethod
    def from_metrics(
        cls, git_metrics: GitMetrics, is_shallow: bool, number_separator: NumberSeparator
    ) -> CommitsInfo:
        return cls(git_metrics.total_number_of_commits, is_shallow, number_separator)

    def value(self) -> str:
        suffix = " (shallow)" if self.is_shallow else ""
        return format_number(self.number_of_commits, self.number_separator) + suffix

    def title(self) -> str:
        return "Commits"

    def serialize(self) -> dict[str, Any]:
        return {"numberOfCommits": self.number_of_commits, "isShallow": self.is_shallow}