"""Aggregated numbers gathered while walking the commit history."""

from __future__ import annotations

from collections.abc import Mapping

from repofetch.signature import Sig


class GitMetrics:
    """Commit counts per author and per file, plus the history's time span.

    Times are seconds since the Unix epoch. When either end of the span is
    unknown (no commit was traversed), both are set to 0.
    """

    def __init__(
        self,
        number_of_commits_by_signature: Mapping[Sig, int],
        number_of_commits_by_file_path: Mapping[str, int],
        churn_pool_size: int,
        time_of_first_commit: int | None,
        time_of_most_recent_commit: int | None,
    ) -> None:
        self.number_of_commits_by_signature = dict(number_of_commits_by_signature)
        self.number_of_commits_by_file_path = dict(number_of_commits_by_file_path)
        self.total_number_of_commits = sum(self.number_of_commits_by_signature.values())
        self.total_number_of_authors = len(self.number_of_commits_by_signature)
        self.churn_pool_size = churn_pool_size

        if time_of_first_commit is None or time_of_most_recent_commit is None:
            time_of_first_commit, time_of_most_recent_commit = 0, 0
        self.time_of_first_commit = time_of_first_commit
        self.time_of_most_recent_commit = time_of_most_recent_commit

    def __repr__(self) -> str:
        return (
            f"GitMetrics(total_number_of_commits={self.total_number_of_commits}, "
            f"total_number_of_authors={self.total_number_of_authors}, "
            f"churn_pool_size={self.churn_pool_size}, "
            f"time_of_first_commit={self.time_of_first_commit}, "
            f"time_of_most_recent_commit={self.time_of_most_recent_commit})"
        )