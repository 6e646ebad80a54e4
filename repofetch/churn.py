"""The "Churn" info line: files changed by the most recent commits."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from repofetch.config import NumberSeparator, format_number


@dataclass
class FileChurn:
    file_path: str
    nbr_of_commits: int
    number_separator: NumberSeparator

    def __str__(self) -> str:
        return (
            f"{shorten_file_path(self.file_path, 2)} "
            f"{format_number(self.nbr_of_commits, self.number_separator)}"
        )

    def serialize(self) -> dict[str, Any]:
        return {"filePath": self.file_path, "nbrOfCommits": self.nbr_of_commits}


class ChurnInfo:
    """Most frequently changed files, aligned under the info title."""

    def __init__(
        self, file_churns: list[FileChurn], churn_pool_size: int, separator_length: int
    ) -> None:
        self.file_churns = list(file_churns)
        self.churn_pool_size = churn_pool_size
        self.separator_length = separator_length

    @classmethod
    def from_counts(
        cls,
        number_of_commits_by_file_path: Mapping[str, int],
        churn_pool_size: int,
        number_of_file_churns_to_display: int,
        globs_to_exclude: Iterable[str],
        number_separator: NumberSeparator,
        separator_length: int,
    ) -> ChurnInfo:
        file_churns = compute_file_churns(
            number_of_commits_by_file_path,
            number_of_file_churns_to_display,
            globs_to_exclude,
            number_separator,
        )
        return cls(file_churns, churn_pool_size, separator_length)

    def value(self) -> str:
        indent = " " * (len(self.title()) + self.separator_length + 1)
        return "\n".join(
            str(churn) if position == 0 else f"{indent}{churn}"
            for position, churn in enumerate(self.file_churns)
        )

    def __str__(self) -> str:
        return self.value()

    def title(self) -> str:
        return f"Churn ({self.churn_pool_size})"

    def serialize(self) -> dict[str, Any]:
        return {
            "file_churns": [churn.serialize() for churn in self.file_churns],
            "churn_pool_size": self.churn_pool_size,
            "separator_length": self.separator_length,
        }


def compute_file_churns(
    number_of_commits_by_file_path: Mapping[str, int],
    number_of_file_churns_to_display: int,
    globs_to_exclude: Iterable[str],
    number_separator: NumberSeparator,
) -> list[FileChurn]:
    """Files sorted by commit count (descending), minus excluded ones.

    Raises ValueError when an exclusion glob is malformed.
    """
    excluded = [re.compile(_glob_to_regex(glob), re.DOTALL) for glob in globs_to_exclude]
    ranked = sorted(
        number_of_commits_by_file_path.items(), key=lambda item: item[1], reverse=True
    )
    kept = (
        FileChurn(path, count, number_separator)
        for path, count in ranked
        if not any(pattern.fullmatch(path) for pattern in excluded)
    )
    return [churn for churn, _ in zip(kept, range(number_of_file_churns_to_display))]


def shorten_file_path(file_path: str, depth: int) -> str:
    """Keep only the last *depth* path components, prefixed with an ellipsis."""
    components = file_path.split("/")
    if depth == 0 or len(components) <= depth:
        return file_path
    return "\u2026/" + "/".join(components[-depth:])


def _glob_to_regex(pattern: str) -> str:
    """Translate a shell glob into a regular expression matching whole paths.

    `*` and `?` also match `/`; `**` as a whole path component matches any
    number of directories; `{a,b}` is an alternation and `[...]` a class.
    """
    out: list[str] = []
    in_braces = False
    length = len(pattern)
    i = 0
    while i < length:
        char = pattern[i]
        if char == "\\":
            if i + 1 >= length:
                raise ValueError(f"dangling escape in glob {pattern!r}")
            out.append(re.escape(pattern[i + 1]))
            i += 2
        elif char == "*":
            if pattern.startswith("**", i) and not in_braces:
                whole_component_start = i == 0 or pattern[i - 1] == "/"
                at_end = i + 2 == length
                if whole_component_start and (at_end or pattern[i + 2] == "/"):
                    if at_end:
                        out.append(".*")
                        i += 2
                    else:
                        out.append("(?:.*/)?")
                        i += 3
                    continue
            out.append(".*")
            i += 1
        elif char == "?":
            out.append(".")
            i += 1
        elif char == "[":
            class_regex, i = _parse_class(pattern, i)
            out.append(class_regex)
        elif char == "{":
            if in_braces:
                raise ValueError(f"nested alternation in glob {pattern!r}")
            in_braces = True
            out.append("(?:")
            i += 1
        elif char == "}" and in_braces:
            in_braces = False
            out.append(")")
            i += 1
        elif char == "," and in_braces:
            out.append("|")
            i += 1
        else:
            out.append(re.escape(char))
            i += 1
    if in_braces:
        raise ValueError(f"unclosed alternation in glob {pattern!r}")
    return "".join(out)


def _parse_class(pattern: str, start: int) -> tuple[str, int]:
    """Translate the character class starting at *start*; return it and the next index."""
    i = start + 1
    negated = i < len(pattern) and pattern[i] in "!^"
    if negated:
        i += 1
    members: list[str] = []
    first = True
    while i < len(pattern):
        char = pattern[i]
        if char == "]" and not first:
            body = "".join(members)
            return f"[{'^' if negated else ''}{body}]", i + 1
        first = False
        if i + 2 < len(pattern) and pattern[i + 1] == "-" and pattern[i + 2] != "]":
            low, high = char, pattern[i + 2]
            if low > high:
                raise ValueError(f"invalid range {low}-{high} in glob {pattern!r}")
            members.append(f"{re.escape(low)}-{re.escape(high)}")
            i += 3
        else:
            members.append(re.escape(char))
            i += 1
    raise ValueError(f"unclosed character class in glob {pattern!r}")