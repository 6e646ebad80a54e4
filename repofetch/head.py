"""The "HEAD" info line: the current commit and the branches pointing at it."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from repofetch.git import GitError, _git, _git_output


@dataclass
class HeadRefs:
    """The abbreviated HEAD commit id and the short names of its refs."""

    short_commit_id: str
    refs: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        if self.refs:
            return f"{self.short_commit_id} ({', '.join(self.refs)})"
        return self.short_commit_id

    def serialize(self) -> dict[str, Any]:
        return {"shortCommitId": self.short_commit_id, "refs": list(self.refs)}


@dataclass
class HeadInfo:
    head_refs: HeadRefs

    @classmethod
    def from_repo(cls, repo_path: str | Path) -> HeadInfo:
        return cls(get_head_refs(repo_path))

    def value(self) -> str:
        return str(self.head_refs)

    def title(self) -> str:
        return "HEAD"

    def serialize(self) -> dict[str, Any]:
        return {"headRefs": self.head_refs.serialize()}


def get_head_refs(repo_path: str | Path) -> HeadRefs:
    """Read HEAD's short id, its branch and that branch's push tracking ref.

    Raises GitError when HEAD does not point to a commit.
    """
    try:
        short_id = _git_output(repo_path, "rev-parse", "--verify", "--short", "HEAD").strip()
    except GitError as error:
        raise GitError(f"Failed to retrieve HEAD ID: {error}") from error

    refs: list[str] = []
    symbolic = _git(repo_path, "symbolic-ref", "-q", "HEAD")
    if symbolic.returncode == 0:
        full_ref = symbolic.stdout.decode("utf-8", errors="replace").strip()
        listing = _git_output(
            repo_path, "for-each-ref", "--format=%(refname:short)%00%(push:short)", full_ref
        )
        first_line = listing.splitlines()[0] if listing.strip() else ""
        branch, _, push_ref = first_line.partition("\x00")
        refs.append(branch or full_ref.removeprefix("refs/heads/"))
        if push_ref:
            refs.append(push_ref)

    return HeadRefs(short_id, refs)