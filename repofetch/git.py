"""Walking the commit history of a repository with the git command."""

from __future__ import annotations

import queue
import subprocess
import tempfile
import threading
from collections import Counter
from collections.abc import Iterator
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from repofetch.cli import BotRegex
from repofetch.metrics import GitMetrics
from repofetch.signature import Sig

_LOG_FORMAT = "%H%x00%P%x00%ct%x00%aN%x00%aE"
_BLOB_MODES = frozenset({"100644", "100755"})
_FILE_CHANGE_STATUSES = frozenset("AMT")
_END_OF_COMMITS = None


class GitError(Exception):
    """Raised when git cannot be run or reports a failure."""


def _git(repo_path: str | Path, *args: str) -> subprocess.CompletedProcess[bytes]:
    """Run git in *repo_path*; raise GitError only when git cannot be started."""
    try:
        return subprocess.run(
            ["git", "-C", str(repo_path), *args], capture_output=True, check=False
        )
    except OSError as error:
        raise GitError(f"cannot run git: {error}") from error


def _git_output(repo_path: str | Path, *args: str) -> str:
    """Run git in *repo_path* and return its output; raise GitError on failure."""
    completed = _git(repo_path, *args)
    if completed.returncode != 0:
        raise GitError(_failure_message(args, completed.stderr))
    return completed.stdout.decode("utf-8", errors="replace")


def _failure_message(args: tuple[str, ...] | list[str], stderr: bytes) -> str:
    detail = stderr.decode("utf-8", errors="replace").strip()
    return f"git {' '.join(args)} failed: {detail}" if detail else f"git {' '.join(args)} failed"


@dataclass(frozen=True)
class _Commit:
    id: str
    parent_ids: tuple[str, ...]
    commit_time: int
    author: Sig


@dataclass
class _TraversalState:
    ended: threading.Event = field(default_factory=threading.Event)
    total_number_of_commits: int = 0


def _parse_log_line(raw: bytes) -> _Commit:
    fields = raw.rstrip(b"\n").split(b"\x00")
    if len(fields) != 5:
        raise GitError(f"unexpected git log output: {raw!r}")
    commit_id, parents, commit_time, name, email = (
        value.decode("utf-8", errors="replace") for value in fields
    )
    try:
        timestamp = int(commit_time)
    except ValueError:
        raise GitError(f"invalid commit time in git log output: {commit_time!r}") from None
    return _Commit(commit_id, tuple(parents.split()), timestamp, Sig(name, email))


def _iter_commits(repo_path: str | Path) -> Iterator[_Commit]:
    """Yield the ancestors of HEAD, newest commit first, with mailmapped authors."""
    args = ["-c", "log.showSignature=false", "log", f"--format={_LOG_FORMAT}", "HEAD", "--"]
    with tempfile.TemporaryFile() as errors:
        try:
            process = subprocess.Popen(
                ["git", "-C", str(repo_path), *args],
                stdout=subprocess.PIPE,
                stderr=errors,
            )
        except OSError as error:
            raise GitError(f"cannot run git: {error}") from error
        with process:
            assert process.stdout is not None
            for raw in process.stdout:
                yield _parse_log_line(raw)
            returncode = process.wait()
        if returncode != 0:
            errors.seek(0)
            raise GitError(_failure_message(args, errors.read()))


def _changed_files(repo_path: str | Path, commit: _Commit) -> Iterator[str]:
    """Paths of files added or modified by *commit* relative to its only parent."""
    if len(commit.parent_ids) > 1:
        return
    output = _git(
        repo_path, "diff-tree", "-r", "--root", "--no-commit-id", "--no-renames",
        "--raw", "-z", commit.id,
    )
    if output.returncode != 0:
        raise GitError(_failure_message(["diff-tree", commit.id], output.stderr))
    fields = iter(output.stdout.split(b"\x00"))
    for header, path in zip(fields, fields):
        parts = header.decode("ascii", errors="replace").lstrip(":").split()
        if len(parts) < 5:
            continue
        new_mode, status = parts[1], parts[4][:1]
        if status in _FILE_CHANGE_STATUSES and new_mode in _BLOB_MODES:
            yield path.decode("utf-8", errors="replace")


def _compute_churn(
    repo_path: str | Path,
    pending: queue.Queue[_Commit | None],
    no_bots: BotRegex | None,
    max_churn_pool_size: int | None,
    state: _TraversalState,
) -> tuple[dict[str, int], int]:
    changes: Counter[str] = Counter()
    number_of_diffs_computed = 0
    while (commit := pending.get()) is not _END_OF_COMMITS:
        if no_bots is not None and is_bot(commit.author.name, no_bots):
            continue
        changes.update(_changed_files(repo_path, commit))
        number_of_diffs_computed += 1
        if should_break(
            state.ended.is_set(),
            state.total_number_of_commits,
            max_churn_pool_size,
            number_of_diffs_computed,
        ):
            break
    return dict(changes), number_of_diffs_computed


def traverse_commit_graph(
    repo_path: str | Path,
    no_bots: BotRegex | None = None,
    max_churn_pool_size: int | None = None,
    no_merges: bool = False,
) -> GitMetrics:
    """Count commits per author and per file over the history of HEAD.

    File churn is computed concurrently with the walk; unless
    *max_churn_pool_size* is given, it covers as many recent commits as could
    be diffed by the time the walk ends, and at least one.
    """
    commits_by_signature: Counter[Sig] = Counter()
    time_of_most_recent_commit: int | None = None
    time_of_first_commit: int | None = None
    state = _TraversalState()
    pending: queue.Queue[_Commit | None] = queue.Queue()

    with ThreadPoolExecutor(max_workers=1) as executor:
        churn = executor.submit(
            _compute_churn, repo_path, pending, no_bots, max_churn_pool_size, state
        )
        count = 0
        try:
            for commit in _iter_commits(repo_path):
                if no_merges and len(commit.parent_ids) > 1:
                    continue
                if not is_bot(commit.author.name, no_bots):
                    commits_by_signature[commit.author] += 1
                pending.put(commit)
                if time_of_most_recent_commit is None:
                    time_of_most_recent_commit = commit.commit_time
                time_of_first_commit = commit.commit_time
                count += 1
        finally:
            state.total_number_of_commits = count
            state.ended.set()
            pending.put(_END_OF_COMMITS)
        commits_by_file_path, churn_pool_size = churn.result()

    return GitMetrics(
        commits_by_signature,
        commits_by_file_path,
        churn_pool_size,
        time_of_first_commit,
        time_of_most_recent_commit,
    )


def should_break(
    has_commit_graph_traversal_ended: bool,
    total_number_of_commits: int,
    max_churn_pool_size: int | None,
    number_of_diffs_computed: int,
) -> bool:
    """Whether the churn computation has diffed enough commits to stop."""
    if not has_commit_graph_traversal_ended:
        return False
    if max_churn_pool_size is None:
        return True
    return number_of_diffs_computed >= min(max_churn_pool_size, total_number_of_commits)


def is_bot(author_name: str, bot_regex: BotRegex | None) -> bool:
    """True when a bot pattern is given and matches *author_name*."""
    return bot_regex is not None and bot_regex.is_match(author_name)