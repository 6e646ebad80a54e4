"""Commit author identity."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class Sig:
    """An author's name and e-mail address, ordered by name then e-mail."""

    name: str
    email: str