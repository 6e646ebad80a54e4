"""The "Description" info line."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from repofetch.manifest import Manifest

NUMBER_OF_WORDS_PER_LINE = 5


@dataclass
class DescriptionInfo:
    """The manifest's description, wrapped a few words per line."""

    description: str | None

    @classmethod
    def from_manifest(cls, manifest: Manifest | None) -> DescriptionInfo:
        return cls(manifest.description if manifest is not None else None)

    def value(self) -> str:
        if self.description is None:
            return ""
        return break_sentence_into_lines(self.description, len(self.title()) + 2)

    def title(self) -> str:
        return "Description"

    def serialize(self) -> dict[str, Any]:
        return {"description": self.description}


def break_sentence_into_lines(sentence: str, left_pad: int) -> str:
    """Split *sentence* into lines of five words, indenting all but the first."""
    words = sentence.split()
    chunks = [
        " ".join(words[offset:offset + NUMBER_OF_WORDS_PER_LINE])
        for offset in range(0, len(words), NUMBER_OF_WORDS_PER_LINE)
    ]
    indent = " " * left_pad
    return "\n".join(
        chunk if position == 0 else indent + chunk for position, chunk in enumerate(chunks)
    )