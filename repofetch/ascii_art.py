"""Colorized ascii art templates truncated to their visible width.

Templates use `{n}` markers, where n is a single digit, to switch to the n-th
color of the palette for the characters that follow.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from enum import Enum, auto
from itertools import dropwhile, takewhile


class AnsiColor(Enum):
    """The sixteen terminal colors plus the terminal's default color."""

    BLACK = 30
    RED = 31
    GREEN = 32
    YELLOW = 33
    BLUE = 34
    MAGENTA = 35
    CYAN = 36
    WHITE = 37
    DEFAULT = 39
    BRIGHT_BLACK = 90
    BRIGHT_RED = 91
    BRIGHT_GREEN = 92
    BRIGHT_YELLOW = 93
    BRIGHT_BLUE = 94
    BRIGHT_MAGENTA = 95
    BRIGHT_CYAN = 96
    BRIGHT_WHITE = 97

    @property
    def fg_code(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class RgbColor:
    """A 24-bit true color."""

    r: int
    g: int
    b: int

    def __post_init__(self) -> None:
        for channel in (self.r, self.g, self.b):
            if not 0 <= channel <= 255:
                raise ValueError(f"color channel out of range: {channel}")

    @property
    def fg_code(self) -> str:
        return f"38;2;{self.r};{self.g};{self.b}"


Color = AnsiColor | RgbColor


def style_text(text: str, color: Color, bold: bool) -> str:
    """Wrap *text* in the escape sequences for *color* and optional bold."""
    params = color.fg_code + (";1" if bold else "")
    return f"\x1b[{params}m{text}\x1b[0m"


class TokenKind(Enum):
    COLOR = auto()
    CHAR = auto()
    SPACE = auto()


@dataclass(frozen=True)
class Token:
    """One element of a template line: a color marker, a space or a character."""

    kind: TokenKind
    value: int | str

    @classmethod
    def color(cls, index: int) -> Token:
        return cls(TokenKind.COLOR, index)

    @classmethod
    def char(cls, character: str) -> Token:
        return cls(TokenKind.CHAR, character)

    @classmethod
    def space(cls) -> Token:
        return cls(TokenKind.SPACE, " ")

    @property
    def is_solid(self) -> bool:
        return self.kind is TokenKind.CHAR

    @property
    def is_space(self) -> bool:
        return self.kind is TokenKind.SPACE

    @property
    def has_zero_width(self) -> bool:
        return self.kind is TokenKind.COLOR

    def __str__(self) -> str:
        if self.kind is TokenKind.COLOR:
            return f"{{{self.value}}}"
        return str(self.value)


_TOKEN_RE = re.compile(r"\{([0-9])\}|(.)", re.DOTALL)


def _token_from_match(match: re.Match[str]) -> Token:
    if match.group(1) is not None:
        return Token.color(int(match.group(1)))
    character = match.group(2)
    return Token.space() if character == " " else Token.char(character)


def parse_token(text: str) -> tuple[Token, str] | None:
    """Parse the first token of *text*, returning it with the rest of the text."""
    match = _TOKEN_RE.match(text)
    if match is None:
        return None
    return _token_from_match(match), text[match.end():]


def tokenize(line: str) -> Iterator[Token]:
    """Yield the tokens of a template line."""
    for match in _TOKEN_RE.finditer(line):
        yield _token_from_match(match)


def is_blank(line: str) -> bool:
    """True when the line holds no visible character."""
    return not any(token.is_solid for token in tokenize(line))


def leading_spaces(line: str) -> int:
    """Count the spaces before the first visible character."""
    before_solid = takewhile(lambda token: not token.is_solid, tokenize(line))
    return sum(1 for token in before_solid if token.is_space)


def true_length(line: str) -> int:
    """Width of the line up to and including its last visible character."""
    last_non_space = 0
    position = 0
    for token in tokenize(line):
        if token.has_zero_width:
            continue
        position += 1
        if not token.is_space:
            last_non_space = position
    return last_non_space


def truncate(tokens: Iterable[Token], start: int, end: int) -> Iterator[Token]:
    """Keep the tokens between display columns *start* and *end*.

    Color markers before *start* are kept so later characters keep their color.
    """
    if start > end:
        raise ValueError(f"start ({start}) must not exceed end ({end})")
    return _truncated(iter(tokens), start, end - start)


def _truncated(tokens: Iterator[Token], skip: int, width: int) -> Iterator[Token]:
    for token in tokens:
        if skip > 0 and not token.has_zero_width:
            skip -= 1
            continue
        if width == 0:
            return
        if not token.has_zero_width:
            width -= 1
        yield token


def render_line(
    line: str, colors: Sequence[Color], start: int, end: int, bold: bool
) -> str:
    """Render a template line truncated and padded to ``end - start`` columns."""
    if start > end:
        raise ValueError(f"start ({start}) must not exceed end ({end})")
    width = end - start
    parts: list[str] = []
    segment: list[str] = []
    color: Color = AnsiColor.DEFAULT

    for token in truncate(tokenize(line), start, end):
        if token.kind is TokenKind.COLOR:
            parts.append(style_text("".join(segment), color, bold))
            segment = []
            index = int(token.value)
            color = colors[index] if index < len(colors) else AnsiColor.DEFAULT
        else:
            width = max(width - 1, 0)
            segment.append(str(token))

    parts.append(style_text("".join(segment), color, bold))
    return "".join(parts) + " " * width


def min_start_max_end(lines: Iterable[str]) -> tuple[int, int]:
    """Smallest leading indentation and largest true length over *lines*."""
    lines = list(lines)
    if not lines:
        return 0, 0
    return (
        min(leading_spaces(line) for line in lines),
        max(true_length(line) for line in lines),
    )


def _split_lines(text: str) -> list[str]:
    if not text:
        return []
    parts = text.split("\n")
    if parts[-1] == "":
        parts.pop()
    return [part[:-1] if part.endswith("\r") else part for part in parts]


class AsciiArt:
    """An ascii template rendered line by line in the given colors."""

    def __init__(self, text: str, colors: Sequence[Color], bold: bool) -> None:
        lines = list(dropwhile(lambda line: line == "", _split_lines(text)))
        while lines and is_blank(lines[-1]):
            lines.pop()
        self._lines = lines
        self._colors = tuple(colors)
        self._bold = bold
        self._start, self._end = min_start_max_end(lines)

    def width(self) -> int:
        """Number of columns each rendered line occupies."""
        return self._end - self._start

    def __iter__(self) -> Iterator[str]:
        for line in self._lines:
            yield render_line(line, self._colors, self._start, self._end, self._bold)