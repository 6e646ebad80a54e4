"""Command-line options and small helpers used by the command."""

from __future__ import annotations

import argparse
import os
import re
import subprocess
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, TypeVar

from repofetch.config import NumberSeparator
from repofetch.manifest import ManifestType
from repofetch.terminal_image import ImageProtocol

_VERSION = "2.23.1"

NO_BOTS_DEFAULT_REGEX_PATTERN = r"(?:-|\s)[Bb]ot$|\[[Bb]ot\]"
COLOR_RESOLUTIONS = ("16", "32", "64", "128", "256")
COMPLETION_SHELLS = ("bash", "elvish", "fish", "powershell", "zsh")
DEFAULT_LANGUAGE_TYPES = ("programming", "markup")
MAX_TEXT_COLORS = 6

_E = TypeVar("_E", bound=Enum)


class CliError(Exception):
    """Raised when the command line cannot be parsed."""


class When(Enum):
    """When to use a feature such as true color."""

    AUTO = "auto"
    NEVER = "never"
    ALWAYS = "always"


@dataclass(frozen=True)
class BotRegex:
    """A regular expression matching the names of bot authors.

    Two instances are equal when their patterns are identical.
    """

    pattern: str
    _compiled: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        try:
            compiled = re.compile(self.pattern)
        except re.error as error:
            raise ValueError(f"invalid regex {self.pattern!r}: {error}") from error
        object.__setattr__(self, "_compiled", compiled)

    def is_match(self, text: str) -> bool:
        """True when the pattern matches anywhere in *text*."""
        return self._compiled.search(text) is not None


@dataclass
class InfoCliOptions:
    disabled_fields: list[str] = field(default_factory=list)
    no_title: bool = False
    number_of_authors: int = 3
    number_of_languages: int = 6
    number_of_file_churns: int = 3
    churn_pool_size: int | None = None
    exclude: list[str] = field(default_factory=list)
    no_bots: BotRegex | None = None
    no_merges: bool = False
    email: bool = False
    http_url: bool = False
    hide_token: bool = False
    include_hidden: bool = False
    type: list[str] = field(default_factory=lambda: list(DEFAULT_LANGUAGE_TYPES))


@dataclass
class AsciiCliOptions:
    ascii_input: str | None = None
    ascii_colors: list[int] = field(default_factory=list)
    ascii_language: str | None = None
    true_color: When = When.AUTO


@dataclass
class ImageCliOptions:
    image: Path | None = None
    image_protocol: ImageProtocol | None = None
    color_resolution: int = 16


@dataclass
class TextFormattingCliOptions:
    text_colors: list[int] = field(default_factory=list)
    iso_time: bool = False
    number_separator: NumberSeparator = NumberSeparator.PLAIN
    no_bold: bool = False


@dataclass
class VisualsCliOptions:
    no_color_palette: bool = False
    no_art: bool = False
    nerd_fonts: bool = False


@dataclass
class DeveloperCliOptions:
    output: str | None = None
    completion: str | None = None


@dataclass
class OtherCliOptions:
    languages: bool = False
    package_managers: bool = False


@dataclass
class CliOptions:
    input: Path = field(default_factory=lambda: Path("."))
    config_path: Path | None = None
    info: InfoCliOptions = field(default_factory=InfoCliOptions)
    text_formatting: TextFormattingCliOptions = field(default_factory=TextFormattingCliOptions)
    ascii: AsciiCliOptions = field(default_factory=AsciiCliOptions)
    image: ImageCliOptions = field(default_factory=ImageCliOptions)
    visuals: VisualsCliOptions = field(default_factory=VisualsCliOptions)
    developer: DeveloperCliOptions = field(default_factory=DeveloperCliOptions)
    other: OtherCliOptions = field(default_factory=OtherCliOptions)


class _Parser(argparse.ArgumentParser):
    def error(self, message: str) -> Any:
        raise CliError(message)


def _enum_choice(enum_cls: type[_E]) -> Callable[[str], _E]:
    choices = ", ".join(str(member.value) for member in enum_cls)

    def convert(text: str) -> _E:
        try:
            return enum_cls(text)
        except ValueError:
            raise argparse.ArgumentTypeError(
                f"invalid value {text!r} (choose from {choices})"
            ) from None

    convert.__name__ = enum_cls.__name__
    return convert


def _usize(text: str) -> int:
    try:
        number = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number {text!r}") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"{text} must not be negative")
    return number


def _color_index(text: str) -> int:
    number = _usize(text)
    if number > 15:
        raise argparse.ArgumentTypeError(f"{text} is not in 0..16")
    return number


def _build_parser() -> argparse.ArgumentParser:
    parser = _Parser(
        prog="repofetch",
        description="Command-line Git information tool",
        allow_abbrev=False,
    )
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {_VERSION}")
    parser.add_argument(
        "input",
        nargs="?",
        default=".",
        type=Path,
        help="run as if started in INPUT instead of the current working directory",
    )
    parser.add_argument("--config-path", type=Path)

    info = parser.add_argument_group("INFO")
    info.add_argument(
        "-d", "--disabled-fields", nargs="+", action="extend", metavar="FIELD",
        help="disable FIELD(s) from appearing in the output",
    )
    info.add_argument("--no-title", action="store_true", help="hide the title")
    info.add_argument("--number-of-authors", type=_usize, default=3, metavar="NUM")
    info.add_argument("--number-of-languages", type=_usize, default=6, metavar="NUM")
    info.add_argument("--number-of-file-churns", type=_usize, default=3, metavar="NUM")
    info.add_argument("--churn-pool-size", type=_usize, metavar="NUM")
    info.add_argument("-e", "--exclude", nargs="+", action="extend")
    info.add_argument(
        "--no-bots", type=BotRegex, metavar="REGEX",
        help="exclude [bot] commits; use --no-bots=REGEX to override the default pattern",
    )
    info.add_argument("--no-merges", action="store_true")
    info.add_argument("-E", "--email", action="store_true")
    info.add_argument("--http-url", action="store_true")
    info.add_argument("--hide-token", action="store_true")
    info.add_argument("--include-hidden", action="store_true")
    info.add_argument("-T", "--type", nargs="+", action="extend", dest="type")

    text = parser.add_argument_group("TEXT FORMATTING")
    text.add_argument(
        "-t", "--text-colors", nargs="+", action="append", type=_color_index, metavar="X"
    )
    text.add_argument("-z", "--iso-time", action="store_true")
    text.add_argument(
        "--number-separator",
        type=_enum_choice(NumberSeparator),
        default=NumberSeparator.PLAIN,
        metavar="SEPARATOR",
    )
    text.add_argument("--no-bold", action="store_true")

    ascii_group = parser.add_argument_group("ASCII")
    ascii_group.add_argument("--ascii-input", metavar="STRING")
    ascii_group.add_argument(
        "-c", "--ascii-colors", nargs="+", action="extend", type=_color_index, metavar="X"
    )
    ascii_group.add_argument("-a", "--ascii-language", metavar="LANGUAGE")
    ascii_group.add_argument(
        "--true-color", type=_enum_choice(When), default=When.AUTO, metavar="WHEN"
    )

    image = parser.add_argument_group("IMAGE")
    image.add_argument("-i", "--image", type=Path)
    image.add_argument("--image-protocol", type=_enum_choice(ImageProtocol), metavar="PROTOCOL")
    image.add_argument("--color-resolution", choices=COLOR_RESOLUTIONS, metavar="VALUE")

    visuals = parser.add_argument_group("VISUALS")
    visuals.add_argument("--no-color-palette", action="store_true")
    visuals.add_argument("--no-art", action="store_true")
    visuals.add_argument("--nerd-fonts", action="store_true")

    developer = parser.add_argument_group("DEVELOPER")
    developer.add_argument("-o", "--output", metavar="FORMAT")
    developer.add_argument(
        "--generate", dest="completion", choices=COMPLETION_SHELLS, metavar="SHELL"
    )

    other = parser.add_argument_group("OTHER")
    other.add_argument("-l", "--languages", action="store_true")
    other.add_argument("-p", "--package-managers", action="store_true")
    return parser


def _expand_bare_no_bots(argv: Sequence[str]) -> list[str]:
    """A bare --no-bots takes the default pattern; a value must follow `=`."""
    expanded = []
    passthrough = False
    for arg in argv:
        if not passthrough and arg == "--no-bots":
            arg = f"--no-bots={NO_BOTS_DEFAULT_REGEX_PATTERN}"
        elif arg == "--":
            passthrough = True
        expanded.append(arg)
    return expanded


def parse_options(argv: Sequence[str] | None = None) -> CliOptions:
    """Parse command-line arguments; raise CliError on invalid input."""
    args = list(argv) if argv is not None else list(os.sys.argv[1:])
    ns = _build_parser().parse_args(_expand_bare_no_bots(args))

    if ns.image is None and ns.image_protocol is not None:
        raise CliError("--image-protocol requires --image")
    if ns.image is None and ns.color_resolution is not None:
        raise CliError("--color-resolution requires --image")

    text_colors: list[int] = []
    for group in ns.text_colors or []:
        if len(group) > MAX_TEXT_COLORS:
            raise CliError(f"--text-colors takes at most {MAX_TEXT_COLORS} values")
        text_colors.extend(group)

    return CliOptions(
        input=ns.input,
        config_path=ns.config_path,
        info=InfoCliOptions(
            disabled_fields=list(ns.disabled_fields or []),
            no_title=ns.no_title,
            number_of_authors=ns.number_of_authors,
            number_of_languages=ns.number_of_languages,
            number_of_file_churns=ns.number_of_file_churns,
            churn_pool_size=ns.churn_pool_size,
            exclude=list(ns.exclude or []),
            no_bots=ns.no_bots,
            no_merges=ns.no_merges,
            email=ns.email,
            http_url=ns.http_url,
            hide_token=ns.hide_token,
            include_hidden=ns.include_hidden,
            type=list(ns.type) if ns.type else list(DEFAULT_LANGUAGE_TYPES),
        ),
        text_formatting=TextFormattingCliOptions(
            text_colors=text_colors,
            iso_time=ns.iso_time,
            number_separator=ns.number_separator,
            no_bold=ns.no_bold,
        ),
        ascii=AsciiCliOptions(
            ascii_input=ns.ascii_input,
            ascii_colors=list(ns.ascii_colors or []),
            ascii_language=ns.ascii_language,
            true_color=ns.true_color,
        ),
        image=ImageCliOptions(
            image=ns.image,
            image_protocol=ns.image_protocol,
            color_resolution=int(ns.color_resolution) if ns.color_resolution else 16,
        ),
        visuals=VisualsCliOptions(
            no_color_palette=ns.no_color_palette,
            no_art=ns.no_art,
            nerd_fonts=ns.nerd_fonts,
        ),
        developer=DeveloperCliOptions(output=ns.output, completion=ns.completion),
        other=OtherCliOptions(languages=ns.languages, package_managers=ns.package_managers),
    )


def print_supported_package_managers() -> None:
    """Print the name of every supported package manager, one per line."""
    for manifest_type in ManifestType:
        print(manifest_type)


def is_truecolor_terminal() -> bool:
    """True when COLORTERM announces 24-bit color support."""
    return os.environ.get("COLORTERM") in ("truecolor", "24bit")


def get_git_version() -> str:
    """The output of `git --version` on one line, or "" when git cannot run."""
    try:
        completed = subprocess.run(["git", "--version"], capture_output=True, check=False)
    except OSError:
        return ""
    return completed.stdout.decode("utf-8", errors="replace").replace("\n", "")