"""User configuration file handling and number formatting."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

import tomli_w
from platformdirs import user_config_dir

CONFIG_DIR_NAME = "repofetch"
CONFIG_FILE_NAME = "config.toml"


class NumberSeparator(Enum):
    """Thousands separator used when printing numbers."""

    PLAIN = "plain"
    COMMA = "comma"
    SPACE = "space"
    UNDERSCORE = "underscore"

    def separator(self) -> str:
        """Return the characters placed between groups of three digits."""
        return _SEPARATORS[self]

    @property
    def config_name(self) -> str:
        """Name used for this separator inside the configuration file."""
        return self.name.capitalize()

    @classmethod
    def from_config_name(cls, name: str) -> NumberSeparator:
        for member in cls:
            if member.config_name == name:
                return member
        raise ValueError(f"unknown number separator: {name!r}")


_SEPARATORS = {
    NumberSeparator.PLAIN: "",
    NumberSeparator.COMMA: ",",
    NumberSeparator.SPACE: "\u202f",
    NumberSeparator.UNDERSCORE: "_",
}


def format_number(number: int, number_separator: NumberSeparator) -> str:
    """Format an integer with standard three-digit grouping."""
    return f"{number:,}".replace(",", number_separator.separator())


@dataclass
class Configuration:
    """Settings read from the configuration file; missing keys are None."""

    separator: str | None = ":"
    number_separator: NumberSeparator | None = NumberSeparator.PLAIN
    nerd_fonts: bool | None = False
    percent_verbosity: int | None = 1

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Configuration:
        separator = data.get("separator")
        if separator is not None and not isinstance(separator, str):
            raise ValueError("separator must be a string")

        number_separator = data.get("number_separator")
        if number_separator is not None:
            if not isinstance(number_separator, str):
                raise ValueError("number_separator must be a string")
            number_separator = NumberSeparator.from_config_name(number_separator)

        nerd_fonts = data.get("nerd_fonts")
        if nerd_fonts is not None and not isinstance(nerd_fonts, bool):
            raise ValueError("nerd_fonts must be a boolean")

        percent_verbosity = data.get("percent_verbosity")
        if percent_verbosity is not None:
            if isinstance(percent_verbosity, bool) or not isinstance(percent_verbosity, int):
                raise ValueError("percent_verbosity must be an integer")
            if percent_verbosity < 0:
                raise ValueError("percent_verbosity must not be negative")

        return cls(
            separator=separator,
            number_separator=number_separator,
            nerd_fonts=nerd_fonts,
            percent_verbosity=percent_verbosity,
        )

    def to_dict(self) -> dict[str, Any]:
        values: dict[str, Any] = {
            "separator": self.separator,
            "number_separator": (
                self.number_separator.config_name if self.number_separator else None
            ),
            "nerd_fonts": self.nerd_fonts,
            "percent_verbosity": self.percent_verbosity,
        }
        return {key: value for key, value in values.items() if value is not None}


def read_cfg(path: str | Path) -> Configuration:
    """Read and parse the TOML configuration file at *path*."""
    with open(path, "rb") as handle:
        data = tomllib.load(handle)
    return Configuration.from_dict(data)


def load_cfg(path: str | Path | None = None) -> Configuration:
    """Load the configuration from *path* or from the user's config directory.

    When no path is given and no configuration file exists yet, a default one
    is written and FileNotFoundError is raised naming it.
    """
    if path is not None:
        return read_cfg(path)

    config_dir = Path(user_config_dir()) / CONFIG_DIR_NAME
    config_file = config_dir / CONFIG_FILE_NAME
    if config_file.exists():
        return read_cfg(config_file)

    config_dir.mkdir(parents=True, exist_ok=True)
    write_default_cfg(config_file)
    raise FileNotFoundError(f"Wrote config at {config_file}")


def write_default_cfg(path: str | Path) -> None:
    """Write the default configuration to *path*."""
    Path(path).write_text(tomli_w.dumps(Configuration().to_dict()), encoding="utf-8")