"""Drawing images next to text in terminals that support inline graphics.

Three protocols are supported: the kitty graphics protocol, iTerm2 inline
images and DEC sixel graphics.
"""

from __future__ import annotations

import base64
import io
import math
import os
import select
import struct
import sys
import time
from abc import ABC, abstractmethod
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum

from PIL import Image, ImageChops

try:
    import fcntl
    import termios
except ImportError:  # pragma: no cover - not available on Windows
    fcntl = None  # type: ignore[assignment]
    termios = None  # type: ignore[assignment]

_QUERY_TIMEOUT_SECONDS = 0.05
_KITTY_CHUNK_SIZE = 4096


class ImageProtocol(Enum):
    KITTY = "kitty"
    SIXEL = "sixel"
    ITERM = "iterm"


@dataclass(frozen=True)
class TerminalSize:
    """Size of the terminal window in character cells and in pixels."""

    rows: int = 0
    cols: int = 0
    xpixel: int = 0
    ypixel: int = 0


def get_dimensions() -> TerminalSize:
    """Query the size of the terminal attached to standard output.

    Returns an all-zero size when it cannot be determined.
    """
    if fcntl is None or termios is None:
        return TerminalSize()
    try:
        packed = fcntl.ioctl(1, termios.TIOCGWINSZ, bytes(8))
    except (OSError, ValueError):
        return TerminalSize()
    rows, cols, xpixel, ypixel = struct.unpack("HHHH", packed)
    return TerminalSize(rows, cols, xpixel, ypixel)


def _as_u32(value: float) -> int:
    """Truncate toward zero, saturating at zero (and at zero for NaN)."""
    if math.isnan(value) or value <= 0:
        return 0
    return int(value)


def _round_half_away(value: float) -> int:
    return math.floor(value + 0.5)


def _fit_height(image: Image.Image, target_height: int) -> Image.Image:
    """Scale *image* to *target_height* keeping its aspect ratio."""
    width, height = image.size
    ratio = target_height / height
    new_width = max(_round_half_away(width * ratio), 1)
    new_height = max(_round_half_away(height * ratio), 1)
    return image.resize((new_width, new_height), Image.Resampling.LANCZOS)


def _text_beside_image(lines: Sequence[str], image_rows: float) -> str:
    """Write each line at the cursor, then move below the taller of text and image."""
    placed = "".join(f"\x1b[s{line}\x1b[u\x1b[1B" for line in lines)
    remaining = max(len(lines), _as_u32(image_rows)) - len(lines)
    return f"{placed}\n\x1b[{remaining}B"


class ImageBackend(ABC):
    """Renders an image with lines of text printed to its right."""

    def __init__(self, terminal_size: TerminalSize | None = None) -> None:
        self._fixed_size = terminal_size

    def _terminal_size(self) -> TerminalSize:
        size = self._fixed_size if self._fixed_size is not None else get_dimensions()
        if 0 in (size.rows, size.cols, size.xpixel, size.ypixel):
            raise ValueError("terminal size in cells and pixels is unknown")
        return size

    @abstractmethod
    def add_image(self, lines: Sequence[str], image: Image.Image, colors: int) -> str:
        """Return the escape sequences that draw *image* beside *lines*."""


class ITermBackend(ImageBackend):
    """iTerm2 inline image protocol."""

    @staticmethod
    def supported() -> bool:
        return os.environ.get("TERM_PROGRAM", "") == "iTerm.app"

    def add_image(self, lines: Sequence[str], image: Image.Image, colors: int) -> str:
        size = self._terminal_size()
        height_ratio = size.rows / size.ypixel

        image = _fit_height(image, _as_u32(len(lines) / height_ratio))
        image_rows = height_ratio * image.height

        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        encoded = base64.b64encode(buffer.getvalue()).decode("ascii")

        return (
            f"\x1b]1337;File=inline=1:{encoded}\x07"
            f"\x1b[{max(_as_u32(image_rows) - 1, 0)}A"
            + _text_beside_image(lines, image_rows)
        )


class KittyBackend(ImageBackend):
    """The kitty terminal graphics protocol."""

    @staticmethod
    def supported() -> bool:
        fd = _stdin_tty_fd()
        if fd is None:
            return False
        test_image = base64.b64encode(bytes((255, 0, 0, 255)) * (32 * 32)).decode("ascii")
        allowed = {0x1B, ord("_"), ord("G"), ord("\\")}
        with _query_mode(fd):
            _write_stdout(f"\x1b_Gi=1,f=32,s=32,v=32,a=q;{test_image}\x1b\\")
            reply = bytearray()
            for byte in _read_reply(fd):
                if byte in allowed:
                    reply.append(byte)
                if reply.startswith(b"\x1b_G") and reply.endswith(b"\x1b\\"):
                    return True
        return False

    def add_image(self, lines: Sequence[str], image: Image.Image, colors: int) -> str:
        size = self._terminal_size()
        height_ratio = size.rows / size.ypixel

        image = _fit_height(image, _as_u32(len(lines) / height_ratio))
        image_rows = height_ratio * image.height

        raw = image.convert("RGBA").tobytes()
        if len(raw) != image.width * image.height * 4:
            raise ValueError("conversion from image to rgba samples failed")
        encoded = base64.b64encode(raw).decode("ascii")

        header = f"\x1b_Gf=32,s={image.width},v={image.height},m=1,a=T;"
        chunks = "".join(
            f"{header}{encoded[offset:offset + _KITTY_CHUNK_SIZE]}\x1b\\"
            for offset in range(0, len(encoded), _KITTY_CHUNK_SIZE)
        )
        return (
            chunks
            + "\x1b_Gm=0;\x1b\\"
            + f"\x1b[{max(_as_u32(image_rows) - 1, 0)}A"
            + _text_beside_image(lines, image_rows)
        )


class SixelBackend(ImageBackend):
    """DEC sixel graphics."""

    @staticmethod
    def supported() -> bool:
        fd = _stdin_tty_fd()
        if fd is None:
            return False
        with _query_mode(fd):
            _write_stdout("\x1b[c")
            reply = bytearray()
            for byte in _read_reply(fd):
                reply.append(byte)
                if reply.startswith(b"\x1b[?") and reply.endswith(b"c"):
                    if b"4" in bytes(reply[3:-1]).split(b";"):
                        return True
        return False

    def add_image(self, lines: Sequence[str], image: Image.Image, colors: int) -> str:
        size = self._terminal_size()
        cell_width = size.xpixel // size.cols
        line_height = size.ypixel // size.rows
        if cell_width == 0 or line_height == 0:
            raise ValueError("terminal cells are smaller than one pixel")

        image = _fit_height(image, len(lines) * line_height)
        image_columns = image.width / cell_width
        image_rows = image.height / line_height

        rgb = _reduce_colors(image, colors)
        return (
            _encode_sixel(rgb)
            + f"\x1b[{_as_u32(image_rows)}A"
            + f"\x1b[{_as_u32(image_columns) + 1}C"
            + _text_beside_image(lines, image_rows)
        )


def _reduce_colors(image: Image.Image, colors: int) -> Image.Image:
    """Premultiply alpha onto black and dither down to at most *colors* colors."""
    red, green, blue, alpha = image.convert("RGBA").split()
    rgb = Image.merge("RGB", [ImageChops.multiply(band, alpha) for band in (red, green, blue)])
    palette = rgb.quantize(colors=colors, method=Image.Quantize.MEDIANCUT)
    return rgb.quantize(palette=palette, dither=Image.Dither.FLOYDSTEINBERG).convert("RGB")


def _encode_sixel(rgb: Image.Image) -> str:
    width, height = rgb.size
    pixels = list(rgb.getdata())
    palette: dict[tuple[int, int, int], int] = {}
    parts = ["\x1bPq", f'"1;1;{width};{height}']

    for top in range(0, height, 6):
        samples: dict[tuple[int, int, int], list[int]] = {}
        for bit, y in enumerate(range(top, min(top + 6, height))):
            row = pixels[y * width:(y + 1) * width]
            for x, pixel in enumerate(row):
                if pixel not in palette:
                    r, g, b = (channel * 100 // 255 for channel in pixel)
                    parts.append(f"#{len(palette)};2;{r};{g};{b}")
                    palette[pixel] = len(palette)
                samples.setdefault(pixel, [0] * width)[x] |= 1 << bit
        for color, index in palette.items():
            bits = samples.get(color, [0] * width)
            parts.append(f"#{index}" + "".join(chr(value + 0x3F) for value in bits) + "$")
        parts.append("-")

    parts.append("\x1b\\")
    return "".join(parts)


def _stdin_tty_fd() -> int | None:
    if termios is None:
        return None
    try:
        fd = sys.stdin.fileno()
    except (AttributeError, OSError, ValueError):
        return None
    return fd if os.isatty(fd) else None


@contextmanager
def _query_mode(fd: int) -> Iterator[None]:
    """Disable canonical input and echo on *fd* for the duration of the block."""
    old_attributes = termios.tcgetattr(fd)
    new_attributes = termios.tcgetattr(fd)
    new_attributes[3] &= ~(termios.ICANON | termios.ECHO)
    termios.tcsetattr(fd, termios.TCSANOW, new_attributes)
    try:
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSANOW, old_attributes)


def _write_stdout(text: str) -> None:
    sys.stdout.write(text)
    sys.stdout.flush()


def _read_reply(fd: int) -> Iterator[int]:
    """Yield bytes from *fd* until none arrives in time or input ends."""
    deadline = time.monotonic() + _QUERY_TIMEOUT_SECONDS
    while True:
        timeout = max(deadline - time.monotonic(), 0.0)
        ready, _, _ = select.select([fd], [], [], timeout)
        if not ready:
            return
        data = os.read(fd, 1)
        if not data:
            return
        yield data[0]


def get_best_backend() -> ImageBackend | None:
    """Pick the first image protocol the current terminal answers to."""
    if sys.platform == "win32":
        return None
    if KittyBackend.supported():
        return KittyBackend()
    if ITermBackend.supported():
        return ITermBackend()
    if SixelBackend.supported():
        return SixelBackend()
    return None


def get_image_backend(image_protocol: ImageProtocol) -> ImageBackend | None:
    """Return the backend for *image_protocol*, or None where images are unsupported."""
    if sys.platform == "win32":
        return None
    backends = {
        ImageProtocol.KITTY: KittyBackend,
        ImageProtocol.ITERM: ITermBackend,
        ImageProtocol.SIXEL: SixelBackend,
    }
    return backends[image_protocol]()