import base64
import io
import re
import struct
from unittest.mock import patch

import pytest
from PIL import Image

from repofetch.terminal_image import (
    ImageProtocol,
    ITermBackend,
    KittyBackend,
    SixelBackend,
    TerminalSize,
    get_dimensions,
    get_image_backend,
)

SIZE = TerminalSize(rows=32, cols=64, xpixel=512, ypixel=512)
LINES = ["first line", "second line", "third line", "fourth line"]


def red_image(width=32, height=32):
    return Image.new("RGBA", (width, height), (255, 0, 0, 255))


def placed(line):
    return f"\x1b[s{line}\x1b[u\x1b[1B"


def test_iterm_supported_follows_term_program(monkeypatch):
    monkeypatch.setenv("TERM_PROGRAM", "iTerm.app")
    assert ITermBackend.supported() is True
    monkeypatch.setenv("TERM_PROGRAM", "xterm")
    assert ITermBackend.supported() is False


def test_iterm_embeds_png_scaled_to_text_height():
    out = ITermBackend(SIZE).add_image(LINES, red_image(), 16)
    prefix = "\x1b]1337;File=inline=1:"
    assert out.startswith(prefix)
    payload = out[len(prefix):out.index("\x07")]
    decoded = Image.open(io.BytesIO(base64.b64decode(payload)))
    assert decoded.format == "PNG"
    assert decoded.size == (64, 64)


def test_iterm_keeps_aspect_ratio():
    out = ITermBackend(SIZE).add_image(LINES, red_image(32, 16), 16)
    prefix = "\x1b]1337;File=inline=1:"
    payload = out[len(prefix):out.index("\x07")]
    decoded = Image.open(io.BytesIO(base64.b64decode(payload)))
    assert decoded.width == 2 * decoded.height


def test_lines_are_placed_in_order():
    out = ITermBackend(SIZE).add_image(LINES, red_image(), 16)
    positions = [out.index(placed(line)) for line in LINES]
    assert positions == sorted(positions)
    assert out.count("\x1b[s") == len(LINES)


def test_kitty_payload_round_trips_to_rgba():
    out = KittyBackend(SIZE).add_image(LINES, red_image(), 16)
    segments = re.findall(r"\x1b_Gf=32,s=(\d+),v=(\d+),m=1,a=T;([^\x1b]*)\x1b\\", out)
    assert segments
    assert all(len(chunk) <= 4096 for _, _, chunk in segments)
    width, height = int(segments[0][0]), int(segments[0][1])
    raw = base64.b64decode("".join(chunk for _, _, chunk in segments))
    assert len(raw) == width * height * 4
    assert raw == bytes((255, 0, 0, 255)) * (width * height)
    assert "\x1b_Gm=0;\x1b\\" in out


def test_kitty_large_image_is_split_into_chunks():
    out = KittyBackend(SIZE).add_image(LINES, red_image(), 16)
    count = out.count("m=1,a=T;")
    assert count > 1
    assert out.index("\x1b_Gm=0;\x1b\\") > out.rindex("m=1,a=T;")


def test_sixel_solid_red_image():
    out = SixelBackend(SIZE).add_image(LINES[:3], red_image(16, 16), 16)
    assert out.startswith("\x1bPq")
    match = re.match(r'\x1bPq"1;1;(\d+);(\d+)', out)
    assert match is not None
    height = int(match.group(2))
    body = out[:out.index("\x1b\\")]
    assert "#0;2;100;0;0" in body
    assert "#1;" not in body
    assert body.count("-") == -(-height // 6)


def test_sixel_transparent_pixels_become_black():
    image = Image.new("RGBA", (8, 8), (200, 100, 50, 0))
    out = SixelBackend(SIZE).add_image(LINES, image, 16)
    assert "#0;2;0;0;0" in out


def test_sixel_ends_with_lines_after_image_data():
    out = SixelBackend(SIZE).add_image(LINES, red_image(), 16)
    assert out.index("\x1b\\") < out.index(placed(LINES[0]))
    assert out.count("\x1b[s") == len(LINES)


@pytest.mark.parametrize("backend_class", [ITermBackend, KittyBackend, SixelBackend])
def test_unknown_terminal_size_raises(backend_class):
    with pytest.raises(ValueError):
        backend_class(TerminalSize()).add_image(LINES, red_image(), 16)


def test_get_dimensions_on_failure_is_zero():
    with patch("fcntl.ioctl", side_effect=OSError("not a tty")):
        assert get_dimensions() == TerminalSize(0, 0, 0, 0)


def test_get_dimensions_unpacks_window_size():
    packed = struct.pack("HHHH", 32, 64, 512, 512)
    with patch("fcntl.ioctl", return_value=packed):
        assert get_dimensions() == SIZE


def test_image_backend_for_protocol_uses_terminal_size():
    packed = struct.pack("HHHH", 32, 64, 512, 512)
    with patch("fcntl.ioctl", return_value=packed):
        out = get_image_backend(ImageProtocol.SIXEL).add_image(LINES, red_image(), 16)
    assert out.startswith("\x1bPq")


@pytest.mark.parametrize("backend_class", [KittyBackend, SixelBackend])
def test_query_backends_unsupported_without_tty(monkeypatch, backend_class):
    monkeypatch.setattr("sys.stdin", io.StringIO(""))
    assert backend_class.supported() is False