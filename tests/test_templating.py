import re

import pytest

from repofetch.templating import hex_to_rgb, strip_color_tokens


def test_strip_color_tokens_removes_markers():
    assert strip_color_tokens("{0}ab{12}c") == "abc"


def test_strip_color_tokens_keeps_other_braces():
    text = "{a}{}{ 1}"
    assert strip_color_tokens(text) == text


@pytest.mark.parametrize("text", ["{1}   /\\{2}__", "{3}{4}{5}", "plain", ""])
def test_strip_color_tokens_leaves_no_markers(text):
    result = strip_color_tokens(text)
    assert re.search(r"\{\d+\}", result) is None
    assert len(result) <= len(text)


def test_strip_color_tokens_requires_string():
    with pytest.raises(TypeError):
        strip_color_tokens(42)


def test_hex_to_rgb_value():
    assert hex_to_rgb("#ff8000") == {"r": 255, "g": 128, "b": 0}


@pytest.mark.parametrize("rgb", [(0, 0, 0), (255, 255, 255), (18, 52, 86), (171, 205, 239)])
def test_hex_to_rgb_round_trip(rgb):
    r, g, b = rgb
    assert hex_to_rgb(f"#{r:02x}{g:02x}{b:02x}") == {"r": r, "g": g, "b": b}
    assert hex_to_rgb(f"#{r:02X}{g:02X}{b:02X}") == {"r": r, "g": g, "b": b}


def test_hex_to_rgb_requires_string():
    with pytest.raises(TypeError):
        hex_to_rgb(None)


def test_hex_to_rgb_requires_hash_prefix():
    with pytest.raises(ValueError, match="starting with"):
        hex_to_rgb("ff8000")


@pytest.mark.parametrize("value", ["#fff", "#ff80000", "#"])
def test_hex_to_rgb_requires_six_digits(value):
    with pytest.raises(ValueError, match="6 digit"):
        hex_to_rgb(value)


@pytest.mark.parametrize("value", ["#gggggg", "#1_2345", "# 12345", "#-12345"])
def test_hex_to_rgb_rejects_invalid_digits(value):
    with pytest.raises(ValueError, match="valid hex"):
        hex_to_rgb(value)