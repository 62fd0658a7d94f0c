#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Pick-Pad is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
"""Width-aware text runs and attribute merging on top of a cell surface."""

import unicodedata
from typing import TYPE_CHECKING, List, Union

from wcwidth import wcwidth

from .style import COLOR_MASK

if TYPE_CHECKING:
    from .screen import Screen

# Drawn in place of every byte that is not valid UTF-8.
PLACEHOLDER = "?"


def char_width(char: str) -> int:
    """
    Returns the number of terminal cells a single character occupies.

    Control and format characters and combining marks take no cells,
    East-Asian wide glyphs take two, anything wcwidth cannot classify takes one.
    """
    if unicodedata.category(char) in ("Cc", "Cf"):
        return 0
    if unicodedata.combining(char):
        return 0
    width = wcwidth(char)
    return width if width >= 0 else 1


def string_width(text: str) -> int:
    """Display width of a whole string, summed per character."""
    return sum(char_width(ch) for ch in text)


def decode_text(text: Union[str, bytes]) -> str:
    """
    Turns ``text`` into a string of drawable characters.

    Bytes are decoded as UTF-8 with every invalid byte mapped to one
    PLACEHOLDER; lone surrogates in an already-decoded string are treated
    the same way.
    """
    if isinstance(text, (bytes, bytearray)):
        text = bytes(text).decode("utf-8", errors="surrogateescape")
    if not any("\ud800" <= ch <= "\udfff" for ch in text):
        return text
    return "".join(PLACEHOLDER if "\ud800" <= ch <= "\udfff" else ch for ch in text)


def byte_offsets(raw: bytes) -> List[int]:
    """
    Byte position where each character of ``decode_text(raw)`` starts,
    followed by ``len(raw)``.

    An invalid byte decodes to one PLACEHOLDER and so spans one byte.
    """
    offsets = []
    pos = 0
    for ch in bytes(raw).decode("utf-8", errors="surrogateescape"):
        offsets.append(pos)
        pos += 1 if "\udc80" <= ch <= "\udcff" else len(ch.encode("utf-8"))
    offsets.append(pos)
    return offsets


def merge_attribute(a: int, b: int) -> int:
    """
    Layers attribute ``b`` on top of attribute ``a``.

    When either side has no palette colour the two are simply OR-ed, so
    whichever colour is set passes through. Otherwise ``b``'s colour bits are
    overlaid onto ``a``'s palette index and modifier bits from both survive.
    """
    if a & COLOR_MASK == 0 or b & COLOR_MASK == 0:
        return a | b
    return ((a - 1) | (b - 1)) + 1


def print_screen(
        screen: "Screen",
        x: int,
        y: int,
        fg: int,
        bg: int,
        msg: Union[str, bytes],
        fill: bool = False,
) -> int:
    """
    Writes ``msg`` to ``screen`` starting at column ``x`` of row ``y``.

    Each character is placed with ``set_cell`` and the column advances by the
    character's display width, so wide glyphs occupy two cells. When ``fill``
    is true the rest of the row is painted with blanks in the same colours.

    Returns:
        int: The column right after the last written character (before fill).
    """
    for ch in decode_text(msg):
        screen.set_cell(x, y, ch, fg, bg)
        x += char_width(ch)

    end = x
    if fill:
        width, _ = screen.size()
        for col in range(x, width):
            screen.set_cell(col, y, " ", fg, bg)
    return end
