#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Pick-Pad is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
"""Cell attributes and the named colour roles used by the layout."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Union

logger = logging.getLogger(__name__)

# Palette indexes live in the low nibble; 0 means "terminal default".
COLOR_DEFAULT = 0
COLOR_BLACK = 1
COLOR_RED = 2
COLOR_GREEN = 3
COLOR_YELLOW = 4
COLOR_BLUE = 5
COLOR_MAGENTA = 6
COLOR_CYAN = 7
COLOR_WHITE = 8

COLOR_MASK = 0x0F

ATTR_BOLD = 1 << 9
ATTR_UNDERLINE = 1 << 10
ATTR_REVERSE = 1 << 11

_COLOR_NAMES: Dict[str, int] = {
    "default": COLOR_DEFAULT,
    "black": COLOR_BLACK,
    "red": COLOR_RED,
    "green": COLOR_GREEN,
    "yellow": COLOR_YELLOW,
    "blue": COLOR_BLUE,
    "magenta": COLOR_MAGENTA,
    "cyan": COLOR_CYAN,
    "white": COLOR_WHITE,
}

_MODIFIER_NAMES: Dict[str, int] = {
    "bold": ATTR_BOLD,
    "underline": ATTR_UNDERLINE,
    "reverse": ATTR_REVERSE,
}


@dataclass
class Style:
    """A foreground/background attribute pair."""
    fg: int = COLOR_DEFAULT
    bg: int = COLOR_DEFAULT


def parse_style(tokens: Union[str, List[str]]) -> Style:
    """
    Builds a Style from a list of names such as ``["bold", "on_blue", "white"]``.

    Plain colour names set the foreground, ``on_``-prefixed names set the
    background and modifier names are OR-ed into the foreground.

    Raises:
        ValueError: If a name is not a known colour or modifier.
    """
    if isinstance(tokens, str):
        tokens = [tokens]

    style = Style()
    for raw in tokens:
        name = str(raw).strip().lower()
        if name.startswith("on_"):
            color = _COLOR_NAMES.get(name[3:])
            if color is None:
                raise ValueError(f"Unknown background colour: {raw!r}")
            style.bg = (style.bg & ~COLOR_MASK) | color
        elif name in _COLOR_NAMES:
            style.fg = (style.fg & ~COLOR_MASK) | _COLOR_NAMES[name]
        elif name in _MODIFIER_NAMES:
            style.fg |= _MODIFIER_NAMES[name]
        else:
            raise ValueError(f"Unknown style attribute: {raw!r}")
    return style


@dataclass
class StyleSet:
    """
    Colour roles for every region of the screen.

    ``selected`` paints the current (cursor) line, ``saved_selection`` paints
    lines the user explicitly marked.
    """
    basic: Style = field(default_factory=Style)
    query: Style = field(default_factory=Style)
    matched: Style = field(default_factory=lambda: Style(COLOR_CYAN, COLOR_DEFAULT))
    selected: Style = field(default_factory=lambda: Style(COLOR_DEFAULT | ATTR_UNDERLINE, COLOR_MAGENTA))
    saved_selection: Style = field(default_factory=lambda: Style(COLOR_BLACK | ATTR_BOLD, COLOR_CYAN))

    ROLES = ("basic", "query", "matched", "selected", "saved_selection")

    @classmethod
    def from_config(cls, style_config: Mapping[str, Any]) -> "StyleSet":
        """Returns the default StyleSet with roles overridden from a ``[style]`` table."""
        styles = cls()
        for role, tokens in (style_config or {}).items():
            if role not in cls.ROLES:
                logger.warning("Ignoring unknown style role %r", role)
                continue
            setattr(styles, role, parse_style(tokens))
            logger.debug("Style role %s set from config: %s", role, tokens)
        return styles
