#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Pick-Pad is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
"""
Cell surfaces the layout draws on.

Every view receives a ``Screen`` at construction time. ``CursesScreen``
talks to a real terminal, ``MemoryScreen`` keeps the cells in memory for
headless rendering and tests.
"""

import curses
import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Tuple

from .render import char_width
from .style import (
    ATTR_BOLD,
    ATTR_REVERSE,
    ATTR_UNDERLINE,
    COLOR_DEFAULT,
    COLOR_MASK,
)

logger = logging.getLogger(__name__)

Cell = Tuple[str, int, int]


class ScreenError(Exception):
    """Raised when the underlying device fails to clear or flush."""


class Screen(ABC):
    """Abstract character-cell surface. Coordinates are 0-based."""

    @abstractmethod
    def size(self) -> Tuple[int, int]:
        """Returns ``(width, height)`` in cells."""

    @abstractmethod
    def set_cell(self, x: int, y: int, ch: str, fg: int, bg: int) -> None:
        pass

    @abstractmethod
    def clear(self, fg: int, bg: int) -> None:
        pass

    @abstractmethod
    def flush(self) -> None:
        pass


class MemoryScreen(Screen):
    """
    In-memory grid of ``(ch, fg, bg)`` cells.

    A wide glyph is stored in its first cell and the following cell is
    overwritten with an empty string, the same way a terminal marks the
    continuation column. ``fail_clear``/``fail_flush`` make the next calls
    raise ScreenError.
    """

    def __init__(self, width: int = 80, height: int = 24):
        self.width = width
        self.height = height
        self.fail_clear = False
        self.fail_flush = False
        self.flush_count = 0
        self.cells: Dict[Tuple[int, int], Cell] = {}
        self._blank = (" ", COLOR_DEFAULT, COLOR_DEFAULT)

    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    def resize(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.cells = {pos: cell for pos, cell in self.cells.items()
                      if pos[0] < width and pos[1] < height}

    def set_cell(self, x: int, y: int, ch: str, fg: int, bg: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            return
        self.cells[(x, y)] = (ch, fg, bg)
        if char_width(ch) == 2 and x + 1 < self.width:
            self.cells[(x + 1, y)] = ("", fg, bg)

    def clear(self, fg: int, bg: int) -> None:
        if self.fail_clear:
            raise ScreenError("clear failed")
        self._blank = (" ", fg, bg)
        self.cells = {}

    def flush(self) -> None:
        if self.fail_flush:
            raise ScreenError("flush failed")
        self.flush_count += 1

    def cell(self, x: int, y: int) -> Cell:
        return self.cells.get((x, y), self._blank)

    def row_text(self, y: int) -> str:
        """Text of row ``y`` with continuation cells dropped."""
        return "".join(self.cell(x, y)[0] for x in range(self.width))

    def row_cells(self, y: int) -> List[Cell]:
        return [self.cell(x, y) for x in range(self.width)]


class CursesScreen(Screen):
    """
    Screen backed by a curses window.

    Palette indexes become colour pairs, allocated on first use and cached;
    modifier bits become curses attributes. Terminals without colour support
    get modifiers only.
    """

    # curses colour numbers by palette index (index 0 is the terminal default)
    _CURSES_COLORS = {
        1: curses.COLOR_BLACK,
        2: curses.COLOR_RED,
        3: curses.COLOR_GREEN,
        4: curses.COLOR_YELLOW,
        5: curses.COLOR_BLUE,
        6: curses.COLOR_MAGENTA,
        7: curses.COLOR_CYAN,
        8: curses.COLOR_WHITE,
    }

    def __init__(self, stdscr: "curses.window"):
        self.stdscr = stdscr
        self._pairs: Dict[Tuple[int, int], int] = {}
        self._next_pair = 1
        self.has_colors = self._init_colors()

    def _init_colors(self) -> bool:
        try:
            if not curses.has_colors():
                logger.warning("Terminal has no colour support; drawing with modifiers only.")
                return False
            curses.start_color()
            curses.use_default_colors()
            return True
        except curses.error as e:
            logger.warning("Failed to initialise curses colours: %s", e)
            return False

    def _color_pair(self, fg: int, bg: int) -> int:
        fg_idx = fg & COLOR_MASK
        bg_idx = bg & COLOR_MASK
        if not self.has_colors or (fg_idx == COLOR_DEFAULT and bg_idx == COLOR_DEFAULT):
            return 0

        key = (fg_idx, bg_idx)
        pair = self._pairs.get(key)
        if pair is None:
            if self._next_pair >= getattr(curses, "COLOR_PAIRS", 256):
                logger.warning("Ran out of available color pairs.")
                return 0
            pair = self._next_pair
            try:
                curses.init_pair(pair, self._CURSES_COLORS.get(fg_idx, -1), self._CURSES_COLORS.get(bg_idx, -1))
            except curses.error as e:
                logger.warning("Failed to init colour pair %d for %s: %s", pair, key, e)
                return 0
            self._pairs[key] = pair
            self._next_pair += 1
        return curses.color_pair(pair)

    def attribute_for(self, fg: int, bg: int) -> int:
        """Curses attribute for a fg/bg attribute pair."""
        attr = self._color_pair(fg, bg)
        mods = fg | bg
        if mods & ATTR_BOLD:
            attr |= curses.A_BOLD
        if mods & ATTR_UNDERLINE:
            attr |= curses.A_UNDERLINE
        if mods & ATTR_REVERSE:
            attr |= curses.A_REVERSE
        return attr

    def size(self) -> Tuple[int, int]:
        height, width = self.stdscr.getmaxyx()
        return width, height

    def set_cell(self, x: int, y: int, ch: str, fg: int, bg: int) -> None:
        try:
            self.stdscr.addstr(y, x, ch, self.attribute_for(fg, bg))
        except curses.error:
            # Writing the bottom-right cell or off-window raises; nothing to draw there.
            pass

    def clear(self, fg: int, bg: int) -> None:
        try:
            self.stdscr.bkgdset(" ", self.attribute_for(fg, bg))
            self.stdscr.erase()
        except curses.error as e:
            raise ScreenError(f"curses clear failed: {e}") from e

    def flush(self) -> None:
        try:
            self.stdscr.noutrefresh()
            curses.doupdate()
        except curses.error as e:
            raise ScreenError(f"curses doupdate failed: {e}") from e

