#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Pick-Pad is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
"""
Screen layout for the line selector.

A layout is made of three anchored regions: the query prompt, the page of
candidate lines and a one-line status bar. ``BasicLayout`` wires them
together in either top-down or bottom-up orientation and redraws the whole
frame on request.
"""

import enum
import functools
import logging
import threading
from typing import Callable, Optional, Protocol, Sequence

from .context import DEFAULT_PROMPT, Ctx, Match
from .paging import NothingToRender, PageController, PagingRequest
from .render import char_width, merge_attribute, print_screen, string_width
from .screen import Screen, ScreenError
from .style import ATTR_BOLD, ATTR_REVERSE

logger = logging.getLogger(__name__)

# Rows outside the list area: one for the prompt, one for the status bar.
RESERVED_ROWS = 2


class LayoutType(str, enum.Enum):
    TOP_DOWN = "top-down"      # items read from top to bottom (default)
    BOTTOM_UP = "bottom-up"    # items read from bottom to top


def is_valid_layout_type(value: str) -> bool:
    return value in (LayoutType.TOP_DOWN.value, LayoutType.BOTTOM_UP.value)


class VerticalAnchor(enum.IntEnum):
    TOP = 1
    BOTTOM = 2


def is_valid_vertical_anchor(anchor) -> bool:
    return anchor in (VerticalAnchor.TOP, VerticalAnchor.BOTTOM)


class AnchorSettings:
    """
    Fixes a region's row relative to the top or bottom edge of the screen.

    Raises:
        ValueError: If ``anchor`` is not a VerticalAnchor.
    """

    def __init__(self, screen: Screen, anchor: VerticalAnchor, anchor_offset: int = 0):
        if not is_valid_vertical_anchor(anchor):
            raise ValueError(f"Invalid vertical anchor specified: {anchor!r}")
        if anchor_offset < 0:
            raise ValueError(f"Anchor offset must not be negative: {anchor_offset}")
        self.screen = screen
        self.anchor = VerticalAnchor(anchor)
        self.anchor_offset = anchor_offset

    def anchor_position(self) -> int:
        """Returns the 0-based row for the configured anchor and offset."""
        _, height = self.screen.size()
        return anchor_y(self.anchor, self.anchor_offset, height)


def anchor_y(anchor: VerticalAnchor, offset: int, screen_height: int) -> int:
    if anchor == VerticalAnchor.TOP:
        return offset
    # -1 because rows are 0-based while the height is a count
    return screen_height - offset - 1


class UserPrompt(AnchorSettings):
    """Draws the query line: prefix, query with caret, page indicator."""

    def __init__(self, ctx: Ctx, screen: Screen, pager: PageController,
                 anchor: VerticalAnchor, anchor_offset: int = 0):
        super().__init__(screen, anchor, anchor_offset)
        self.ctx = ctx
        self.pager = pager
        self.prefix = ctx.prompt or DEFAULT_PROMPT
        self.prefix_len = string_width(self.prefix)

    def draw(self) -> None:
        ctx = self.ctx
        style = ctx.style
        location = self.anchor_position()

        print_screen(self.screen, 0, location, style.basic.fg, style.basic.bg, self.prefix)

        if ctx.caret_pos < 0:
            ctx.set_caret_pos(0)
        if ctx.caret_pos > ctx.query_len():
            ctx.set_caret_pos(ctx.query_len())

        fg = style.query.fg
        bg = style.query.bg
        start = self.prefix_len + 1
        if ctx.caret_pos == ctx.query_len():
            # the whole query, then the caret as a reversed blank after it
            query_width = string_width(ctx.query)
            print_screen(self.screen, start, location, fg, bg, ctx.query)
            print_screen(self.screen, start + query_width, location,
                         fg | ATTR_REVERSE, bg | ATTR_REVERSE, " ")
            print_screen(self.screen, start + query_width + 1, location, fg, bg, "", fill=True)
        else:
            # caret inside the query: reverse the character under it
            x = start
            for i, ch in enumerate(ctx.query):
                if i == ctx.caret_pos:
                    self.screen.set_cell(x, location, ch, fg | ATTR_REVERSE, bg | ATTR_REVERSE)
                else:
                    self.screen.set_cell(x, location, ch, fg, bg)
                x += char_width(ch)

        width, _ = self.screen.size()
        indicator = f"{ctx.matcher_name} [{self.pager.current_page.index}/{self.pager.max_page}]"
        print_screen(self.screen, width - string_width(indicator), location,
                     style.basic.fg, style.basic.bg, indicator)


class ClearTimer(Protocol):
    def start(self) -> None: ...

    def cancel(self) -> None: ...


TimerFactory = Callable[[float, Callable[[], None]], ClearTimer]


class StatusBar(AnchorSettings):
    """
    Right-aligned, reverse-video status message with optional auto-clear.

    At most one clear timer is pending: every ``print_status`` call cancels
    the previous one before drawing. Each message gets a new generation
    number and its timer only blanks the bar while that generation is still
    current, so a timer that fired just before a newer message cannot erase
    it. The same lock guards the timer handle and the writes to the status
    row.

    Args:
        timer_factory: Builds the deferred clear; called as
            ``timer_factory(delay, callback)`` and must return an object with
            ``start()`` and ``cancel()``. Defaults to ``threading.Timer``.
    """

    def __init__(self, ctx: Ctx, screen: Screen, anchor: VerticalAnchor, anchor_offset: int = 0,
                 timer_factory: Optional[TimerFactory] = None):
        super().__init__(screen, anchor, anchor_offset)
        self.ctx = ctx
        self._timer_factory = timer_factory or threading.Timer
        self._clear_timer: Optional[ClearTimer] = None
        self._generation = 0
        self._timer_lock = threading.Lock()

    def _cancel_timer_locked(self) -> None:
        if self._clear_timer is not None:
            self._clear_timer.cancel()
            self._clear_timer = None
            logger.debug("Pending status clear cancelled")

    def has_pending_clear(self) -> bool:
        with self._timer_lock:
            return self._clear_timer is not None

    def print_status(self, msg: str, clear_delay: float = 0) -> None:
        """
        Prints ``msg`` on the status row and, when ``clear_delay`` > 0,
        schedules it to be cleared after that many seconds.
        """
        with self._timer_lock:
            self._cancel_timer_locked()
            self._generation += 1
            self._draw_locked(msg)

            if clear_delay > 0:
                timer = self._timer_factory(clear_delay, functools.partial(self._clear_status, self._generation))
                if isinstance(timer, threading.Timer):
                    timer.daemon = True
                self._clear_timer = timer
                timer.start()
                logger.debug("Status clear scheduled in %.3fs", clear_delay)

    def _draw_locked(self, msg: str) -> None:
        location = self.anchor_position()
        width, _ = self.screen.size()

        msg_width = string_width(msg)
        while msg_width > width and msg:
            msg_width -= char_width(msg[0])
            msg = msg[1:]

        style = self.ctx.style.basic
        if width > msg_width:
            print_screen(self.screen, 0, location, style.fg, style.bg, " " * (width - msg_width))
        if msg_width > 0:
            print_screen(self.screen, width - msg_width, location,
                         style.fg | ATTR_REVERSE | ATTR_BOLD, style.bg | ATTR_REVERSE, msg)
        try:
            self.screen.flush()
        except ScreenError as e:
            logger.debug("Status bar flush failed: %s", e)

    def _clear_status(self, generation: int) -> None:
        with self._timer_lock:
            if generation != self._generation:
                logger.debug("Stale status clear ignored")
                return
            self._clear_timer = None
            self._generation += 1
            self._draw_locked("")

    def close(self) -> None:
        """Cancels any pending clear."""
        with self._timer_lock:
            self._cancel_timer_locked()


class ListArea(AnchorSettings):
    """Draws one page of candidate lines, highlighting matched ranges."""

    def __init__(self, ctx: Ctx, screen: Screen, pager: PageController,
                 anchor: VerticalAnchor, anchor_offset: int = 0, sort_top_down: bool = True):
        super().__init__(screen, anchor, anchor_offset)
        self.ctx = ctx
        self.pager = pager
        self.sort_top_down = sort_top_down

    def _row_colors(self, idx: int):
        ctx = self.ctx
        style = ctx.style
        if idx == ctx.current_line - 1:
            return style.selected.fg, style.selected.bg
        if ctx.selection.has(idx + 1) or ctx.selected_range().has(idx + 1):
            return style.saved_selection.fg, style.saved_selection.bg
        return style.basic.fg, style.basic.bg

    def draw(self, targets: Sequence[Match], per_page: int) -> None:
        page = self.pager.current_page
        start = self.anchor_position()

        for n in range(per_page):
            target_idx = page.offset + n
            if target_idx >= len(targets):
                break

            fg, bg = self._row_colors(target_idx)
            y = start + n if self.sort_top_down else start - n

            target = targets[target_idx]
            self._draw_line(y, target.line(), target.indices(), fg, bg)

    def _draw_line(self, y, line, matches, fg, bg) -> None:
        if not matches:
            print_screen(self.screen, 0, y, fg, bg, line, fill=True)
            return

        matched = self.ctx.style.matched
        col = 0
        index = 0
        for m_start, m_end in matches:
            if m_start > index:
                gap = line[index:m_start]
                print_screen(self.screen, col, y, fg, bg, gap)
                col += string_width(gap)
                index += len(gap)
            chunk = line[m_start:m_end]
            print_screen(self.screen, col, y, matched.fg, merge_attribute(bg, matched.bg), chunk, fill=True)
            col += string_width(chunk)
            index += len(chunk)

        last_end = matches[-1][1]
        if len(line) > last_end:
            print_screen(self.screen, col, y, fg, bg, line[last_end:], fill=True)


class BasicLayout:
    """
    Composes prompt, list area and status bar into a full-frame redraw.

    Use ``new_default_layout``/``new_bottom_up_layout`` (or ``new_layout``)
    rather than building one by hand.
    """

    def __init__(self, ctx: Ctx, screen: Screen, prompt: UserPrompt, list_area: ListArea,
                 status_bar: StatusBar, pager: PageController):
        self.ctx = ctx
        self.screen = screen
        self.prompt = prompt
        self.list = list_area
        self.status_bar = status_bar
        self.pager = pager

    def lines_per_page(self) -> int:
        _, height = self.screen.size()
        return height - RESERVED_ROWS

    def calculate_page(self, targets: Sequence[Match], per_page: int):
        return self.pager.calculate_page(targets, per_page)

    def draw_prompt(self) -> None:
        self.prompt.draw()

    def draw_screen(self, targets: Sequence[Match]) -> bool:
        """
        Redraws the whole frame.

        A failed clear or flush, or nothing to show, drops the frame; the
        next event draws a fresh one.

        Returns:
            bool: True when the frame was drawn and flushed.
        """
        basic = self.ctx.style.basic
        try:
            self.screen.clear(basic.fg, basic.bg)
        except ScreenError as e:
            logger.debug("Frame dropped, clear failed: %s", e)
            return False

        if self.ctx.current_line > len(targets) > 0:
            self.ctx.current_line = len(targets)

        per_page = self.lines_per_page()
        try:
            self.calculate_page(targets, per_page)
        except NothingToRender as e:
            logger.debug("Frame dropped: %s", e)
            return False

        self.draw_prompt()
        self.list.draw(targets, per_page)

        try:
            self.screen.flush()
        except ScreenError as e:
            logger.debug("Frame dropped, flush failed: %s", e)
            return False
        return True

    def move_page(self, request: PagingRequest) -> None:
        self.pager.move_page(request, self.lines_per_page())

    def print_status(self, msg: str, clear_delay: float = 0) -> None:
        self.status_bar.print_status(msg, clear_delay)

    def close(self) -> None:
        self.status_bar.close()


def new_default_layout(ctx: Ctx, screen: Screen, timer_factory: Optional[TimerFactory] = None) -> BasicLayout:
    """Prompt on the top row, list below it reading downwards, status on the last row."""
    pager = PageController(ctx, top_down=True)
    return BasicLayout(
        ctx,
        screen,
        prompt=UserPrompt(ctx, screen, pager, VerticalAnchor.TOP, 0),
        list_area=ListArea(ctx, screen, pager, VerticalAnchor.TOP, 1, sort_top_down=True),
        status_bar=StatusBar(ctx, screen, VerticalAnchor.BOTTOM, 0, timer_factory=timer_factory),
        pager=pager,
    )


def new_bottom_up_layout(ctx: Ctx, screen: Screen, timer_factory: Optional[TimerFactory] = None) -> BasicLayout:
    """Prompt just above the status row, list above the prompt reading upwards."""
    pager = PageController(ctx, top_down=False)
    return BasicLayout(
        ctx,
        screen,
        prompt=UserPrompt(ctx, screen, pager, VerticalAnchor.BOTTOM, 1),
        list_area=ListArea(ctx, screen, pager, VerticalAnchor.BOTTOM, 2, sort_top_down=False),
        status_bar=StatusBar(ctx, screen, VerticalAnchor.BOTTOM, 0, timer_factory=timer_factory),
        pager=pager,
    )


def new_layout(ctx: Ctx, screen: Screen, layout_type: Optional[str] = None,
               timer_factory: Optional[TimerFactory] = None) -> BasicLayout:
    """
    Builds the layout named by ``layout_type`` (``ctx.layout_type`` if omitted).

    Raises:
        ValueError: For an unknown layout type.
    """
    layout_type = layout_type or ctx.layout_type
    if isinstance(layout_type, LayoutType):
        layout_type = layout_type.value
    if not is_valid_layout_type(layout_type):
        raise ValueError(f"Unknown layout type: {layout_type!r}")

    logger.debug("Creating %s layout", layout_type)
    if layout_type == LayoutType.BOTTOM_UP.value:
        return new_bottom_up_layout(ctx, screen, timer_factory)
    return new_default_layout(ctx, screen, timer_factory)
