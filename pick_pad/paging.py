#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Pick-Pad is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
"""Page window math and cursor movement for the candidate list."""

import enum
import logging
from dataclasses import dataclass
from typing import Sized

from .context import Ctx

logger = logging.getLogger(__name__)


class NothingToRender(Exception):
    """There are no candidates and no query, so the frame is skipped."""


class PagingRequest(enum.Enum):
    TO_LINE_ABOVE = "line-up"
    TO_LINE_BELOW = "line-down"
    TO_SCROLL_PAGE_UP = "page-up"
    TO_SCROLL_PAGE_DOWN = "page-down"


@dataclass
class Page:
    """The visible window: ``offset == (index - 1) * per_page`` always holds."""
    index: int = 1
    offset: int = 0
    per_page: int = 1


class PageController:
    """
    Maps the context's ``current_line`` onto a page of the item list.

    The controller owns the resolved ``current_page`` and ``max_page``;
    the prompt reads both for its page indicator and the list area reads
    the page offset.

    Args:
        ctx (Ctx): Application context holding the cursor.
        top_down (bool): False flips every paging request so the highlighted
            row moves in the physical direction of the key pressed.
    """

    def __init__(self, ctx: Ctx, top_down: bool = True):
        self.ctx = ctx
        self.top_down = top_down
        self.current_page = Page()
        self.max_page = 1

    def _resolve(self, per_page: int) -> Page:
        index = (self.ctx.current_line - 1) // per_page + 1
        if index <= 0:
            index = 1
        return Page(index=index, offset=(index - 1) * per_page, per_page=per_page)

    def calculate_page(self, targets: Sized, per_page: int) -> Page:
        """
        Resolves the page that contains ``ctx.current_line``.

        When the list has shrunk under the cursor (the page index is past
        ``max_page``) the cursor is moved to ``max_page * per_page``, the
        offset of the first page beyond the end, which always lands on the
        last valid page in the next pass.

        Returns:
            Page: The resolved page, also stored in ``current_page``.

        Raises:
            NothingToRender: The cursor is past the end, the list is empty
                and the query is empty as well.
        """
        if per_page < 1:
            raise ValueError(f"per_page must be positive, got {per_page}")

        item_count = len(targets)
        if item_count == 0:
            self.max_page = 1
        else:
            self.max_page = (item_count + per_page - 1) // per_page

        page = self._resolve(per_page)
        if page.index > self.max_page:
            if item_count == 0 and self.ctx.query_len() == 0:
                raise NothingToRender("no targets or query. nothing to do")
            logger.debug(
                "Cursor line %d is past page %d/%d; moving it back",
                self.ctx.current_line, page.index, self.max_page,
            )
            self.ctx.current_line = self.max_page * per_page
            page = self._resolve(per_page)

        self.current_page = page
        return page

    def move_page(self, request: PagingRequest, per_page: int) -> None:
        """
        Moves the cursor for a paging request.

        Falling off the top wraps to the last item of ``ctx.current`` (or
        stays on line 1 when the backing list is unknown); running past the
        last item wraps to line 1.
        """
        step = {
            PagingRequest.TO_LINE_ABOVE: -1,
            PagingRequest.TO_LINE_BELOW: 1,
            PagingRequest.TO_SCROLL_PAGE_UP: -per_page,
            PagingRequest.TO_SCROLL_PAGE_DOWN: per_page,
        }[request]
        if not self.top_down:
            step = -step

        ctx = self.ctx
        ctx.current_line += step

        if ctx.current_line < 1:
            if ctx.current is not None:
                # Go to the last item, if possible
                ctx.current_line = len(ctx.current)
            else:
                ctx.current_line = 1
        elif ctx.current is not None and ctx.current_line > len(ctx.current):
            ctx.current_line = 1
