#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Pick-Pad is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
"""Application state the layout reads: query, caret, cursor, selection, styles."""

import bisect
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Sequence, Set, Tuple, Union

from .render import byte_offsets, decode_text
from .style import StyleSet

logger = logging.getLogger(__name__)

DEFAULT_PROMPT = "QUERY>"
DEFAULT_MATCHER_NAME = "IgnoreCase"


class Match:
    """
    One candidate line plus the ranges of it that matched the query.

    ``indices`` is an ascending list of non-overlapping half-open
    ``(start, end)`` offsets into ``line``: byte offsets when ``line`` is
    ``bytes``, character offsets when it is ``str``. Byte offsets are
    converted to character offsets of the decoded text, so ``indices()``
    always indexes ``line()``. An empty list or None means the line is
    drawn without highlighting.
    """

    __slots__ = ("_line", "_indices")

    def __init__(self, line: Union[str, bytes], indices: Optional[Sequence[Tuple[int, int]]] = None):
        self._line = decode_text(line)
        if not indices:
            self._indices = None
        elif isinstance(line, (bytes, bytearray)):
            starts = byte_offsets(line)
            # an offset inside a multi-byte character snaps to the next character
            self._indices = [(bisect.bisect_left(starts, int(start)), bisect.bisect_left(starts, int(end)))
                             for start, end in indices]
        else:
            self._indices = [(int(start), int(end)) for start, end in indices]

    def line(self) -> str:
        return self._line

    def indices(self) -> Optional[List[Tuple[int, int]]]:
        return self._indices

    def __repr__(self) -> str:
        return f"Match({self._line!r}, {self._indices!r})"


class Selection:
    """Set of 1-based line numbers the user marked."""

    def __init__(self, lines: Optional[Sequence[int]] = None):
        self._lines: Set[int] = set(lines or ())

    def add(self, line: int) -> None:
        self._lines.add(line)

    def remove(self, line: int) -> None:
        self._lines.discard(line)

    def toggle(self, line: int) -> None:
        if line in self._lines:
            self._lines.remove(line)
        else:
            self._lines.add(line)

    def has(self, line: int) -> bool:
        return line in self._lines

    def clear(self) -> None:
        self._lines.clear()

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self._lines))


@dataclass(frozen=True)
class RangeSelection:
    """Inclusive run of line numbers; ``start`` may be after ``end``."""
    start: int = 0
    end: int = 0

    def has(self, line: int) -> bool:
        if self.start <= 0 or self.end <= 0:
            return False
        low, high = sorted((self.start, self.end))
        return low <= line <= high


EMPTY_RANGE = RangeSelection()


@dataclass
class Ctx:
    """
    Shared state owned by the application and read by every view.

    Attributes:
        query (str): Current query text.
        caret_pos (int): Caret index into ``query``; views clamp it.
        current_line (int): 1-based cursor into the visible item list.
        current (Optional[List[Match]]): Full backing list when known; used
            to wrap the cursor when paging past either end.
        selection (Selection): Lines explicitly marked by the user.
        range_start (int): Line where range-selection mode began, 0 when off.
        style (StyleSet): Colour roles.
        prompt (str): Prompt prefix; empty means DEFAULT_PROMPT.
        matcher_name (str): Display name of the active matching strategy.
        layout_type (str): "top-down" or "bottom-up".
        status_clear_delay (float): Seconds before transient status messages clear.
    """
    query: str = ""
    caret_pos: int = 0
    current_line: int = 1
    current: Optional[List[Match]] = None
    selection: Selection = field(default_factory=Selection)
    range_start: int = 0
    style: StyleSet = field(default_factory=StyleSet)
    prompt: str = DEFAULT_PROMPT
    matcher_name: str = DEFAULT_MATCHER_NAME
    layout_type: str = "top-down"
    status_clear_delay: float = 0.5

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "Ctx":
        """Builds a context from the dictionary returned by ``load_config``."""
        ui = config.get("ui", {})
        ctx = cls(
            style=StyleSet.from_config(config.get("style", {})),
            prompt=ui.get("prompt", DEFAULT_PROMPT),
            matcher_name=ui.get("matcher", DEFAULT_MATCHER_NAME),
            layout_type=ui.get("layout", "top-down"),
            status_clear_delay=float(ui.get("status_clear_delay", 0.5)),
        )
        logger.debug("Context created: layout=%s prompt=%r matcher=%s",
                     ctx.layout_type, ctx.prompt, ctx.matcher_name)
        return ctx

    def query_len(self) -> int:
        return len(self.query)

    def set_query(self, query: str) -> None:
        self.query = query
        self.caret_pos = len(query)

    def set_caret_pos(self, pos: int) -> None:
        self.caret_pos = pos

    def is_range_mode(self) -> bool:
        return self.range_start > 0

    def selected_range(self) -> RangeSelection:
        if not self.is_range_mode():
            return EMPTY_RANGE
        return RangeSelection(self.range_start, self.current_line)
