# pick_pad/__init__.py

__version__ = "0.1.0"

from .config import deep_merge, load_config, setup_logging
from .context import Ctx, Match, RangeSelection, Selection
from .layout import (
    AnchorSettings,
    BasicLayout,
    LayoutType,
    ListArea,
    StatusBar,
    UserPrompt,
    VerticalAnchor,
    anchor_y,
    new_bottom_up_layout,
    new_default_layout,
    new_layout,
)
from .paging import NothingToRender, Page, PageController, PagingRequest
from .render import merge_attribute, print_screen, string_width
from .screen import CursesScreen, MemoryScreen, Screen, ScreenError
from .style import Style, StyleSet, parse_style

__all__ = [
    'AnchorSettings',
    'BasicLayout',
    'Ctx',
    'CursesScreen',
    'LayoutType',
    'ListArea',
    'Match',
    'MemoryScreen',
    'NothingToRender',
    'Page',
    'PageController',
    'PagingRequest',
    'RangeSelection',
    'Screen',
    'ScreenError',
    'Selection',
    'StatusBar',
    'Style',
    'StyleSet',
    'UserPrompt',
    'VerticalAnchor',
    'anchor_y',
    'deep_merge',
    'load_config',
    'merge_attribute',
    'new_bottom_up_layout',
    'new_default_layout',
    'new_layout',
    'parse_style',
    'print_screen',
    'setup_logging',
    'string_width',
]
