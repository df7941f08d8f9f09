"""Theme definitions and lookup helpers for duopane."""

from dataclasses import dataclass
import curses
from typing import Optional

from .constants import (
    C_CURSOR,
    C_DIRECTORY,
    C_ERROR,
    C_FILE,
    C_HINT_DESC,
    C_HINT_KEY,
    C_PANE_ACTIVE,
    C_PANE_INACTIVE,
    C_PREVIEW,
    C_PROGRESS_BAR,
    C_PROGRESS_TRACK,
    C_PROMPT_CONFIRM,
    C_PROMPT_INPUT,
    C_PROMPT_OVERWRITE,
    C_SELECTION,
    C_STATUS,
    C_STATUS_ACTIVE,
)

# Test doubles may expose only a subset of color constants.
for _name, _fallback in {
    "COLOR_BLACK": 0,
    "COLOR_RED": 1,
    "COLOR_GREEN": 2,
    "COLOR_YELLOW": 3,
    "COLOR_BLUE": 4,
    "COLOR_MAGENTA": 5,
    "COLOR_CYAN": 6,
    "COLOR_WHITE": 7,
}.items():
    if not hasattr(curses, _name):
        setattr(curses, _name, _fallback)

DEFAULT_THEME = "classic"

# -1 keeps the terminal's default background (see curses.use_default_colors).
DEFAULT_BG = -1

ROLE_TO_PAIR_ID = {
    "pane_active": C_PANE_ACTIVE,
    "pane_inactive": C_PANE_INACTIVE,
    "cursor": C_CURSOR,
    "selection": C_SELECTION,
    "directory": C_DIRECTORY,
    "file": C_FILE,
    "status": C_STATUS,
    "status_active": C_STATUS_ACTIVE,
    "prompt_input": C_PROMPT_INPUT,
    "prompt_confirm": C_PROMPT_CONFIRM,
    "prompt_overwrite": C_PROMPT_OVERWRITE,
    "preview": C_PREVIEW,
    "progress_bar": C_PROGRESS_BAR,
    "progress_track": C_PROGRESS_TRACK,
    "hint_key": C_HINT_KEY,
    "hint_desc": C_HINT_DESC,
    "error": C_ERROR,
}


@dataclass(frozen=True)
class Theme:
    """duopane semantic theme definition."""

    key: str
    label: str
    pairs: dict[str, tuple[int, int]]

    def attr(self, role: str) -> int:
        """Return the curses attribute for ``role`` once pairs are initialized."""
        return curses.color_pair(ROLE_TO_PAIR_ID[role])


THEMES = {
    "classic": Theme(
        key="classic",
        label="Classic",
        pairs={
            "pane_active": (curses.COLOR_BLUE, DEFAULT_BG),
            "pane_inactive": (curses.COLOR_WHITE, DEFAULT_BG),
            "cursor": (curses.COLOR_WHITE, curses.COLOR_BLUE),
            "selection": (curses.COLOR_BLACK, curses.COLOR_YELLOW),
            "directory": (curses.COLOR_CYAN, DEFAULT_BG),
            "file": (curses.COLOR_WHITE, DEFAULT_BG),
            "status": (curses.COLOR_WHITE, curses.COLOR_BLACK),
            "status_active": (curses.COLOR_WHITE, curses.COLOR_BLUE),
            "prompt_input": (curses.COLOR_WHITE, curses.COLOR_BLACK),
            "prompt_confirm": (curses.COLOR_WHITE, curses.COLOR_RED),
            "prompt_overwrite": (curses.COLOR_BLACK, curses.COLOR_YELLOW),
            "preview": (curses.COLOR_MAGENTA, DEFAULT_BG),
            "progress_bar": (curses.COLOR_WHITE, curses.COLOR_BLUE),
            "progress_track": (curses.COLOR_WHITE, curses.COLOR_BLACK),
            "hint_key": (curses.COLOR_BLUE, DEFAULT_BG),
            "hint_desc": (curses.COLOR_WHITE, DEFAULT_BG),
            "error": (curses.COLOR_RED, DEFAULT_BG),
        },
    ),
    "midnight": Theme(
        key="midnight",
        label="Midnight Commander",
        pairs={
            "pane_active": (curses.COLOR_WHITE, curses.COLOR_BLUE),
            "pane_inactive": (curses.COLOR_CYAN, curses.COLOR_BLUE),
            "cursor": (curses.COLOR_BLACK, curses.COLOR_CYAN),
            "selection": (curses.COLOR_YELLOW, curses.COLOR_BLUE),
            "directory": (curses.COLOR_WHITE, curses.COLOR_BLUE),
            "file": (curses.COLOR_CYAN, curses.COLOR_BLUE),
            "status": (curses.COLOR_BLACK, curses.COLOR_CYAN),
            "status_active": (curses.COLOR_WHITE, curses.COLOR_BLACK),
            "prompt_input": (curses.COLOR_BLACK, curses.COLOR_WHITE),
            "prompt_confirm": (curses.COLOR_WHITE, curses.COLOR_RED),
            "prompt_overwrite": (curses.COLOR_BLACK, curses.COLOR_YELLOW),
            "preview": (curses.COLOR_WHITE, curses.COLOR_BLUE),
            "progress_bar": (curses.COLOR_BLACK, curses.COLOR_CYAN),
            "progress_track": (curses.COLOR_CYAN, curses.COLOR_BLACK),
            "hint_key": (curses.COLOR_WHITE, curses.COLOR_BLACK),
            "hint_desc": (curses.COLOR_BLACK, curses.COLOR_CYAN),
            "error": (curses.COLOR_YELLOW, curses.COLOR_RED),
        },
    ),
    "hacker": Theme(
        key="hacker",
        label="Hacker",
        pairs={
            "pane_active": (curses.COLOR_GREEN, curses.COLOR_BLACK),
            "pane_inactive": (curses.COLOR_GREEN, curses.COLOR_BLACK),
            "cursor": (curses.COLOR_BLACK, curses.COLOR_GREEN),
            "selection": (curses.COLOR_YELLOW, curses.COLOR_BLACK),
            "directory": (curses.COLOR_GREEN, curses.COLOR_BLACK),
            "file": (curses.COLOR_GREEN, curses.COLOR_BLACK),
            "status": (curses.COLOR_GREEN, curses.COLOR_BLACK),
            "status_active": (curses.COLOR_BLACK, curses.COLOR_GREEN),
            "prompt_input": (curses.COLOR_GREEN, curses.COLOR_BLACK),
            "prompt_confirm": (curses.COLOR_BLACK, curses.COLOR_GREEN),
            "prompt_overwrite": (curses.COLOR_BLACK, curses.COLOR_GREEN),
            "preview": (curses.COLOR_GREEN, curses.COLOR_BLACK),
            "progress_bar": (curses.COLOR_BLACK, curses.COLOR_GREEN),
            "progress_track": (curses.COLOR_GREEN, curses.COLOR_BLACK),
            "hint_key": (curses.COLOR_BLACK, curses.COLOR_GREEN),
            "hint_desc": (curses.COLOR_GREEN, curses.COLOR_BLACK),
            "error": (curses.COLOR_RED, curses.COLOR_BLACK),
        },
    ),
}


def get_theme(theme_key: Optional[str]) -> Theme:
    """Resolve theme by key with fallback to default."""
    if not theme_key:
        return THEMES[DEFAULT_THEME]
    return THEMES.get(theme_key, THEMES[DEFAULT_THEME])
