"""
Utility functions for duopane.
"""
import curses
import locale

from .constants import BOX_DOUBLE, BOX_SINGLE, BOX_ASCII
from .theme import ROLE_TO_PAIR_ID, get_theme


def init_colors(theme_key_or_obj=None):
    """Initialize curses color pairs from the active semantic theme."""
    curses.start_color()
    has_default_colors = True
    try:
        curses.use_default_colors()
    except curses.error:
        has_default_colors = False

    if theme_key_or_obj is None or isinstance(theme_key_or_obj, str):
        theme = get_theme(theme_key_or_obj)
    else:
        theme = theme_key_or_obj

    for role, pair_id in ROLE_TO_PAIR_ID.items():
        fg, bg = theme.pairs[role]
        if not has_default_colors:
            fg = curses.COLOR_WHITE if fg < 0 else fg
            bg = curses.COLOR_BLACK if bg < 0 else bg
        curses.init_pair(pair_id, fg, bg)


def safe_addstr(win, y, x, text, attr=0):
    """Write string safely, clipping to window bounds."""
    h, w = win.getmaxyx()
    if y < 0 or y >= h or x < 0 or x >= w:
        return
    max_len = w - x
    if y == h - 1:
        # Writing the bottom-right cell scrolls the screen.
        max_len -= 1
    if max_len <= 0:
        return
    try:
        win.addnstr(y, x, text, max_len, attr)
    except curses.error:
        pass


def draw_box(win, y, x, h, w, attr=0, style='single'):
    """Draw a box with single, double or ASCII borders."""
    if h < 2 or w < 2:
        return
    chars = {'double': BOX_DOUBLE, 'ascii': BOX_ASCII}.get(style, BOX_SINGLE)
    tl, tr, bl, br, hz, vt = chars

    safe_addstr(win, y, x, tl + hz * (w - 2) + tr, attr)
    for i in range(1, h - 1):
        safe_addstr(win, y + i, x, vt, attr)
        safe_addstr(win, y + i, x + w - 1, vt, attr)
    safe_addstr(win, y + h - 1, x, bl + hz * (w - 2) + br, attr)


def check_unicode_support():
    """Check if terminal supports Unicode."""
    try:
        '╔'.encode(locale.getpreferredencoding())
        return True
    except (UnicodeEncodeError, LookupError):
        return False
