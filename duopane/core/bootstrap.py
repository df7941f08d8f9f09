"""Terminal bootstrap helpers for duopane startup."""

import curses

from ..constants import ESCAPE_SEQUENCE_TIMEOUT_MS, INPUT_TIMEOUT_MS


def configure_terminal(stdscr, timeout_ms=INPUT_TIMEOUT_MS):
    """Apply core curses terminal setup.

    Raw mode delivers Ctrl+C as a key (``\\x03``) instead of SIGINT and keeps
    XON/XOFF from swallowing Ctrl+Q/Ctrl+S.
    """
    try:
        curses.curs_set(0)
    except curses.error:
        pass
    curses.noecho()
    curses.raw()
    set_escdelay = getattr(curses, 'set_escdelay', None)
    if callable(set_escdelay):
        set_escdelay(ESCAPE_SEQUENCE_TIMEOUT_MS)
    stdscr.keypad(True)
    stdscr.nodelay(False)
    stdscr.timeout(timeout_ms)
