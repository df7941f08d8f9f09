"""Main loop helpers for duopane."""

import curses
import logging

from ..ui.rendering import render_frame
from .key_router import read_key_name

LOGGER = logging.getLogger(__name__)


def sync_terminal_size(app):
    """Hand the current terminal size to the controller when it changed."""
    h, w = app.stdscr.getmaxyx()
    controller = app.controller
    if (w, h) != (controller.width, controller.height):
        controller.resize(w, h)


def draw_frame(app):
    """Render a full frame before reading input."""
    sync_terminal_size(app)
    app.stdscr.erase()
    render_frame(app.stdscr, app.controller, app.theme, app.use_unicode)
    app.stdscr.noutrefresh()
    curses.doupdate()


def read_input_key(stdscr):
    """Read one key from curses, returning None on timeout/no input."""
    try:
        return stdscr.get_wch()
    except curses.error:
        return None


def dispatch_input(app, key):
    """Translate one raw key and route it to the controller."""
    if key is None:
        return
    name = read_key_name(app.stdscr, key)
    if name is None:
        return
    if name == 'resize':
        curses.update_lines_cols()
        sync_terminal_size(app)
        return
    app.controller.handle_key(name)


def poll_messages(app):
    """Apply every result the background workers queued since the last tick."""
    for message in app.tasks.drain():
        LOGGER.debug('Dispatching %s', type(message).__name__)
        app.controller.handle_message(message)


def run_app_loop(app):
    """Run main draw/input loop with terminal cleanup on exit."""
    try:
        while app.running:
            poll_messages(app)
            draw_frame(app)
            key = read_input_key(app.stdscr)
            dispatch_input(app, key)
    finally:
        app.cleanup()
