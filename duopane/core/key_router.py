"""Raw curses key -> key-name translation."""

import curses

from ..constants import ESCAPE_SEQUENCE_TIMEOUT_MS, INPUT_TIMEOUT_MS

_CONTROL_NAMES = {
    '\n': 'enter',
    '\r': 'enter',
    '\t': 'tab',
    '\x1b': 'esc',
    '\x7f': 'backspace',
    '\b': 'backspace',
    '\x03': 'ctrl+c',
}


def _special_key_names():
    names = {
        getattr(curses, 'KEY_UP', -1): 'up',
        getattr(curses, 'KEY_DOWN', -1): 'down',
        getattr(curses, 'KEY_PPAGE', -1): 'pgup',
        getattr(curses, 'KEY_NPAGE', -1): 'pgdown',
        getattr(curses, 'KEY_HOME', -1): 'home',
        getattr(curses, 'KEY_END', -1): 'end',
        getattr(curses, 'KEY_ENTER', -1): 'enter',
        getattr(curses, 'KEY_BACKSPACE', -1): 'backspace',
        getattr(curses, 'KEY_IC', -1): 'insert',
        getattr(curses, 'KEY_RESIZE', -1): 'resize',
    }
    for number in range(1, 11):
        names[getattr(curses, f'KEY_F{number}', -1)] = f'f{number}'
    names.pop(-1, None)
    return names


def key_name(key):
    """Return the key name for one ``get_wch()`` value, or None when unbound.

    Integers are curses key codes (or raw byte values from ``getch``);
    strings are typed characters.
    """
    if key is None:
        return None
    if isinstance(key, int):
        name = _special_key_names().get(key)
        if name is not None:
            return name
        if 0 <= key < 256:
            key = chr(key)
        else:
            return None
    if not isinstance(key, str) or len(key) != 1:
        return None
    if key in _CONTROL_NAMES:
        return _CONTROL_NAMES[key]
    if key.isprintable():
        return key
    return None


def _unget(key):
    try:
        if isinstance(key, str):
            curses.unget_wch(key)
        else:
            curses.ungetch(key)
    except curses.error:
        pass


def read_key_name(stdscr, key):
    """Translate ``key``, folding ESC + printable character into ``alt+<char>``.

    Terminals send Alt combinations as an escape byte followed by the key, so
    after an ESC the next key is read with a short timeout. Anything that does
    not complete an Alt combination is pushed back for the next read.
    """
    name = key_name(key)
    if name != 'esc':
        return name
    stdscr.timeout(ESCAPE_SEQUENCE_TIMEOUT_MS)
    try:
        follow = stdscr.get_wch()
    except curses.error:
        follow = None
    finally:
        stdscr.timeout(INPUT_TIMEOUT_MS)
    if follow is None:
        return 'esc'
    if isinstance(follow, str) and len(follow) == 1 and follow.isprintable():
        return f'alt+{follow}'
    _unget(follow)
    return 'esc'
