"""
Static key-binding table for the Normal mode.
"""
from dataclasses import dataclass
from enum import Enum


class Command(str, Enum):
    """Normal-mode commands bound to key names."""

    QUIT = "quit"
    FORCE_QUIT = "force_quit"
    SWITCH_PANE = "switch_pane"
    PREVIEW = "preview"
    COPY = "copy"
    MOVE = "move"
    NEW_FOLDER = "new_folder"
    DELETE = "delete"
    COPY_PATH = "copy_path"
    TOGGLE_SELECT = "toggle_select"
    UP = "up"
    DOWN = "down"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    HOME = "home"
    END = "end"
    OPEN = "open"
    PARENT = "parent"
    CLEAR_SEARCH = "clear_search"


@dataclass(frozen=True)
class Shortcut:
    """One binding: every key name in ``keys`` triggers ``command``.

    ``hint`` and ``label`` feed the bottom hint bar; bindings without a hint
    are not listed there.
    """

    command: Command
    keys: tuple
    hint: str = ''
    label: str = ''


DEFAULT_KEYMAP = (
    Shortcut(Command.PREVIEW, ('alt+v', 'f3'), 'F3', 'View'),
    Shortcut(Command.COPY, ('alt+c', 'f5'), 'F5', 'Copy'),
    Shortcut(Command.MOVE, ('alt+m', 'f6'), 'F6', 'Move'),
    Shortcut(Command.NEW_FOLDER, ('alt+n', 'f7'), 'F7', 'MkDir'),
    Shortcut(Command.DELETE, ('alt+d', 'f8'), 'F8', 'Delete'),
    Shortcut(Command.COPY_PATH, ('alt+p', 'f9'), 'F9', 'Path'),
    Shortcut(Command.QUIT, ('alt+q', 'f10'), 'F10', 'Quit'),
    Shortcut(Command.TOGGLE_SELECT, ('alt+i', 'insert'), 'Ins', 'Select'),
    Shortcut(Command.SWITCH_PANE, ('tab',), 'Tab', 'Switch'),
    Shortcut(Command.FORCE_QUIT, ('ctrl+c',)),
    Shortcut(Command.UP, ('up', 'k')),
    Shortcut(Command.DOWN, ('down', 'j')),
    Shortcut(Command.PAGE_UP, ('pgup',)),
    Shortcut(Command.PAGE_DOWN, ('pgdown',)),
    Shortcut(Command.HOME, ('home',)),
    Shortcut(Command.END, ('end',)),
    Shortcut(Command.OPEN, ('enter',)),
    Shortcut(Command.PARENT, ('backspace', 'h')),
    Shortcut(Command.CLEAR_SEARCH, ('esc',)),
)


def build_key_index(keymap=DEFAULT_KEYMAP):
    """Return a ``{key_name: Command}`` lookup; later bindings win."""
    index = {}
    for shortcut in keymap:
        for key_name in shortcut.keys:
            index[key_name] = shortcut.command
    return index


def hint_items(keymap=DEFAULT_KEYMAP):
    """Return ``(hint, label)`` pairs for the hint bar, in table order."""
    return [(s.hint, s.label) for s in keymap if s.hint]
