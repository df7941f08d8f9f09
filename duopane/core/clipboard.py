"""
System clipboard access for the copy-path command.
"""
from __future__ import annotations

import base64
import logging
import sys

import pyperclip

LOGGER = logging.getLogger(__name__)


def osc52_sequence(text: str) -> str:
    """Return the OSC 52 escape that asks the terminal to set its clipboard."""
    payload = base64.b64encode(text.encode("utf-8")).decode("ascii")
    return f"\x1b]52;c;{payload}\x07"


def _write_osc52(text: str, stream=None) -> None:
    stream = stream if stream is not None else (sys.__stderr__ or sys.stderr)
    stream.write(osc52_sequence(text))
    stream.flush()


def copy_to_clipboard(text: str, stream=None) -> str:
    """Copy ``text`` to the system clipboard and return the backend used.

    Falls back to an OSC 52 escape on the terminal when pyperclip has no
    working backend (headless sessions, SSH without X forwarding).
    """
    try:
        pyperclip.copy(text)
        return "pyperclip"
    except pyperclip.PyperclipException as exc:
        LOGGER.debug("pyperclip unavailable (%s); using OSC 52", exc)
    _write_osc52(text, stream)
    return "osc52"
