"""
Open files with the operating system's default handler.
"""
import logging
import os
import subprocess
import sys

LOGGER = logging.getLogger(__name__)


def opener_command(path, platform=None):
    """Return the argv used to open ``path``, or None when ``os.startfile`` applies."""
    platform = platform or sys.platform
    if platform.startswith('win'):
        return None
    if platform == 'darwin':
        return ['open', path]
    return ['xdg-open', path]


def open_with_system_handler(path):
    """Open ``path`` with its default application.

    Raises ``OSError`` when the opener is missing and
    ``subprocess.CalledProcessError`` when it exits with an error.
    """
    command = opener_command(path)
    if command is None:
        os.startfile(path)  # type: ignore[attr-defined]
        return
    LOGGER.debug('Opening %s with %s', path, command[0])
    subprocess.run(
        command,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
        check=True,
    )
