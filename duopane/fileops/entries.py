"""
Directory entries and the directory lister used by both panes.
"""
import logging
import os
import stat
import time
from dataclasses import dataclass

LOGGER = logging.getLogger(__name__)

PARENT_NAME = '..'


@dataclass(frozen=True)
class Entry:
    """Immutable snapshot of one row in a pane listing."""

    name: str
    path: str
    size: int = 0
    mode: int = 0
    mtime: float = 0.0
    is_dir: bool = False

    @property
    def is_parent(self):
        return self.name == PARENT_NAME

    @property
    def mode_string(self):
        return stat.filemode(self.mode)


def is_root(path):
    """Return True when ``path`` has no parent directory."""
    return os.path.dirname(path) == path


def parent_entry(path):
    """Build the synthetic ``..`` row for ``path``."""
    return Entry(
        name=PARENT_NAME,
        path=os.path.dirname(path),
        mode=stat.S_IFDIR,
        mtime=time.time(),
        is_dir=True,
    )


def _sort_key(entry):
    # Directories first, then plain code-point order by name.
    return (not entry.is_dir, entry.name)


def list_directory(path):
    """Return an ordered snapshot of ``path``.

    Directories come before files, each group sorted by name. A ``..`` row is
    prepended unless ``path`` is the filesystem root. Raises ``OSError`` when
    the directory itself cannot be read; unreadable children are skipped.
    """
    entries = []
    with os.scandir(path) as it:
        for dirent in it:
            try:
                st = dirent.stat()
            except OSError:
                # Dangling symlinks still show up, described by the link itself.
                try:
                    st = dirent.stat(follow_symlinks=False)
                except OSError as exc:
                    LOGGER.debug('Skipping unreadable entry %s: %s', dirent.path, exc)
                    continue
            entries.append(Entry(
                name=dirent.name,
                path=os.path.join(path, dirent.name),
                size=st.st_size,
                mode=st.st_mode,
                mtime=st.st_mtime,
                is_dir=stat.S_ISDIR(st.st_mode),
            ))

    entries.sort(key=_sort_key)
    if not is_root(path):
        entries.insert(0, parent_entry(path))
    return tuple(entries)
