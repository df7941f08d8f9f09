"""Result messages put on the task queue by background workers.

Copy/move workers also emit ``ProgressEvent`` and ``ConflictsFound`` values
from :mod:`duopane.fileops.engine`.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class DirectoryLoaded:
    pane_id: int
    path: str
    entries: tuple = ()
    error: Optional[str] = None
    focus_path: Optional[str] = None


@dataclass(frozen=True)
class FolderCreated:
    pane_id: int
    path: Optional[str] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class EntryDeleted:
    pane_id: int
    path: str
    error: Optional[str] = None


@dataclass(frozen=True)
class FileOpened:
    path: str
    error: Optional[str] = None


@dataclass(frozen=True)
class ClipboardCopied:
    text: str
    error: Optional[str] = None


@dataclass(frozen=True)
class PreviewReady:
    path: str
    content: str = ''
    error: Optional[str] = None
