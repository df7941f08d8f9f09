"""Interaction modes of the controller.

Exactly one mode is current at a time; the controller routes keys through a
handler table keyed by the mode's type.
"""

from dataclasses import dataclass, field
from typing import Optional

from ..fileops.conflicts import OverwriteSession
from ..fileops.entries import Entry
from ..fileops.preview import clamp_scroll, preview_inner_size, wrapped_lines


@dataclass
class NormalMode:
    """Browsing both panes."""


@dataclass
class CreatingFolderMode:
    buffer: str = ''


@dataclass
class ConfirmingDeleteMode:
    target: Entry
    pane_id: int


@dataclass
class ConfirmingOverwriteMode:
    session: OverwriteSession


@dataclass
class PreviewingMode:
    """Full-screen file preview; ``content`` stays None until loaded.

    ``lines`` holds ``content`` wrapped to the box's inner width and is only
    rebuilt when the content arrives or that width changes.
    """

    path: str
    name: str
    content: Optional[str] = None
    scroll: int = 0
    width: int = 0
    height: int = 0
    lines: list = field(default_factory=list)
    wrap_width: int = -1

    def show(self, content):
        self.content = content
        self.scroll = 0
        self.wrap_width = -1
        self.rewrap()

    def rewrap(self):
        """Re-wrap for the current size if the inner width moved; clamp scroll."""
        if self.content is None:
            return
        inner_w, _ = preview_inner_size(self.width, self.height)
        if inner_w != self.wrap_width:
            self.lines = wrapped_lines(self.content, inner_w)
            self.wrap_width = inner_w
        self.scroll = clamp_scroll(self.scroll, self.lines, self.height)
