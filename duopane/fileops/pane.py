"""
Pane navigation state: cursor, viewport, selection and type-ahead search.
"""
import os

from ..constants import PAGE_STEP, PANE_BORDER_ROWS, PANE_HEADER_ROWS


class Pane:
    """One of the two directory browsing views.

    ``entries`` is replaced wholesale by ``apply_listing``; ``selected``
    holds paths inside the current directory only.
    """

    def __init__(self, pane_id, path, active=False):
        self.pane_id = pane_id
        self.path = path
        self.entries = ()
        self.selected = set()
        self.cursor = 0
        self.viewport = 0
        self.active = active
        self.search = ''
        self.error = None
        self.width = 0
        self.height = 0

    @property
    def visible_rows(self):
        return max(1, self.height - PANE_BORDER_ROWS - PANE_HEADER_ROWS)

    def current_entry(self):
        if 0 <= self.cursor < len(self.entries):
            return self.entries[self.cursor]
        return None

    def ensure_visible(self):
        """Keep the cursor row inside the viewport."""
        rows = self.visible_rows
        if self.cursor < self.viewport:
            self.viewport = self.cursor
        elif self.cursor >= self.viewport + rows:
            self.viewport = self.cursor - rows + 1
        max_viewport = max(0, len(self.entries) - rows)
        self.viewport = max(0, min(self.viewport, max_viewport))

    def clamp_cursor(self):
        if not self.entries:
            self.cursor = 0
        else:
            self.cursor = max(0, min(self.cursor, len(self.entries) - 1))
        self.ensure_visible()

    # --- Cursor movement ---

    def move_cursor(self, delta):
        self.search = ''
        if not self.entries:
            return
        self.cursor = max(0, min(self.cursor + delta, len(self.entries) - 1))
        self.ensure_visible()

    def go_home(self):
        self.search = ''
        self.cursor = 0
        self.ensure_visible()

    def go_end(self):
        self.search = ''
        self.cursor = max(0, len(self.entries) - 1)
        self.ensure_visible()

    def page(self, direction):
        self.move_cursor(direction * max(PAGE_STEP, self.visible_rows - 1))

    # --- Selection ---

    def toggle_selection(self):
        """Toggle the focused entry and move the cursor down one row."""
        entry = self.current_entry()
        if entry is None:
            return
        if not entry.is_parent:
            if entry.path in self.selected:
                self.selected.discard(entry.path)
            else:
                self.selected.add(entry.path)
        if self.cursor < len(self.entries) - 1:
            self.cursor += 1
            self.ensure_visible()

    def is_selected(self, entry):
        return entry.path in self.selected

    def clear_selection(self):
        self.selected = set()

    def selected_entries(self):
        """Selected entries in listing order."""
        return [entry for entry in self.entries if entry.path in self.selected]

    def operation_entries(self):
        """Entries a copy/move acts on: the selection, else the focused entry."""
        entries = self.selected_entries()
        if not entries:
            entry = self.current_entry()
            entries = [entry] if entry is not None else []
        return [entry for entry in entries if not entry.is_parent]

    # --- Type-ahead search ---

    def search_char(self, ch):
        """Extend the search prefix and jump to the first matching name."""
        self.search += ch
        prefix = self.search.lower()
        for index, entry in enumerate(self.entries):
            if entry.name.lower().startswith(prefix):
                self.cursor = index
                self.ensure_visible()
                return True
        return False

    def clear_search(self):
        self.search = ''

    # --- Directory changes ---

    def change_directory(self, path):
        self.path = path
        self.cursor = 0
        self.viewport = 0
        self.search = ''
        self.clear_selection()

    def descend(self):
        """Enter the focused directory.

        Returns the path to focus after reload (the directory just left when
        the ``..`` row is used), ``''`` when nothing needs focusing, or None
        when the focused entry is not a directory.
        """
        entry = self.current_entry()
        if entry is None or not entry.is_dir:
            return None
        if entry.is_parent:
            return self.ascend()
        self.change_directory(entry.path)
        return ''

    def ascend(self):
        """Go to the parent directory; returns the path to focus or None at root."""
        parent = os.path.dirname(self.path)
        if parent == self.path:
            return None
        old_path = self.path
        self.change_directory(parent)
        return old_path

    def apply_listing(self, entries, error=None, focus_path=None):
        """Replace the listing after a (re)load of the current directory."""
        self.entries = tuple(entries or ())
        self.error = error
        present = {entry.path for entry in self.entries}
        self.selected = {path for path in self.selected if path in present}
        if focus_path:
            for index, entry in enumerate(self.entries):
                if entry.path == focus_path:
                    self.cursor = index
                    break
        self.clamp_cursor()

    def step_back_after_delete(self):
        """Pull the cursor up when it sits on the row about to disappear."""
        if self.cursor >= len(self.entries) - 1 and self.cursor > 0:
            self.cursor -= 1
