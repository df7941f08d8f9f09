"""
Interaction mode state machine.

The controller owns both panes and the current interaction mode. Keys are
routed exclusively to the handler of the current mode; background results
arrive as messages and only ever update data, with two exceptions: a
``ConflictsFound`` opens the overwrite prompt, and a terminal progress event
reloads both panes.
"""
import logging
import os
import time
from collections import deque

from ..constants import BOTTOM_BARS_HEIGHT
from ..fileops.conflicts import Decision, OverwriteSession
from ..fileops.engine import ConflictsFound, OperationMode, OperationRequest, ProgressEvent
from ..fileops.pane import Pane
from ..fileops.preview import clamp_scroll, max_scroll, preview_inner_size
from .config import AppConfig
from .keys import Command, build_key_index
from .messages import (
    ClipboardCopied,
    DirectoryLoaded,
    EntryDeleted,
    FileOpened,
    FolderCreated,
    PreviewReady,
)
from .modes import (
    ConfirmingDeleteMode,
    ConfirmingOverwriteMode,
    CreatingFolderMode,
    NormalMode,
    PreviewingMode,
)

LOGGER = logging.getLogger(__name__)

OVERWRITE_KEYS = {
    'y': Decision.OVERWRITE,
    'n': Decision.SKIP,
    'a': Decision.OVERWRITE_ALL,
    's': Decision.SKIP_ALL,
}


class InteractionController:
    """Routes keys and background messages for the two-pane browser.

    ``executor`` runs filesystem work off the loop thread (see
    :class:`duopane.core.tasks.TaskRunner`); its results are fed back through
    ``handle_message``.
    """

    def __init__(self, executor, config=None, start_path=None):
        self.executor = executor
        self.config = config or AppConfig()
        start_path = start_path or os.getcwd()
        self.left = Pane(0, start_path, active=True)
        self.right = Pane(1, start_path)
        self.panes = (self.left, self.right)
        self.mode = NormalMode()
        self.running = True
        self.last_error = None
        self.width = 0
        self.height = 0

        self.progress = None
        self.active_operation_id = None
        self.active_request = None
        self.operation_started_at = None
        self.pending_requests = deque()
        self.pending_conflicts = None
        self._next_operation_id = 0

        self._commands = build_key_index()
        self._key_handlers = {
            NormalMode: self._handle_normal_key,
            CreatingFolderMode: self._handle_folder_key,
            ConfirmingDeleteMode: self._handle_delete_key,
            ConfirmingOverwriteMode: self._handle_overwrite_key,
            PreviewingMode: self._handle_preview_key,
        }
        self._command_handlers = {
            Command.QUIT: self.quit,
            Command.FORCE_QUIT: self.quit,
            Command.SWITCH_PANE: self.switch_pane,
            Command.PREVIEW: self.open_preview,
            Command.COPY: lambda: self.start_transfer(OperationMode.COPY),
            Command.MOVE: lambda: self.start_transfer(OperationMode.MOVE),
            Command.NEW_FOLDER: self.begin_new_folder,
            Command.DELETE: self.begin_delete,
            Command.COPY_PATH: self.copy_paths,
            Command.TOGGLE_SELECT: lambda: self.active_pane.toggle_selection(),
            Command.UP: lambda: self.active_pane.move_cursor(-1),
            Command.DOWN: lambda: self.active_pane.move_cursor(1),
            Command.PAGE_UP: lambda: self.active_pane.page(-1),
            Command.PAGE_DOWN: lambda: self.active_pane.page(1),
            Command.HOME: lambda: self.active_pane.go_home(),
            Command.END: lambda: self.active_pane.go_end(),
            Command.OPEN: self.open_entry,
            Command.PARENT: self.go_parent,
            Command.CLEAR_SEARCH: lambda: self.active_pane.clear_search(),
        }
        self._message_handlers = {
            DirectoryLoaded: self._on_directory_loaded,
            FolderCreated: self._on_folder_created,
            EntryDeleted: self._on_entry_deleted,
            FileOpened: self._on_file_opened,
            ClipboardCopied: self._on_clipboard_copied,
            PreviewReady: self._on_preview_ready,
            ProgressEvent: self._on_progress,
            ConflictsFound: self._on_conflicts,
        }

    # ------------------------------------------------------------------
    # State helpers
    # ------------------------------------------------------------------

    @property
    def active_pane(self):
        return self.left if self.left.active else self.right

    @property
    def inactive_pane(self):
        return self.right if self.left.active else self.left

    @property
    def operation_busy(self):
        return self.active_operation_id is not None or bool(self.pending_requests)

    def start(self):
        """Issue the initial listing of both panes."""
        self.reload_panes()

    def load_pane(self, pane, focus_path=None):
        self.executor.load_directory(pane.pane_id, pane.path, focus_path)

    def reload_panes(self):
        for pane in self.panes:
            focus = pane.current_entry()
            self.load_pane(pane, focus.path if focus is not None else None)

    def resize(self, width, height):
        """Recompute pane and preview geometry for a ``width`` x ``height`` terminal."""
        self.width = width
        self.height = height
        pane_height = max(0, height - BOTTOM_BARS_HEIGHT)
        self.left.width = width // 2
        self.right.width = width - width // 2
        for pane in self.panes:
            pane.height = pane_height
            pane.ensure_visible()
        if isinstance(self.mode, PreviewingMode):
            # The preview takes over the active pane.
            mode = self.mode
            mode.width = self.active_pane.width
            mode.height = self.active_pane.height
            mode.rewrap()

    def _return_to_normal(self):
        self.mode = NormalMode()
        if self.pending_conflicts is not None:
            parked = self.pending_conflicts
            self.pending_conflicts = None
            self._open_overwrite_session(parked)

    # ------------------------------------------------------------------
    # Key routing
    # ------------------------------------------------------------------

    def handle_key(self, key_name):
        """Route one key name to the handler of the current mode."""
        if not key_name:
            return
        if key_name == 'ctrl+c':
            self.quit()
            return
        handler = self._key_handlers[type(self.mode)]
        handler(key_name)

    def _handle_normal_key(self, key_name):
        command = self._commands.get(key_name)
        if command is not None:
            self._command_handlers[command]()
            return
        if len(key_name) == 1 and key_name.isprintable():
            self.active_pane.search_char(key_name)

    def _handle_folder_key(self, key_name):
        mode = self.mode
        if key_name == 'esc':
            self._return_to_normal()
        elif key_name == 'enter':
            name = mode.buffer.strip()
            pane = self.active_pane
            self._return_to_normal()
            if not name:
                self.last_error = 'Folder name cannot be empty.'
                return
            self.executor.create_folder(pane.pane_id, pane.path, name)
        elif key_name == 'backspace':
            mode.buffer = mode.buffer[:-1]
        elif len(key_name) == 1 and key_name.isprintable():
            mode.buffer += key_name

    def _handle_delete_key(self, key_name):
        mode = self.mode
        if key_name in ('y', 'Y'):
            self._return_to_normal()
            self.executor.delete_entry(mode.pane_id, mode.target)
        elif key_name in ('n', 'N', 'esc'):
            self._return_to_normal()

    def _handle_overwrite_key(self, key_name):
        session = self.mode.session
        if key_name == 'esc':
            decision = Decision.CANCEL
        else:
            decision = OVERWRITE_KEYS.get(key_name.lower()) if len(key_name) == 1 else None
        if decision is None:
            return
        for request in session.decide(decision):
            self._enqueue_operation(request)
        if session.finished:
            self._end_overwrite_session(session)

    def _handle_preview_key(self, key_name):
        mode = self.mode
        if key_name in ('esc', 'q'):
            self._return_to_normal()
            return
        if mode.content is None:
            return
        _, inner_h = preview_inner_size(mode.width, mode.height)
        page = max(1, inner_h)
        deltas = {
            'up': -1, 'k': -1,
            'down': 1, 'j': 1,
            'pgup': -page, 'pgdown': page,
        }
        if key_name in deltas:
            scroll = mode.scroll + deltas[key_name]
        elif key_name in ('home', 'g'):
            scroll = 0
        elif key_name in ('end', 'G'):
            scroll = max_scroll(mode.lines, mode.height)
        else:
            return
        mode.scroll = clamp_scroll(scroll, mode.lines, mode.height)

    # ------------------------------------------------------------------
    # Normal-mode commands
    # ------------------------------------------------------------------

    def quit(self):
        self.running = False

    def switch_pane(self):
        active = self.active_pane
        other = self.inactive_pane
        active.active = False
        other.active = True

    def open_entry(self):
        pane = self.active_pane
        entry = pane.current_entry()
        if entry is None:
            return
        focus_path = pane.descend()
        if focus_path is None:
            self.executor.open_path(entry.path)
            return
        self.load_pane(pane, focus_path or None)

    def go_parent(self):
        pane = self.active_pane
        focus_path = pane.ascend()
        if focus_path is not None:
            self.load_pane(pane, focus_path)

    def open_preview(self):
        pane = self.active_pane
        entry = pane.current_entry()
        if entry is None or entry.is_dir:
            return
        self.mode = PreviewingMode(
            path=entry.path, name=entry.name, width=pane.width, height=pane.height
        )
        self.executor.load_preview(entry.path)

    def begin_new_folder(self):
        self.mode = CreatingFolderMode()

    def begin_delete(self):
        pane = self.active_pane
        entry = pane.current_entry()
        if entry is None:
            return
        if entry.is_parent:
            self.last_error = 'Cannot delete parent entry.'
            return
        self.mode = ConfirmingDeleteMode(target=entry, pane_id=pane.pane_id)

    def copy_paths(self):
        pane = self.active_pane
        entries = pane.selected_entries()
        if not entries:
            entry = pane.current_entry()
            entries = [entry] if entry is not None else []
        if not entries:
            return
        self.executor.copy_to_clipboard('\n'.join(entry.path for entry in entries))

    def start_transfer(self, mode):
        """Copy or move the active pane's selection (or focused entry) across."""
        if self.operation_busy:
            self.last_error = 'Another operation is already running.'
            return
        source = self.active_pane
        entries = source.operation_entries()
        if not entries:
            return
        request = OperationRequest(
            sources=entries, destination=self.inactive_pane.path, mode=OperationMode(mode)
        )
        source.clear_selection()
        self._enqueue_operation(request)

    # ------------------------------------------------------------------
    # Operation queue
    # ------------------------------------------------------------------

    def _enqueue_operation(self, request):
        self.pending_requests.append(request)
        self._start_next_operation()

    def _start_next_operation(self):
        if self.active_operation_id is not None or not self.pending_requests:
            return
        request = self.pending_requests.popleft()
        self._next_operation_id += 1
        self.active_operation_id = self._next_operation_id
        self.active_request = request
        self.operation_started_at = time.monotonic()
        self.progress = None
        LOGGER.debug(
            'Starting operation %s: %s %d item(s)',
            self.active_operation_id, request.mode.value, len(request.sources),
        )
        self.executor.start_operation(self.active_operation_id, request)

    def _finish_operation(self):
        self.active_operation_id = None
        self.active_request = None
        self.operation_started_at = None
        self.progress = None

    def _open_overwrite_session(self, found):
        session = OverwriteSession(list(found.conflicts), mode=found.mode)
        self.mode = ConfirmingOverwriteMode(session=session)

    def _end_overwrite_session(self, session):
        self._return_to_normal()
        if session.invocations > 0:
            self.reload_panes()

    # ------------------------------------------------------------------
    # Background messages
    # ------------------------------------------------------------------

    def handle_message(self, message):
        """Apply one message produced by a background task."""
        handler = self._message_handlers.get(type(message))
        if handler is None:
            LOGGER.debug('Ignoring unknown message %r', message)
            return
        handler(message)

    def _on_directory_loaded(self, message):
        pane = self.panes[message.pane_id]
        if message.path != pane.path:
            LOGGER.debug('Dropping stale listing of %s', message.path)
            return
        pane.apply_listing(message.entries, message.error, message.focus_path)

    def _on_folder_created(self, message):
        if message.error:
            self.last_error = message.error
            return
        pane = self.panes[message.pane_id]
        if os.path.dirname(message.path) == pane.path:
            self.load_pane(pane, message.path)

    def _on_entry_deleted(self, message):
        if message.error:
            self.last_error = message.error
            return
        parent = os.path.dirname(message.path)
        pane = self.panes[message.pane_id]
        if pane.path == parent:
            pane.step_back_after_delete()
        for other in self.panes:
            if other.path == parent:
                focus = other.current_entry()
                self.load_pane(other, focus.path if focus is not None else None)

    def _on_file_opened(self, message):
        if message.error:
            self.last_error = message.error

    def _on_clipboard_copied(self, message):
        if message.error:
            self.last_error = message.error

    def _on_preview_ready(self, message):
        mode = self.mode
        if not isinstance(mode, PreviewingMode) or mode.path != message.path:
            LOGGER.debug('Dropping stale preview of %s', message.path)
            return
        if message.error:
            # Stay in the preview so parked conflicts keep waiting for Esc.
            self.last_error = message.error
            mode.show(message.error)
            return
        mode.show(message.content)

    def _on_progress(self, event):
        if event.operation_id != self.active_operation_id:
            LOGGER.debug('Dropping progress for inactive operation %s', event.operation_id)
            return
        if not event.done:
            self.progress = event
            return
        verb = 'Move' if self.active_request.mode == OperationMode.MOVE else 'Copy'
        self._finish_operation()
        if event.error:
            LOGGER.debug('Operation %s failed: %s', event.operation_id, event.error)
            if event.failed_item:
                self.last_error = f'{verb} failed on {event.failed_item}: {event.error}'
            else:
                self.last_error = f'{verb} failed: {event.error}'
        self.reload_panes()
        self._start_next_operation()

    def _on_conflicts(self, found):
        if found.operation_id != self.active_operation_id:
            LOGGER.debug('Dropping conflicts for inactive operation %s', found.operation_id)
            return
        self._finish_operation()
        if isinstance(self.mode, NormalMode):
            self._open_overwrite_session(found)
        else:
            self.pending_conflicts = found
        self._start_next_operation()
