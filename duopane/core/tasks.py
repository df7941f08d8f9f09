"""Background task runner.

Every filesystem call runs on a daemon ``threading.Thread``; results come
back as message values on a single ``queue.Queue`` that the event loop drains
each tick. Workers never touch pane or controller state.
"""

import dataclasses
import logging
import queue
import subprocess
import threading

from ..fileops.engine import (
    OperationError,
    ProgressEvent,
    create_directory,
    execute,
    remove_path,
)
from ..fileops.entries import list_directory
from ..fileops.preview import load_preview
from .clipboard import copy_to_clipboard
from .config import AppConfig
from .launcher import open_with_system_handler
from .messages import (
    ClipboardCopied,
    DirectoryLoaded,
    EntryDeleted,
    FileOpened,
    FolderCreated,
    PreviewReady,
)

LOGGER = logging.getLogger(__name__)


class TaskRunner:
    """Runs one-shot tasks and copy/move workers off the loop thread."""

    def __init__(self, config=None, results=None):
        self.config = config or AppConfig()
        self.results = results if results is not None else queue.Queue()

    # ------------------------------------------------------------------
    # Plumbing
    # ------------------------------------------------------------------

    def _spawn(self, name, target):
        thread = threading.Thread(target=target, name=f'duopane-{name}', daemon=True)
        thread.start()
        return thread

    def _submit(self, name, job, on_error):
        """Run ``job()`` in a worker and queue the message it returns.

        ``on_error(message)`` builds the reply when ``job`` raises something
        it did not handle itself.
        """
        def _runner():
            try:
                message = job()
            except Exception as exc:  # pragma: no cover - worker crash guard
                LOGGER.exception('Task %s failed', name)
                message = on_error(str(exc) or exc.__class__.__name__)
            self.results.put(message)

        return self._spawn(name, _runner)

    def drain(self):
        """Return every queued message without blocking."""
        messages = []
        while True:
            try:
                messages.append(self.results.get_nowait())
            except queue.Empty:
                return messages

    # ------------------------------------------------------------------
    # One-shot tasks
    # ------------------------------------------------------------------

    def load_directory(self, pane_id, path, focus_path=None):
        def job():
            try:
                entries = list_directory(path)
            except OSError as exc:
                return DirectoryLoaded(pane_id, path, (), str(exc), focus_path)
            return DirectoryLoaded(pane_id, path, entries, None, focus_path)

        return self._submit(
            'list', job, lambda error: DirectoryLoaded(pane_id, path, (), error, focus_path)
        )

    def open_path(self, path):
        def job():
            try:
                open_with_system_handler(path)
            except (OSError, subprocess.CalledProcessError) as exc:
                LOGGER.debug('Opening %s failed: %s', path, exc)
                return FileOpened(path, f'Cannot open file: {exc}')
            return FileOpened(path)

        return self._submit('open', job, lambda error: FileOpened(path, error))

    def create_folder(self, pane_id, base_path, name):
        def job():
            try:
                path = create_directory(base_path, name)
            except OperationError as exc:
                return FolderCreated(pane_id, None, exc.message)
            except OSError as exc:
                return FolderCreated(pane_id, None, f'Cannot create folder: {exc}')
            return FolderCreated(pane_id, path)

        return self._submit('mkdir', job, lambda error: FolderCreated(pane_id, None, error))

    def delete_entry(self, pane_id, entry):
        def job():
            try:
                remove_path(entry.path)
            except OSError as exc:
                return EntryDeleted(pane_id, entry.path, f'Cannot delete {entry.name}: {exc}')
            return EntryDeleted(pane_id, entry.path)

        return self._submit(
            'delete', job, lambda error: EntryDeleted(pane_id, entry.path, error)
        )

    def load_preview(self, path):
        max_bytes = self.config.preview_max_bytes

        def job():
            try:
                content = load_preview(path, max_bytes)
            except OSError as exc:
                return PreviewReady(path, '', f'Cannot preview file: {exc}')
            return PreviewReady(path, content)

        return self._submit('preview', job, lambda error: PreviewReady(path, '', error))

    def copy_to_clipboard(self, text):
        def job():
            try:
                backend = copy_to_clipboard(text)
            except OSError as exc:
                return ClipboardCopied(text, f'Clipboard copy failed: {exc}')
            LOGGER.debug('Copied %d chars via %s', len(text), backend)
            return ClipboardCopied(text)

        return self._submit('clipboard', job, lambda error: ClipboardCopied(text, error))

    # ------------------------------------------------------------------
    # Copy/move workers
    # ------------------------------------------------------------------

    def start_operation(self, operation_id, request):
        """Run ``request`` through the engine, queueing every event in order."""
        granularity = self.config.progress_granularity
        move_fallback = self.config.move_fallback

        def _runner():
            last = ProgressEvent(operation_id)
            try:
                for event in execute(
                    request,
                    operation_id,
                    granularity=granularity,
                    move_fallback=move_fallback,
                ):
                    if isinstance(event, ProgressEvent):
                        last = event
                    self.results.put(event)
            except Exception as exc:  # pragma: no cover - worker crash guard
                LOGGER.exception('Operation %s crashed', operation_id)
                self.results.put(dataclasses.replace(
                    last,
                    done=True,
                    error=str(exc) or exc.__class__.__name__,
                    failed_item=last.current_file or None,
                ))

        return self._spawn(f'op-{operation_id}', _runner)
