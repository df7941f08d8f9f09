"""
File operation engine for copy/move between panes.

``execute`` is a generator meant to run inside a worker thread. It yields
immutable ``ProgressEvent`` snapshots and always finishes with exactly one
terminal value: a ``ProgressEvent`` with ``done=True`` (success or failure)
or a ``ConflictsFound`` when a non-forced request would overwrite something.
"""
import errno
import logging
import os
import shutil
import stat
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..constants import COPY_READ_SIZE, PROGRESS_GRANULARITY
from .entries import Entry

LOGGER = logging.getLogger(__name__)

# Rename failures that the move fallback turns into copy + remove.
MOVE_FALLBACK_ERRNOS = frozenset((errno.EXDEV, errno.ENOTEMPTY, errno.EEXIST))


class OperationMode(str, Enum):
    """Kind of multi-entry operation."""

    COPY = "copy"
    MOVE = "move"


@dataclass(frozen=True)
class Conflict:
    """A source whose destination path already exists."""

    source: Entry
    destination: str


@dataclass(frozen=True)
class OperationRequest:
    """Sources to copy/move into ``destination`` (a directory)."""

    sources: tuple
    destination: str
    mode: OperationMode = OperationMode.COPY
    force: bool = False

    def __post_init__(self):
        object.__setattr__(self, 'sources', tuple(self.sources))


@dataclass(frozen=True)
class ProgressEvent:
    """Progress snapshot for one operation id."""

    operation_id: int
    total_bytes: int = 0
    bytes_done: int = 0
    total_files: int = 0
    files_done: int = 0
    current_file: str = ''
    done: bool = False
    error: Optional[str] = None
    failed_item: Optional[str] = None

    @property
    def ok(self):
        return self.done and self.error is None

    @property
    def fraction(self):
        """Completion ratio in [0, 1], by bytes when known, else by files."""
        if self.total_bytes > 0:
            return min(1.0, self.bytes_done / self.total_bytes)
        if self.total_files > 0:
            return min(1.0, self.files_done / self.total_files)
        return 1.0 if self.done else 0.0


@dataclass(frozen=True)
class ConflictsFound:
    """Terminal result of a non-forced request with existing destinations."""

    operation_id: int
    conflicts: tuple
    mode: OperationMode


class OperationError(Exception):
    """Validation or pre-pass failure attributed to one item."""

    def __init__(self, message, item=None):
        super().__init__(message)
        self.message = message
        self.item = item


@dataclass(frozen=True)
class _PlanItem:
    source: Entry
    target: str
    nbytes: int
    nfiles: int


class _ProgressTracker:
    """Counters owned by the worker; each emission is a frozen snapshot."""

    def __init__(self, operation_id, granularity):
        self.operation_id = operation_id
        self.granularity = max(1, int(granularity))
        self.total_bytes = 0
        self.total_files = 0
        self.bytes_done = 0
        self.files_done = 0
        self.current_file = ''
        self._unreported = 0

    def snapshot(self, done=False, error=None, failed_item=None):
        self._unreported = 0
        return ProgressEvent(
            operation_id=self.operation_id,
            total_bytes=self.total_bytes,
            bytes_done=self.bytes_done,
            total_files=self.total_files,
            files_done=self.files_done,
            current_file=self.current_file,
            done=done,
            error=error,
            failed_item=failed_item,
        )

    def begin(self, name):
        self.current_file = name
        return self.snapshot()

    def advance(self, count):
        """Account copied bytes; return an event once enough accumulated."""
        self.bytes_done += count
        self._unreported += count
        if self._unreported >= self.granularity:
            return self.snapshot()
        return None

    def file_done(self):
        self.files_done += 1
        return self.snapshot()

    def credit(self, nbytes, nfiles):
        self.bytes_done += nbytes
        self.files_done += nfiles
        return self.snapshot()


def target_path(destination, source):
    return os.path.join(destination, source.name)


def find_conflicts(sources, destination):
    """Return a Conflict for every source whose target already exists."""
    conflicts = []
    for source in sources:
        target = target_path(destination, source)
        if os.path.lexists(target):
            conflicts.append(Conflict(source=source, destination=target))
    return conflicts


def measure(path):
    """Return ``(bytes, files)`` below ``path`` without following symlinks."""
    st = os.lstat(path)
    if stat.S_ISLNK(st.st_mode):
        return 0, 1
    if not stat.S_ISDIR(st.st_mode):
        return st.st_size, 1
    total_bytes = 0
    total_files = 0
    with os.scandir(path) as it:
        children = [child.path for child in it]
    for child in children:
        nbytes, nfiles = measure(child)
        total_bytes += nbytes
        total_files += nfiles
    return total_bytes, total_files


def _validate(source, target):
    src_real = os.path.normcase(os.path.realpath(source.path))
    dst_real = os.path.normcase(os.path.realpath(target))
    if src_real == dst_real:
        raise OperationError('Source and destination are the same.', source.name)
    is_real_dir = os.path.isdir(source.path) and not os.path.islink(source.path)
    if is_real_dir and dst_real.startswith(src_real + os.sep):
        raise OperationError(
            'Cannot copy/move a directory into itself or its children.', source.name
        )


def _plan(request):
    if not os.path.isdir(request.destination):
        raise OperationError(
            'Destination directory does not exist.',
            os.path.basename(request.destination.rstrip(os.sep)) or request.destination,
        )
    plan = []
    for source in request.sources:
        target = target_path(request.destination, source)
        _validate(source, target)
        try:
            nbytes, nfiles = measure(source.path)
        except OSError as exc:
            raise OperationError(str(exc), source.name) from exc
        plan.append(_PlanItem(source=source, target=target, nbytes=nbytes, nfiles=nfiles))
    return plan


def execute(request, operation_id, granularity=PROGRESS_GRANULARITY, move_fallback=True):
    """Run ``request``, yielding progress and one terminal value."""
    LOGGER.debug(
        'Operation %s: %s %d item(s) -> %s (force=%s)',
        operation_id, request.mode.value, len(request.sources), request.destination, request.force,
    )
    if not request.force:
        conflicts = find_conflicts(request.sources, request.destination)
        if conflicts:
            yield ConflictsFound(operation_id, tuple(conflicts), request.mode)
            return

    tracker = _ProgressTracker(operation_id, granularity)
    try:
        plan = _plan(request)
    except OperationError as exc:
        yield tracker.snapshot(done=True, error=exc.message, failed_item=exc.item)
        return

    tracker.total_bytes = sum(item.nbytes for item in plan)
    tracker.total_files = sum(item.nfiles for item in plan)

    for item in plan:
        yield tracker.begin(item.source.name)
        try:
            if request.mode == OperationMode.MOVE:
                yield from _move_item(item, tracker, move_fallback)
            else:
                yield from _copy_path(item.source.path, item.target, tracker)
        except OSError as exc:
            LOGGER.debug('Operation %s failed on %s: %s', operation_id, item.source.name, exc)
            yield tracker.snapshot(done=True, error=str(exc), failed_item=item.source.name)
            return

    yield tracker.snapshot(done=True)


def _copy_path(src, dst, tracker):
    if os.path.islink(src):
        _copy_symlink(src, dst)
        yield tracker.file_done()
    elif os.path.isdir(src):
        yield from _copy_tree(src, dst, tracker)
    else:
        yield from _copy_file(src, dst, tracker)


def _copy_symlink(src, dst):
    link_target = os.readlink(src)
    if os.path.islink(dst) or (os.path.lexists(dst) and not os.path.isdir(dst)):
        os.remove(dst)
    os.symlink(link_target, dst)


def _copy_tree(src, dst, tracker):
    if os.path.islink(dst):
        os.remove(dst)
    os.makedirs(dst, exist_ok=True)
    with os.scandir(src) as it:
        children = sorted((child.name for child in it))
    for name in children:
        yield from _copy_path(os.path.join(src, name), os.path.join(dst, name), tracker)
    # Mode goes on last so a read-only source directory still gets its children.
    shutil.copymode(src, dst)


def _copy_file(src, dst, tracker):
    # Replace a destination symlink instead of writing through it.
    if os.path.islink(dst):
        os.remove(dst)
    with open(src, 'rb') as reader, open(dst, 'wb') as writer:
        while True:
            chunk = reader.read(COPY_READ_SIZE)
            if not chunk:
                break
            writer.write(chunk)
            event = tracker.advance(len(chunk))
            if event is not None:
                yield event
    shutil.copymode(src, dst)
    yield tracker.file_done()


def _move_item(item, tracker, move_fallback):
    try:
        os.replace(item.source.path, item.target)
    except OSError as exc:
        if not move_fallback or exc.errno not in MOVE_FALLBACK_ERRNOS:
            raise
        LOGGER.debug('Rename of %s failed (%s); copying instead', item.source.path, exc)
        yield from _copy_path(item.source.path, item.target, tracker)
        remove_path(item.source.path)
        return
    yield tracker.credit(item.nbytes, item.nfiles)


def remove_path(path):
    """Delete a file, symlink or whole directory tree."""
    if os.path.islink(path) or not os.path.isdir(path):
        os.remove(path)
    else:
        shutil.rmtree(path)


def create_directory(base_path, name):
    """Create ``name`` inside ``base_path`` and return the new path."""
    name = name.strip()
    if not name:
        raise OperationError('Folder name cannot be empty.')
    if os.sep in name or (os.altsep and os.altsep in name):
        raise OperationError('Folder name cannot contain path separators.', name)
    path = os.path.join(base_path, name)
    os.mkdir(path, 0o755)
    return path
