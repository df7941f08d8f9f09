from .entries import Entry, list_directory
from .engine import (
    Conflict,
    ConflictsFound,
    OperationError,
    OperationMode,
    OperationRequest,
    ProgressEvent,
    create_directory,
    execute,
    find_conflicts,
    remove_path,
)
from .conflicts import Decision, OverwriteSession
from .pane import Pane
from .preview import load_preview

__all__ = [
    'Entry', 'list_directory',
    'Conflict', 'ConflictsFound', 'OperationError', 'OperationMode', 'OperationRequest',
    'ProgressEvent', 'create_directory', 'execute', 'find_conflicts', 'remove_path',
    'Decision', 'OverwriteSession', 'Pane', 'load_preview',
]
