"""
Overwrite-conflict resolution.

An ``OverwriteSession`` holds the conflicts reported by one non-forced
operation and turns each user decision into the forced requests that the
engine should run next.
"""
import os
from dataclasses import dataclass
from enum import Enum

from .engine import OperationMode, OperationRequest


class Decision(str, Enum):
    """User answers to an overwrite prompt."""

    OVERWRITE = "overwrite"
    SKIP = "skip"
    OVERWRITE_ALL = "overwrite_all"
    SKIP_ALL = "skip_all"
    CANCEL = "cancel"


@dataclass
class OverwriteSession:
    """Ordered queue of pending conflicts for one copy/move."""

    conflicts: list
    mode: OperationMode = OperationMode.COPY
    overwrite_all: bool = False
    skip_all: bool = False
    invocations: int = 0

    def __post_init__(self):
        self.conflicts = list(self.conflicts)

    @property
    def current(self):
        """Conflict awaiting a decision, or None once the queue is empty."""
        return self.conflicts[0] if self.conflicts else None

    @property
    def finished(self):
        return not self.conflicts

    def _request_for(self, conflicts):
        self.invocations += 1
        return OperationRequest(
            sources=[conflict.source for conflict in conflicts],
            destination=os.path.dirname(conflicts[0].destination),
            mode=self.mode,
            force=True,
        )

    def decide(self, decision):
        """Apply ``decision`` to the head of the queue.

        Returns the list of forced requests to run (empty or one element).
        Deciding on a finished session is a no-op.
        """
        decision = Decision(decision)
        if self.finished:
            return []

        if decision == Decision.OVERWRITE:
            head = self.conflicts.pop(0)
            return [self._request_for([head])]

        if decision == Decision.SKIP:
            self.conflicts.pop(0)
            return []

        if decision == Decision.OVERWRITE_ALL:
            self.overwrite_all = True
            remaining = self.conflicts
            self.conflicts = []
            return [self._request_for(remaining)]

        if decision == Decision.SKIP_ALL:
            self.skip_all = True
            self.conflicts = []
            return []

        # Cancel
        self.conflicts = []
        self.overwrite_all = False
        self.skip_all = False
        return []
