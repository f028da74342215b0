"""
Undo/redo history around the seating reducer
"""

from typing import List

from seatplan.core.config import settings
from seatplan.schemas.actions import NON_UNDOABLE_ACTIONS
from seatplan.schemas.document import SeatingDocument
from seatplan.services.reducer import apply_action

class HistoryManager:
    """Bounded past/present/future stacks over seating documents.

    ``past`` is ordered oldest first and capped at ``limit`` entries; the
    oldest entries are dropped silently. ``future`` holds redo states with the
    next one first and is cleared by every new undoable action.
    """

    def __init__(self, document: SeatingDocument, limit: int | None = None):
        self.limit = settings.HISTORY_LIMIT if limit is None else limit
        self.past: List[SeatingDocument] = []
        self.present = document
        self.future: List[SeatingDocument] = []

    @property
    def can_undo(self) -> bool:
        return len(self.past) > 0

    @property
    def can_redo(self) -> bool:
        return len(self.future) > 0

    def dispatch(self, action) -> bool:
        """Apply an action; returns True when the present document changed"""
        new_present = apply_action(self.present, action)
        if new_present is self.present:
            return False

        if action.type in NON_UNDOABLE_ACTIONS:
            self.present = new_present
            return True

        self.past.append(self.present)
        if len(self.past) > self.limit:
            del self.past[: len(self.past) - self.limit]
        self.present = new_present
        self.future.clear()
        return True

    def undo(self) -> bool:
        if not self.past:
            return False
        self.future.insert(0, self.present)
        self.present = self.past.pop()
        return True

    def redo(self) -> bool:
        if not self.future:
            return False
        self.past.append(self.present)
        self.present = self.future.pop(0)
        return True

    def reset(self, document: SeatingDocument) -> None:
        """Start over from ``document`` with empty stacks"""
        self.past.clear()
        self.future.clear()
        self.present = document
