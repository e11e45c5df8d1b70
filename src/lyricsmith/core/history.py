"""Linear undo/redo history over alignment states."""

from dataclasses import dataclass
from typing import Optional, Tuple

from ..config import HISTORY_LIMIT
from .models import AlignmentState


@dataclass(frozen=True)
class History:
    """Snapshots of alignment states with a cursor at the current one.

    ``AlignmentState`` is immutable, so storing a state is already a deep,
    independent snapshot. The entry under the cursor is always the state
    the session currently shows; recording after an undo discards the
    entries that could have been redone.
    """

    entries: Tuple[AlignmentState, ...] = ()
    index: int = -1
    limit: int = HISTORY_LIMIT

    @property
    def current(self) -> Optional[AlignmentState]:
        if 0 <= self.index < len(self.entries):
            return self.entries[self.index]
        return None

    @property
    def can_undo(self) -> bool:
        return self.index > 0

    @property
    def can_redo(self) -> bool:
        return self.index < len(self.entries) - 1

    def record(self, state: AlignmentState) -> "History":
        entries = self.entries[: self.index + 1] + (state,)
        entries = entries[-self.limit:]
        return History(entries=entries, index=len(entries) - 1, limit=self.limit)

    def undo(self) -> "History":
        if not self.can_undo:
            return self
        return History(entries=self.entries, index=self.index - 1, limit=self.limit)

    def redo(self) -> "History":
        if not self.can_redo:
            return self
        return History(entries=self.entries, index=self.index + 1, limit=self.limit)
