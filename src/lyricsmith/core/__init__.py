"""Core alignment, merge and export modules."""

from .models import (
    AlignmentState,
    LineView,
    MergeAction,
    Record,
    RowType,
    Script,
)
from .session import LyricSession
from .state import SessionState, create_initial_state, reduce

__all__ = [
    "AlignmentState",
    "LineView",
    "MergeAction",
    "Record",
    "RowType",
    "Script",
    "LyricSession",
    "SessionState",
    "create_initial_state",
    "reduce",
]
