"""Stateful facade over the pure transition function.

``LyricSession`` is what a UI or a script talks to: it owns one
``SessionState``, applies commands through ``reduce`` and tells subscribers
about every dispatched command. Harnesses that log or replay actions hold a
reference to the session instead of reaching for any global.
"""

import logging
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Union

from ..config import AUTO_MATCH_DEFAULT
from ..exceptions import ScenarioError
from .export import generate_xml_from_state, write_export
from .models import AlignmentState, LineView, MergeAction, RowType, line_views
from .state import (
    DismissError,
    ImportAnnotated,
    ImportPlainText,
    MergeSyllables,
    Redo,
    ResetLine,
    SessionState,
    Undo,
    create_initial_state,
    reduce,
)

logger = logging.getLogger(__name__)

Listener = Callable[[object, SessionState], None]


class LyricSession:
    """One alignment session: import, merge, undo/redo, export."""

    def __init__(self, auto_match: bool = AUTO_MATCH_DEFAULT):
        self._state = create_initial_state(auto_match=auto_match)
        self._listeners: List[Listener] = []

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def alignment(self) -> AlignmentState:
        return self._state.alignment

    @property
    def error(self) -> Optional[str]:
        return self._state.error

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener(command, new_state)`` after every dispatch.

        Returns a function that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, command) -> SessionState:
        self._state = reduce(self._state, command)
        for listener in list(self._listeners):
            listener(command, self._state)
        return self._state

    # Entry points
    def import_annotated(self, text: str) -> SessionState:
        return self.dispatch(ImportAnnotated(text))

    def import_annotated_file(self, path: Path) -> SessionState:
        return self.import_annotated(Path(path).read_text(encoding="utf-8"))

    def import_plain_text(self, text: str) -> SessionState:
        return self.dispatch(ImportPlainText(text))

    def import_plain_text_file(self, path: Path) -> SessionState:
        return self.import_plain_text(Path(path).read_text(encoding="utf-8"))

    def merge_syllable(
        self, line_index: int, syllable_index: int, side: Union[RowType, str]
    ) -> SessionState:
        return self.dispatch(MergeSyllables(line_index, syllable_index, side))

    def reset_line(self, line_index: int) -> SessionState:
        return self.dispatch(ResetLine(line_index))

    def undo(self) -> SessionState:
        return self.dispatch(Undo())

    def redo(self) -> SessionState:
        return self.dispatch(Redo())

    def dismiss_error(self) -> SessionState:
        return self.dispatch(DismissError())

    def apply_actions(self, actions: Iterable[MergeAction]) -> SessionState:
        """Replay recorded merges in order."""
        for action in actions:
            self.merge_syllable(action.line_index, action.syllable_index, action.row_type)
            if self.error:
                raise ScenarioError(
                    f"Merge action failed at step {action.step}: {self.error}"
                )
        return self._state

    # Output
    def lines(self) -> List[LineView]:
        return line_views(self.alignment)

    def serialize(self) -> str:
        return generate_xml_from_state(self.alignment)

    def export(self, path: Path) -> Path:
        return write_export(self.alignment, Path(path))

