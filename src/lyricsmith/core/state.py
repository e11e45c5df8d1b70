"""Session state, commands and the transition function between states.

Every user action is a command dataclass. ``reduce`` maps a state and a
command to the next state without mutating anything, so each action is one
atomic transition and old states stay valid for the undo history.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Callable, Dict, Optional, Type, Union

from ..config import AUTO_MATCH_DEFAULT
from ..exceptions import LyricSmithError, ValidationError
from .alphabet import detect_script
from .history import History
from .matching import parse_text_with_reference
from .merge import merge_annotated, merge_plain, reset_line
from .models import AlignmentState, RowType, freeze_lines
from .records import group_into_lines, parse_records
from .text_utils import count_non_empty_lines

logger = logging.getLogger(__name__)


# ----------------------
# Commands
# ----------------------
@dataclass(frozen=True)
class ImportAnnotated:
    text: str
    error_label = "Annotated Import Error"


@dataclass(frozen=True)
class ImportPlainText:
    text: str
    error_label = "Text Import Error"


@dataclass(frozen=True)
class MergeSyllables:
    line_index: int
    syllable_index: int
    row_type: Union[RowType, str]
    error_label = "Merge Error"


@dataclass(frozen=True)
class ResetLine:
    line_index: int
    error_label = "Reset Error"


@dataclass(frozen=True)
class Undo:
    error_label = "Undo Error"


@dataclass(frozen=True)
class Redo:
    error_label = "Redo Error"


@dataclass(frozen=True)
class DismissError:
    error_label = "Error"


# ----------------------
# State
# ----------------------
@dataclass(frozen=True)
class SessionState:
    """Current alignment plus undo history and the last user-visible error."""

    alignment: AlignmentState = field(default_factory=AlignmentState)
    history: History = field(default_factory=History)
    error: Optional[str] = None
    auto_match: bool = AUTO_MATCH_DEFAULT


def create_initial_state(auto_match: bool = AUTO_MATCH_DEFAULT) -> SessionState:
    return SessionState(auto_match=auto_match)


def _commit(state: SessionState, alignment: AlignmentState) -> SessionState:
    """Make ``alignment`` current and record it in the history."""
    _warn_mismatches(alignment)
    return replace(state, alignment=alignment, history=state.history.record(alignment))


def _warn_mismatches(alignment: AlignmentState) -> None:
    if not alignment.has_annotated or not alignment.has_plain_text:
        return
    mismatched = alignment.mismatched_lines()
    if mismatched:
        logger.warning(
            "%d of %d lines have mismatched syllable counts (first: line %d)",
            len(mismatched),
            len(alignment.line_groups),
            mismatched[0] + 1,
        )


# ----------------------
# Handlers
# ----------------------
def _import_annotated(state: SessionState, command: ImportAnnotated) -> SessionState:
    parsed = parse_records(command.text)
    line_groups = group_into_lines(parsed.records)

    alignment = replace(
        state.alignment,
        header=parsed.header,
        records=parsed.records,
        line_groups=line_groups,
        original_count=parsed.count,
        has_annotated=True,
    )

    if alignment.plain_text_raw:
        lines = freeze_lines(
            parse_text_with_reference(
                alignment.plain_text_raw, parsed.records, line_groups, alignment.script
            )
        )
        alignment = replace(
            alignment, plain_text_lines=lines, original_plain_text_lines=lines
        )

    logger.info(
        "Imported %d annotated records in %d lines", parsed.count, len(line_groups)
    )
    return replace(_commit(state, alignment), error=None)


def _import_plain_text(state: SessionState, command: ImportPlainText) -> SessionState:
    text = command.text
    if not text.strip():
        raise ValidationError("Plain text is empty")

    script = detect_script(text)
    current = state.alignment
    lines = freeze_lines(
        parse_text_with_reference(text, current.records, current.line_groups, script)
    )

    alignment = replace(
        current,
        plain_text_raw=text,
        plain_text_lines=lines,
        original_plain_text_lines=lines,
        script=script,
    )

    logger.info(
        "Imported %d lines of %s plain text (%d annotated lines)",
        count_non_empty_lines(text),
        script.value,
        len(current.line_groups),
    )
    return replace(_commit(state, alignment), error=None)


def _merge_syllables(state: SessionState, command: MergeSyllables) -> SessionState:
    row_type = RowType.parse(command.row_type)
    if row_type == RowType.ANNOTATED:
        alignment = merge_annotated(
            state.alignment, command.line_index, command.syllable_index
        )
    else:
        alignment = merge_plain(
            state.alignment,
            command.line_index,
            command.syllable_index,
            auto_match=state.auto_match,
        )

    if alignment is state.alignment:
        logger.debug("Ignored merge at line %d, syllable %d (%s)",
                     command.line_index, command.syllable_index, row_type.value)
        return state
    return _commit(state, alignment)


def _reset_line(state: SessionState, command: ResetLine) -> SessionState:
    alignment = reset_line(state.alignment, command.line_index)
    if alignment is state.alignment:
        return state
    return _commit(state, alignment)


def _restore(state: SessionState, history: History) -> SessionState:
    if history is state.history or history.current is None:
        return state
    return replace(state, alignment=history.current, history=history)


def _undo(state: SessionState, command: Undo) -> SessionState:
    return _restore(state, state.history.undo())


def _redo(state: SessionState, command: Redo) -> SessionState:
    return _restore(state, state.history.redo())


def _dismiss_error(state: SessionState, command: DismissError) -> SessionState:
    return replace(state, error=None)


_HANDLERS: Dict[Type, Callable] = {
    ImportAnnotated: _import_annotated,
    ImportPlainText: _import_plain_text,
    MergeSyllables: _merge_syllables,
    ResetLine: _reset_line,
    Undo: _undo,
    Redo: _redo,
    DismissError: _dismiss_error,
}


def reduce(state: SessionState, command) -> SessionState:
    """Apply one command and return the next state.

    Failures inside a transition leave the alignment untouched and are
    reported through ``state.error``.
    """
    handler = _HANDLERS.get(type(command))
    if handler is None:
        raise ValidationError(f"Unknown command: {command!r}")

    try:
        return handler(state, command)
    except LyricSmithError as e:
        message = f"{command.error_label}: {e}"
        logger.warning(message)
        return replace(state, error=message)
