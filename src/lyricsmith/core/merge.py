"""Merge operations on either side of the alignment, and per-line reset.

Each operation takes an ``AlignmentState`` and returns a new one. A refused
operation (nothing imported, index out of range, last syllable of a line)
returns the very same state object, which callers use to tell a no-op from a
change.
"""

import logging
from dataclasses import replace
from typing import List, Sequence

from .matching import parse_text_with_reference, try_auto_merge_remaining_line
from .models import AlignmentState, freeze_lines
from .records import merge_records, update_line_groups_after_merge

logger = logging.getLogger(__name__)


def merge_syllables_in_array(syllables: Sequence[str], index: int) -> List[str]:
    """Concatenate syllable ``index`` with the next one, verbatim."""
    if index < 0 or index >= len(syllables) - 1:
        return list(syllables)

    merged = list(syllables)
    merged[index] = syllables[index] + syllables[index + 1]
    del merged[index + 1]
    return merged


def _valid_line(state: AlignmentState, line_index: int) -> bool:
    return state.has_annotated and 0 <= line_index < len(state.line_groups)


def merge_annotated(
    state: AlignmentState, line_index: int, syllable_index: int
) -> AlignmentState:
    """Merge two adjacent annotated records and re-align the plain text."""
    if not _valid_line(state, line_index):
        return state

    group = state.line_groups[line_index]
    if syllable_index < 0 or syllable_index >= len(group) - 1:
        return state

    record_index = group[syllable_index]
    records = merge_records(state.records, record_index)
    line_groups = update_line_groups_after_merge(
        state.line_groups, line_index, record_index
    )

    plain_text_lines = state.plain_text_lines
    if state.plain_text_raw:
        plain_text_lines = freeze_lines(
            parse_text_with_reference(
                state.plain_text_raw, records, line_groups, state.script
            )
        )

    logger.info(
        "Merged annotated syllables %d and %d of line %d (%d records left)",
        syllable_index,
        syllable_index + 1,
        line_index + 1,
        len(records),
    )
    return replace(
        state,
        records=records,
        line_groups=line_groups,
        plain_text_lines=plain_text_lines,
    )


def merge_plain(
    state: AlignmentState,
    line_index: int,
    syllable_index: int,
    auto_match: bool = False,
) -> AlignmentState:
    """Merge two adjacent plain-text syllables of one line.

    With ``auto_match`` the rest of the line is re-matched against the
    annotated syllables afterwards.
    """
    if not _valid_line(state, line_index) or line_index >= len(state.plain_text_lines):
        return state

    line = state.plain_text_lines[line_index]
    if syllable_index < 0 or syllable_index >= len(line) - 1:
        return state

    merged = merge_syllables_in_array(line, syllable_index)
    if auto_match:
        merged = try_auto_merge_remaining_line(
            merged, state.pattern_for_line(line_index), syllable_index
        )

    lines = list(state.plain_text_lines)
    lines[line_index] = tuple(merged)

    logger.info(
        "Merged plain-text syllables %d and %d of line %d",
        syllable_index,
        syllable_index + 1,
        line_index + 1,
    )
    return replace(state, plain_text_lines=freeze_lines(lines))


def reset_line(state: AlignmentState, line_index: int) -> AlignmentState:
    """Restore one plain-text line to how it looked right after import."""
    if not 0 <= line_index < len(state.original_plain_text_lines):
        return state
    if line_index >= len(state.plain_text_lines):
        return state

    original = state.original_plain_text_lines[line_index]
    if state.plain_text_lines[line_index] == original:
        return state

    lines = list(state.plain_text_lines)
    lines[line_index] = original
    logger.info("Reset line %d to its imported segmentation", line_index + 1)
    return replace(state, plain_text_lines=freeze_lines(lines))
