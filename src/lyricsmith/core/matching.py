"""Alignment of plain-text lines against annotated syllable patterns.

Strategies, in order of preference:

1. Whole-line exact match: the line without whitespace equals the
   concatenated pattern (modulo case and diacritics), so it can be sliced
   by the pattern's syllable lengths.
2. Script-segmented match: Latin runs are matched against the pattern
   elements they cover, non-Latin runs are split into characters.
3. Fuzzy incremental match (``auto_match_syllables``): each pattern element
   is searched for as a normalized prefix of the remaining text. Used by
   the progressive auto-match after plain-text merges.
4. Character fallback for everything else.

Every entry point returns *some* segmentation; a syllable count that differs
from the pattern is a valid result, reported to the user as a mismatch.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..config import FUZZY_MIN_WINDOW, SYLLABLE_SEPARATOR
from .alphabet import detect_script, is_primarily_latin, segment_by_script
from .models import LineGroups, Record, Script
from .text_utils import (
    clean_syllable,
    count_non_empty_lines,
    normalize_for_comparison,
    parse_text_into_syllables,
    split_into_characters,
    split_into_non_empty_lines,
    strip_whitespace,
)

logger = logging.getLogger(__name__)

LITERAL_HYPHEN = SYLLABLE_SEPARATOR * 2


# ----------------------
# Whole-line exact match
# ----------------------
def _comparable_length(text: str) -> int:
    return len(normalize_for_comparison(text))


def match_plain_text_to_pattern(
    plain_text: str, pattern: Sequence[str]
) -> Optional[List[str]]:
    """Slice ``plain_text`` into the pattern's syllables if both spell the same.

    Slices are measured in comparable characters, so punctuation and other
    characters that normalization drops do not shift later syllables; they
    stay on the syllable they follow.

    Returns None when the normalized texts differ or the text runs out
    before the pattern does.
    """
    compact = strip_whitespace(plain_text)
    expected = "".join(clean_syllable(s) for s in pattern)

    normalized_plain = normalize_for_comparison(compact)
    normalized_pattern = normalize_for_comparison(expected)
    if normalized_plain != normalized_pattern:
        logger.debug("Match failed: %r != %r", normalized_plain, normalized_pattern)
        return None

    targets = [_comparable_length(clean_syllable(s)) for s in pattern]
    result: List[str] = []
    position = 0

    for index, syllable in enumerate(pattern):
        start = position
        consumed = 0
        while position < len(compact) and consumed < targets[index]:
            consumed += _comparable_length(compact[position])
            position += 1
        if consumed < targets[index]:
            logger.debug("Length mismatch at position %d", position)
            return None

        # Dropped characters after the syllable belong to it, unless the next
        # syllable has no comparable characters of its own
        next_is_empty = index + 1 < len(targets) and targets[index + 1] == 0
        if not next_is_empty or targets[index] == 0:
            while position < len(compact) and not _comparable_length(compact[position]):
                position += 1

        piece = compact[start:position]
        if syllable.endswith(SYLLABLE_SEPARATOR) and not piece.endswith(SYLLABLE_SEPARATOR):
            piece += SYLLABLE_SEPARATOR
        result.append(piece)

    if result and position < len(compact):
        last = result[-1]
        tail = compact[position:]
        if last.endswith(SYLLABLE_SEPARATOR) and len(last) > 1:
            result[-1] = last[:-1] + tail + SYLLABLE_SEPARATOR
        else:
            result[-1] = last + tail

    return result


# ----------------------
# Script-segmented match
# ----------------------
def divide_line_by_pattern(line: str, pattern: Sequence[str]) -> List[str]:
    """Segment one plain-text line against the annotated syllables of its line."""
    if not pattern or not is_primarily_latin(line):
        return split_into_characters(line)

    matched = match_plain_text_to_pattern(line, pattern)
    if matched is not None:
        return matched

    result: List[str] = []
    pattern_index = 0

    for run in segment_by_script(line):
        if not run.is_latin or pattern_index >= len(pattern):
            result.extend(split_into_characters(run.text))
            continue

        run_length = len(strip_whitespace(run.text))
        consumed = 0
        run_pattern: List[str] = []
        while pattern_index < len(pattern) and consumed < run_length:
            element = pattern[pattern_index]
            run_pattern.append(element)
            consumed += len(clean_syllable(element))
            pattern_index += 1

        run_matched = match_plain_text_to_pattern(run.text, run_pattern)
        if run_matched is not None:
            result.extend(run_matched)
        else:
            result.extend(split_into_characters(run.text))

    return result


# ----------------------
# Fuzzy incremental match
# ----------------------
@dataclass
class _RunMatch:
    syllables: List[str]
    consumed: int


def find_best_match(text: str, start: int, syllable: str) -> Optional[int]:
    """Length of the shortest prefix of ``text[start:]`` spelling ``syllable``.

    Only prefixes up to ``max(2 * len(syllable), FUZZY_MIN_WINDOW)``
    characters are tried.
    """
    if not syllable.strip():
        return None

    target = normalize_for_comparison(syllable)
    limit = min(max(len(syllable) * 2, FUZZY_MIN_WINDOW), len(text) - start)

    for length in range(1, limit + 1):
        if normalize_for_comparison(text[start:start + length]) == target:
            return length
    return None


def _match_latin_run(text: str, pattern: Sequence[str], start_index: int) -> _RunMatch:
    result: List[str] = []
    text = text.strip()
    position = 0
    pattern_index = start_index

    while position < len(text) and pattern_index < len(pattern):
        element = pattern[pattern_index]
        length = find_best_match(text, position, clean_syllable(element))

        if length is None:
            # Matching for this run stops; the rest becomes single characters
            result.extend(split_into_characters(text[position:]))
            position = len(text)
            break

        matched = text[position:position + length]
        position += length

        if LITERAL_HYPHEN in element and text[position:position + 1] == "-":
            matched += "-"
            position += 1

        has_space_after = text[position:position + 1] == " "
        while text[position:position + 1] == " ":
            position += 1
        if has_space_after:
            matched += " "

        result.append(matched)
        pattern_index += 1

    if position < len(text):
        result.extend(split_into_characters(text[position:]))

    return _RunMatch(syllables=result, consumed=pattern_index - start_index)


def auto_match_syllables(line: str, pattern: Sequence[str]) -> List[str]:
    """Fuzzy-match a plain-text line against annotated syllables, run by run."""
    if not line.strip() or not pattern:
        return split_into_characters(line)

    result: List[str] = []
    pattern_index = 0

    for run in segment_by_script(line):
        if run.is_latin and pattern_index < len(pattern):
            matched = _match_latin_run(run.text, pattern, pattern_index)
            result.extend(matched.syllables)
            pattern_index += matched.consumed
        else:
            chars = split_into_characters(run.text)
            result.extend(chars)
            # Each character stands in for one annotated syllable
            pattern_index += len(chars)

    return result


def try_auto_merge_remaining_line(
    syllables: Sequence[str], pattern: Sequence[str], merged_index: int
) -> List[str]:
    """Re-match the part of a line after a manual merge.

    After the user merges non-Latin characters by hand, the Latin remainder
    of the line can often be matched automatically. The re-matched tail is
    only kept when it has fewer syllables than before.
    """
    check_from = merged_index + 1
    if check_from >= len(syllables):
        return list(syllables)

    remaining = list(syllables[check_from:])
    remaining_text = "".join(remaining)
    if not is_primarily_latin(remaining_text):
        return list(syllables)

    remaining_pattern = list(pattern[check_from:])
    if not remaining_pattern:
        return list(syllables)

    rematched = auto_match_syllables(remaining_text, remaining_pattern)
    if len(rematched) >= len(remaining):
        return list(syllables)

    logger.debug(
        "Auto-matched line tail from syllable %d: %d -> %d syllables",
        check_from,
        len(remaining),
        len(rematched),
    )
    return list(syllables[:check_from]) + rematched


# ----------------------
# Whole-text alignment
# ----------------------
def _distribute_by_length(text: str, patterns: Sequence[Sequence[str]]) -> List[str]:
    """Cut flattened text into one chunk per line by pattern character counts."""
    stream = " ".join(text.split("\n")).strip()
    chunks: List[str] = []

    for pattern in patterns:
        expected = len("".join(clean_syllable(s) for s in pattern))

        extracted = 0
        consumed = 0
        while consumed < len(stream) and extracted < expected:
            if stream[consumed].strip():
                extracted += 1
            consumed += 1

        chunk = stream[:consumed].strip()
        if not chunk and stream:
            chunk = stream.strip()
            consumed = len(stream)

        chunks.append(chunk)
        stream = stream[consumed:].strip()

    if stream:
        logger.warning(
            "%d characters of plain text left over after the last line", len(stream)
        )
    return chunks


def split_plain_text_lines(text: str, patterns: Sequence[Sequence[str]]) -> List[str]:
    """Assign plain text to annotated lines.

    Lines pair up one-to-one when both sides have the same number of lines;
    otherwise the text is redistributed by character counts.
    """
    if count_non_empty_lines(text) == len(patterns):
        return [line.strip() for line in split_into_non_empty_lines(text)]

    logger.warning(
        "Plain text has %d lines but annotated lyrics have %d; "
        "distributing text by character count",
        count_non_empty_lines(text),
        len(patterns),
    )
    return _distribute_by_length(text, patterns)


def parse_text_with_reference(
    text: str,
    records: Sequence[Record],
    line_groups: LineGroups,
    script: Optional[Script] = None,
) -> List[List[str]]:
    """Split plain text into per-line syllables aligned to the annotated records.

    Without annotated lines, falls back to the script's plain splitter.
    """
    if not records or not line_groups:
        return parse_text_into_syllables(text, script or detect_script(text))

    if not text.strip():
        return []

    patterns = [[records[i].lyric for i in group] for group in line_groups]
    lines = split_plain_text_lines(text, patterns)
    return [divide_line_by_pattern(line, pattern) for line, pattern in zip(lines, patterns)]
