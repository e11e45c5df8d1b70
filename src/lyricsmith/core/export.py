"""Rebuild annotated markup from the edited plain-text syllables.

Timing attributes and the header are written back exactly as imported.
Only ``lyric`` values are recomputed: untouched syllables keep their
original spelling and hyphenation, edited ones get continuation hyphens
inferred from the whitespace between plain-text syllables.
"""

import logging
from pathlib import Path
from typing import List, Optional, Sequence

from ..config import LINE_END_MARKER, SYLLABLE_SEPARATOR
from ..exceptions import PreconditionError
from .models import AlignmentState, Record

logger = logging.getLogger(__name__)


def escape_xml_attribute(text: str) -> str:
    """Escape text for a double-quoted XML attribute."""
    return (
        text.replace("&", "&amp;")  # first, so later entities are not re-escaped
        .replace('"', "&quot;")
        .replace("'", "&apos;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
    )


def _core(text: str) -> str:
    """Syllable content without line-end marker, trailing hyphen or padding."""
    text = text.strip()
    if text.endswith(LINE_END_MARKER):
        text = text[: -len(LINE_END_MARKER)]
    if text.endswith(SYLLABLE_SEPARATOR):
        text = text[: -len(SYLLABLE_SEPARATOR)]
    return text.strip()


def is_material_change(original_lyric: str, replacement: str) -> bool:
    """True when the plain-text syllable spells something other than the lyric.

    Case and diacritics count as changes here; markers and padding do not.
    """
    return _core(original_lyric) != _core(replacement)


def _keep_original(lyric: str, is_last: bool) -> str:
    if lyric.endswith(LINE_END_MARKER):
        lyric = lyric[: -len(LINE_END_MARKER)]
    if is_last:
        lyric += LINE_END_MARKER
    return escape_xml_attribute(lyric)


def _continues_word(
    raw: str, body: str, next_raw: Optional[str], original_lyric: str, line_has_spacing: bool
) -> bool:
    if not body:
        return False
    if raw != raw.rstrip():
        return False
    if next_raw is not None and next_raw != next_raw.lstrip():
        return False
    if raw.strip().endswith(SYLLABLE_SEPARATOR):
        return True
    if not line_has_spacing:
        # Syllables sliced from space-free text carry no word boundaries;
        # the annotated hyphenation is the only evidence left
        return original_lyric.rstrip(LINE_END_MARKER).endswith(SYLLABLE_SEPARATOR)
    return True


def _replacement_lyric(
    raw: str,
    next_raw: Optional[str],
    original_lyric: str,
    is_last: bool,
    line_has_spacing: bool,
) -> str:
    body = raw.strip()
    if body.startswith(SYLLABLE_SEPARATOR):
        body = body[len(SYLLABLE_SEPARATOR):]
    if body.endswith(SYLLABLE_SEPARATOR):
        body = body[: -len(SYLLABLE_SEPARATOR)]

    lyric = escape_xml_attribute(body)
    if is_last:
        return lyric + LINE_END_MARKER
    if _continues_word(raw, body, next_raw, original_lyric, line_has_spacing):
        lyric += SYLLABLE_SEPARATOR
    return lyric


def resolve_line_lyrics(records: Sequence[Record], plain: Sequence[str]) -> List[str]:
    """Compute the escaped ``lyric`` values for one line of records."""
    line_has_spacing = any(s != s.strip() for s in plain)
    lyrics: List[str] = []

    for position, record in enumerate(records):
        is_last = position == len(records) - 1
        if position >= len(plain):
            lyrics.append(_keep_original(record.lyric, is_last))
            continue

        raw = plain[position]
        if not is_material_change(record.lyric, raw):
            lyrics.append(_keep_original(record.lyric, is_last))
            continue

        next_raw = plain[position + 1] if position + 1 < len(plain) else None
        lyrics.append(
            _replacement_lyric(raw, next_raw, record.lyric, is_last, line_has_spacing)
        )

    return lyrics


def _format_record(record: Record, lyric: str) -> str:
    return (
        f'  <vocal time="{record.time}" note="{record.note}" '
        f'length="{record.length}" lyric="{lyric}"/>\n'
    )


def generate_xml_from_state(state: AlignmentState) -> str:
    """Serialize the alignment back to annotated markup.

    Raises:
        PreconditionError: If either side has not been imported
    """
    if not state.records:
        raise PreconditionError("No annotated records to export; import annotated lyrics first")
    if not state.plain_text_lines:
        raise PreconditionError("No plain text to export; import plain text first")

    mismatched = state.mismatched_lines()
    if mismatched:
        logger.warning(
            "Exporting with %d misaligned lines; unmatched syllables keep their original lyric",
            len(mismatched),
        )

    parts = [state.header, f'<vocals count="{len(state.records)}">\n']
    for line_index, group in enumerate(state.line_groups):
        records = [state.records[i] for i in group]
        plain = state.plain_text_lines[line_index] if line_index < len(state.plain_text_lines) else ()
        for record, lyric in zip(records, resolve_line_lyrics(records, plain)):
            parts.append(_format_record(record, lyric))
    parts.append("</vocals>\n")

    return "".join(parts)


def serialize(state: AlignmentState) -> str:
    return generate_xml_from_state(state)


def write_export(state: AlignmentState, path: Path) -> Path:
    """Serialize ``state`` and write it to ``path`` as UTF-8."""
    content = generate_xml_from_state(state)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    logger.info("Wrote %d records to %s", len(state.records), path)
    return path
