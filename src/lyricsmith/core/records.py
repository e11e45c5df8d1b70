"""Annotated record parsing, line grouping and record merging.

This module handles:
- Parsing ``<vocals>``/``<vocal>`` markup into ``Record`` objects
- Keeping the text before the record list verbatim as the header
- Grouping records into lyric lines at line-end markers
- Merging two adjacent records and shifting line-group indices
"""

import logging
from dataclasses import replace
from typing import List, Sequence, Tuple

from lxml import etree

from ..config import LENGTH_DECIMALS, SYLLABLE_SEPARATOR
from ..exceptions import MalformedInputError, ValidationError
from .models import LineGroups, ParsedRecords, Record, freeze_groups

logger = logging.getLogger(__name__)

RECORD_LIST_TAG = "vocals"
RECORD_TAG = "vocal"


# ----------------------
# Parsing
# ----------------------
def extract_header(markup: str) -> str:
    """Return everything before the record list element, verbatim."""
    start = markup.find("<" + RECORD_LIST_TAG)
    return markup[:start] if start >= 0 else ""


def _record_from_element(element) -> Record:
    lyric = element.get("lyric", "")
    return Record(
        time=element.get("time", ""),
        note=element.get("note", ""),
        length=element.get("length", ""),
        lyric=lyric,
        original_lyric=lyric,
    )


def parse_records(markup: str) -> ParsedRecords:
    """Parse annotated markup into a header and an ordered record tuple.

    Raises:
        MalformedInputError: If the markup is not well-formed XML
    """
    if not markup or not markup.strip():
        raise MalformedInputError("Annotated input is empty")

    parser = etree.XMLParser(
        encoding="utf-8", resolve_entities=False, no_network=True
    )
    try:
        root = etree.fromstring(markup.encode("utf-8"), parser)
    except (etree.XMLSyntaxError, ValueError) as e:
        raise MalformedInputError(f"Invalid XML format: {e}")

    records = tuple(_record_from_element(el) for el in root.iter(RECORD_TAG))
    if not records:
        logger.warning("No <%s> records found in annotated input", RECORD_TAG)

    return ParsedRecords(header=extract_header(markup), records=records)


# ----------------------
# Line grouping
# ----------------------
def group_into_lines(records: Sequence[Record]) -> LineGroups:
    """Partition record indices into lines closed by the line-end marker.

    Records after the last marker still form a final line.
    """
    lines: List[Tuple[int, ...]] = []
    current: List[int] = []

    for index, record in enumerate(records):
        current.append(index)
        if record.is_line_end:
            lines.append(tuple(current))
            current = []

    if current:
        lines.append(tuple(current))

    return tuple(lines)


# ----------------------
# Merging
# ----------------------
def _parse_seconds(value: str, field_name: str, index: int) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(
            f"Record {index} has non-numeric {field_name}: {value!r}"
        )


def merge_records(records: Sequence[Record], first_index: int) -> Tuple[Record, ...]:
    """Merge the record at ``first_index`` with the one after it.

    The first record keeps its time and note, takes the concatenated lyric
    (minus its own continuation hyphen) and a length spanning to the end of
    the second record.
    """
    if first_index < 0 or first_index >= len(records) - 1:
        return tuple(records)

    first = records[first_index]
    second = records[first_index + 1]

    start = _parse_seconds(first.time, "time", first_index)
    second_end = _parse_seconds(second.time, "time", first_index + 1) + _parse_seconds(
        second.length, "length", first_index + 1
    )
    combined_length = f"{round(second_end - start, LENGTH_DECIMALS):.{LENGTH_DECIMALS}f}"

    lyric = first.lyric
    if lyric.endswith(SYLLABLE_SEPARATOR):
        lyric = lyric[: -len(SYLLABLE_SEPARATOR)]

    merged = replace(first, lyric=lyric + second.lyric, length=combined_length)

    logger.debug(
        "Merged records %d+%d: %r + %r -> %r (length %s)",
        first_index,
        first_index + 1,
        first.lyric,
        second.lyric,
        merged.lyric,
        combined_length,
    )

    return tuple(records[:first_index]) + (merged,) + tuple(records[first_index + 2:])


def update_line_groups_after_merge(
    line_groups: LineGroups, line_index: int, merged_index: int
) -> LineGroups:
    """Drop the absorbed record from its line and renumber every later index."""
    groups = [list(group) for group in line_groups]
    target = groups[line_index]

    if merged_index not in target:
        return freeze_groups(groups)

    position = target.index(merged_index)
    if position + 1 >= len(target):
        return freeze_groups(groups)
    del target[position + 1]

    return freeze_groups(
        [idx - 1 if idx > merged_index else idx for idx in group] for group in groups
    )
