"""Validation utilities."""

import logging
import re
from pathlib import Path
from typing import Sequence

from ..config import EXPORT_EXTENSIONS
from ..core.models import MergeAction, RowType
from ..exceptions import ValidationError

logger = logging.getLogger(__name__)

_MERGE_SPEC = re.compile(r"^\s*(\d+)\s*:\s*(\d+)\s*:\s*([A-Za-z]+)\s*$")


def validate_row_type(value: str) -> RowType:
    """Validate a merge side name (``annotated``/``xml`` or ``plain``/``text``)."""
    return RowType.parse(value)


def parse_merge_spec(spec: str, step: int = 0) -> MergeAction:
    """Parse ``LINE:SYLLABLE:SIDE`` into a merge action.

    Indices are zero-based, e.g. ``0:2:plain``.
    """
    if not spec:
        raise ValidationError("Merge spec cannot be empty")

    match = _MERGE_SPEC.match(spec)
    if not match:
        raise ValidationError(
            f"Invalid merge spec: {spec!r} (expected LINE:SYLLABLE:SIDE, e.g. 0:1:plain)"
        )

    line, syllable, side = match.groups()
    return MergeAction(
        line_index=int(line),
        syllable_index=int(syllable),
        row_type=validate_row_type(side),
        step=step,
        description=spec.strip(),
    )


def parse_merge_specs(specs: Sequence[str]) -> list:
    """Parse several merge specs, numbering them from 1 in the given order."""
    return [parse_merge_spec(spec, step=i) for i, spec in enumerate(specs, start=1)]


def validate_line_index(index: int, line_count: int) -> int:
    """Validate a zero-based line index against the number of lines."""
    if not 0 <= index < line_count:
        raise ValidationError(f"Line index must be between 0 and {line_count - 1}")
    return index


def validate_input_file(path: str) -> Path:
    """Validate that an input file exists."""
    input_path = Path(path)
    if not input_path.is_file():
        raise ValidationError(f"Input file not found: {input_path}")
    return input_path


def validate_output_path(path: str) -> Path:
    """Validate and normalize output path."""
    output_path = Path(path)

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ValidationError(f"Cannot create output directory: {e}")

    if output_path.suffix.lower() not in EXPORT_EXTENSIONS:
        raise ValidationError(
            f"Output file must have one of these extensions: {', '.join(EXPORT_EXTENSIONS)}"
        )

    return output_path
