"""Utility modules."""

from .logging import setup_logging, get_logger
from .validation import (
    parse_merge_spec,
    parse_merge_specs,
    validate_input_file,
    validate_line_index,
    validate_output_path,
    validate_row_type,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "parse_merge_spec",
    "parse_merge_specs",
    "validate_input_file",
    "validate_line_index",
    "validate_output_path",
    "validate_row_type",
]
