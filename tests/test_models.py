"""Tests for data models."""

import pytest

from lyricsmith.core.models import (
    AlignmentState,
    MergeAction,
    Record,
    RowType,
    freeze_groups,
    freeze_lines,
    line_views,
)
from lyricsmith.exceptions import ValidationError

# ------------------------------
# Record Tests
# ------------------------------


class TestRecord:
    def test_line_end(self):
        assert Record("0", "60", "1", "ld+").is_line_end
        assert not Record("0", "60", "1", "wor-").is_line_end

    def test_modified(self):
        record = Record("0", "60", "1", "Hello", original_lyric="Hel-")
        assert record.is_modified

    def test_frozen(self):
        record = Record("0", "60", "1", "la")
        with pytest.raises(AttributeError):
            record.lyric = "li"


# ------------------------------
# RowType / MergeAction Tests
# ------------------------------


class TestRowType:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("xml", RowType.ANNOTATED),
            ("Annotated", RowType.ANNOTATED),
            (" plain ", RowType.PLAIN),
            ("text", RowType.PLAIN),
            (RowType.PLAIN, RowType.PLAIN),
        ],
    )
    def test_parse(self, value, expected):
        assert RowType.parse(value) == expected

    def test_parse_unknown(self):
        with pytest.raises(ValidationError, match="Unknown row type"):
            RowType.parse("left")


class TestMergeAction:
    def test_from_dict(self):
        action = MergeAction.from_dict(
            {"step": 3, "lineIndex": "2", "syllableIndex": 1, "rowType": "text"}
        )
        assert action == MergeAction(2, 1, RowType.PLAIN, step=3)

    def test_from_dict_missing_key(self):
        with pytest.raises(ValidationError, match="Invalid merge action"):
            MergeAction.from_dict({"lineIndex": 0, "rowType": "xml"})


# ------------------------------
# AlignmentState Tests
# ------------------------------


class TestAlignmentState:
    def test_empty(self):
        state = AlignmentState()
        assert state.annotated_count == 0
        assert state.plain_count == 0
        assert not state.has_plain_text
        assert state.mismatched_lines() == []

    def test_patterns_and_mismatches(self):
        records = tuple(Record("0", "60", "1", lyric) for lyric in ("a-", "b+", "c+"))
        state = AlignmentState(
            records=records,
            line_groups=((0, 1), (2,)),
            plain_text_lines=(("a", "b"), ("c", "d")),
            has_annotated=True,
        )
        assert state.pattern_for_line(0) == ["a-", "b+"]
        assert state.pattern_for_line(1) == ["c+"]
        assert state.plain_count == 4
        assert state.mismatched_lines() == [1]

    def test_line_views_cover_longer_side(self):
        state = AlignmentState(plain_text_lines=(("a",), ("b",)))
        views = line_views(state)
        assert [v.annotated for v in views] == [(), ()]
        assert views[1].plain == ("b",)

    def test_states_compare_by_value(self):
        assert AlignmentState(header="x") == AlignmentState(header="x")


def test_freeze_helpers():
    assert freeze_lines([["a", "b"], []]) == (("a", "b"), ())
    assert freeze_groups([[0, 1], [2]]) == ((0, 1), (2,))
