"""Data models for annotated records, plain-text lines and alignment state."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple

from ..config import LINE_END_MARKER
from ..exceptions import ValidationError

LineGroups = Tuple[Tuple[int, ...], ...]
PlainTextLines = Tuple[Tuple[str, ...], ...]


class Script(str, Enum):
    """Alphabet family of a text span."""

    LATIN = "latin"
    CYRILLIC = "cyrillic"
    CJK = "cjk"
    ARABIC = "arabic"


class RowType(str, Enum):
    """Which side of the alignment a merge applies to."""

    ANNOTATED = "annotated"
    PLAIN = "plain"

    @classmethod
    def parse(cls, value: str) -> "RowType":
        """Parse a row type, accepting the ``xml`` spelling of recorded scenarios."""
        if isinstance(value, cls):
            return value
        name = str(value).strip().lower()
        if name in ("xml", "annotated"):
            return cls.ANNOTATED
        if name in ("plain", "text"):
            return cls.PLAIN
        raise ValidationError(f"Unknown row type: {value!r}")


@dataclass(frozen=True)
class Record:
    """One timed syllable from the annotated export.

    All attributes are kept as the strings found in the markup so they can
    be written back unchanged.
    """

    time: str
    note: str
    length: str
    lyric: str
    original_lyric: str = ""

    @property
    def is_line_end(self) -> bool:
        return self.lyric.endswith(LINE_END_MARKER)

    @property
    def is_modified(self) -> bool:
        return self.lyric != self.original_lyric


@dataclass(frozen=True)
class ScriptRun:
    """A maximal run of Latin or non-Latin text."""

    text: str
    is_latin: bool


@dataclass(frozen=True)
class ParsedRecords:
    """Result of parsing annotated markup."""

    header: str
    records: Tuple[Record, ...]

    @property
    def count(self) -> int:
        return len(self.records)


@dataclass(frozen=True)
class MergeAction:
    """One recorded merge, replayable against a fresh session."""

    line_index: int
    syllable_index: int
    row_type: RowType
    step: int = 0
    description: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "MergeAction":
        try:
            return cls(
                line_index=int(data["lineIndex"]),
                syllable_index=int(data["syllableIndex"]),
                row_type=RowType.parse(data["rowType"]),
                step=int(data.get("step", 0)),
                description=str(data.get("description", "")),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ValidationError(f"Invalid merge action {data!r}: {e}")


@dataclass(frozen=True)
class AlignmentState:
    """Both sides of the alignment at one point in time.

    Instances are immutable (tuples all the way down), so a state can be
    stored in the undo history as-is and never aliases a later state.
    """

    header: str = ""
    records: Tuple[Record, ...] = ()
    line_groups: LineGroups = ()
    plain_text_raw: str = ""
    plain_text_lines: PlainTextLines = ()
    original_plain_text_lines: PlainTextLines = ()
    script: Script = Script.LATIN
    original_count: int = 0
    has_annotated: bool = False

    @property
    def annotated_count(self) -> int:
        return len(self.records)

    @property
    def plain_count(self) -> int:
        return sum(len(line) for line in self.plain_text_lines)

    @property
    def has_plain_text(self) -> bool:
        return len(self.plain_text_lines) > 0

    def pattern_for_line(self, line_index: int) -> List[str]:
        """Annotated lyrics of one line, in order."""
        return [self.records[i].lyric for i in self.line_groups[line_index]]

    def mismatched_lines(self) -> List[int]:
        """Indices of lines whose two sides have different syllable counts."""
        mismatched = []
        for i, group in enumerate(self.line_groups):
            plain = self.plain_text_lines[i] if i < len(self.plain_text_lines) else ()
            if len(plain) != len(group):
                mismatched.append(i)
        return mismatched


@dataclass(frozen=True)
class LineView:
    """Side-by-side view of one lyric line, for display."""

    index: int
    annotated: Tuple[str, ...]
    plain: Tuple[str, ...]
    issues: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_aligned(self) -> bool:
        return len(self.annotated) == len(self.plain)


def line_views(state: AlignmentState) -> List[LineView]:
    """Pair each annotated line with its plain-text line."""
    views = []
    count = max(len(state.line_groups), len(state.plain_text_lines))
    for i in range(count):
        annotated = (
            tuple(state.pattern_for_line(i)) if i < len(state.line_groups) else ()
        )
        plain = state.plain_text_lines[i] if i < len(state.plain_text_lines) else ()
        issues: Tuple[str, ...] = ()
        if state.has_plain_text and len(annotated) != len(plain):
            issues = (f"{len(annotated)} annotated vs {len(plain)} plain syllables",)
        views.append(LineView(index=i, annotated=annotated, plain=plain, issues=issues))
    return views


def freeze_lines(lines) -> PlainTextLines:
    """Convert nested sequences of syllables into an immutable tuple form."""
    return tuple(tuple(line) for line in lines)


def freeze_groups(groups) -> LineGroups:
    return tuple(tuple(group) for group in groups)

