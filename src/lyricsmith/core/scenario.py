"""Replay of recorded merge scenarios and comparison of exports.

A scenario is a JSON file next to its inputs::

    {
      "testCaseName": "hello",
      "sourceXML": "source.xml",
      "plainText": "plain_text.txt",
      "targetXML": "target.xml",
      "mergeActions": [{"step": 1, "lineIndex": 0, "syllableIndex": 0, "rowType": "xml"}],
      "expectedVocalCount": 4
    }

File names are resolved relative to the JSON file.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from ..config import COMPARISON_TOLERANCE
from ..exceptions import LyricSmithError, MalformedInputError, ScenarioError
from .models import MergeAction, Record
from .records import parse_records
from .session import LyricSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Scenario:
    name: str
    source_xml: str
    plain_text: str
    target_xml: Optional[str]
    merge_actions: Tuple[MergeAction, ...] = ()
    expected_count: Optional[int] = None
    description: str = ""


@dataclass
class RecordDifference:
    index: int
    expected: Record
    actual: Record
    differences: List[str] = field(default_factory=list)


@dataclass
class ComparisonResult:
    is_match: bool
    count_mismatch: Optional[Tuple[int, int]] = None  # (expected, actual)
    mismatched_records: List[RecordDifference] = field(default_factory=list)

    def summary(self) -> str:
        if self.count_mismatch:
            expected, actual = self.count_mismatch
            return f"Record count mismatch: expected {expected}, got {actual}"
        if self.is_match:
            return "All records match"
        lines = [f"{len(self.mismatched_records)} records differ:"]
        for diff in self.mismatched_records:
            lines.append(f"  #{diff.index}: " + "; ".join(diff.differences))
        return "\n".join(lines)


@dataclass
class ScenarioResult:
    scenario: Scenario
    session: LyricSession
    output: str
    comparison: Optional[ComparisonResult] = None

    @property
    def passed(self) -> bool:
        if self.comparison is not None and not self.comparison.is_match:
            return False
        if self.scenario.expected_count is not None:
            return self.session.alignment.annotated_count == self.scenario.expected_count
        return True


def _read(base: Path, name: str) -> str:
    path = base / name
    if not path.is_file():
        raise ScenarioError(f"Scenario file not found: {path}")
    return path.read_text(encoding="utf-8")


def load_scenario(path: Path) -> Scenario:
    """Load a scenario JSON file and the inputs it references."""
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ScenarioError(f"Cannot read scenario {path}: {e}")

    base = path.parent
    try:
        actions = tuple(MergeAction.from_dict(a) for a in data.get("mergeActions", []))
        source = _read(base, data["sourceXML"])
        plain = _read(base, data["plainText"])
    except KeyError as e:
        raise ScenarioError(f"Scenario {path} is missing {e}")
    except LyricSmithError as e:
        raise ScenarioError(str(e))

    target = _read(base, data["targetXML"]) if data.get("targetXML") else None
    expected = data.get("expectedVocalCount")

    return Scenario(
        name=data.get("testCaseName", path.stem),
        source_xml=source,
        plain_text=plain,
        target_xml=target,
        merge_actions=actions,
        expected_count=int(expected) if expected is not None else None,
        description=data.get("description", ""),
    )


def _compare_seconds(name: str, expected: str, actual: str, tolerance: float) -> Optional[str]:
    try:
        diff = abs(float(actual) - float(expected))
    except ValueError:
        return None if actual == expected else f"{name}: expected {expected}, got {actual}"
    if diff > tolerance:
        return f"{name}: expected {expected}, got {actual} (diff: {diff:.3f})"
    return None


def compare_exports(
    actual_xml: str, expected_xml: str, tolerance: float = COMPARISON_TOLERANCE
) -> ComparisonResult:
    """Compare two exports record by record.

    Lyrics and notes must match exactly; time and length may differ by
    ``tolerance`` seconds.
    """
    actual = parse_records(actual_xml).records
    expected = parse_records(expected_xml).records

    if len(actual) != len(expected):
        return ComparisonResult(is_match=False, count_mismatch=(len(expected), len(actual)))

    mismatched: List[RecordDifference] = []
    for index, (exp, act) in enumerate(zip(expected, actual)):
        differences = []
        if act.lyric != exp.lyric:
            differences.append(f'lyric: expected "{exp.lyric}", got "{act.lyric}"')
        for name in ("time", "length"):
            problem = _compare_seconds(name, getattr(exp, name), getattr(act, name), tolerance)
            if problem:
                differences.append(problem)
        if act.note != exp.note:
            differences.append(f"note: expected {exp.note}, got {act.note}")

        if differences:
            mismatched.append(RecordDifference(index, exp, act, differences))

    return ComparisonResult(is_match=not mismatched, mismatched_records=mismatched)


def run_scenario(scenario: Scenario, auto_match: bool = False) -> ScenarioResult:
    """Import a scenario's inputs, replay its merges and export the result."""
    session = LyricSession(auto_match=auto_match)

    session.import_annotated(scenario.source_xml)
    if session.error:
        raise ScenarioError(f"Annotated import failed: {session.error}")

    session.import_plain_text(scenario.plain_text)
    if session.error:
        raise ScenarioError(f"Plain text import failed: {session.error}")

    session.apply_actions(scenario.merge_actions)
    output = session.serialize()

    comparison = None
    if scenario.target_xml is not None:
        try:
            comparison = compare_exports(output, scenario.target_xml)
        except MalformedInputError as e:
            raise ScenarioError(f"Target export of {scenario.name} is invalid: {e}")

    logger.info(
        "Scenario %s: %d actions replayed, %d records",
        scenario.name,
        len(scenario.merge_actions),
        session.alignment.annotated_count,
    )
    return ScenarioResult(scenario=scenario, session=session, output=output, comparison=comparison)
