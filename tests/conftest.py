"""Test configuration and fixtures.

Provides reusable fixtures for:
- Annotated lyric exports (Latin, multi-line, CJK)
- Plain-text lyrics matching them
- Sessions with both sides imported
- Scenario directories for replay tests
"""

import json
import logging
import tempfile
from pathlib import Path

import pytest

from lyricsmith.core.session import LyricSession
from lyricsmith.utils.logging import LOGGER_NAME

# =============================================================================
# Basic Fixtures
# =============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers installed by CLI runs so they never outlive a test."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


# =============================================================================
# Annotated Export Fixtures
# =============================================================================

HEADER = '<?xml version="1.0" encoding="UTF-8"?>\n'


def make_export(rows, header=HEADER):
    """Build annotated markup from (time, note, length, lyric) rows."""
    body = "".join(
        f'  <vocal time="{time}" note="{note}" length="{length}" lyric="{lyric}"/>\n'
        for time, note, length, lyric in rows
    )
    return f'{header}<vocals count="{len(rows)}">\n{body}</vocals>\n'


HELLO_ROWS = [
    ("1.000", "60", "0.500", "Hel-"),
    ("1.500", "62", "0.400", "lo"),
    ("2.000", "64", "0.300", "wor-"),
    ("2.500", "65", "0.500", "ld+"),
]

TWO_LINE_ROWS = HELLO_ROWS + [
    ("4.000", "60", "0.250", "how"),
    ("4.500", "62", "0.250", "are"),
    ("5.000", "64", "0.750", "you+"),
]


@pytest.fixture
def build_export():
    """Factory fixture for ad-hoc annotated exports."""
    return make_export


@pytest.fixture
def hello_xml():
    """One line: Hel- lo wor- ld+."""
    return make_export(HELLO_ROWS)


@pytest.fixture
def two_line_xml():
    """Two lines: 'Hello world' and 'how are you'."""
    return make_export(TWO_LINE_ROWS)


@pytest.fixture
def cjk_xml():
    return make_export(
        [
            ("0.000", "60", "0.500", "你"),
            ("0.500", "62", "0.500", "好+"),
        ]
    )


@pytest.fixture
def two_line_text():
    return "Hello world\nhow are you\n"


@pytest.fixture
def hello_session(hello_xml):
    """Session with the one-line export and matching plain text imported."""
    session = LyricSession()
    session.import_annotated(hello_xml)
    session.import_plain_text("Hello world")
    return session


@pytest.fixture
def two_line_session(two_line_xml, two_line_text):
    session = LyricSession()
    session.import_annotated(two_line_xml)
    session.import_plain_text(two_line_text)
    return session


# =============================================================================
# Scenario Fixtures
# =============================================================================


@pytest.fixture
def scenario_dir(temp_dir, hello_xml):
    """A replayable scenario merging 'Hel-' and 'lo' on the annotated side."""
    target = make_export(
        [
            ("1.000", "60", "0.900", "Hello"),
            ("2.000", "64", "0.300", "wor-"),
            ("2.500", "65", "0.500", "ld+"),
        ]
    )
    (temp_dir / "source.xml").write_text(hello_xml, encoding="utf-8")
    (temp_dir / "plain_text.txt").write_text("Hello world\n", encoding="utf-8")
    (temp_dir / "target.xml").write_text(target, encoding="utf-8")
    scenario = {
        "testCaseName": "hello-merge",
        "description": "Merge the first two annotated syllables",
        "sourceXML": "source.xml",
        "plainText": "plain_text.txt",
        "targetXML": "target.xml",
        "mergeActions": [
            {"step": 1, "lineIndex": 0, "syllableIndex": 0, "rowType": "xml"}
        ],
        "expectedVocalCount": 3,
    }
    (temp_dir / "test-case.json").write_text(json.dumps(scenario), encoding="utf-8")
    return temp_dir
