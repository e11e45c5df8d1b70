"""Tests for rebuilding annotated markup from edited syllables."""

import pytest

from lyricsmith.core.export import (
    escape_xml_attribute,
    generate_xml_from_state,
    is_material_change,
    resolve_line_lyrics,
    write_export,
)
from lyricsmith.core.models import AlignmentState, Record
from lyricsmith.core.session import LyricSession
from lyricsmith.exceptions import PreconditionError


def _records(*lyrics):
    return [Record(time="0", note="60", length="1", lyric=lyric) for lyric in lyrics]


def test_escape_xml_attribute():
    assert escape_xml_attribute('R&B "<x>" it\'s') == (
        "R&amp;B &quot;&lt;x&gt;&quot; it&apos;s"
    )
    assert escape_xml_attribute("&amp;") == "&amp;amp;"


class TestIsMaterialChange:
    def test_markers_do_not_count(self):
        assert not is_material_change("Hel-", "Hel-")
        assert not is_material_change("ld+", "ld")
        assert not is_material_change("lo", " lo ")

    def test_case_counts(self):
        assert is_material_change("lo", "LO")

    def test_different_text(self):
        assert is_material_change("ld+", "rld")


class TestResolveLineLyrics:
    def test_unchanged_line_keeps_original_lyrics(self):
        records = _records("Hel-", "lo", "wor-", "ld+")
        plain = ["Hel-", "lo", "wor-", "ld"]
        assert resolve_line_lyrics(records, plain) == ["Hel-", "lo", "wor-", "ld+"]

    def test_last_syllable_gets_line_end_marker(self):
        records = _records("a", "b")
        assert resolve_line_lyrics(records, ["a", "c"]) == ["a", "c+"]

    def test_spaced_syllables_infer_word_boundaries(self):
        records = _records("a", "b", "c+")
        assert resolve_line_lyrics(records, ["x", "y ", "z"]) == ["x-", "y", "z+"]

    def test_space_before_next_syllable_ends_word(self):
        records = _records("a", "b+")
        assert resolve_line_lyrics(records, ["x", " y"]) == ["x", "y+"]

    def test_unspaced_line_follows_original_hyphenation(self):
        records = _records("Hel-", "lo", "wor-", "ld+")
        plain = ["HEL", "LO", "wor-", "ld"]
        assert resolve_line_lyrics(records, plain) == ["HEL-", "LO", "wor-", "ld+"]

    def test_replacement_is_escaped(self):
        records = _records("a", "b+")
        assert resolve_line_lyrics(records, ["R&", "b"]) == ["R&amp;", "b+"]

    def test_missing_plain_syllables_keep_original(self):
        records = _records("a-", "b", "c")
        assert resolve_line_lyrics(records, ["a-"]) == ["a-", "b", "c+"]


class TestGenerateXml:
    def test_round_trip_is_identical(self, hello_xml, hello_session):
        assert generate_xml_from_state(hello_session.alignment) == hello_xml

    def test_round_trip_ignores_case_and_spacing(self, two_line_xml):
        session = LyricSession()
        session.import_annotated(two_line_xml)
        session.import_plain_text("hello  world\nhow are you")
        output = generate_xml_from_state(session.alignment)
        assert 'lyric="Hel-"' not in output
        assert 'lyric="hel-"' in output
        assert 'lyric="ld+"' in output
        assert 'lyric="you+"' in output

    def test_merged_records(self, hello_session):
        hello_session.merge_syllable(0, 0, "annotated")
        output = generate_xml_from_state(hello_session.alignment)
        assert '<vocals count="3">' in output
        assert '<vocal time="1.000" note="60" length="0.900" lyric="Hello"/>' in output

    def test_header_is_preserved(self, build_export):
        header = '<?xml version="1.0"?>\n<!-- take 3 -->\n'
        session = LyricSession()
        session.import_annotated(build_export([("0", "60", "1", "la+")], header=header))
        session.import_plain_text("la")
        assert generate_xml_from_state(session.alignment).startswith(
            header + '<vocals count="1">\n'
        )

    def test_requires_annotated_side(self):
        with pytest.raises(PreconditionError, match="annotated"):
            generate_xml_from_state(AlignmentState())

    def test_requires_plain_text(self, hello_xml):
        session = LyricSession()
        session.import_annotated(hello_xml)
        with pytest.raises(PreconditionError, match="plain text"):
            generate_xml_from_state(session.alignment)


def test_write_export(temp_dir, hello_session, hello_xml):
    path = write_export(hello_session.alignment, temp_dir / "out" / "song.xml")
    assert path.read_text(encoding="utf-8") == hello_xml
