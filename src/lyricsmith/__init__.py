"""LyricSmith - align syllable-annotated lyric exports with plain-text transcriptions."""

__version__ = "0.1.0"
