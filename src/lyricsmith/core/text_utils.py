"""
Text utilities for comparison, character splitting and fallback syllable splitting.

These helpers never decide alignment themselves; the matching module builds
on them.
"""

import re
import unicodedata
from typing import List

from .models import Script

# ----------------------
# Comparison normalization
# ----------------------
_COMBINING_MARKS_RE = re.compile(r"[\u0300-\u036f]")
_NON_COMPARABLE_RE = re.compile(
    r"[^a-z0-9\u0400-\u04FF\u4E00-\u9FFF\u3040-\u309F\u30A0-\u30FF\u0600-\u06FF]"
)
_MARKERS_RE = re.compile(r"[-+]")


def normalize_for_comparison(text: str) -> str:
    """Reduce text to the characters that matter for equality testing.

    Decomposes, drops combining diacritics, lowercases and removes anything
    outside ASCII alphanumerics and the Cyrillic, CJK, kana and Arabic
    blocks. The result is never meant for display.
    """
    text = unicodedata.normalize("NFD", text)
    text = _COMBINING_MARKS_RE.sub("", text)
    return _NON_COMPARABLE_RE.sub("", text.lower())


def clean_syllable(syllable: str) -> str:
    """Remove continuation hyphens and line-end markers from an annotated syllable."""
    return _MARKERS_RE.sub("", syllable)


def strip_whitespace(text: str) -> str:
    return re.sub(r"\s+", "", text)


# ----------------------
# Character splitting
# ----------------------
_TRAILING_PUNCTUATION = set(",.!?')-\u2019\u201d")
_LEADING_PUNCTUATION = set("(\u201c\u2018")


def split_into_characters(text: str) -> List[str]:
    """Split text into one syllable per visible character.

    Trailing punctuation sticks to the character before it, an opening
    bracket or quote is merged with the character after it, and a single
    following space is kept on the syllable so word boundaries survive.
    """
    chars: List[str] = []
    i = 0
    n = len(text)

    while i < n:
        char = text[i]

        if not char.strip():
            i += 1
            continue

        if char in _LEADING_PUNCTUATION:
            combined = char
            i += 1
            while i < n and not text[i].strip():
                i += 1
            if i < n:
                combined += text[i]
                i += 1
            if i < n and text[i] == " ":
                combined += " "
                i += 1
            chars.append(combined)
            continue

        unit = char
        i += 1
        while i < n and text[i] in _TRAILING_PUNCTUATION:
            unit += text[i]
            i += 1
        if i < n and text[i] == " ":
            unit += " "
            i += 1
        chars.append(unit)

    return chars


# ----------------------
# Fallback syllable splitting (no annotated reference)
# ----------------------
_BEFORE_VOWEL_RE = re.compile(r"(?=[aeiouAEIOU])")


def split_latin_into_syllables(text: str) -> List[str]:
    """Crude Latin splitter: break each word before every vowel."""
    syllables: List[str] = []
    for word in re.split(r"\s+", text):
        for part in _BEFORE_VOWEL_RE.split(word):
            part = part.strip()
            if part:
                syllables.append(part)
    return syllables if syllables else [text]


def split_text_by_syllables(text: str, script: Script) -> List[str]:
    if script == Script.LATIN:
        return split_latin_into_syllables(text)
    return split_into_characters(text)


def split_into_non_empty_lines(text: str) -> List[str]:
    return [line for line in text.split("\n") if line.strip()]


def count_non_empty_lines(text: str) -> int:
    if not text.strip():
        return 0
    return len(split_into_non_empty_lines(text))


def parse_text_into_syllables(text: str, script: Script) -> List[List[str]]:
    """Split plain text per line without an annotated reference."""
    return [split_text_by_syllables(line, script) for line in split_into_non_empty_lines(text)]
