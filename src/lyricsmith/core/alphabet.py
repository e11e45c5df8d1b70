"""Script (alphabet family) detection and Latin/non-Latin segmentation."""

import re
from typing import List

from .models import Script, ScriptRun

# ----------------------
# Unicode ranges for script detection
# ----------------------
CYRILLIC_RANGES = [(0x0400, 0x04FF)]
CJK_RANGES = [(0x4E00, 0x9FFF), (0x3040, 0x309F), (0x30A0, 0x30FF)]
ARABIC_RANGES = [(0x0600, 0x06FF)]

# Checked in order; the first script with a character in range wins
SCRIPT_PRIORITY = [
    (Script.CYRILLIC, CYRILLIC_RANGES),
    (Script.CJK, CJK_RANGES),
    (Script.ARABIC, ARABIC_RANGES),
]

_ASCII_LETTER_RE = re.compile(r"[a-zA-Z]")
_LATIN_LETTER_RE = re.compile(r"[a-zA-Z\u00C0-\u00FF\u0100-\u017F\u0180-\u024F]")
_RUN_PUNCTUATION_RE = re.compile(r"[.,!?;:'\"()\[\]{}\-\u2019\u201D\u2026]")


def _in_ranges(char: str, ranges) -> bool:
    code = ord(char)
    return any(start <= code <= end for start, end in ranges)


def contains_script(text: str, ranges) -> bool:
    return any(_in_ranges(c, ranges) for c in text)


def detect_script(text: str) -> Script:
    """Classify text by the first non-Latin script found in it.

    Mixed Latin/Cyrillic text is Cyrillic; text without any Cyrillic, CJK or
    Arabic character is Latin.
    """
    for script, ranges in SCRIPT_PRIORITY:
        if contains_script(text, ranges):
            return script
    return Script.LATIN


def is_primarily_latin(text: str) -> bool:
    """True when ASCII letters make up at least half of the visible characters."""
    visible = re.sub(r"\s", "", text)
    if not visible:
        return False
    latin = len(_ASCII_LETTER_RE.findall(text))
    return latin / len(visible) >= 0.5


def is_latin_letter(char: str) -> bool:
    """Latin letter, including Latin-1 and Latin Extended-A/B."""
    return bool(_LATIN_LETTER_RE.match(char))


def _is_run_neutral(char: str) -> bool:
    return char.isspace() or bool(_RUN_PUNCTUATION_RE.match(char))


def segment_by_script(text: str) -> List[ScriptRun]:
    """Split text into alternating Latin and non-Latin runs.

    Punctuation and whitespace stay with the run they follow, so
    ``"Беги, run"`` keeps the comma next to the Cyrillic word. Runs that are
    only whitespace are dropped.
    """
    runs: List[ScriptRun] = []
    if not text:
        return runs

    current = ""
    current_is_latin = is_latin_letter(text[0]) or _is_run_neutral(text[0])

    for char in text:
        if _is_run_neutral(char):
            current += char
            continue

        char_is_latin = is_latin_letter(char)
        if not current:
            current_is_latin = char_is_latin
            current = char
        elif char_is_latin == current_is_latin:
            current += char
        else:
            if current.strip():
                runs.append(ScriptRun(text=current, is_latin=current_is_latin))
            current = char
            current_is_latin = char_is_latin

    if current.strip():
        runs.append(ScriptRun(text=current, is_latin=current_is_latin))

    return runs
