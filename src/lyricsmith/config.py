"""Configuration settings for LyricSmith."""

import os

from .exceptions import ConfigError

# Annotated lyric conventions
LINE_END_MARKER = "+"
SYLLABLE_SEPARATOR = "-"

# History (can be overridden via environment variables)
HISTORY_LIMIT = int(os.getenv("LYRICSMITH_HISTORY_LIMIT", "50"))

# Fuzzy matcher looks ahead max(2 * syllable length, FUZZY_MIN_WINDOW) chars
FUZZY_MIN_WINDOW = int(os.getenv("LYRICSMITH_FUZZY_MIN_WINDOW", "20"))


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# Re-run the fuzzy matcher on the rest of a line after a plain-text merge
AUTO_MATCH_DEFAULT = _env_flag("LYRICSMITH_AUTO_MATCH")

# Merged record durations are written with this many decimals
LENGTH_DECIMALS = 3

# Scenario comparison tolerance for time/length attributes (seconds)
COMPARISON_TOLERANCE = 0.003

# Export
DEFAULT_EXPORT_NAME = "exported_lyrics.xml"
EXPORT_EXTENSIONS = (".xml",)


def validate_config() -> None:
    """Validate configuration values."""
    if HISTORY_LIMIT < 1:
        raise ConfigError("History limit must be at least 1")

    if FUZZY_MIN_WINDOW < 1:
        raise ConfigError("Fuzzy match window must be at least 1")

    if LENGTH_DECIMALS < 0:
        raise ConfigError("Invalid length precision")


# Validate config on import
validate_config()
