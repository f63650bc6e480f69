"""Configuration settings for karaoke_qc."""

import os
from dataclasses import dataclass

from .exceptions import ConfigError

# Alignment scoring (can be overridden via environment variables)
MATCH_SCORE = float(os.getenv("KARAOKE_QC_MATCH_SCORE", "2.0"))
MISMATCH_SCORE = float(os.getenv("KARAOKE_QC_MISMATCH_SCORE", "-1.0"))
GAP_SCORE = float(os.getenv("KARAOKE_QC_GAP_SCORE", "-2.0"))

# A diagonal step only earns a scaled match score above this similarity
SCORE_THRESHOLD = float(os.getenv("KARAOKE_QC_SCORE_THRESHOLD", "0.6"))
# Diagonal steps at or above this similarity are reported as matches
MATCH_THRESHOLD = float(os.getenv("KARAOKE_QC_MATCH_THRESHOLD", "0.8"))

# Word timing checks (seconds)
LONG_WORD_DURATION = float(os.getenv("KARAOKE_QC_LONG_WORD", "3.0"))
SHORT_WORD_DURATION = float(os.getenv("KARAOKE_QC_SHORT_WORD", "0.03"))
OVERLAP_TOLERANCE = float(os.getenv("KARAOKE_QC_OVERLAP_TOLERANCE", "0.01"))

# Editing
MAX_HISTORY_SIZE = int(os.getenv("KARAOKE_QC_MAX_HISTORY", "50"))
OVERLAP_FIX_GAP = 0.01  # Gap left before the next word when fixing overlaps
MIN_WORD_DURATION = 0.03  # Auto-fix never shrinks a word below this
FLAG_NAVIGATION_MARGIN = 0.1  # Skip flags this close to the playhead

# Song display defaults
DEFAULT_TITLE = "Untitled"
DEFAULT_ARTIST = "Unknown Artist"


@dataclass(frozen=True)
class AlignmentSettings:
    """Scores and thresholds for lyrics-to-timing alignment."""

    match_score: float = MATCH_SCORE
    mismatch_score: float = MISMATCH_SCORE
    gap_score: float = GAP_SCORE
    score_threshold: float = SCORE_THRESHOLD
    match_threshold: float = MATCH_THRESHOLD

    def validate(self) -> None:
        for name in ("score_threshold", "match_threshold"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigError(f"{name} must be between 0 and 1, got {value}")
        if self.gap_score >= 0:
            raise ConfigError("gap_score must be negative")
        if self.match_score <= 0:
            raise ConfigError("match_score must be positive")


@dataclass(frozen=True)
class FlagSettings:
    """Thresholds for per-word timing flags."""

    long_duration: float = LONG_WORD_DURATION
    short_duration: float = SHORT_WORD_DURATION
    overlap_tolerance: float = OVERLAP_TOLERANCE

    def validate(self) -> None:
        if self.short_duration < 0 or self.long_duration <= 0:
            raise ConfigError("Word duration thresholds must be positive")
        if self.short_duration >= self.long_duration:
            raise ConfigError("short_duration must be below long_duration")
        if self.overlap_tolerance < 0:
            raise ConfigError("overlap_tolerance must be non-negative")


def validate_config() -> None:
    """Validate configuration values."""
    AlignmentSettings().validate()
    FlagSettings().validate()

    if MAX_HISTORY_SIZE <= 0:
        raise ConfigError("Invalid history size")


def get_alignment_settings() -> AlignmentSettings:
    """Get alignment settings from the environment-backed defaults."""
    return AlignmentSettings()


def get_flag_settings() -> FlagSettings:
    """Get flag settings from the environment-backed defaults."""
    return FlagSettings()


# Validate config on import
validate_config()
