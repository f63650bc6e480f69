"""Tests for configuration settings."""

import pytest

from karaoke_qc import config
from karaoke_qc.config import AlignmentSettings, FlagSettings
from karaoke_qc.exceptions import ConfigError


def test_default_thresholds():
    settings = config.get_alignment_settings()
    assert settings.score_threshold == 0.6
    assert settings.match_threshold == 0.8
    assert settings.gap_score == -2.0
    assert settings.mismatch_score == -1.0
    assert settings.match_score == 2.0


def test_default_flag_settings():
    settings = config.get_flag_settings()
    assert settings.long_duration == 3.0
    assert settings.short_duration == 0.03
    assert settings.overlap_tolerance == 0.01


@pytest.mark.parametrize(
    "kwargs",
    [
        {"match_threshold": 1.5},
        {"score_threshold": -0.1},
        {"gap_score": 0.0},
        {"match_score": 0.0},
    ],
)
def test_invalid_alignment_settings(kwargs):
    with pytest.raises(ConfigError):
        AlignmentSettings(**kwargs).validate()


@pytest.mark.parametrize(
    "kwargs",
    [
        {"short_duration": 5.0},
        {"long_duration": 0.0},
        {"overlap_tolerance": -0.01},
    ],
)
def test_invalid_flag_settings(kwargs):
    with pytest.raises(ConfigError):
        FlagSettings(**kwargs).validate()


def test_validate_config_passes_with_defaults():
    config.validate_config()
