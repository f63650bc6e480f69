"""Test configuration and fixtures.

Provides reusable fixtures for:
- Word timing sequences (clean, overlapping) and a factory for custom ones
- Song documents as dicts and as files on disk

The package logger is reset after every test, since CLI runs reconfigure it.
"""

import json
import logging

import pytest

from karaoke_qc.core.models import WordTiming


@pytest.fixture(autouse=True)
def reset_package_logger():
    logger = logging.getLogger("karaoke_qc")
    yield
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


def _build_timings(*entries):
    return [WordTiming(word=w, start=s, end=e) for w, s, e in entries]


@pytest.fixture
def make_timings():
    """Factory building WordTimings from (word, start, end) tuples."""
    return _build_timings


@pytest.fixture
def clean_timings():
    return _build_timings(
        ("hello", 0.0, 0.5),
        ("world", 0.5, 1.0),
    )


@pytest.fixture
def overlapping_timings():
    return _build_timings(
        ("a", 0.0, 1.0),
        ("b", 0.9, 1.5),
    )


@pytest.fixture
def song_dict():
    return {
        "title": "Test Song",
        "artist": "Test Artist",
        "lyrics_text": "one two three",
        "duration": 12.5,
        "word_timings": [
            {"word": "one", "start": 0.0, "end": 0.4},
            {"word": "three", "start": 1.0, "end": 1.4},
        ],
        "pitch_data": [
            {"time": 0.1, "midi_note": 60, "note_name": "C4"},
            {"time": 1.2, "midi_note": 62, "note_name": "D4"},
        ],
    }


@pytest.fixture
def song_file(tmp_path, song_dict):
    path = tmp_path / "song.json"
    path.write_text(json.dumps(song_dict), encoding="utf-8")
    return path
