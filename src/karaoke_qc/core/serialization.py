"""JSON serialization for song timing documents."""

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..config import DEFAULT_ARTIST, DEFAULT_TITLE
from ..exceptions import SongDataError
from .models import FlagReport, SongData, WordTiming
from .text_utils import coerce_to_display_string, parse_duration

logger = logging.getLogger(__name__)

WORD_KEYS = {"word", "start", "end", "speaker", "track"}
SONG_KEYS = {
    "title",
    "artist",
    "lyrics_text",
    "word_timings",
    "pitch_data",
    "duration",
    "reviewed",
}


def word_timing_from_dict(data: Mapping) -> WordTiming:
    """Convert a JSON word entry into a WordTiming, keeping unknown keys."""
    if not isinstance(data, Mapping):
        raise SongDataError(f"Word timing must be an object, got {type(data).__name__}")
    try:
        start = float(data.get("start", 0.0))
        end = float(data.get("end", 0.0))
    except (TypeError, ValueError) as e:
        raise SongDataError(f"Invalid timing for word {data.get('word')!r}: {e}")

    word = data.get("word")
    track = data.get("track")
    return WordTiming(
        word="" if word is None else str(word),
        start=start,
        end=end,
        speaker=data.get("speaker"),
        track=int(track) if isinstance(track, (int, float)) else None,
        extra={k: v for k, v in data.items() if k not in WORD_KEYS},
    )


def word_timing_to_dict(timing: WordTiming, track: Optional[int] = None) -> Dict[str, Any]:
    """Convert a WordTiming back into its JSON shape."""
    data: Dict[str, Any] = dict(timing.extra)
    data.update({"word": timing.word, "start": timing.start, "end": timing.end})
    if timing.speaker is not None:
        data["speaker"] = timing.speaker
    if track is None:
        track = timing.track
    if track is not None:
        data["track"] = track
    return data


def song_from_dict(data: Any, fallback_title: str = DEFAULT_TITLE) -> SongData:
    """Build SongData from a decoded JSON document.

    Loose fields are sanitized rather than rejected: title and artist are
    coerced to strings, and arrays of the wrong type are replaced by empty
    lists.
    """
    if not isinstance(data, dict):
        raise SongDataError("Song document must be a JSON object")

    raw_timings = data.get("word_timings")
    if not isinstance(raw_timings, list):
        logger.error("Invalid song data: word_timings is not an array")
        raw_timings = []

    pitch_data = data.get("pitch_data")
    if not isinstance(pitch_data, list):
        logger.warning("No pitch_data array found, initializing empty")
        pitch_data = []

    lyrics_text = data.get("lyrics_text")
    if lyrics_text is not None and not isinstance(lyrics_text, str):
        logger.warning("lyrics_text is not a string, converting")
        lyrics_text = coerce_to_display_string(lyrics_text, "")

    return SongData(
        title=coerce_to_display_string(data.get("title"), fallback_title),
        artist=coerce_to_display_string(data.get("artist"), DEFAULT_ARTIST),
        lyrics_text=lyrics_text or "",
        word_timings=[word_timing_from_dict(w) for w in raw_timings],
        pitch_data=list(pitch_data),
        duration=parse_duration(data.get("duration")),
        reviewed=bool(data.get("reviewed", False)),
        extra={k: v for k, v in data.items() if k not in SONG_KEYS},
    )


def song_to_dict(
    song: SongData, word_tracks: Optional[Dict[int, int]] = None
) -> Dict[str, Any]:
    """Convert SongData to a JSON-serializable dict.

    When ``word_tracks`` is given every word is written with its track,
    defaulting to track 0.
    """
    timings: List[Dict[str, Any]] = []
    for i, timing in enumerate(song.word_timings):
        track = word_tracks.get(i, 0) if word_tracks is not None else None
        timings.append(word_timing_to_dict(timing, track))

    data: Dict[str, Any] = dict(song.extra)
    data.update(
        {
            "title": song.title,
            "artist": song.artist,
            "lyrics_text": song.lyrics_text,
            "duration": song.duration,
            "reviewed": song.reviewed,
            "word_timings": timings,
            "pitch_data": song.pitch_data,
        }
    )
    return data


def load_song_json(filepath: Union[str, Path]) -> SongData:
    """Load a song timing document from a JSON file."""
    path = Path(filepath)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise SongDataError(f"Cannot read {path}: {e}")
    except json.JSONDecodeError as e:
        raise SongDataError(f"Invalid JSON in {path}: {e}")

    song = song_from_dict(data, fallback_title=path.stem)
    logger.debug(
        "Loaded %s: %d words, %d pitch points",
        path.name,
        len(song.word_timings),
        len(song.pitch_data),
    )
    return song


def save_song_json(
    filepath: Union[str, Path],
    song: SongData,
    word_tracks: Optional[Dict[int, int]] = None,
) -> None:
    """Save a song timing document to a JSON file."""
    path = Path(filepath)
    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(song_to_dict(song, word_tracks), f, ensure_ascii=False, indent=2)
    except OSError as e:
        raise SongDataError(f"Cannot write {path}: {e}")


def flag_report_to_json(report: FlagReport) -> str:
    """Serialize a flag report in the camelCase shape used by editors."""
    return json.dumps(report.to_dict(), ensure_ascii=False, indent=2)
