"""Quality-control flags for word timings.

Flags are keyed by timing index and always regenerated from a full pass
over the song; after any structural edit the previous report is stale.
"""

import logging
from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from ..config import AlignmentSettings, FlagSettings, get_flag_settings
from .alignment import align_lyrics_to_timings
from .models import (
    MISSING_WORD,
    AlignmentEdge,
    EdgeType,
    Flag,
    FlagReport,
    FlagType,
    SongData,
    WordTiming,
    empty_flag_counts,
)
from .serialization import word_timing_from_dict

logger = logging.getLogger(__name__)


def _coerce_timings(word_timings: Optional[Sequence[Any]]) -> List[WordTiming]:
    if not word_timings:
        return []
    return [
        t if isinstance(t, WordTiming) else word_timing_from_dict(t)
        for t in word_timings
    ]


def _song_fields(song_data: Union[SongData, Mapping]) -> Tuple[str, List[WordTiming]]:
    if isinstance(song_data, SongData):
        return song_data.lyrics_text, list(song_data.word_timings)
    lyrics_text = song_data.get("lyrics_text") or ""
    return lyrics_text, _coerce_timings(song_data.get("word_timings"))


def check_word_timing(
    timings: Sequence[WordTiming], index: int, settings: FlagSettings
) -> List[Flag]:
    """Duration and overlap checks for one word; no lyrics needed."""
    flags: List[Flag] = []
    timing = timings[index]
    duration = timing.duration

    if duration > settings.long_duration:
        flags.append(
            Flag(
                FlagType.TIMING_LONG,
                f"Duration {duration:.2f}s > {settings.long_duration:g}s",
            )
        )
    # Zero and negative durations land here too
    if duration < settings.short_duration:
        flags.append(
            Flag(
                FlagType.TIMING_SHORT,
                f"Duration {duration * 1000:.0f}ms < {settings.short_duration * 1000:.0f}ms",
            )
        )

    # Index order is taken as chronological; only the next neighbour is checked
    if index < len(timings) - 1:
        following = timings[index + 1]
        if timing.end > following.start + settings.overlap_tolerance:
            flags.append(Flag(FlagType.OVERLAP, f'Overlaps with "{following.word}"'))

    return flags


def _alignment_flag(edge: AlignmentEdge) -> Optional[Flag]:
    if edge.edge_type == EdgeType.MISMATCH:
        return Flag(
            FlagType.TEXT_MISMATCH,
            f'Expected "{edge.lyric_word}", got "{edge.timing_word}"',
            suggested_word=edge.lyric_word,
            similarity=edge.similarity,
        )
    if edge.edge_type == EdgeType.EXTRA_TIMING:
        return Flag(FlagType.EXTRA_WORD, "Extra word not in lyrics")
    return None


def count_flags(
    word_flags: Sequence[Sequence[Flag]], alignment: Sequence[AlignmentEdge]
) -> Dict[str, int]:
    """Per-type flag totals, including lyric words with no timing."""
    counts = empty_flag_counts()
    for flags in word_flags:
        for flag in flags:
            counts[flag.flag_type.value] += 1
    counts[MISSING_WORD] = sum(
        1 for edge in alignment if edge.edge_type == EdgeType.MISSING_TIMING
    )
    return counts


def generate_flags(
    song_data: Union[SongData, Mapping],
    settings: Optional[FlagSettings] = None,
    alignment_settings: Optional[AlignmentSettings] = None,
) -> FlagReport:
    """Build the flag report for a song.

    Args:
        song_data: A ``SongData`` or a mapping with ``lyrics_text`` and
            ``word_timings``; other keys (``pitch_data``, ...) are ignored.
        settings: Timing thresholds; defaults come from ``config``.
        alignment_settings: Passed through to the aligner.

    Returns:
        A ``FlagReport`` whose ``word_flags`` has one list per timing.
        Timing checks run even without lyrics; text checks need both.
    """
    settings = settings or get_flag_settings()
    lyrics_text, timings = _song_fields(song_data)

    word_flags: List[List[Flag]] = [
        check_word_timing(timings, i, settings) for i in range(len(timings))
    ]

    alignment: List[AlignmentEdge] = []
    if lyrics_text and timings:
        alignment = align_lyrics_to_timings(lyrics_text, timings, alignment_settings)
        for edge in alignment:
            if edge.timing_index is None:
                continue
            flag = _alignment_flag(edge)
            if flag is not None:
                word_flags[edge.timing_index].append(flag)

    report = FlagReport(
        word_flags=word_flags,
        alignment=alignment,
        flag_counts=count_flags(word_flags, alignment),
    )
    logger.debug("Generated %d flags for %d words", report.total_flags, len(timings))
    return report
