"""Structural edits on word timing sequences.

Every function returns a new list and leaves its input untouched. Word
indices shift after deletes, merges and splits, so flags computed before
an edit must be thrown away and regenerated.
"""

import logging
from dataclasses import replace
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from ..config import MIN_WORD_DURATION, OVERLAP_FIX_GAP
from ..exceptions import ValidationError
from .models import Flag, FlagType, WordTiming

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = {"word", "start", "end", "speaker", "track"}


def _check_index(timings: Sequence[WordTiming], index: int) -> None:
    if not 0 <= index < len(timings):
        raise ValidationError(f"Word index {index} out of range (0-{len(timings) - 1})")


def update_word(
    timings: Sequence[WordTiming], index: int, **changes: Any
) -> List[WordTiming]:
    """Replace fields of one word."""
    _check_index(timings, index)
    unknown = set(changes) - EDITABLE_FIELDS
    if unknown:
        raise ValidationError(f"Cannot edit word field(s): {', '.join(sorted(unknown))}")

    updated = list(timings)
    updated[index] = replace(updated[index], **changes)
    return updated


def delete_words(timings: Sequence[WordTiming], indices: Iterable[int]) -> List[WordTiming]:
    """Remove the words at the given indices."""
    index_set = set(indices)
    return [t for i, t in enumerate(timings) if i not in index_set]


def merge_words(
    timings: Sequence[WordTiming], indices: Iterable[int]
) -> Tuple[List[WordTiming], int]:
    """Merge consecutive words into one spanning all of them.

    The merged word keeps the speaker and extra fields of the first part.

    Returns:
        The new sequence and the index of the merged word.
    """
    ordered = sorted(set(indices))
    if len(ordered) < 2:
        raise ValidationError("Select at least two words to merge")
    for prev, cur in zip(ordered, ordered[1:]):
        if cur != prev + 1:
            raise ValidationError("Cannot merge non-consecutive words")
    _check_index(timings, ordered[0])
    _check_index(timings, ordered[-1])

    parts = [timings[i] for i in ordered]
    merged = replace(
        parts[0],
        extra=dict(parts[0].extra),
        word="".join(p.word for p in parts),
        start=min(p.start for p in parts),
        end=max(p.end for p in parts),
    )

    first, last = ordered[0], ordered[-1]
    return list(timings[:first]) + [merged] + list(timings[last + 1:]), first


def split_word(
    timings: Sequence[WordTiming], index: int, position: int
) -> List[WordTiming]:
    """Split a word at a character position.

    The split time is placed proportionally to ``position`` within the
    word's text. Both halves keep the original speaker and extra fields.
    """
    _check_index(timings, index)
    timing = timings[index]
    if not 0 < position < len(timing.word):
        raise ValidationError(
            f"Split position must be inside the word (1-{len(timing.word) - 1})"
        )

    ratio = position / len(timing.word)
    split_time = timing.start + (timing.end - timing.start) * ratio

    first = replace(timing, word=timing.word[:position], end=split_time)
    second = replace(
        timing, word=timing.word[position:], start=split_time, extra=dict(timing.extra)
    )
    return list(timings[:index]) + [first, second] + list(timings[index + 1:])


def auto_fix_overlaps(
    timings: Sequence[WordTiming],
    word_flags: Sequence[Sequence[Flag]],
    gap: float = OVERLAP_FIX_GAP,
    min_duration: float = MIN_WORD_DURATION,
) -> Tuple[List[WordTiming], int]:
    """Pull back the end of every overlap-flagged word.

    Each flagged word ends ``gap`` seconds before the next word starts,
    unless that would leave it shorter than ``min_duration``.

    Returns:
        The new sequence and the number of words adjusted.
    """
    fixed = list(timings)
    fix_count = 0

    for i, flags in enumerate(word_flags):
        if i + 1 >= len(fixed):
            break
        if not any(f.flag_type == FlagType.OVERLAP for f in flags):
            continue
        new_end = fixed[i + 1].start - gap
        if new_end - fixed[i].start >= min_duration:
            fixed[i] = replace(fixed[i], end=new_end)
            fix_count += 1
        else:
            logger.debug("Skipping overlap fix for word %d: would be too short", i)

    return fixed, fix_count


def remap_tracks(
    word_tracks: Dict[int, int], source_indices: Sequence[int]
) -> Dict[int, int]:
    """Rebuild an index->track map after a structural edit.

    ``source_indices[new]`` is the pre-edit index each new word came from.
    """
    return {new: word_tracks.get(old, 0) for new, old in enumerate(source_indices)}


def _update_pitch_range(
    pitch_data: Sequence[Dict[str, Any]],
    start: float,
    end: float,
    midi_note: Optional[int],
    note_name: Optional[str],
) -> List[Dict[str, Any]]:
    updated = []
    for point in pitch_data:
        time = point.get("time")
        if time is not None and start <= time <= end:
            point = {**point, "midi_note": midi_note, "note_name": note_name}
        updated.append(point)
    return updated


def set_pitch_for_range(
    pitch_data: Sequence[Dict[str, Any]],
    start: float,
    end: float,
    midi_note: int,
    note_name: str,
) -> List[Dict[str, Any]]:
    """Assign a note to every pitch point in ``[start, end]``."""
    return _update_pitch_range(pitch_data, start, end, midi_note, note_name)


def clear_pitch_for_range(
    pitch_data: Sequence[Dict[str, Any]], start: float, end: float
) -> List[Dict[str, Any]]:
    """Remove the note from every pitch point in ``[start, end]``."""
    return _update_pitch_range(pitch_data, start, end, None, None)
