"""Editing session for one song: edits, undo/redo history and flag navigation."""

import logging
from collections import deque
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Deque, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from ..config import (
    FLAG_NAVIGATION_MARGIN,
    MAX_HISTORY_SIZE,
    AlignmentSettings,
    FlagSettings,
)
from ..exceptions import ValidationError
from . import editing
from .flags import generate_flags
from .models import FlagReport, SongData, WordTiming
from .serialization import save_song_json, song_to_dict

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Snapshot:
    """Immutable copy of the editable state."""

    word_timings: Tuple[WordTiming, ...]
    word_tracks: Tuple[Tuple[int, int], ...]


class EditorSession:
    """Holds a song being edited and keeps its flag report current.

    Every committed edit records a snapshot in a bounded history and
    regenerates the whole flag report. Not thread-safe.
    """

    def __init__(
        self,
        song: SongData,
        max_history: int = MAX_HISTORY_SIZE,
        settings: Optional[FlagSettings] = None,
        alignment_settings: Optional[AlignmentSettings] = None,
    ):
        if max_history < 1:
            raise ValidationError("max_history must be at least 1")
        self.song = replace(song, word_timings=list(song.word_timings))
        self.settings = settings
        self.alignment_settings = alignment_settings
        self.word_tracks: Dict[int, int] = {
            i: t.track or 0 for i, t in enumerate(self.song.word_timings)
        }
        self.selection: List[int] = []
        self.dirty = False
        self._history: Deque[Snapshot] = deque(maxlen=max_history)
        self._history_index = -1
        self.report = FlagReport()
        self.regenerate_flags()
        self.clear_history()

    # ------------------------------------------------------------------
    # Flags
    # ------------------------------------------------------------------

    @property
    def word_timings(self) -> List[WordTiming]:
        return self.song.word_timings

    def regenerate_flags(self) -> FlagReport:
        """Recompute the flag report from scratch."""
        self.report = generate_flags(
            self.song, self.settings, alignment_settings=self.alignment_settings
        )
        return self.report

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def _snapshot(self) -> Snapshot:
        return Snapshot(
            word_timings=tuple(self.song.word_timings),
            word_tracks=tuple(sorted(self.word_tracks.items())),
        )

    def _restore(self, snapshot: Snapshot) -> None:
        self.song.word_timings = list(snapshot.word_timings)
        self.word_tracks = dict(snapshot.word_tracks)
        self.dirty = True
        self.regenerate_flags()

    def _push_history(self) -> None:
        # Drop any redo states past the cursor
        while len(self._history) > self._history_index + 1:
            self._history.pop()
        self._history.append(self._snapshot())
        self._history_index = len(self._history) - 1

    def clear_history(self) -> None:
        """Reset history so the current state is the only entry."""
        self._history.clear()
        self._history.append(self._snapshot())
        self._history_index = 0

    @property
    def can_undo(self) -> bool:
        return self._history_index > 0

    @property
    def can_redo(self) -> bool:
        return self._history_index < len(self._history) - 1

    def undo(self) -> bool:
        if not self.can_undo:
            return False
        self._history_index -= 1
        self._restore(self._history[self._history_index])
        return True

    def redo(self) -> bool:
        if not self.can_redo:
            return False
        self._history_index += 1
        self._restore(self._history[self._history_index])
        return True

    def _commit(
        self,
        timings: List[WordTiming],
        word_tracks: Optional[Dict[int, int]] = None,
        selection: Optional[List[int]] = None,
    ) -> None:
        self.song.word_timings = timings
        if word_tracks is not None:
            self.word_tracks = word_tracks
        if selection is not None:
            self.selection = selection
        self.dirty = True
        self._push_history()
        self.regenerate_flags()

    # ------------------------------------------------------------------
    # Word edits
    # ------------------------------------------------------------------

    def _tracks_after(
        self, index: int, changes: Dict[str, Any]
    ) -> Optional[Dict[int, int]]:
        # word_tracks is what gets saved, so a track edit has to land there too
        if "track" not in changes:
            return None
        tracks = dict(self.word_tracks)
        tracks[index] = changes["track"] or 0
        return tracks

    def update_word(self, index: int, **changes: Any) -> None:
        timings = editing.update_word(self.song.word_timings, index, **changes)
        self._commit(timings, self._tracks_after(index, changes))

    def update_word_live(self, index: int, **changes: Any) -> None:
        """Apply an edit while dragging; history and flags wait for finalize_drag."""
        tracks = self._tracks_after(index, changes)
        self.song.word_timings = editing.update_word(
            self.song.word_timings, index, **changes
        )
        if tracks is not None:
            self.word_tracks = tracks
        self.dirty = True

    def finalize_drag(self) -> None:
        self._push_history()
        self.regenerate_flags()

    def delete_words(self, indices: Iterable[int]) -> None:
        index_set = set(indices)
        count = len(self.song.word_timings)
        sources = [i for i in range(count) if i not in index_set]
        self._commit(
            editing.delete_words(self.song.word_timings, index_set),
            editing.remap_tracks(self.word_tracks, sources),
            selection=[],
        )

    def merge_words(self, indices: Iterable[int]) -> None:
        ordered = sorted(set(indices))
        timings, first = editing.merge_words(self.song.word_timings, ordered)
        absorbed = set(ordered[1:])
        sources = [i for i in range(len(self.song.word_timings)) if i not in absorbed]
        self._commit(
            timings, editing.remap_tracks(self.word_tracks, sources), selection=[first]
        )

    def split_word(self, index: int, position: int) -> None:
        timings = editing.split_word(self.song.word_timings, index, position)
        sources = list(range(index + 1)) + list(
            range(index, len(self.song.word_timings))
        )
        self._commit(
            timings,
            editing.remap_tracks(self.word_tracks, sources),
            selection=[index, index + 1],
        )

    def auto_fix_overlaps(self) -> int:
        """Shorten overlapping words; returns how many were fixed."""
        timings, fix_count = editing.auto_fix_overlaps(
            self.song.word_timings, self.report.word_flags
        )
        if fix_count:
            self._commit(timings)
            logger.info("Fixed %d overlapping words", fix_count)
        return fix_count

    def move_words_to_track(self, indices: Iterable[int], track: int) -> None:
        tracks = dict(self.word_tracks)
        for i in indices:
            tracks[i] = track
        self.word_tracks = tracks
        self.dirty = True
        self._push_history()

    # ------------------------------------------------------------------
    # Pitch edits
    # ------------------------------------------------------------------

    def set_pitch_for_range(
        self, start: float, end: float, midi_note: int, note_name: str
    ) -> None:
        self.song.pitch_data = editing.set_pitch_for_range(
            self.song.pitch_data, start, end, midi_note, note_name
        )
        self.dirty = True

    def clear_pitch_for_range(self, start: float, end: float) -> None:
        self.song.pitch_data = editing.clear_pitch_for_range(
            self.song.pitch_data, start, end
        )
        self.dirty = True

    # ------------------------------------------------------------------
    # Selection and navigation
    # ------------------------------------------------------------------

    def select_word(self, index: int, multi: bool = False) -> None:
        if not multi:
            self.selection = [index]
        elif index in self.selection:
            self.selection = [i for i in self.selection if i != index]
        else:
            self.selection = self.selection + [index]

    def select_range(self, start_index: int, end_index: int) -> None:
        low, high = sorted((start_index, end_index))
        self.selection = list(range(low, high + 1))

    def clear_selection(self) -> None:
        self.selection = []

    def selected_time_range(self) -> Optional[Tuple[float, float]]:
        words = [
            self.song.word_timings[i]
            for i in self.selection
            if 0 <= i < len(self.song.word_timings)
        ]
        if not words:
            return None
        return min(w.start for w in words), max(w.end for w in words)

    def _jump_to_flag(self, candidates: Sequence[int], accept) -> Optional[float]:
        flagged = [i for i in candidates if self.report.word_flags[i]]
        for i in flagged:
            if accept(self.song.word_timings[i].start):
                self.selection = [i]
                return self.song.word_timings[i].start
        # Wrap around
        if flagged:
            self.selection = [flagged[0]]
            return self.song.word_timings[flagged[0]].start
        return None

    def next_flag(self, current_time: float) -> Optional[float]:
        """Select the next flagged word after ``current_time``; returns its start."""
        return self._jump_to_flag(
            range(len(self.report.word_flags)),
            lambda start: start > current_time + FLAG_NAVIGATION_MARGIN,
        )

    def prev_flag(self, current_time: float) -> Optional[float]:
        """Select the previous flagged word before ``current_time``; returns its start."""
        return self._jump_to_flag(
            range(len(self.report.word_flags) - 1, -1, -1),
            lambda start: start < current_time - FLAG_NAVIGATION_MARGIN,
        )

    # ------------------------------------------------------------------
    # Review state and saving
    # ------------------------------------------------------------------

    def toggle_reviewed(self) -> bool:
        self.song.reviewed = not self.song.reviewed
        self.dirty = True
        return self.song.reviewed

    def to_dict(self) -> Dict[str, Any]:
        return song_to_dict(self.song, self.word_tracks)

    def save(self, filepath: Union[str, Path]) -> None:
        save_song_json(filepath, self.song, self.word_tracks)
        self.dirty = False
        logger.info("Saved %s", filepath)
