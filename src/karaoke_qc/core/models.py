"""Data models for word timings, alignment traces and quality flags."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class EdgeType(str, Enum):
    """Kind of step in a lyrics-to-timing alignment."""

    MATCH = "match"
    MISMATCH = "mismatch"
    MISSING_TIMING = "missing_timing"
    EXTRA_TIMING = "extra_timing"


class FlagType(str, Enum):
    """Quality-control flag attached to a timing entry."""

    TEXT_MISMATCH = "text_mismatch"
    TIMING_LONG = "timing_long"
    TIMING_SHORT = "timing_short"
    OVERLAP = "overlap"
    EXTRA_WORD = "extra_word"


# Lyric tokens with no timing have no index to carry a flag, so they are
# only counted in the report totals.
MISSING_WORD = "missing_word"

FLAG_COUNT_KEYS = [t.value for t in FlagType] + [MISSING_WORD]


@dataclass(frozen=True)
class WordTiming:
    """A single transcribed word with timing information.

    ``end > start`` is expected but not enforced; checks downstream treat
    degenerate entries as too short rather than failing on them.
    """

    word: str
    start: float
    end: float
    speaker: Optional[str] = None
    track: Optional[int] = None
    extra: Dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def duration(self) -> float:
        return self.end - self.start


@dataclass(frozen=True)
class LyricToken:
    """A whitespace-delimited token of the lyrics transcript."""

    text: str
    index: int


@dataclass(frozen=True)
class AlignmentEdge:
    """One step of the optimal alignment path.

    Edges touching a timing entry carry its position in the original
    sequence, never a copy of the entry.
    """

    edge_type: EdgeType
    lyric_index: Optional[int] = None
    timing_index: Optional[int] = None
    lyric_word: Optional[str] = None
    timing_word: Optional[str] = None
    similarity: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.edge_type.value}
        if self.timing_index is not None:
            data["timingIndex"] = self.timing_index
        if self.lyric_index is not None:
            data["lyricIndex"] = self.lyric_index
        data["lyricWord"] = self.lyric_word
        data["timingWord"] = self.timing_word
        if self.similarity is not None:
            data["similarity"] = self.similarity
        return data


@dataclass(frozen=True)
class Flag:
    """A detected timing or text anomaly on one word."""

    flag_type: FlagType
    message: str
    suggested_word: Optional[str] = None
    similarity: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.flag_type.value, "message": self.message}
        if self.suggested_word is not None:
            data["suggestedWord"] = self.suggested_word
        if self.similarity is not None:
            data["similarity"] = self.similarity
        return data


def empty_flag_counts() -> Dict[str, int]:
    return {key: 0 for key in FLAG_COUNT_KEYS}


@dataclass
class FlagReport:
    """Per-word flags plus aggregate counts for one song."""

    word_flags: List[List[Flag]] = field(default_factory=list)
    alignment: List[AlignmentEdge] = field(default_factory=list)
    flag_counts: Dict[str, int] = field(default_factory=empty_flag_counts)

    @property
    def total_flags(self) -> int:
        return sum(self.flag_counts.values())

    @property
    def flagged_indices(self) -> List[int]:
        return [i for i, flags in enumerate(self.word_flags) if flags]

    def is_clean(self, index: int) -> bool:
        return not self.word_flags[index]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "wordFlags": [[f.to_dict() for f in flags] for flags in self.word_flags],
            "alignment": [edge.to_dict() for edge in self.alignment],
            "flagCounts": dict(self.flag_counts),
            "totalFlags": self.total_flags,
        }


@dataclass
class SongData:
    """A song's timing document as loaded from disk."""

    title: str
    artist: str
    lyrics_text: str = ""
    word_timings: List[WordTiming] = field(default_factory=list)
    pitch_data: List[Dict[str, Any]] = field(default_factory=list)
    duration: float = 0.0
    reviewed: bool = False
    extra: Dict[str, Any] = field(default_factory=dict)
