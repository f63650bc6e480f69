"""Core alignment and flagging modules."""

from .alignment import align_lyrics_to_timings, tokenize_lyrics
from .flags import generate_flags
from .models import (
    AlignmentEdge,
    EdgeType,
    Flag,
    FlagReport,
    FlagType,
    LyricToken,
    SongData,
    WordTiming,
)
from .session import EditorSession
from .similarity import edit_distance, normalize_word, similarity

__all__ = [
    "AlignmentEdge",
    "EdgeType",
    "EditorSession",
    "Flag",
    "FlagReport",
    "FlagType",
    "LyricToken",
    "SongData",
    "WordTiming",
    "align_lyrics_to_timings",
    "edit_distance",
    "generate_flags",
    "normalize_word",
    "similarity",
    "tokenize_lyrics",
]
