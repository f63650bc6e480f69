"""karaoke_qc - alignment and quality flags for karaoke word timings."""

__version__ = "0.1.0"

from .core import (  # noqa: E402
    align_lyrics_to_timings,
    edit_distance,
    generate_flags,
    normalize_word,
    similarity,
    tokenize_lyrics,
)

__all__ = [
    "__version__",
    "align_lyrics_to_timings",
    "edit_distance",
    "generate_flags",
    "normalize_word",
    "similarity",
    "tokenize_lyrics",
]
