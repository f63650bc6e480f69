"""Global alignment of lyrics text against transcribed word timings.

A Needleman-Wunsch variant: lyric tokens form the rows, timing entries the
columns, gaps cost a flat penalty and substitutions are scored from the
word similarity kernel.
"""

import logging
import re
from collections.abc import Mapping
from typing import Any, List, Optional, Sequence, Union

import numpy as np

from ..config import AlignmentSettings, get_alignment_settings
from .models import AlignmentEdge, EdgeType, LyricToken, WordTiming
from .similarity import similarity

logger = logging.getLogger(__name__)

TimingLike = Union[WordTiming, Mapping]

# Traceback pointers, in tie-break priority order
DIAGONAL = 0
UP = 1
LEFT = 2


def tokenize_lyrics(text: Optional[str]) -> List[LyricToken]:
    """Split lyrics on whitespace runs, keeping the original spelling."""
    if not text:
        return []
    words = [w for w in re.split(r"\s+", text) if w]
    return [LyricToken(text=word, index=i) for i, word in enumerate(words)]


def timing_word(timing: Any) -> str:
    """Text of a timing entry given as a WordTiming or a raw dict."""
    if isinstance(timing, Mapping):
        word = timing.get("word")
    else:
        word = getattr(timing, "word", None)
    if word is None:
        return ""
    return word if isinstance(word, str) else str(word)


def _substitution_score(sim: float, settings: AlignmentSettings) -> float:
    if sim > settings.score_threshold:
        return settings.match_score * sim
    return settings.mismatch_score


def _fill_matrices(
    tokens: Sequence[LyricToken],
    words: Sequence[str],
    settings: AlignmentSettings,
):
    n, m = len(tokens), len(words)
    gap = settings.gap_score

    scores = np.zeros((n + 1, m + 1), dtype=np.float64)
    pointers = np.full((n + 1, m + 1), DIAGONAL, dtype=np.int8)
    sims = np.zeros((n + 1, m + 1), dtype=np.float64)

    for i in range(1, n + 1):
        scores[i, 0] = scores[i - 1, 0] + gap
        pointers[i, 0] = UP
    for j in range(1, m + 1):
        scores[0, j] = scores[0, j - 1] + gap
        pointers[0, j] = LEFT

    for i in range(1, n + 1):
        lyric = tokens[i - 1].text
        for j in range(1, m + 1):
            sim = similarity(lyric, words[j - 1])
            sims[i, j] = sim

            diagonal = scores[i - 1, j - 1] + _substitution_score(sim, settings)
            up = scores[i - 1, j] + gap
            left = scores[i, j - 1] + gap

            if diagonal >= up and diagonal >= left:
                scores[i, j] = diagonal
                pointers[i, j] = DIAGONAL
            elif up >= left:
                scores[i, j] = up
                pointers[i, j] = UP
            else:
                scores[i, j] = left
                pointers[i, j] = LEFT

    return scores, pointers, sims


def _traceback(
    tokens: Sequence[LyricToken],
    words: Sequence[str],
    pointers: np.ndarray,
    sims: np.ndarray,
    settings: AlignmentSettings,
) -> List[AlignmentEdge]:
    edges: List[AlignmentEdge] = []
    i, j = len(tokens), len(words)

    while i > 0 or j > 0:
        if i == 0:
            step = LEFT
        elif j == 0:
            step = UP
        else:
            step = int(pointers[i, j])

        if step == DIAGONAL:
            sim = float(sims[i, j])
            edge_type = (
                EdgeType.MATCH if sim >= settings.match_threshold else EdgeType.MISMATCH
            )
            edges.append(
                AlignmentEdge(
                    edge_type=edge_type,
                    lyric_index=i - 1,
                    timing_index=j - 1,
                    lyric_word=tokens[i - 1].text,
                    timing_word=words[j - 1],
                    similarity=sim,
                )
            )
            i -= 1
            j -= 1
        elif step == UP:
            edges.append(
                AlignmentEdge(
                    edge_type=EdgeType.MISSING_TIMING,
                    lyric_index=i - 1,
                    lyric_word=tokens[i - 1].text,
                )
            )
            i -= 1
        else:
            edges.append(
                AlignmentEdge(
                    edge_type=EdgeType.EXTRA_TIMING,
                    timing_index=j - 1,
                    timing_word=words[j - 1],
                )
            )
            j -= 1

    edges.reverse()
    return edges


def align_lyrics_to_timings(
    lyrics_text: Optional[str],
    word_timings: Optional[Sequence[TimingLike]],
    settings: Optional[AlignmentSettings] = None,
) -> List[AlignmentEdge]:
    """Align lyrics text to a word timing sequence.

    Args:
        lyrics_text: Canonical lyrics; tokenized on whitespace.
        word_timings: Timing entries (``WordTiming`` or dicts with a
            ``word`` key) in their original order.
        settings: Scoring overrides; defaults come from ``config``.

    Returns:
        Alignment edges in left-to-right order. Every timing index appears
        in exactly one match, mismatch or extra_timing edge. Empty when
        either input is missing.
    """
    if not lyrics_text or not lyrics_text.strip() or not word_timings:
        return []

    settings = settings or get_alignment_settings()
    tokens = tokenize_lyrics(lyrics_text)
    words = [timing_word(t) for t in word_timings]

    logger.debug(
        "Aligning %d lyric tokens to %d timings (%d cells)",
        len(tokens),
        len(words),
        (len(tokens) + 1) * (len(words) + 1),
    )

    _, pointers, sims = _fill_matrices(tokens, words, settings)
    return _traceback(tokens, words, pointers, sims, settings)
