"""Word normalization and edit-distance similarity for lyric matching."""

import re
from functools import lru_cache
from typing import List

_NON_WORD_RE = re.compile(r"[^\w']")


def _require_str(value, name: str) -> None:
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a string, got {type(value).__name__}")


def normalize_word(word: str) -> str:
    """Lowercase a word and drop everything except word characters and apostrophes.

    >>> normalize_word("Don't!")
    "don't"
    """
    _require_str(word, "word")
    return _NON_WORD_RE.sub("", word.lower())


def edit_distance(a: str, b: str) -> int:
    """Levenshtein distance between ``a`` and ``b`` with unit costs.

    Fills the whole ``(len(b) + 1) x (len(a) + 1)`` table; there is no
    early exit, and transpositions count as two edits.
    """
    _require_str(a, "a")
    _require_str(b, "b")

    matrix: List[List[int]] = [[i] + [0] * len(a) for i in range(len(b) + 1)]
    for j in range(len(a) + 1):
        matrix[0][j] = j

    for i in range(1, len(b) + 1):
        for j in range(1, len(a) + 1):
            if b[i - 1] == a[j - 1]:
                matrix[i][j] = matrix[i - 1][j - 1]
            else:
                matrix[i][j] = min(
                    matrix[i - 1][j - 1] + 1,  # substitution
                    matrix[i][j - 1] + 1,  # insertion
                    matrix[i - 1][j] + 1,  # deletion
                )

    return matrix[len(b)][len(a)]


@lru_cache(maxsize=65536)
def _similarity(a: str, b: str) -> float:
    norm_a = normalize_word(a)
    norm_b = normalize_word(b)

    if norm_a == norm_b:
        return 1.0
    if not norm_a or not norm_b:
        return 0.0

    max_len = max(len(norm_a), len(norm_b))
    return 1 - edit_distance(norm_a, norm_b) / max_len


def similarity(a: str, b: str) -> float:
    """Similarity ratio in [0, 1] between two words after normalization.

    Identical normalized words score 1.0; a word that normalizes to the
    empty string scores 0.0 against anything else. Otherwise the score is
    ``1 - distance / longest length``, which is symmetric in ``a`` and ``b``.
    """
    _require_str(a, "a")
    _require_str(b, "b")
    return _similarity(a, b)
