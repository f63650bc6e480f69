"""Validation utilities."""

import logging
from pathlib import Path
from typing import List, Sequence

from ..core.models import WordTiming
from ..exceptions import ValidationError

logger = logging.getLogger(__name__)


def validate_word_timings(timings: Sequence[WordTiming]) -> None:
    """Validate that every word has non-negative, non-reversed timing."""
    for idx, timing in enumerate(timings):
        if timing.start < 0 or timing.end < 0:
            raise ValidationError(
                f"Word {idx + 1} ({timing.word!r}) has negative timing"
            )
        if timing.end < timing.start:
            raise ValidationError(
                f"Word {idx + 1} ({timing.word!r}) ends before it starts "
                f"({timing.start:.2f}s -> {timing.end:.2f}s)"
            )


def find_out_of_order_words(timings: Sequence[WordTiming]) -> List[int]:
    """Indices of words that start before the previous word.

    Overlap checks only compare neighbours by index, so overlaps around
    these words may go unreported.
    """
    out_of_order: List[int] = []
    for idx in range(1, len(timings)):
        prev_start = timings[idx - 1].start
        start = timings[idx].start
        if start < prev_start:
            logger.warning(
                "Word %d starts before previous word (%.2fs < %.2fs)",
                idx + 1,
                start,
                prev_start,
            )
            out_of_order.append(idx)
    return out_of_order


def validate_output_path(path: str) -> Path:
    """Validate and normalize an output JSON path."""
    output_path = Path(path)

    # Check if parent directory exists or can be created
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ValidationError(f"Cannot create output directory: {e}")

    if output_path.suffix.lower() != ".json":
        raise ValidationError("Output file must have .json extension")

    return output_path
