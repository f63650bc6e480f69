"""Utility modules."""

from .logging import setup_logging, get_logger
from .validation import (
    validate_word_timings,
    find_out_of_order_words,
    validate_output_path,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "validate_word_timings",
    "find_out_of_order_words",
    "validate_output_path",
]
