"""Tests for validation utilities."""

import pytest

from karaoke_qc.core.models import WordTiming
from karaoke_qc.exceptions import ValidationError
from karaoke_qc.utils.validation import (
    find_out_of_order_words,
    validate_output_path,
    validate_word_timings,
)


class TestValidateWordTimings:
    def test_accepts_clean_timings(self, clean_timings):
        validate_word_timings(clean_timings)

    def test_rejects_reversed_word(self):
        with pytest.raises(ValidationError, match="ends before it starts"):
            validate_word_timings([WordTiming("a", 2.0, 1.0)])

    def test_rejects_negative_time(self):
        with pytest.raises(ValidationError, match="negative"):
            validate_word_timings([WordTiming("a", -1.0, 1.0)])


def test_find_out_of_order_words(make_timings, caplog):
    timings = make_timings(("a", 0, 1), ("b", 3, 4), ("c", 2, 2.5), ("d", 5, 6))
    assert find_out_of_order_words(timings) == [2]
    assert "starts before previous word" in caplog.text


class TestValidateOutputPath:
    def test_creates_parent(self, tmp_path):
        path = validate_output_path(str(tmp_path / "sub" / "out.json"))
        assert path.parent.exists()

    def test_rejects_other_extensions(self, tmp_path):
        with pytest.raises(ValidationError):
            validate_output_path(str(tmp_path / "out.txt"))
