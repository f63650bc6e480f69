"""Tests for lyrics-to-timing alignment."""

from collections import Counter

import pytest

from karaoke_qc.config import AlignmentSettings
from karaoke_qc.core.alignment import align_lyrics_to_timings, tokenize_lyrics
from karaoke_qc.core.models import EdgeType, WordTiming


def _types(edges):
    return [e.edge_type for e in edges]


class TestTokenizeLyrics:
    def test_splits_on_whitespace_runs(self):
        tokens = tokenize_lyrics("  Hello,\n  world \t again ")
        assert [t.text for t in tokens] == ["Hello,", "world", "again"]
        assert [t.index for t in tokens] == [0, 1, 2]

    def test_empty_text(self):
        assert tokenize_lyrics("") == []
        assert tokenize_lyrics(None) == []


class TestAlignLyricsToTimings:
    def test_exact_match(self, clean_timings):
        edges = align_lyrics_to_timings("hello world", clean_timings)
        assert _types(edges) == [EdgeType.MATCH, EdgeType.MATCH]
        assert [e.timing_index for e in edges] == [0, 1]
        assert [e.lyric_index for e in edges] == [0, 1]

    def test_one_edit_is_still_a_match(self, make_timings):
        timings = make_timings(("helo", 0.0, 0.5), ("world", 0.5, 1.0))
        edges = align_lyrics_to_timings("hello world", timings)
        assert _types(edges) == [EdgeType.MATCH, EdgeType.MATCH]
        assert edges[0].similarity == pytest.approx(0.8)

    def test_low_similarity_pair_is_mismatch(self, make_timings):
        timings = make_timings(("helo", 0.0, 0.5), ("world", 0.5, 1.0))
        edges = align_lyrics_to_timings("wello world", timings)
        assert _types(edges) == [EdgeType.MISMATCH, EdgeType.MATCH]
        assert edges[0].lyric_word == "wello"
        assert edges[0].timing_word == "helo"
        assert edges[0].similarity == pytest.approx(0.6)

    def test_scored_diagonal_below_match_threshold(self, make_timings):
        edges = align_lyrics_to_timings("sing", make_timings(("song", 0.0, 0.5)))
        assert _types(edges) == [EdgeType.MISMATCH]
        assert edges[0].similarity == pytest.approx(0.75)

    def test_missing_timing(self, make_timings):
        timings = make_timings(("one", 0.0, 0.4), ("three", 1.0, 1.4))
        edges = align_lyrics_to_timings("one two three", timings)
        assert _types(edges) == [
            EdgeType.MATCH,
            EdgeType.MISSING_TIMING,
            EdgeType.MATCH,
        ]
        missing = edges[1]
        assert missing.lyric_word == "two"
        assert missing.timing_index is None

    def test_extra_timing(self, make_timings):
        timings = make_timings(("hello", 0, 0.5), ("um", 0.5, 0.6), ("world", 0.6, 1))
        edges = align_lyrics_to_timings("hello world", timings)
        assert _types(edges) == [
            EdgeType.MATCH,
            EdgeType.EXTRA_TIMING,
            EdgeType.MATCH,
        ]
        assert edges[1].timing_index == 1
        assert edges[1].lyric_index is None

    def test_diagonal_wins_ties(self, make_timings):
        # Last cell ties diagonal (-3) with up (-3); diagonal is taken
        edges = align_lyrics_to_timings("x y", make_timings(("z", 0.0, 0.5)))
        assert _types(edges) == [EdgeType.MISSING_TIMING, EdgeType.MISMATCH]
        assert edges[0].lyric_word == "x"
        assert edges[1].lyric_word == "y"

    def test_all_extra_when_lyrics_are_shorter(self, make_timings):
        timings = make_timings(("la", 0, 1), ("la", 1, 2), ("hey", 2, 3))
        edges = align_lyrics_to_timings("hey", timings)
        assert _types(edges) == [
            EdgeType.EXTRA_TIMING,
            EdgeType.EXTRA_TIMING,
            EdgeType.MATCH,
        ]

    def test_preserves_original_spelling(self, make_timings):
        edges = align_lyrics_to_timings("Hello,", make_timings(("hello", 0, 1)))
        assert edges[0].lyric_word == "Hello,"
        assert edges[0].edge_type == EdgeType.MATCH

    def test_accepts_dict_timings(self):
        timings = [{"word": "hello", "start": 0, "end": 1, "track": 1}]
        edges = align_lyrics_to_timings("hello", timings)
        assert _types(edges) == [EdgeType.MATCH]

    @pytest.mark.parametrize("lyrics", ["", None, "   \n"])
    def test_missing_lyrics_gives_empty_alignment(self, lyrics, clean_timings):
        assert align_lyrics_to_timings(lyrics, clean_timings) == []

    def test_empty_timings_gives_empty_alignment(self):
        assert align_lyrics_to_timings("hello world", []) == []

    def test_custom_match_threshold(self, make_timings):
        settings = AlignmentSettings(match_threshold=0.7)
        edges = align_lyrics_to_timings("sing", make_timings(("song", 0, 1)), settings)
        assert _types(edges) == [EdgeType.MATCH]

    def test_does_not_mutate_input(self, clean_timings):
        before = list(clean_timings)
        align_lyrics_to_timings("hello there world", clean_timings)
        assert clean_timings == before

    @pytest.mark.parametrize(
        "lyrics,words",
        [
            ("the quick brown fox", ["the", "quik", "fox", "jumps"]),
            ("a b c d e", ["x"]),
            ("solo", ["la", "la", "la", "solo", "la"]),
            ("we will rock you", ["we", "we", "will", "rok", "you", "yeah"]),
            ("never gonna give you up", ["gonna", "give", "up", "never"]),
        ],
    )
    def test_every_index_covered_exactly_once(self, lyrics, words):
        timings = [WordTiming(word=w, start=i, end=i + 0.5) for i, w in enumerate(words)]
        edges = align_lyrics_to_timings(lyrics, timings)

        timing_refs = Counter(e.timing_index for e in edges if e.timing_index is not None)
        assert sorted(timing_refs) == list(range(len(words)))
        assert set(timing_refs.values()) == {1}

        lyric_refs = [e.lyric_index for e in edges if e.lyric_index is not None]
        assert lyric_refs == list(range(len(lyrics.split())))

        for edge in edges:
            if edge.edge_type in (EdgeType.MATCH, EdgeType.MISMATCH):
                assert edge.timing_index is not None and edge.lyric_index is not None
            elif edge.edge_type == EdgeType.MISSING_TIMING:
                assert edge.timing_index is None
            else:
                assert edge.lyric_index is None

    def test_deterministic(self, make_timings):
        timings = make_timings(("we", 0, 1), ("wil", 1, 2), ("rock", 2, 3))
        first = align_lyrics_to_timings("we will rock you", timings)
        second = align_lyrics_to_timings("we will rock you", timings)
        assert first == second

    def test_edge_to_dict(self, make_timings):
        edges = align_lyrics_to_timings("sing", make_timings(("song", 0, 1)))
        assert edges[0].to_dict() == {
            "type": "mismatch",
            "timingIndex": 0,
            "lyricIndex": 0,
            "lyricWord": "sing",
            "timingWord": "song",
            "similarity": pytest.approx(0.75),
        }
