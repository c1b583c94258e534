"""
Unit tests for card batch splitting and joining
"""
from refiner.batch import (
    check_card_count,
    join_cards,
    split_cards,
    split_segments,
    strip_code_fences,
)

D = "===CARD==="


class TestSplitCards:
    def test_split_trims_segments(self):
        """Each card is trimmed"""
        raw = f"  first card \n{D}\n second card  "
        assert split_cards(raw, D) == ["first card", "second card"]

    def test_split_drops_empty_segments(self):
        """Segments empty after trimming are dropped"""
        raw = f"{D}\nfirst\n{D}\n   \n{D}\nsecond\n{D}"
        assert split_cards(raw, D) == ["first", "second"]

    def test_split_without_delimiter(self):
        """Text without the delimiter is one card"""
        assert split_cards("only card", D) == ["only card"]

    def test_split_empty_text(self):
        assert split_cards("", D) == []
        assert split_cards(None, D) == []

    def test_default_delimiter_when_blank(self):
        """A blank delimiter falls back to the default"""
        assert split_cards(f"a{D}b", "") == ["a", "b"]


class TestSplitSegments:
    def test_positional_split_keeps_everything(self):
        """Raw segments keep whitespace and empty cards so joining restores the text"""
        raw = f"a \n{D}{D}\n b"
        parts = split_segments(raw, D)
        assert parts == ["a \n", "", "\n b"]
        assert D.join(parts) == raw


class TestJoinCards:
    def test_join_uses_newline_framed_delimiter(self):
        assert join_cards(["one", "two", "three"], D) == f"one\n{D}\ntwo\n{D}\nthree"

    def test_split_join_round_trip(self):
        """Clean cards survive split -> join -> split"""
        cards = ["{{c1::malaria}} card", "second card"]
        assert split_cards(join_cards(cards, D), D) == cards


class TestCodeFences:
    def test_strip_fence_with_language(self):
        assert strip_code_fences("```text\ncard one\n```") == "card one"

    def test_strip_bare_fences_around_batch(self):
        raw = f"```\ncard one\n{D}\ncard two\n```"
        assert strip_code_fences(raw) == f"card one\n{D}\ncard two"

    def test_no_fences(self):
        assert strip_code_fences("  plain  ") == "plain"


class TestCardCount:
    def test_matching_count_has_no_warning(self):
        assert check_card_count(f"a\n{D}\nb", 2, D) is None

    def test_collapsed_batch_is_flagged(self):
        """Two cards expected, the model returned one blob"""
        warning = check_card_count("a and b merged together", 2, D)
        assert warning == "Model returned 1 chunk(s) but expected 2."
