"""Tests for provider text helpers."""

import re

import pytest

from storymedia.services.providers.text import (
    content_preview,
    estimate_duration,
    split_into_chunks,
    strip_html,
)


def _squash(s):
    return re.sub(r"\s+", "", s)


class TestStripHtml:
    def test_removes_tags_and_trims(self):
        assert strip_html("  <p>Hello <b>world</b></p>\n") == "Hello world"

    def test_none_and_empty(self):
        assert strip_html("") == ""
        assert strip_html(None) == ""


class TestSplitIntoChunks:
    def test_short_text_is_single_chunk(self):
        assert split_into_chunks("One. Two! Three?", 100) == ["One. Two! Three?"]

    def test_breaks_on_sentence_boundaries(self):
        text = "First sentence. Second sentence. Third sentence."
        chunks = split_into_chunks(text, 35)
        assert chunks == ["First sentence. Second sentence.", "Third sentence."]

    def test_concatenation_reproduces_original(self):
        text = strip_html(
            "<p>The moon rose slowly. Waves lapped the shore! Did the owl call? "
            "Nobody knew... and the night went on</p>"
        )
        for max_len in (10, 25, 40, 1000):
            chunks = split_into_chunks(text, max_len)
            assert _squash("".join(chunks)) == _squash(text)
            assert all(len(c) <= max_len for c in chunks)

    def test_trailing_text_without_terminator_is_kept(self):
        chunks = split_into_chunks("Done. and then some more", 8)
        assert _squash("".join(chunks)) == _squash("Done. and then some more")

    def test_no_sentence_boundaries_falls_back_to_raw_text(self):
        text = "no punctuation at all here"
        assert split_into_chunks(text, 100) == [text]

    def test_oversized_sentence_is_hard_split(self):
        text = "a" * 25 + "."
        chunks = split_into_chunks(text, 10)
        assert [len(c) for c in chunks] == [10, 10, 6]
        assert "".join(chunks) == text

    def test_empty_text(self):
        assert split_into_chunks("", 10) == []

    def test_rejects_non_positive_length(self):
        with pytest.raises(ValueError):
            split_into_chunks("abc", 0)


def test_estimate_duration_at_150_wpm():
    assert estimate_duration(" ".join(["word"] * 150)) == 60
    assert estimate_duration("one two three") == 2
    assert estimate_duration("") == 0


def test_content_preview_truncates_before_stripping():
    content = "<p>" + "x" * 600 + "</p>"
    preview = content_preview(content, 500)
    assert preview == "x" * 497
