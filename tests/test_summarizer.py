"""Tests for preview summarization"""

import pytest

from blog_generator.summarizer import PreviewConfig, clean_markup, reading_minutes, summarize
from tests.fakes import SAMPLE_CONTENT


def test_short_content_is_returned_clean():
    result = summarize("## Intro\n\nThis is **bold** and `code`.")

    assert result == "Intro This is bold and code."


def test_bold_labels_fold_into_colon():
    assert clean_markup("**Tip:** keep it short") == "Tip: keep it short"


def test_bullets_and_ordinals_are_stripped():
    assert clean_markup("- first\n- second\n1. third\n• fourth") == "first second third fourth"


def test_long_content_cuts_after_sentence():
    content = "a" * 160 + ". " + "b " * 50

    result = summarize(content)

    assert result == "a" * 160 + "."


def test_long_content_cuts_at_word_with_ellipsis():
    content = "word " * 60

    result = summarize(content)

    assert result.endswith("word...")
    assert len(result) == 202


def test_long_content_without_breaks_is_hard_cut():
    result = summarize("x" * 300)

    assert result == "x" * 200 + "..."


@pytest.mark.parametrize(
    "content",
    [
        SAMPLE_CONTENT * 5,
        "# Title\n\n" + "**Bold** words and *italic* words. " * 30,
        "* star\n" * 80,
        "",
    ],
)
def test_preview_is_bounded_and_markup_free(content):
    result = summarize(content)

    assert len(result) <= 203
    for glyph in ("#", "*", "•", "`"):
        assert glyph not in result


def test_custom_preview_config():
    config = PreviewConfig(max_length=20, split_point=5)

    assert summarize("one two three four five six", config) == "one two three four..."


def test_non_string_content_returns_empty():
    assert summarize(None) == ""


def test_reading_minutes_rounds_up():
    assert reading_minutes(" ".join(["word"] * 200)) == 1
    assert reading_minutes(" ".join(["word"] * 401)) == 3
