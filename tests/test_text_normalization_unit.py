from __future__ import annotations

from utils.text_normalization import collapse_whitespace, joined_text


def test_collapse_whitespace_keeps_case_and_punctuation():
    assert collapse_whitespace("  Hello,\n\tWorld!  ") == "Hello, World!"
    assert collapse_whitespace("") == ""
    assert collapse_whitespace("a  b") == "a b"


def test_joined_text_trims_and_drops_empty_items():
    assert joined_text([" Page ", "", "  ", "1"]) == "Page 1"
    assert joined_text([]) == ""
