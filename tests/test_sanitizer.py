"""Sanitizing and truncation of submitted text."""

import pytest

from prep_portal.services import sanitizer


@pytest.mark.parametrize("raw, expected", [
    ("<script>alert(1)</script>Binary Search", "Binary Search"),
    ("<SCRIPT type='text/javascript'>x()</SCRIPT >Graphs", "Graphs"),
    ("<b>Two</b> <i>pointers</i>", "Two pointers"),
    ("   padded   ", "padded"),
    ("Trees<script>steal()", "Trees"),
    (None, ""),
])
def test_sanitize(raw, expected):
    assert sanitizer.sanitize(raw) == expected


def test_truncate_never_exceeds_limit():
    for limit in (1, 10, 100, 200, 500):
        text = "x" * (limit + 1000)
        assert len(sanitizer.truncate(text, limit)) == limit


def test_truncate_adversarial_markup():
    text = "<p>" + ("a " * 1000) + "</p><script>" + "b" * 5000 + "</script>"
    result = sanitizer.truncate(text, 200)
    assert len(result) <= 200
    assert "<" not in result
    assert "b" not in result


def test_truncate_short_text_untouched():
    assert sanitizer.truncate("Explain TCP handshake", 500) == "Explain TCP handshake"


def test_clean_list_drops_empty_entries():
    values = ["  Arrays ", "<script>x</script>", "", None, "Graphs"]
    assert sanitizer.clean_list(values, 200) == ["Arrays", "Graphs"]


def test_clean_list_accepts_single_string():
    assert sanitizer.clean_list("Online test", 500) == ["Online test"]


def test_dedupe_keeps_first_seen_order():
    assert sanitizer.dedupe(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]
