"""
Shared pytest fixtures for all tests.
"""

import pytest


# ============================================================
# Normalizer Fixtures
# ============================================================


@pytest.fixture
def text_cases() -> list[tuple[str | None, str]]:
    """Test cases for normalize_text: (input, expected)."""
    return [
        ("<b>Go &amp; Rust</b>", "Go & Rust"),
        ("", ""),
        (None, ""),
        ("plain text", "plain text"),
        ("<a href='x'>link</a> &lt;tag&gt;", "link <tag>"),
        ("1 < 2", "1 < 2"),
    ]


@pytest.fixture
def url_cases() -> list[tuple[str | None, str]]:
    """Test cases for normalize_url: (input, expected)."""
    return [
        ("a b%20c", "a+b c"),
        ("https://example.com/a%2Fb", "https://example.com/a/b"),
        ("https://example.com/?q=go lang", "https://example.com/?q=go+lang"),
        ("", ""),
        (None, ""),
    ]
