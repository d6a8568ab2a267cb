"""
Text and URL normalization utilities.

Clean up fields pulled out of DuckDuckGo responses before they are returned.
"""

import html
import re
from urllib.parse import unquote

STRIP_TAGS_PATTERN = re.compile(r"<.*?>")


def normalize_text(raw_html: str | None) -> str:
    """
    Strip HTML tags and unescape entities.

    Args:
        raw_html: Text that may contain markup (e.g., "<b>Go &amp; Rust</b>")

    Returns:
        Plain text (e.g., "Go & Rust"), empty string for empty input

    Examples:
        >>> normalize_text("<b>Go &amp; Rust</b>")
        'Go & Rust'
        >>> normalize_text("1 < 2")
        '1 < 2'
    """
    if not raw_html:
        return ""
    return html.unescape(STRIP_TAGS_PATTERN.sub("", raw_html))


def normalize_url(raw_url: str | None) -> str:
    """
    Unquote URL and replace spaces with '+'.

    Args:
        raw_url: URL as found in the response

    Returns:
        Decoded URL, or the input unchanged if it cannot be decoded

    Examples:
        >>> normalize_url("a b%20c")
        'a+b c'
    """
    if not raw_url:
        return ""
    try:
        return unquote(raw_url.replace(" ", "+"), errors="strict")
    except UnicodeDecodeError:
        return raw_url
