"""
vqd token extraction.

DuckDuckGo embeds a short-lived `vqd` value in its HTML. Token-gated
endpoints (text api, images, videos, news, translate) reject requests
without it.
"""

from src.search.exceptions import TokenNotFound

# (opening, closing) delimiters, tried in this order
VQD_DELIMITERS: list[tuple[bytes, bytes]] = [
    (b'vqd="', b'"'),
    (b"vqd=", b"&"),
    (b"vqd='", b"'"),
]


def extract_vqd(body: bytes, keywords: str) -> str:
    """
    Extract the vqd token from an HTML response body.

    Args:
        body: Raw response body
        keywords: Keywords the token was requested for (for diagnostics)

    Returns:
        Token string

    Raises:
        TokenNotFound: If no delimiter pair yields a non-empty value

    Examples:
        >>> extract_vqd(b'<script>vqd="4-1234"</script>', "test")
        '4-1234'
    """
    for opening, closing in VQD_DELIMITERS:
        start = body.find(opening)
        if start < 0:
            continue
        start += len(opening)
        end = body.find(closing, start)
        if end > start:
            return body[start:end].decode("utf-8", errors="replace")
    raise TokenNotFound(keywords)
