"""
Utility modules for the DuckDuckGo client.
"""

from src.utils.normalize import normalize_text, normalize_url

__all__ = [
    "normalize_text",
    "normalize_url",
]
