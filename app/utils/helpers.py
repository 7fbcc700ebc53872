"""
Common utility functions and helpers.
"""
from typing import Iterable, List, TypeVar
import math
import re

T = TypeVar("T")

_TAG_RE = re.compile(r"<[^>]+>")
_WORD_RE = re.compile(r"[A-Za-z'\-]+")


def strip_tags(html: str) -> str:
    """Remove HTML/markdown-embedded tags, keeping the text content."""
    return _TAG_RE.sub(' ', html)


def count_words(text: str) -> int:
    """Count alphabetic words (tags are not stripped here)."""
    return len(_WORD_RE.findall(text))


def estimate_reading_time(content: str, words_per_minute: int = 200) -> int:
    """
    Estimate reading time in whole minutes.

    Args:
        content: Post body (may contain HTML)
        words_per_minute: Average reading speed

    Returns:
        Minutes, never less than 1
    """
    if not content:
        return 1
    words = count_words(strip_tags(content))
    return max(1, math.ceil(words / words_per_minute))


def find_duplicates(values: Iterable[T]) -> List[T]:
    """Return values that appear more than once, in first-seen order."""
    seen = set()
    duplicates: List[T] = []
    for value in values:
        if value in seen and value not in duplicates:
            duplicates.append(value)
        seen.add(value)
    return duplicates


def truncate_text(text: str, max_length: int = 200, suffix: str = "...") -> str:
    """
    Truncate text to maximum length.

    Args:
        text: Text to truncate
        max_length: Maximum length
        suffix: Suffix to add if truncated

    Returns:
        Truncated text
    """
    if len(text) <= max_length:
        return text
    return text[:max_length - len(suffix)] + suffix
