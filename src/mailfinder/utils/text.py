"""Text helpers used by the tokenizer."""

from __future__ import annotations

import re
from typing import Iterable

_WHITESPACE_RE = re.compile(r"\s+")


def collapse_whitespace(text: str) -> str:
    """Replace every run of whitespace with a single space."""
    return _WHITESPACE_RE.sub(" ", text)


def strip_punctuation(text: str, chars: Iterable[str]) -> str:
    """Remove every occurrence of the given characters."""
    return text.translate({ord(char): None for char in chars})
