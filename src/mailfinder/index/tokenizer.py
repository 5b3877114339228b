"""Message id extraction and body tokenization.

A message is RFC822-like text: a header block, a blank line, then the body.
Only the body contributes tokens; the ``Message-ID`` header identifies the
message.
"""

from __future__ import annotations

from typing import FrozenSet

from mailfinder.models import ParsedDocument
from mailfinder.utils.text import collapse_whitespace, strip_punctuation

MESSAGE_ID_HEADER = "Message-ID"
# Suffix appended to message ids by the JavaMail relay.
RELAY_SUFFIX = ".JavaMail"

PUNCTUATION: FrozenSet[str] = frozenset(".,/#!$%^&*;:{}=-_`~()")


def extract_document_id(raw_text: str) -> str | None:
    """Return the message id, or ``None`` when there is no ``Message-ID`` line.

    The result may be an empty string for a malformed header; callers treat
    that the same as ``None``.
    """
    header = next(
        (line for line in raw_text.split("\n") if line.startswith(MESSAGE_ID_HEADER)),
        None,
    )
    if header is None:
        return None

    _, bracket, rest = header.partition("<")
    value = rest if bracket else header
    suffix_at = value.find(RELAY_SUFFIX)
    if suffix_at != -1:
        value = value[:suffix_at]
    return value.strip()


def extract_body(raw_text: str) -> str:
    """Return everything after the first blank line.

    Without a blank line the whole text, headers included, is the body.
    """
    parts = raw_text.split("\n\n")
    if len(parts) == 1:
        return raw_text
    return "\n".join(parts[1:])


def normalize(body_text: str) -> set[str]:
    """Lower-case, punctuation-free, de-duplicated tokens of ``body_text``."""
    cleaned = strip_punctuation(collapse_whitespace(body_text), PUNCTUATION)
    return {piece.lower() for piece in cleaned.split(" ") if piece}


def parse_document(raw_text: str, location: str) -> ParsedDocument | None:
    """Tokenize one message. Returns ``None`` if it cannot be indexed."""
    doc_id = extract_document_id(raw_text)
    if not doc_id:
        return None
    tokens = frozenset(normalize(extract_body(raw_text)))
    return ParsedDocument(doc_id=doc_id, location=location, tokens=tokens)
