"""Core MailFinder data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, FrozenSet, List, Literal, Mapping, Optional, Tuple

ContentIndex = Dict[str, List[str]]
LocationIndex = Dict[str, str]

SearchStatus = Literal["ok", "no_match", "invalid_input"]


@dataclass(slots=True)
class ParsedDocument:
    """Tokens extracted from one message, ready to be written to the index."""

    doc_id: str
    location: str
    tokens: FrozenSet[str]


@dataclass(frozen=True, slots=True)
class IndexSnapshot:
    """Read-only pair of indices published for query serving."""

    content: Mapping[str, Tuple[str, ...]]
    locations: Mapping[str, str]

    @classmethod
    def from_dicts(cls, content: Mapping[str, List[str]], locations: Mapping[str, str]) -> "IndexSnapshot":
        frozen_content = {token: tuple(ids) for token, ids in content.items()}
        return cls(
            content=MappingProxyType(frozen_content),
            locations=MappingProxyType(dict(locations)),
        )

    @classmethod
    def empty(cls) -> "IndexSnapshot":
        return cls.from_dicts({}, {})

    @property
    def token_count(self) -> int:
        return len(self.content)

    @property
    def document_count(self) -> int:
        return len(self.locations)

    def to_dicts(self) -> tuple[ContentIndex, LocationIndex]:
        content = {token: list(ids) for token, ids in self.content.items()}
        return content, dict(self.locations)


@dataclass(slots=True)
class SearchOutcome:
    """Result of a prefix query.

    ``no_match`` is an empty result, not an error. ``invalid_input`` carries
    the reason in ``error``.
    """

    status: SearchStatus
    query: object
    terms: List[str] = field(default_factory=list)
    locations: List[str] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"
