"""Prefix search over a published index snapshot."""

from __future__ import annotations

import logging
from typing import List

from mailfinder.models import IndexSnapshot, SearchOutcome

LOGGER = logging.getLogger(__name__)


class Searcher:
    """Read-only query API over an :class:`IndexSnapshot`.

    Holds no mutable state, so any number of threads may call
    :meth:`search` on the same instance.
    """

    def __init__(self, snapshot: IndexSnapshot) -> None:
        self.snapshot = snapshot

    def matching_terms(self, prefix: str) -> List[str]:
        """Indexed terms starting with ``prefix``, case-insensitively."""
        needle = prefix.lower()
        return sorted(term for term in self.snapshot.content if term.startswith(needle))

    def search(self, query: str) -> SearchOutcome:
        if not isinstance(query, str):
            return SearchOutcome(
                status="invalid_input",
                query=query,
                error=f"Query must be a string, got {type(query).__name__}",
            )

        terms = self.matching_terms(query)
        if not terms:
            LOGGER.info("Could not match search %r", query)
            return SearchOutcome(status="no_match", query=query)

        doc_ids = {doc_id for term in terms for doc_id in self.snapshot.content[term]}
        locations = set()
        for doc_id in doc_ids:
            location = self.snapshot.locations.get(doc_id)
            if location is None:
                LOGGER.error("Index inconsistency: message %s has no location", doc_id)
                continue
            locations.add(location)

        if not locations:
            return SearchOutcome(status="no_match", query=query, terms=terms)

        LOGGER.debug("Terms matching %r: %s", query, terms)
        LOGGER.debug("Locations matching %r: %s", query, sorted(locations))
        return SearchOutcome(status="ok", query=query, terms=terms, locations=sorted(locations))
