"""Tests for core data models."""

from __future__ import annotations

import pytest

from mailfinder.models import IndexSnapshot, ParsedDocument, SearchOutcome


class TestIndexSnapshot:
    """Test IndexSnapshot."""

    def test_from_dicts_copies_input(self) -> None:
        content = {"hello": ["1"]}
        locations = {"1": "pathA"}

        snapshot = IndexSnapshot.from_dicts(content, locations)
        content["hello"].append("2")
        locations["2"] = "pathB"

        assert snapshot.content["hello"] == ("1",)
        assert "2" not in snapshot.locations

    def test_counts(self) -> None:
        snapshot = IndexSnapshot.from_dicts({"a": ["1"], "b": ["1"]}, {"1": "p"})

        assert snapshot.token_count == 2
        assert snapshot.document_count == 1

    def test_to_dicts(self) -> None:
        snapshot = IndexSnapshot.from_dicts({"a": ["1", "2"]}, {"1": "p", "2": "q"})
        assert snapshot.to_dicts() == ({"a": ["1", "2"]}, {"1": "p", "2": "q"})

    def test_frozen(self) -> None:
        snapshot = IndexSnapshot.empty()
        with pytest.raises(AttributeError):
            snapshot.content = {}  # type: ignore[misc]

    def test_locations_read_only(self) -> None:
        snapshot = IndexSnapshot.from_dicts({}, {"1": "p"})
        with pytest.raises(TypeError):
            snapshot.locations["1"] = "q"  # type: ignore[index]


class TestSearchOutcome:
    """Test SearchOutcome."""

    def test_defaults(self) -> None:
        outcome = SearchOutcome(status="no_match", query="x")

        assert not outcome.ok
        assert outcome.terms == []
        assert outcome.locations == []
        assert outcome.error is None

    def test_ok(self) -> None:
        assert SearchOutcome(status="ok", query="x", locations=["p"]).ok


class TestParsedDocument:
    """Test ParsedDocument."""

    def test_fields(self) -> None:
        parsed = ParsedDocument(doc_id="1", location="p", tokens=frozenset({"a"}))

        assert parsed.doc_id == "1"
        assert parsed.location == "p"
        assert parsed.tokens == frozenset({"a"})
