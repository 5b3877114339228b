"""Shared fixtures for MailFinder tests."""

from __future__ import annotations

from pathlib import Path

import pytest


def make_message(doc_id: str | None, body: str, *, sender: str = "jeff@enron.com") -> str:
    """Build a raw message in the maildir layout."""
    headers = []
    if doc_id is not None:
        headers.append(f"Message-ID: <{doc_id}.JavaMail.evans@thyme>")
    headers.extend(
        [
            "Date: Mon, 14 May 2001 16:39:00 -0700 (PDT)",
            f"From: {sender}",
            "Subject: test",
        ]
    )
    return "\n".join(headers) + "\n\n" + body + "\n"


@pytest.fixture
def maildir(tmp_path: Path) -> Path:
    """Small maildir with two indexable messages and one without an id."""
    root = tmp_path / "maildir"
    inbox = root / "skilling-j" / "inbox"
    inbox.mkdir(parents=True)
    (inbox / "1.").write_text(make_message("1", "Hello World"), encoding="utf-8")
    (inbox / "2.").write_text(make_message("2", "Hello there"), encoding="utf-8")
    (root / "skilling-j" / "3.").write_text(make_message(None, "orphan text"), encoding="utf-8")
    return root
