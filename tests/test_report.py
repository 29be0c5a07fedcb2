"""Tests for sequence and session rendering."""

import json

from featurepick.models import CommitSequence, PickOutcome, PickSession, SessionStatus
from featurepick.report import sequence_to_str, session_to_str
from featurepick.utils.util import markdown_cell


def make_session(record, cancelled=False):
    sequence = CommitSequence([record("aaa", 1, "feat-a: one"), record("bbb", 2, "feat-a: a|b")])
    session = PickSession(sequence=sequence)
    session.record(PickOutcome.APPLIED)
    if cancelled:
        session.index = 1
        session.record(PickOutcome.ABORTED, "aborted by operator")
        session.status = SessionStatus.CANCELLED
    else:
        session.status = SessionStatus.COMPLETED
    return session


def test_sequence_text(record):
    sequence = CommitSequence([record("aaa", 1, "feat-a: one")])

    text = sequence_to_str(sequence, "text")

    assert text == "1: aaa 2024-01-01 00:00:01 +0000 feat-a: one\n"


def test_empty_sequence(record):
    assert "No commits matched." in sequence_to_str(CommitSequence(), "text")
    assert "No commits matched." in sequence_to_str(CommitSequence(), "markdown")


def test_sequence_markdown_escapes_pipes(record):
    markdown = sequence_to_str(make_session(record).sequence, "markdown")

    assert "| 2 | `bbb` |" in markdown
    assert "feat-a: a\\|b" in markdown
    assert "Total: 2 commits" in markdown


def test_sequence_json(record):
    data = json.loads(sequence_to_str(CommitSequence([record("aaa", 1)]), "json"))

    assert data["count"] == 1
    assert data["commits"][0]["hexsha"] == "aaa"


def test_session_markdown_completed(record):
    markdown = session_to_str(make_session(record), "markdown")

    assert "**Status:** completed" in markdown
    assert "**Applied:** 1" in markdown
    assert "**Not attempted:** 1" in markdown
    assert "Cancelled by operator" not in markdown


def test_session_markdown_cancelled(record):
    markdown = session_to_str(make_session(record, cancelled=True), "markdown")

    assert "**Status:** cancelled" in markdown
    assert "| 2 | `bbb` | aborted |" in markdown
    assert "Commits after `bbb` were not attempted." in markdown


def test_session_text_and_json(record):
    session = make_session(record, cancelled=True)

    text = session_to_str(session, "text")
    data = json.loads(session_to_str(session, "json", pretty=True))

    assert text.startswith("Status: cancelled\n")
    assert "1 applied, 1 aborted" in text
    assert data["counts"]["aborted"] == 1


def test_markdown_cell_keeps_table_intact():
    assert markdown_cell("fix a|b\nand more") == "fix a\\|b and more"
