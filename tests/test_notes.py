"""Tests for field notes."""

import pytest

import notes
from cache import NOTES_KEY
from errors import ValidationError


@pytest.fixture
def two_notes(conn, cache):
    notes.create_note(conn, cache, "dig site A", is_private=True, created_by="Ana")
    notes.create_note(conn, cache, "lunch break", is_private=False, created_by="Ben")
    return notes.list_notes(conn, cache)


def test_list_newest_first(two_notes) -> None:
    assert [n.content for n in two_notes] == ["lunch break", "dig site A"]


def test_privacy_flag_is_bool(two_notes) -> None:
    assert [n.is_private for n in two_notes] == [False, True]


@pytest.mark.parametrize("query,visibility,expected", [
    ("", "all", ["lunch break", "dig site A"]),
    ("site", "all", ["dig site A"]),
    ("", "private", ["dig site A"]),
    ("", "public", ["lunch break"]),
    ("SITE", "public", []),
    ("dig", "private", ["dig site A"]),
    ("dig", "public", []),
])
def test_filter(two_notes, query, visibility, expected) -> None:
    assert [n.content for n in notes.filter_notes(two_notes, query, visibility)] == expected


def test_filter_rejects_unknown_visibility(two_notes) -> None:
    with pytest.raises(ValueError):
        notes.filter_notes(two_notes, "", "secret")


@pytest.mark.parametrize("content", ["", "   \n"])
def test_blank_note_rejected(conn, cache, content) -> None:
    with pytest.raises(ValidationError):
        notes.create_note(conn, cache, content)

    assert notes.list_notes(conn, cache) == []


def test_create_invalidates_list(conn, cache) -> None:
    notes.list_notes(conn, cache)
    assert cache.contains(NOTES_KEY)

    note = notes.create_note(conn, cache, "trench 2 flooded", created_by="Ana")

    assert not cache.contains(NOTES_KEY)
    assert note.created_by == "Ana"
    assert note.is_private is False
