"""
notes.py — Field notes

Notes are created from the Quick Note composer and listed newest first on the
Notes screen. They are never edited or deleted from the UI.
"""

import logging
from typing import Iterable, List, Optional

import db
from cache import NOTES_KEY, QueryCache
from errors import ValidationError
from models import Note

logger = logging.getLogger(__name__)

KIND = "Note"
VISIBILITY_FILTERS = ("all", "private", "public")


def list_notes(conn, cache: QueryCache, sort: str = "-created_date") -> List[Note]:
    rows = cache.get(NOTES_KEY, lambda: db.list_entities(conn, KIND, sort=sort))
    return [Note(**row) for row in rows]


def filter_notes(notes: Iterable[Note], query: str = "", visibility: str = "all") -> List[Note]:
    if visibility not in VISIBILITY_FILTERS:
        raise ValueError(f"Unknown visibility filter: {visibility}")
    q = (query or "").lower()

    def visible(note: Note) -> bool:
        if visibility == "private":
            return note.is_private
        if visibility == "public":
            return not note.is_private
        return True

    return [n for n in notes if q in n.content.lower() and visible(n)]


def create_note(conn, cache: QueryCache, content: str, is_private: bool = False,
                created_by: Optional[str] = None) -> Note:
    if not content or not content.strip():
        raise ValidationError("Please enter a note")

    row = db.create_entity(conn, KIND, {"content": content, "is_private": int(bool(is_private))},
                           created_by=created_by)
    cache.invalidate(NOTES_KEY)
    return Note(**row)
