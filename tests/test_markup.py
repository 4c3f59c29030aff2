"""Tests for HTML built from user-entered text."""

from datetime import datetime, timezone

from artifact_ui import title_html
from models import Artifact, Note
from notes_ui import note_meta_html
from ui_tools import Theme


def test_artifact_name_is_escaped() -> None:
    artifact = Artifact(id="a1", name="</div><b>Pin", photo_url="pin.jpg", latitude=1.0, longitude=2.0,
                        discovery_date=datetime(2026, 10, 19, tzinfo=timezone.utc))

    markup = title_html(artifact)

    assert "&lt;/div&gt;&lt;b&gt;Pin" in markup
    assert "<b>" not in markup


def test_note_author_is_escaped() -> None:
    note = Note(id="n1", content="trench", created_by="<b", is_private=True)

    markup = note_meta_html(note, Theme())

    assert "&lt;b" in markup
    assert "Private" in markup
