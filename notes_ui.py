"""
notes_ui.py — Field Notes screen and Quick Note composer
----------------------------------------------------------

The Notes screen lists every note newest first, filtered by text and by
visibility. The Quick Note composer is a dialog the header opens from any page.
"""

import html

import streamlit as st

import notes
from auth import current_user
from errors import StoreError, ValidationError, describe_exception
from models import Notice
from ui_tools import flash, get_cache, get_conn, show_notice
from utils import format_discovery_date

FILTER_LABELS = {"all": "All", "private": "🔒 Private", "public": "👥 Team"}


def note_meta_html(note, theme):
    badge_color = "#6B4423" if note.is_private else theme.accent
    badge = "🔒 Private" if note.is_private else "👥 Team"
    when = ""
    if note.created_date is not None:
        day, clock = format_discovery_date(note.created_date)
        when = f"{day} · {clock}"
    return (
        f"<span class='badge' style='background:{badge_color}'>{badge}</span> "
        f"<span class='small-muted'>{when} · {html.escape(note.created_by or 'Unknown')}</span>"
    )


def _note_card(note, theme):
    with st.container(border=True):
        st.markdown(note_meta_html(note, theme), unsafe_allow_html=True)
        st.write(note.content)


def render(theme):
    st.title("Field Notes")
    search_col, filter_col = st.columns([3, 2])
    query = search_col.text_input("Search", placeholder="🔍 Search notes...", label_visibility="collapsed")
    visibility = filter_col.radio(
        "Visibility", list(FILTER_LABELS), format_func=FILTER_LABELS.get,
        horizontal=True, label_visibility="collapsed",
    )

    try:
        with st.spinner("Loading notes..."):
            all_notes = notes.list_notes(get_conn(), get_cache())
    except StoreError as e:
        describe_exception(e)
        st.error("Failed to load notes")
        return

    filtered = notes.filter_notes(all_notes, query, visibility)
    if not filtered:
        st.info("No notes found" if (query or visibility != "all") else "No notes yet. Use Quick Note to add one.")
        return
    for note in filtered:
        _note_card(note, theme)


@st.dialog("Add Quick Note")
def quick_note_dialog():
    # a fresh nonce gives the composer empty widgets after each save
    nonce = st.session_state.setdefault("quick_note_nonce", 0)
    content = st.text_area("Note", height=160, label_visibility="collapsed", key=f"quick_note_content_{nonce}",
                           placeholder="What's happening? Observations, findings, reminders...")
    is_private = st.toggle("Private Note", key=f"quick_note_private_{nonce}")
    st.caption("🔒 Only you can see this note" if is_private else "👥 This note is visible to all team members")

    if not st.button("Save Note", type="primary", use_container_width=True):
        return
    try:
        notes.create_note(get_conn(), get_cache(), content, is_private=is_private,
                          created_by=current_user(st.session_state))
    except ValidationError as e:
        show_notice(Notice(level="error", message=str(e)), inline=True)
        return
    except StoreError as e:
        describe_exception(e)
        show_notice(Notice(level="error", message="Failed to save note"), inline=True)
        return
    st.session_state["quick_note_nonce"] = nonce + 1
    flash(Notice(level="success", message="Note saved"))
    st.rerun()
