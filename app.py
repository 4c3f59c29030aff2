"""
app.py — SiteScan shell and navigation
----------------------------------------

Entry point: `streamlit run app.py`

Renders the persistent header (Capture / Gallery / Notes links, Quick Note,
Sign Out), mounts the Assistant panel in the sidebar and runs the selected page.
The theme is built once here and handed to every page explicitly.
"""

import logging

import streamlit as st

import artifact_ui
import capture_ui
import chat_ui
import gallery_ui
import notes_ui
import settings
from auth import current_user, login, logout
from errors import ValidationError
from models import Notice
from ui_tools import Theme, page_css, show_flashes, show_notice

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

st.set_page_config(page_title='SiteScan', page_icon='📷', layout='wide')

THEME = Theme(color=settings.THEME_COLOR)
st.markdown(page_css(THEME), unsafe_allow_html=True)


# --- Pages ---

def capture_page():
    capture_ui.render(THEME)


def gallery_page():
    gallery_ui.render(THEME, open_artifact)


def notes_page():
    notes_ui.render(THEME)


def artifact_page():
    artifact_ui.render(THEME, back_to_gallery)


CAPTURE = st.Page(capture_page, title="Capture", icon="📷", url_path="capture", default=True)
GALLERY = st.Page(gallery_page, title="Gallery", icon="🗂️", url_path="gallery")
NOTES = st.Page(notes_page, title="Notes", icon="📝", url_path="notes")
ARTIFACT = st.Page(artifact_page, title="Artifact", icon="🏺", url_path="artifact")
NAV_PAGES = [CAPTURE, GALLERY, NOTES]


def open_artifact(artifact_id):
    st.session_state["selected_artifact_id"] = artifact_id
    st.switch_page(ARTIFACT)


def back_to_gallery():
    st.query_params.clear()
    st.switch_page(GALLERY)


# --- Shell ---

def sign_in():
    st.markdown(
        '<div class="hero"><h1>SiteScan</h1><p>Capture and preserve archaeological discoveries</p></div>',
        unsafe_allow_html=True,
    )
    _, middle, _ = st.columns([1, 2, 1])
    with middle, st.form("sign_in"):
        name = st.text_input("Your name", placeholder="Shown as 'Documented By' on your records")
        password = ""
        if settings.AUTH_PASSWORD:
            password = st.text_input("Team password", type="password")
        if st.form_submit_button("Sign In", type="primary", use_container_width=True):
            try:
                login(st.session_state, name, password)
            except ValidationError as e:
                show_notice(Notice(level="error", message=str(e)), inline=True)
                return
            st.rerun()


def header(current_page):
    brand, *links, quick_note, sign_out = st.columns([2.2, 1, 1, 1, 1.3, 1.2], vertical_alignment="center")
    brand.markdown('<div class="top-nav"><span class="brand">📷 SiteScan</span></div>', unsafe_allow_html=True)

    for column, page in zip(links, NAV_PAGES):
        if page.url_path == current_page.url_path:
            column.markdown(
                f"<span class='badge' style='background:{THEME.accent}'>{page.icon} {page.title}</span>",
                unsafe_allow_html=True,
            )
        else:
            column.page_link(page, label=page.title, icon=page.icon)

    if quick_note.button("📝 Quick Note", use_container_width=True):
        notes_ui.quick_note_dialog()
    if sign_out.button("↪ Sign Out", use_container_width=True):
        logout(st.session_state)
        st.rerun()


if current_user(st.session_state) is None:
    sign_in()
    st.stop()

pg = st.navigation([CAPTURE, GALLERY, NOTES, ARTIFACT], position="hidden")
header(pg)
show_flashes()
chat_ui.render_panel(THEME)
pg.run()
