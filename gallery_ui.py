"""
gallery_ui.py — Artifact Gallery
----------------------------------

Grid of every artifact (newest first) with a client-side search over name and
description. Each card opens the Detail quick look or the full View page.
"""

import html
import logging

import streamlit as st

import catalog
from artifact_ui import show_detail
from errors import StoreError, describe_exception
from ui_tools import get_cache, get_conn
from utils import format_coordinates, format_discovery_date

logger = logging.getLogger(__name__)

COLUMNS = 3


def _card(artifact, theme, open_artifact):
    with st.container(border=True):
        st.markdown(f"<div style='height:6px;background:{html.escape(artifact.color)};border-radius:4px'></div>",
                    unsafe_allow_html=True)
        try:
            st.image(artifact.photo_url, width="stretch")
        except Exception as e:
            logger.warning("Photo %s unavailable: %s", artifact.photo_url, e)
            st.markdown(f"<div class='meta' style='background:{theme.muted}'>No image</div>", unsafe_allow_html=True)
        st.markdown(f"**{artifact.name}**")
        if artifact.description:
            snippet = artifact.description if len(artifact.description) <= 120 else artifact.description[:117] + "..."
            st.caption(snippet)
        day, _ = format_discovery_date(artifact.discovery_date)
        st.caption(f"📅 {day}  \n📍 {format_coordinates(artifact.latitude, artifact.longitude)}")
        left, right = st.columns(2)
        if left.button("Details", key=f"detail-{artifact.id}", use_container_width=True):
            show_detail(artifact)
        if right.button("Open", key=f"open-{artifact.id}", type="primary", use_container_width=True):
            open_artifact(artifact.id)


def render(theme, open_artifact):
    st.title("Artifact Gallery")
    query = st.text_input("Search", placeholder="🔍 Search artifacts...", label_visibility="collapsed")

    try:
        with st.spinner("Loading artifacts..."):
            artifacts = catalog.list_artifacts(get_conn(), get_cache())
    except StoreError as e:
        describe_exception(e)
        st.error("Failed to load artifacts")
        return

    filtered = catalog.filter_artifacts(artifacts, query)
    if not filtered:
        st.info("No artifacts found" if query else "No artifacts yet. Start documenting!")
        return

    columns = st.columns(COLUMNS)
    for i, artifact in enumerate(filtered):
        with columns[i % COLUMNS]:
            _card(artifact, theme, open_artifact)
