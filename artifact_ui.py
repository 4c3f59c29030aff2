"""
artifact_ui.py — Artifact View page and Detail quick look
-----------------------------------------------------------

View page (`/artifact?id=...`): full record with edit, delete, share and QR.
Detail dialog (opened from the Gallery): the same record, read-only, with
share and QR.
"""

import html
import logging

import streamlit as st
import streamlit.components.v1 as components

import browser
import catalog
from errors import ArtifactNotFound, StoreError, ValidationError, describe_exception
from models import Notice
from ui_tools import flash, get_cache, get_conn, show_notice
from utils import (artifact_url, format_accuracy, format_coordinates, format_discovery_date,
                   google_maps_url, map_embed_url)

logger = logging.getLogger(__name__)


def _meta_block(column, icon, label, value_html):
    column.markdown(
        f'<div class="meta"><div class="label">{icon} {label}</div><div class="value">{value_html}</div></div>',
        unsafe_allow_html=True,
    )


def _metadata(artifact):
    day, clock = format_discovery_date(artifact.discovery_date)
    maps = google_maps_url(artifact.latitude, artifact.longitude)
    left, right = st.columns(2)
    _meta_block(left, "📅", "Discovery Date", f"{day}<br><span class='small-muted'>{clock}</span>")
    _meta_block(
        right, "📍", "GPS Coordinates",
        f"<a href='{maps}' target='_blank'>{format_coordinates(artifact.latitude, artifact.longitude)}</a>"
        f"<br><a class='small-muted' href='{maps}' target='_blank'>🗺️ Open in Google Maps →</a>",
    )
    _meta_block(left, "🎯", "Location Accuracy", format_accuracy(artifact.location_accuracy))
    _meta_block(right, "👤", "Documented By", html.escape(artifact.created_by or "Unknown"))
    if artifact.id_number:
        st.caption(f"Catalog number `{artifact.id_number}`")

    if artifact.description:
        st.markdown("#### Description & Notes")
        st.write(artifact.description)
    if artifact.extracted_text:
        st.markdown("#### Extracted Text & Markings")
        st.text(artifact.extracted_text)

    st.markdown("#### Location Preview")
    components.iframe(map_embed_url(artifact.latitude, artifact.longitude), height=260)


def _share_button(artifact, url, key):
    request_key = f"{key}_request"
    pending_key = f"{key}_pending"
    if st.button("🔗 Share", key=key, use_container_width=True):
        st.session_state[request_key] = st.session_state.get(request_key, 0) + 1
        st.session_state[pending_key] = True
    if not st.session_state.get(pending_key):
        return

    # the browser answers on a later rerun
    reply = browser.request_share(catalog.share_payload(artifact, url),
                                  key=f"{key}_js_{st.session_state[request_key]}")
    if reply is None:
        st.caption("Opening share...")
        return
    st.session_state[pending_key] = False
    outcome = browser.ShareReply(reply)
    notice = catalog.share_artifact(artifact, url, share=outcome.share,
                                    copy_to_clipboard=outcome.copy_to_clipboard)
    show_notice(notice)
    if notice is not None and notice.level == "error":
        st.caption("Copy the link manually:")
        st.code(url, language=None)


def _qr_section(artifact, url, key):
    with st.expander("▦ QR Code"):
        st.image(catalog.qr_image_url(url), width=256)
        st.caption("Scan this QR code to view the artifact details")
        file_name, png = catalog.qr_download(artifact, url)
        if st.download_button("Download QR Code", data=png, file_name=file_name, mime="image/png", key=key):
            show_notice(Notice(level="success", message="QR code downloaded"))


def title_html(artifact):
    return (
        f"<h2 style='border-left: 6px solid {html.escape(artifact.color)}; padding-left: 10px'>"
        f"{html.escape(artifact.name)}</h2>"
    )


def _header(artifact, url, key_prefix):
    st.markdown(title_html(artifact), unsafe_allow_html=True)
    try:
        st.image(artifact.photo_url, width="stretch")
    except Exception as e:
        logger.warning("Photo %s unavailable: %s", artifact.photo_url, e)
        st.write("Image not available")
    _share_button(artifact, url, key=f"{key_prefix}_share")
    _qr_section(artifact, url, key=f"{key_prefix}_qr")


@st.dialog("Artifact Details", width="large")
def show_detail(artifact):
    _header(artifact, artifact_url(artifact.id), key_prefix=f"detail_{artifact.id}")
    _metadata(artifact)


@st.dialog("Edit Artifact")
def _edit_dialog(artifact):
    conn, cache = get_conn(), get_cache()
    with st.form("edit_artifact"):
        name = st.text_input("Artifact Name", value=artifact.name)
        description = st.text_area("Description & Notes", value=artifact.description, height=160)
        extracted_text = st.text_area("Extracted Text & Markings", value=artifact.extracted_text or "", height=90)
        color = st.color_picker("Accent Color", value=artifact.color)
        submitted = st.form_submit_button("Save Changes", type="primary", use_container_width=True)

    if submitted:
        try:
            catalog.update_artifact(conn, cache, artifact.id, {
                "name": name.strip() or None,
                "description": description,
                "extracted_text": extracted_text or None,
                "color": color,
            })
        except (StoreError, ValidationError) as e:
            describe_exception(e)
            show_notice(Notice(level="error", message="Failed to update artifact"), inline=True)
            return
        flash(Notice(level="success", message="Artifact updated"))
        st.rerun()


@st.dialog("Delete Artifact")
def _delete_dialog(artifact, back_to_gallery):
    st.write(f"Delete **{artifact.name}** permanently? This cannot be undone.")
    left, right = st.columns(2)
    if left.button("Cancel", use_container_width=True):
        st.rerun()
    if right.button("Delete", type="primary", use_container_width=True):
        try:
            catalog.delete_artifact(get_conn(), get_cache(), artifact.id)
        except StoreError as e:
            describe_exception(e)
            show_notice(Notice(level="error", message="Failed to delete artifact"), inline=True)
            return
        st.session_state.pop("selected_artifact_id", None)
        flash(Notice(level="success", message="Artifact deleted"))
        back_to_gallery()


def _empty_state(message, theme, back_to_gallery):
    st.markdown(f"<div class='hero'><p style='color:{theme.text}'>{message}</p></div>", unsafe_allow_html=True)
    _, middle, _ = st.columns([2, 1, 2])
    if middle.button("← Back to Gallery", use_container_width=True):
        back_to_gallery()


def render(theme, back_to_gallery):
    artifact_id = st.query_params.get("id") or st.session_state.get("selected_artifact_id")
    if not artifact_id:
        _empty_state("No artifact selected", theme, back_to_gallery)
        return
    # keep the id in the URL so the page can be shared and bookmarked
    st.query_params["id"] = artifact_id

    try:
        with st.spinner("Loading artifact..."):
            artifact = catalog.get_artifact(get_conn(), get_cache(), artifact_id)
    except ArtifactNotFound:
        _empty_state("Artifact not found", theme, back_to_gallery)
        return
    except StoreError as e:
        describe_exception(e)
        _empty_state("Failed to load artifact", theme, back_to_gallery)
        return

    if st.button("← Back to Gallery"):
        back_to_gallery()

    _, middle, _ = st.columns([1, 4, 1])
    with middle, st.container(border=True):
        _header(artifact, artifact_url(artifact.id), key_prefix=f"view_{artifact.id}")
        edit_col, delete_col = st.columns(2)
        if edit_col.button("✏️ Edit", use_container_width=True):
            _edit_dialog(artifact)
        if delete_col.button("🗑️ Delete", use_container_width=True):
            _delete_dialog(artifact, back_to_gallery)
        _metadata(artifact)
