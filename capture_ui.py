"""
capture_ui.py — New Discovery capture screen
----------------------------------------------

Workflow:
1. Pick or shoot a photo -> preview, device position fix, AI enrichment (in background)
2. Review name, description, extracted text and accent color
3. Save -> photo upload, then artifact creation

Saving stays disabled until both a photo and a position fix exist. A failed
save keeps every field so the user can simply press Save again.
"""

import logging

import streamlit as st

import browser
import catalog
import llm
from auth import current_user
from enrichment import start_enrichment
from errors import StoreError, UploadError, ValidationError, describe_exception
from location import LocationCapture, default_source
from models import Notice, PhotoFile
from ui_tools import flash, get_cache, get_conn, show_notice
from utils import format_accuracy, format_coordinates, upload_file

logger = logging.getLogger(__name__)

PHOTO_TYPES = ["png", "jpg", "jpeg", "tif", "tiff", "webp", "heic", "gif", "bmp"]
ENRICHED_KEYS = ["capture_extracted_text", "capture_description"]
FIELD_KEYS = ["capture_name", "capture_description", "capture_extracted_text", "capture_color"]


def _init_state(theme):
    st.session_state.setdefault("capture_nonce", 0)
    st.session_state.setdefault("capture_photo", None)
    st.session_state.setdefault("capture_enrichment", None)
    st.session_state.setdefault("capture_enrichment_applied", [])
    st.session_state.setdefault("capture_color", theme.color)


def _reset_form(location):
    for key in FIELD_KEYS:
        st.session_state.pop(key, None)
    st.session_state["capture_photo"] = None
    st.session_state["capture_enrichment"] = None
    st.session_state["capture_enrichment_applied"] = []
    st.session_state["capture_nonce"] += 1
    location.clear()


def _apply_enrichment():
    """Copy finished enrichment results into the form, once per result."""
    job = st.session_state.get("capture_enrichment")
    if job is None:
        return
    applied = st.session_state["capture_enrichment_applied"]

    if not job.text.pending and job.text.label not in applied:
        applied.append(job.text.label)
        if job.text.value is not None:
            st.session_state["capture_extracted_text"] = job.text.value
        show_notice(job.text.notice())

    if not job.description.pending and job.description.label not in applied:
        applied.append(job.description.label)
        if job.description.value is not None:
            st.session_state["capture_description"] = job.description.value
        show_notice(job.description.notice())


@st.fragment(run_every=1)
def _enrichment_progress():
    job = st.session_state.get("capture_enrichment")
    if job is None:
        return
    applied = st.session_state.get("capture_enrichment_applied", [])
    if not job.done:
        st.caption("✨ Analyzing photo: reading markings and drafting a description...")
    if any(not slot.pending and slot.label not in applied for slot in (job.text, job.description)):
        st.rerun()


def _pick_photo(nonce):
    """The photo currently in the picker, or None."""
    if st.toggle("Use camera", key="capture_use_camera"):
        uploaded = st.camera_input("Artifact Photo *", key=f"capture_camera_{nonce}")
    else:
        uploaded = st.file_uploader("Artifact Photo *", type=PHOTO_TYPES, key=f"capture_file_{nonce}")
    return PhotoFile.from_upload(uploaded) if uploaded is not None else None


def _on_photo_selected(photo, location):
    st.session_state["capture_photo"] = photo
    # results from the previous photo must not leak into this one
    for key in ENRICHED_KEYS:
        st.session_state.pop(key, None)
    location.start()
    st.session_state["capture_enrichment"] = start_enrichment(photo, upload_file, llm.invoke)
    st.session_state["capture_enrichment_applied"] = []


def _locate(location, photo):
    """Finish a pending device position request once the browser has answered."""
    reply = browser.request_position(key=f"capture_geo_{location.request_id}")
    if reply is None:
        st.info("Getting location...")
        return
    show_notice(location.refresh(default_source(photo.data, browser_reply=reply)))


def _location_status(location, photo):
    with st.container(border=True):
        if location.acquiring:
            _locate(location, photo)
        coords = location.coordinates
        if location.acquiring:
            return
        if coords is not None:
            st.success(f"Location captured  \n`{format_coordinates(coords.latitude, coords.longitude)}`")
            if coords.accuracy is not None:
                st.caption(f"Accuracy {format_accuracy(coords.accuracy)}")
        else:
            left, right = st.columns([3, 1])
            left.error("Location not captured")
            if right.button("📍 Get Location", key="capture_get_location"):
                location.start()
                st.rerun()


def _submit(conn, cache, location):
    try:
        with st.spinner("Saving to Cloud..."):
            artifact = catalog.create_artifact(
                conn, cache, upload_file,
                photo=st.session_state["capture_photo"],
                coordinates=location.coordinates,
                name=st.session_state.get("capture_name", ""),
                description=st.session_state.get("capture_description", ""),
                extracted_text=st.session_state.get("capture_extracted_text") or None,
                color=st.session_state.get("capture_color"),
                created_by=current_user(st.session_state),
            )
    except ValidationError as e:
        show_notice(Notice(level="error", message=str(e)))
        return
    except UploadError as e:
        describe_exception(e)
        show_notice(Notice(level="error", message="Failed to upload photo"))
        return
    except StoreError as e:
        describe_exception(e)
        show_notice(Notice(level="error", message="Failed to save artifact"))
        return

    logger.info("Captured %s", artifact.id_number)
    flash(Notice(level="success", message="Artifact saved successfully!"))
    st.session_state["capture_reset_pending"] = True
    st.rerun()


def render(theme):
    conn, cache = get_conn(), get_cache()
    location = LocationCapture(st.session_state, prefix="capture")
    _init_state(theme)

    # widget-bound keys may only be changed before their widgets exist
    if st.session_state.pop("capture_reset_pending", False):
        _reset_form(location)
        st.session_state["capture_color"] = theme.color
    _apply_enrichment()

    st.markdown(
        '<div class="hero"><h1>SiteScan</h1><p>Capture and preserve archaeological discoveries</p></div>',
        unsafe_allow_html=True,
    )

    _, middle, _ = st.columns([1, 3, 1])
    with middle, st.container(border=True):
        st.subheader("📷 New Discovery")

        picked = _pick_photo(st.session_state["capture_nonce"])
        if picked is not None:
            current = st.session_state["capture_photo"]
            if current is None or current.signature != picked.signature:
                _on_photo_selected(picked, location)
        else:
            st.session_state["capture_photo"] = None

        photo = st.session_state["capture_photo"]
        if photo is not None:
            st.image(photo.data, caption="Preview", width="stretch")
            _location_status(location, photo)

        job = st.session_state.get("capture_enrichment")
        if job is not None:
            _enrichment_progress()
        describing = job is not None and job.description.pending

        st.text_input("Artifact Name", key="capture_name", placeholder="e.g., Pottery Fragment, Stone Tool, etc.")
        st.text_area(
            "Description & Notes",
            key="capture_description",
            height=160,
            disabled=describing,
            placeholder="Generating AI description..." if describing else
            "Describe the artifact, its condition, context, and any notable features...",
        )
        st.caption("AI-generated description - you can edit before saving")
        st.text_area("Extracted Text & Markings", key="capture_extracted_text", height=90,
                     placeholder="Visible inscriptions or markings will appear here...")
        st.color_picker("Accent Color", key="capture_color")

        ready = photo is not None and location.coordinates is not None
        if st.button("⬆ Save Artifact", key="capture_save", type="primary", disabled=not ready,
                     use_container_width=True):
            _submit(conn, cache, location)
