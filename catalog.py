"""
catalog.py — Artifact catalog operations

Backs the Capture, Gallery, Artifact View and Detail screens. Reads go through
the QueryCache; every mutation invalidates exactly:

* create -> ('artifacts',)
* update -> ('artifact', id), ('artifacts',)
* delete -> ('artifact', id), ('artifacts',)
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Optional

import db
from cache import ARTIFACTS_KEY, QueryCache, artifact_key
from errors import ArtifactNotFound, ShareCancelled, ValidationError
from models import EDITABLE_ARTIFACT_FIELDS, Artifact, Coordinates, Notice, PhotoFile
from utils import generate_id_number, generate_qr_png, qr_filename, qr_service_url

logger = logging.getLogger(__name__)

KIND = "Artifact"
DEFAULT_SORT = "-created_date"


def list_artifacts(conn, cache: QueryCache, sort: str = DEFAULT_SORT) -> List[Artifact]:
    rows = cache.get(ARTIFACTS_KEY, lambda: db.list_entities(conn, KIND, sort=sort))
    return [Artifact(**row) for row in rows]


def filter_artifacts(artifacts: Iterable[Artifact], query: str) -> List[Artifact]:
    """Case-insensitive substring match over name and description."""
    q = (query or "").strip().lower()
    if not q:
        return list(artifacts)
    return [a for a in artifacts if q in a.name.lower() or q in a.description.lower()]


def get_artifact(conn, cache: QueryCache, artifact_id: str) -> Artifact:
    """
    Look an artifact up by scanning the full list; the first match wins.
    Raises ArtifactNotFound when no row has that id.
    """
    def load():
        rows = db.list_entities(conn, KIND, sort=DEFAULT_SORT)
        return next((row for row in rows if row["id"] == artifact_id), None)

    key = artifact_key(artifact_id)
    row = cache.get(key, load)
    if row is None:
        cache.invalidate(key)
        raise ArtifactNotFound(f"No artifact with id {artifact_id}")
    return Artifact(**row)


def validate_capture(photo: Optional[PhotoFile], coordinates: Optional[Coordinates]) -> None:
    if photo is None:
        raise ValidationError("Please select a photo")
    if coordinates is None:
        raise ValidationError("Please capture location")


def create_artifact(
    conn,
    cache: QueryCache,
    upload: Callable,
    photo: Optional[PhotoFile],
    coordinates: Optional[Coordinates],
    name: str = "",
    description: str = "",
    extracted_text: Optional[str] = None,
    color: Optional[str] = None,
    created_by: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Artifact:
    """
    Upload the photo, then create the record. Validation happens before any
    upload; an upload or store failure raises and leaves nothing half-saved.
    """
    validate_capture(photo, coordinates)

    file_url = upload(photo)["file_url"]

    fields = {
        "id_number": generate_id_number(),
        "name": name.strip() if name else None,
        "description": description or "",
        "photo_url": file_url,
        "latitude": coordinates.latitude,
        "longitude": coordinates.longitude,
        "location_accuracy": coordinates.accuracy,
        "discovery_date": (now or datetime.now(timezone.utc)).isoformat(),
        "color": color,
        "extracted_text": extracted_text,
    }
    # apply the model's defaults before the row is written
    defaults = Artifact(id="pending", **fields)
    fields["name"] = defaults.name
    fields["color"] = defaults.color

    row = db.create_entity(conn, KIND, fields, created_by=created_by)
    cache.invalidate(ARTIFACTS_KEY)
    logger.info("Artifact %s saved (%s)", row["id"], row["id_number"])
    return Artifact(**row)


def update_artifact(conn, cache: QueryCache, artifact_id: str, changes: dict) -> Artifact:
    illegal = set(changes) - set(EDITABLE_ARTIFACT_FIELDS)
    if illegal:
        raise ValidationError(f"Fields cannot be edited: {', '.join(sorted(illegal))}")

    row = db.update_entity(conn, KIND, artifact_id, changes)
    cache.invalidate(artifact_key(artifact_id), ARTIFACTS_KEY)
    return Artifact(**row)


def delete_artifact(conn, cache: QueryCache, artifact_id: str) -> None:
    """Deleting an already deleted artifact is a no-op."""
    removed = db.delete_entity(conn, KIND, artifact_id)
    cache.invalidate(artifact_key(artifact_id), ARTIFACTS_KEY)
    if not removed:
        logger.info("Artifact %s was already gone", artifact_id)


# --- Sharing ---

def share_payload(artifact: Artifact, url: str) -> dict:
    text = f"Check out this archaeological artifact: {artifact.name}"
    if artifact.description:
        text += "\n\n" + artifact.description
    return {"title": artifact.name or "Artifact Discovery", "text": text, "url": url}


def share_artifact(
    artifact: Artifact,
    url: str,
    share: Optional[Callable[[dict], None]] = None,
    copy_to_clipboard: Optional[Callable[[str], None]] = None,
) -> Optional[Notice]:
    """
    Share through the platform share sheet, or copy the link when there is none.
    Returns None when the user cancelled the share sheet. The copy is only
    reported as done when copy_to_clipboard returned without raising.
    """
    if share is None:
        if copy_to_clipboard is None:
            return Notice(level="error", message="Failed to copy link")
        try:
            copy_to_clipboard(url)
        except Exception as e:
            logger.error("Copy to clipboard failed: %s", e)
            return Notice(level="error", message="Failed to copy link")
        return Notice(level="success", message="Link copied to clipboard")

    try:
        share(share_payload(artifact, url))
    except ShareCancelled:
        return None
    except Exception as e:
        logger.error("Share failed: %s", e)
        return Notice(level="error", message="Failed to share")
    return Notice(level="success", message="Shared successfully")


# --- QR ---

def qr_image_url(url: str) -> str:
    return qr_service_url(url)


def qr_download(artifact: Artifact, url: str) -> tuple:
    """(file name, PNG bytes) for the artifact's QR code."""
    return qr_filename(artifact.name), generate_qr_png(url, fill_color=artifact.color)
