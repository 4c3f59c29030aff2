"""Tests for artifact catalog operations."""

import re
from datetime import datetime, timedelta, timezone

import pytest

import catalog
from cache import ARTIFACTS_KEY, artifact_key
from errors import ArtifactNotFound, ShareCancelled, UploadError, ValidationError
from models import DEFAULT_ARTIFACT_COLOR, DEFAULT_ARTIFACT_NAME


def _create(conn, cache, uploads, photo, coords, **kwargs):
    return catalog.create_artifact(conn, cache, uploads, photo, coords, **kwargs)


def test_capture_scenario(conn, cache, uploads, photo, coords) -> None:
    """Photo plus fix produce an artifact stamped at submission time."""
    before = datetime.now(timezone.utc)

    artifact = _create(conn, cache, uploads, photo, coords, name="Shard", description="", created_by="Ana")

    assert artifact.name == "Shard"
    assert artifact.description == ""
    assert artifact.latitude == 40.0
    assert artifact.longitude == -75.0
    assert artifact.location_accuracy == 5.0
    assert artifact.created_by == "Ana"
    assert abs(artifact.discovery_date - before) < timedelta(seconds=5)
    assert artifact.photo_url.endswith("upload-1.jpg")


def test_create_generates_id_number(conn, cache, uploads, photo, coords) -> None:
    artifact = _create(conn, cache, uploads, photo, coords)

    assert re.fullmatch(r"ART-\d{13}-\d{4}", artifact.id_number)


def test_create_applies_defaults(conn, cache, uploads, photo, coords) -> None:
    """Blank name and missing color fall back to the documented defaults."""
    artifact = _create(conn, cache, uploads, photo, coords, name="   ")

    assert artifact.name == DEFAULT_ARTIFACT_NAME
    assert artifact.color == DEFAULT_ARTIFACT_COLOR


@pytest.mark.parametrize("missing", ["photo", "coords"])
def test_create_rejected_before_upload(conn, cache, uploads, photo, coords, missing) -> None:
    """Missing photo or fix never reaches the upload or the store."""
    args = {"photo": None if missing == "photo" else photo, "coordinates": None if missing == "coords" else coords}

    with pytest.raises(ValidationError):
        catalog.create_artifact(conn, cache, uploads, **args)

    assert uploads.calls == []
    assert catalog.list_artifacts(conn, cache) == []


def test_upload_failure_creates_nothing(conn, cache, photo, coords) -> None:
    def failing_upload(_photo):
        raise UploadError("disk full")

    with pytest.raises(UploadError):
        catalog.create_artifact(conn, cache, failing_upload, photo, coords, name="Shard")

    assert catalog.list_artifacts(conn, cache) == []


def test_create_invalidates_list(conn, cache, uploads, photo, coords) -> None:
    assert catalog.list_artifacts(conn, cache) == []

    _create(conn, cache, uploads, photo, coords, name="Bead")

    assert [a.name for a in catalog.list_artifacts(conn, cache)] == ["Bead"]


def test_update_round_trip(conn, cache, uploads, photo, coords) -> None:
    """Only the edited field changes."""
    original = _create(conn, cache, uploads, photo, coords, name="Shard", description="Red slip")
    catalog.get_artifact(conn, cache, original.id)

    catalog.update_artifact(conn, cache, original.id, {"name": "X"})
    fetched = catalog.get_artifact(conn, cache, original.id)

    assert fetched.name == "X"
    assert fetched.model_dump(exclude={"name"}) == original.model_dump(exclude={"name"})


def test_update_invalidates_item_and_list(conn, cache, uploads, photo, coords) -> None:
    artifact = _create(conn, cache, uploads, photo, coords)
    catalog.list_artifacts(conn, cache)
    catalog.get_artifact(conn, cache, artifact.id)

    catalog.update_artifact(conn, cache, artifact.id, {"color": "#AA0000"})

    assert not cache.contains(ARTIFACTS_KEY)
    assert not cache.contains(artifact_key(artifact.id))


def test_update_rejects_non_editable_fields(conn, cache, uploads, photo, coords) -> None:
    artifact = _create(conn, cache, uploads, photo, coords)

    with pytest.raises(ValidationError):
        catalog.update_artifact(conn, cache, artifact.id, {"latitude": 0.0})


def test_delete_twice_is_harmless(conn, cache, uploads, photo, coords) -> None:
    keep = _create(conn, cache, uploads, photo, coords, name="Keep")
    drop = _create(conn, cache, uploads, photo, coords, name="Drop")
    catalog.get_artifact(conn, cache, drop.id)

    catalog.delete_artifact(conn, cache, drop.id)
    catalog.delete_artifact(conn, cache, drop.id)

    assert [a.id for a in catalog.list_artifacts(conn, cache)] == [keep.id]
    with pytest.raises(ArtifactNotFound):
        catalog.get_artifact(conn, cache, drop.id)


def test_get_unknown_id_raises(conn, cache) -> None:
    with pytest.raises(ArtifactNotFound):
        catalog.get_artifact(conn, cache, "nope")


def test_filter_matches_name_or_description_case_insensitive(conn, cache, uploads, photo, coords) -> None:
    _create(conn, cache, uploads, photo, coords, name="Bronze Pin")
    _create(conn, cache, uploads, photo, coords, name="Sherd", description="bronze rivet hole")
    _create(conn, cache, uploads, photo, coords, name="Flint")
    artifacts = catalog.list_artifacts(conn, cache)

    assert {a.name for a in catalog.filter_artifacts(artifacts, "BRONZE")} == {"Bronze Pin", "Sherd"}
    assert len(catalog.filter_artifacts(artifacts, "")) == 3


def test_share_without_native_share_copies_link(conn, cache, uploads, photo, coords) -> None:
    artifact = _create(conn, cache, uploads, photo, coords, name="Shard")
    clipboard = []

    notice = catalog.share_artifact(artifact, "http://site/artifact?id=1", share=None,
                                    copy_to_clipboard=clipboard.append)

    assert clipboard == ["http://site/artifact?id=1"]
    assert notice.level == "success"


def test_share_cancel_is_silent(conn, cache, uploads, photo, coords) -> None:
    artifact = _create(conn, cache, uploads, photo, coords)

    def cancelled(_payload):
        raise ShareCancelled()

    assert catalog.share_artifact(artifact, "http://x", share=cancelled) is None


def test_share_failure_is_reported(conn, cache, uploads, photo, coords) -> None:
    artifact = _create(conn, cache, uploads, photo, coords)

    def broken(_payload):
        raise RuntimeError("no network")

    assert catalog.share_artifact(artifact, "http://x", share=broken).level == "error"


def test_share_payload_includes_description(conn, cache, uploads, photo, coords) -> None:
    artifact = _create(conn, cache, uploads, photo, coords, name="Shard", description="Incised rim")
    sent = []

    catalog.share_artifact(artifact, "http://x", share=sent.append)

    assert sent == [{
        "title": "Shard",
        "text": "Check out this archaeological artifact: Shard\n\nIncised rim",
        "url": "http://x",
    }]


def test_qr_download(conn, cache, uploads, photo, coords) -> None:
    artifact = _create(conn, cache, uploads, photo, coords, name="Bone  comb")

    file_name, png = catalog.qr_download(artifact, "http://x/artifact?id=1")

    assert file_name == "artifact_Bone_comb.png"
    assert png.startswith(b"\x89PNG")


def test_failed_copy_is_not_reported_as_success(conn, cache, uploads, photo, coords) -> None:
    artifact = _create(conn, cache, uploads, photo, coords)

    def rejected(_url):
        raise PermissionError("clipboard-write denied")

    notice = catalog.share_artifact(artifact, "http://x", share=None, copy_to_clipboard=rejected)

    assert notice.level == "error"
    assert notice.message == "Failed to copy link"


def test_no_clipboard_at_all_is_an_error(conn, cache, uploads, photo, coords) -> None:
    artifact = _create(conn, cache, uploads, photo, coords)

    assert catalog.share_artifact(artifact, "http://x").level == "error"
