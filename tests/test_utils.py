"""Tests for utils helpers."""

from datetime import datetime

import pytest

from models import PhotoFile
from utils import (artifact_url, format_accuracy, format_coordinates, format_discovery_date,
                   generate_id_number, google_maps_url, qr_filename, qr_service_url, upload_file)


def test_id_number_format() -> None:
    assert generate_id_number(now_ms=1760886240000, rand=7) == "ART-1760886240000-0007"


def test_artifact_url() -> None:
    assert artifact_url("abc-1", base_url="https://dig.example") == "https://dig.example/artifact?id=abc-1"


def test_qr_service_url_encodes_target() -> None:
    url = qr_service_url("https://dig.example/artifact?id=1", service_url="https://qr.example/create")

    assert url == "https://qr.example/create?size=400x400&data=https%3A%2F%2Fdig.example%2Fartifact%3Fid%3D1"


@pytest.mark.parametrize("name,expected", [
    ("Bronze Pin", "artifact_Bronze_Pin.png"),
    ("a \t b", "artifact_a_b.png"),
    ("", "artifact_qrcode.png"),
])
def test_qr_filename(name, expected) -> None:
    assert qr_filename(name) == expected


def test_format_accuracy() -> None:
    assert format_accuracy(5) == "±5.0 meters"
    assert format_accuracy(None) == "Unknown"


def test_format_coordinates() -> None:
    assert format_coordinates(40.0, -75.1234567) == "40.000000, -75.123457"


@pytest.mark.parametrize("value,expected", [
    (datetime(2026, 10, 19, 15, 4), ("October 19, 2026", "3:04 PM")),
    (datetime(2026, 1, 2, 0, 30), ("January 2, 2026", "12:30 AM")),
    (datetime(2026, 7, 4, 12, 0), ("July 4, 2026", "12:00 PM")),
])
def test_format_discovery_date(value, expected) -> None:
    assert format_discovery_date(value) == expected


def test_google_maps_url() -> None:
    assert google_maps_url(40.0, -75.0) == "https://www.google.com/maps?q=40.0,-75.0"


def test_upload_file_writes_photo(tmp_path) -> None:
    photo = PhotoFile(name="Shard.JPG", data=b"jpeg-bytes", mime_type="image/jpeg")

    result = upload_file(photo, image_dir=tmp_path / "images")

    stored = tmp_path / "images" / result["file_url"].split("/")[-1]
    assert stored.suffix == ".jpg"
    assert stored.read_bytes() == b"jpeg-bytes"
