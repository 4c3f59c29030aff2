"""
Pytest configuration for SiteScan tests.

Ensures the repository root is on the path and gives each test its own store.
"""

import itertools
import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import db  # noqa: E402
from cache import QueryCache  # noqa: E402
from models import Coordinates, PhotoFile  # noqa: E402


@pytest.fixture
def conn(tmp_path):
    connection = db.get_conn(tmp_path / "sitescan.db")
    yield connection
    connection.close()


@pytest.fixture
def state():
    return {}


@pytest.fixture
def cache(state):
    return QueryCache(state)


@pytest.fixture
def photo():
    return PhotoFile(name="shard.jpg", data=b"\xff\xd8\xff\xe0fake-jpeg", mime_type="image/jpeg")


@pytest.fixture
def coords():
    return Coordinates(latitude=40.0, longitude=-75.0, accuracy=5.0)


@pytest.fixture
def uploads(tmp_path):
    """Fake upload collaborator that records every call."""
    calls = []
    counter = itertools.count(1)

    def upload(photo):
        calls.append(photo.name)
        return {"file_url": str(tmp_path / f"upload-{next(counter)}.jpg")}

    upload.calls = calls
    return upload
