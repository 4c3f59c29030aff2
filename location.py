"""
location.py — Position fixes for the Capture screen

acquire() asks a PositionSource for one fix and waits at most `timeout`
seconds. Sources:

* BrowserPositionSource — the reply of a browser geolocation request
  (see browser.request_position)
* PhotoGpsSource — GPS block in the captured photo's EXIF (phones and field
  cameras write it when location tagging is on)
* FixedPositionSource — a configured field-station position
* ChainedPositionSource — first source that yields a fix wins

A missing source means the capability is absent and is reported as
LocationUnsupported, never silently ignored.
"""

from __future__ import annotations

import io
import logging
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeout
from typing import Iterable, MutableMapping, Optional, Protocol

from PIL import ExifTags, Image, UnidentifiedImageError

from errors import (LocationDenied, LocationError, LocationTimeout, LocationUnavailable,
                    LocationUnsupported)
from models import Coordinates, Notice
from settings import LOCATION_TIMEOUT, SITE_ACCURACY, SITE_LATITUDE, SITE_LONGITUDE

logger = logging.getLogger(__name__)


class PositionSource(Protocol):
    def read(self) -> Coordinates: ...


def dms_to_decimal(dms, ref: str) -> float:
    """Convert EXIF (degrees, minutes, seconds) rationals to signed decimal degrees."""
    degrees, minutes, seconds = (float(v) for v in dms)
    value = degrees + minutes / 60.0 + seconds / 3600.0
    return -value if str(ref).upper() in ("S", "W") else value


# Browser reply error codes (W3C GeolocationPositionError; 0 means no geolocation API)
_BROWSER_ERRORS = {
    0: LocationUnsupported,
    1: LocationDenied,
    2: LocationUnavailable,
    3: LocationTimeout,
}


class BrowserPositionSource:
    def __init__(self, reply: dict):
        self.reply = reply or {}

    def read(self) -> Coordinates:
        error = self.reply.get("error")
        if error:
            exc = _BROWSER_ERRORS.get(error.get("code"), LocationUnavailable)
            raise exc(error.get("message") or "Browser geolocation failed")
        coords = self.reply.get("coords")
        if not coords:
            raise LocationUnavailable("Browser returned no position")
        return Coordinates(
            latitude=coords["latitude"],
            longitude=coords["longitude"],
            accuracy=coords.get("accuracy"),
        )


class PhotoGpsSource:
    def __init__(self, image_bytes: bytes):
        self.image_bytes = image_bytes

    def read(self) -> Coordinates:
        try:
            img = Image.open(io.BytesIO(self.image_bytes))
            gps = img.getexif().get_ifd(ExifTags.IFD.GPSInfo)
        except (UnidentifiedImageError, OSError) as e:
            raise LocationUnavailable(f"Photo could not be read: {e}") from e

        lat = gps.get(ExifTags.GPS.GPSLatitude)
        lon = gps.get(ExifTags.GPS.GPSLongitude)
        if not lat or not lon:
            raise LocationUnavailable("Photo carries no GPS position")

        accuracy = gps.get(ExifTags.GPS.GPSHPositioningError)
        return Coordinates(
            latitude=dms_to_decimal(lat, gps.get(ExifTags.GPS.GPSLatitudeRef, "N")),
            longitude=dms_to_decimal(lon, gps.get(ExifTags.GPS.GPSLongitudeRef, "E")),
            accuracy=float(accuracy) if accuracy is not None else None,
        )


class FixedPositionSource:
    def __init__(self, latitude: float, longitude: float, accuracy: Optional[float] = None):
        self.coordinates = Coordinates(latitude=latitude, longitude=longitude, accuracy=accuracy)

    def read(self) -> Coordinates:
        return self.coordinates


class ChainedPositionSource:
    def __init__(self, sources: Iterable[PositionSource]):
        self.sources = list(sources)

    def read(self) -> Coordinates:
        """First fix wins; when every source fails the first failure is raised."""
        failures = []
        for source in self.sources:
            try:
                return source.read()
            except LocationError as e:
                logger.info("%s gave no fix: %s", type(source).__name__, e)
                failures.append(e)
        if failures:
            raise failures[0]
        raise LocationUnavailable("No position available")


def default_source(image_bytes: Optional[bytes] = None,
                   browser_reply: Optional[dict] = None) -> Optional[PositionSource]:
    """
    Sources available for this capture, best first: the device (browser),
    the photo's EXIF, then the configured site. None when there are none.
    """
    sources = []
    if browser_reply is not None:
        sources.append(BrowserPositionSource(browser_reply))
    if image_bytes:
        sources.append(PhotoGpsSource(image_bytes))
    if SITE_LATITUDE is not None and SITE_LONGITUDE is not None:
        sources.append(FixedPositionSource(SITE_LATITUDE, SITE_LONGITUDE, SITE_ACCURACY))
    if not sources:
        return None
    return sources[0] if len(sources) == 1 else ChainedPositionSource(sources)


def acquire(source: Optional[PositionSource], timeout: float = LOCATION_TIMEOUT) -> Coordinates:
    """Single best-effort fix. Raises a LocationError subclass on any failure."""
    if source is None:
        raise LocationUnsupported("Geolocation is not supported on this device")

    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="location")
    future = executor.submit(source.read)
    try:
        return future.result(timeout=timeout)
    except FutureTimeout:
        raise LocationTimeout(f"No position fix within {timeout:g} seconds")
    except LocationError:
        raise
    except Exception as e:
        raise LocationUnavailable(f"Position source failed: {e}") from e
    finally:
        # a slow source keeps running in the background; nobody waits for it
        executor.shutdown(wait=False)


class LocationCapture:
    """
    Capture-screen location state: the current fix and an 'acquiring' flag.
    A failed refresh keeps whatever fix was there before.
    """

    def __init__(self, state: MutableMapping, prefix: str = "capture"):
        self.state = state
        self.coords_key = f"{prefix}_coordinates"
        self.busy_key = f"{prefix}_acquiring"
        self.request_key = f"{prefix}_location_request"
        state.setdefault(self.coords_key, None)
        state.setdefault(self.busy_key, False)
        state.setdefault(self.request_key, 0)

    @property
    def coordinates(self) -> Optional[Coordinates]:
        return self.state[self.coords_key]

    @property
    def acquiring(self) -> bool:
        return self.state[self.busy_key]

    @property
    def request_id(self) -> int:
        return self.state[self.request_key]

    def start(self) -> int:
        """Mark a new device position request as in flight and return its id."""
        self.state[self.request_key] += 1
        self.state[self.busy_key] = True
        return self.state[self.request_key]

    def refresh(self, source: Optional[PositionSource], timeout: float = LOCATION_TIMEOUT) -> Notice:
        self.state[self.busy_key] = True
        try:
            coords = acquire(source, timeout=timeout)
        except LocationUnsupported as e:
            logger.warning("Location unsupported: %s", e)
            return Notice(level="error", message="Geolocation is not supported by your browser")
        except LocationError as e:
            logger.warning("Location failed: %s", e)
            return Notice(level="error", message="Unable to get location. Please enable location services.")
        finally:
            self.state[self.busy_key] = False

        self.state[self.coords_key] = coords
        return Notice(level="success", message="Location captured")

    def clear(self) -> None:
        self.state[self.coords_key] = None
        self.state[self.busy_key] = False
