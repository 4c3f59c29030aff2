"""
errors.py — SiteScan exception types

Every operation raises one of these; page code catches them at the boundary
and turns them into a short notice for the user.
"""

import logging
import traceback

logger = logging.getLogger(__name__)


class SiteScanError(Exception):
    """Base class for all SiteScan failures."""


class ValidationError(SiteScanError):
    """Input rejected locally before any network or store call."""


# --- Location ---

class LocationError(SiteScanError):
    pass


class LocationUnsupported(LocationError):
    """No position source is available on this device/deployment."""


class LocationDenied(LocationError):
    pass


class LocationUnavailable(LocationError):
    """A source exists but could not produce a fix."""


class LocationTimeout(LocationError):
    pass


# --- Storage ---

class UploadError(SiteScanError):
    pass


class StoreError(SiteScanError):
    pass


class ArtifactNotFound(SiteScanError):
    pass


# --- Inference ---

class InferenceError(SiteScanError):
    pass


class InferenceUnavailable(InferenceError):
    """No inference backend is configured."""


# --- Sharing ---

class ShareCancelled(SiteScanError):
    """The user dismissed the share sheet."""


def describe_exception(exc: BaseException) -> str:
    """Log the full traceback and return a one-line summary for display."""
    full_traceback = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    logger.error(full_traceback)

    message = str(exc).strip()
    return f"{type(exc).__name__}: {message}" if message else type(exc).__name__
