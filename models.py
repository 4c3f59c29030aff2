"""
models.py — SiteScan record types

Artifact and Note mirror the rows owned by the entity store. Defaults for
optional display fields live here as validators, so screens never need to
coalesce missing values themselves.
"""

from __future__ import annotations

import hashlib
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from settings import THEME_COLOR

DEFAULT_ARTIFACT_NAME = "Untitled Artifact"
DEFAULT_ARTIFACT_COLOR = THEME_COLOR

# Fields the View screen is allowed to edit
EDITABLE_ARTIFACT_FIELDS = ("name", "description", "extracted_text", "color")


class Coordinates(BaseModel):
    """A single position fix. Accuracy is a radius in meters."""
    latitude: float
    longitude: float
    accuracy: Optional[float] = None


class Artifact(BaseModel):
    id: str
    id_number: Optional[str] = None
    name: str = DEFAULT_ARTIFACT_NAME
    description: str = ""
    photo_url: str
    latitude: float
    longitude: float
    location_accuracy: Optional[float] = None
    discovery_date: datetime
    color: str = DEFAULT_ARTIFACT_COLOR
    extracted_text: Optional[str] = None
    created_by: Optional[str] = None
    created_date: Optional[datetime] = None

    @field_validator("name", mode="before")
    @classmethod
    def _default_name(cls, value):
        if value is None or not str(value).strip():
            return DEFAULT_ARTIFACT_NAME
        return value

    @field_validator("description", mode="before")
    @classmethod
    def _default_description(cls, value):
        return "" if value is None else value

    @field_validator("color", mode="before")
    @classmethod
    def _default_color(cls, value):
        if value is None or not str(value).strip():
            return DEFAULT_ARTIFACT_COLOR
        return value

    @property
    def coordinates(self) -> Coordinates:
        return Coordinates(latitude=self.latitude, longitude=self.longitude, accuracy=self.location_accuracy)


class Note(BaseModel):
    id: str
    content: str
    is_private: bool = False
    created_by: Optional[str] = None
    created_date: Optional[datetime] = None

    @field_validator("is_private", mode="before")
    @classmethod
    def _coerce_flag(cls, value):
        # sqlite hands back 0/1
        return bool(value) if value is not None else False


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class Notice(BaseModel):
    """A transient message for the user (rendered as a toast or inline alert)."""
    level: Literal["success", "info", "warning", "error"]
    message: str


class PhotoFile(BaseModel):
    """An image picked on the Capture screen, held fully in memory."""
    name: str
    data: bytes = Field(repr=False)
    mime_type: str = "image/jpeg"

    @classmethod
    def from_upload(cls, uploaded) -> "PhotoFile":
        """Build from a Streamlit UploadedFile (file_uploader or camera_input)."""
        return cls(
            name=getattr(uploaded, "name", None) or "photo.jpg",
            data=uploaded.getvalue(),
            mime_type=getattr(uploaded, "type", None) or "image/jpeg",
        )

    @property
    def signature(self) -> str:
        return hashlib.sha1(self.data).hexdigest()
