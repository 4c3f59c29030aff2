"""
enrichment.py — AI enrichment of a freshly captured photo

Two independent requests start as soon as a photo is picked:

1. Text extraction: inscriptions, symbols or markings visible on the object
2. Description: a short archaeological description of the object

Each uploads its own copy of the photo and fills its own result slot. One
failing never affects the other, and neither blocks saving the artifact.
"""

import logging
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Callable, Optional

from errors import InferenceUnavailable
from models import Notice, PhotoFile
from utils import run_ocr

logger = logging.getLogger(__name__)

NO_TEXT_DETECTED = "No visible text detected"

TEXT_EXTRACTION_PROMPT = (
    "Examine this photo of an archaeological artifact and report any visible text, "
    "inscriptions, symbols, numerals or markings exactly as they appear. "
    "If there is nothing legible, reply with an empty response."
)

DESCRIPTION_PROMPT = (
    "You are assisting an archaeologist documenting finds in the field. "
    "Write a 3-5 sentence description of the artifact in this photo covering its "
    "probable material, condition, likely period or culture, and any notable features. "
    "Reply with the description only."
)

# Shared pool for enrichment requests across sessions
_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="enrichment")


def extract_text(file_url: str, invoke: Callable) -> str:
    """Ask the inference service for visible text; fall back to local OCR when it is not configured."""
    try:
        text = invoke(TEXT_EXTRACTION_PROMPT, file_urls=[file_url])
    except InferenceUnavailable:
        logger.info("Inference unavailable, using local OCR for %s", file_url)
        text = run_ocr(file_url)
    text = (text or "").strip()
    return text or NO_TEXT_DETECTED


def generate_description(file_url: str, invoke: Callable) -> str:
    return (invoke(DESCRIPTION_PROMPT, file_urls=[file_url]) or "").strip()


class EnrichmentSlot:
    """Read-only view over one in-flight request."""

    def __init__(self, label: str, future: Future):
        self.label = label
        self.future = future

    @property
    def pending(self) -> bool:
        return not self.future.done()

    @property
    def failed(self) -> bool:
        return self.future.done() and self.future.exception() is not None

    @property
    def value(self) -> Optional[str]:
        if self.pending or self.failed:
            return None
        return self.future.result()

    def notice(self) -> Optional[Notice]:
        if self.pending:
            return None
        if self.failed:
            logger.warning("%s failed: %s", self.label, self.future.exception())
            return Notice(level="warning", message=f"{self.label} failed. You can fill it in manually.")
        return Notice(level="success", message=f"{self.label} ready")


class EnrichmentJob:
    def __init__(self, photo_signature: str, text: EnrichmentSlot, description: EnrichmentSlot):
        self.photo_signature = photo_signature
        self.text = text
        self.description = description

    @property
    def done(self) -> bool:
        return not (self.text.pending or self.description.pending)


def _upload_then(task: Callable, photo: PhotoFile, upload: Callable, invoke: Callable) -> str:
    file_url = upload(photo)["file_url"]
    return task(file_url, invoke)


def start_enrichment(
    photo: PhotoFile,
    upload: Callable,
    invoke: Callable,
    executor: Optional[Executor] = None,
) -> EnrichmentJob:
    """Submit both requests concurrently and return immediately."""
    pool = executor or _executor
    text_future = pool.submit(_upload_then, extract_text, photo, upload, invoke)
    description_future = pool.submit(_upload_then, generate_description, photo, upload, invoke)
    logger.info("Started enrichment for photo %s", photo.name)
    return EnrichmentJob(
        photo.signature,
        EnrichmentSlot("Text extraction", text_future),
        EnrichmentSlot("AI description", description_future),
    )
