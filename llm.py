"""
llm.py — Inference client for SiteScan
---------------------------------------

Single entry point `invoke(prompt, file_urls=None)` used by:

* Capture enrichment (text extraction, description from the photo)
* The SiteScan Assistant chat panel

Photos stored locally are sent as base64 data URIs; http(s) references are
passed through unchanged.

Requirements:
- `openai` package for API access
- `backoff` for retry logic
- OPENAI_API_KEY in `.streamlit/secrets.toml` or the environment
"""

import logging
from pathlib import Path
from typing import List, Optional

import backoff
from openai import OpenAI, OpenAIError

from errors import InferenceError, InferenceUnavailable
from settings import LLM_MAX_TRIES, LLM_MODEL, OPENAI_API_KEY
from utils import image_to_datauri

logger = logging.getLogger(__name__)

_client = None


def is_configured() -> bool:
    return bool(OPENAI_API_KEY)


def get_client() -> OpenAI:
    global _client
    if not is_configured():
        raise InferenceUnavailable("OPENAI_API_KEY is not set")
    if _client is None:
        _client = OpenAI(api_key=OPENAI_API_KEY)
    return _client


def _image_reference(file_url: str) -> str:
    if file_url.startswith(("http://", "https://", "data:")):
        return file_url
    if not Path(file_url).exists():
        raise InferenceError(f"Image not found: {file_url}")
    return image_to_datauri(file_url)


def build_messages(prompt: str, file_urls: Optional[List[str]] = None) -> list:
    if not file_urls:
        return [{"role": "user", "content": prompt}]

    content = [{"type": "text", "text": prompt}]
    for url in file_urls:
        content.append({"type": "image_url", "image_url": {"url": _image_reference(url)}})
    return [{"role": "user", "content": content}]


@backoff.on_exception(backoff.expo, OpenAIError, max_tries=LLM_MAX_TRIES)
def _complete(messages: list, model: str) -> str:
    response = get_client().chat.completions.create(model=model, messages=messages)
    return (response.choices[0].message.content or "").strip()


def invoke(prompt: str, file_urls: Optional[List[str]] = None, model: str = LLM_MODEL) -> str:
    """
    Send a prompt (optionally with image references) and return the reply text.

    Raises:
        InferenceUnavailable: no API key configured.
        InferenceError: the request failed after retries.
    """
    messages = build_messages(prompt, file_urls)
    try:
        return _complete(messages, model)
    except OpenAIError as e:
        logger.error("Inference request failed: %s", e)
        raise InferenceError(str(e)) from e
