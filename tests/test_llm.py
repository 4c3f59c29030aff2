"""Tests for the inference client wrapper."""

import pytest

import llm
from errors import InferenceError, InferenceUnavailable


def test_text_only_message() -> None:
    assert llm.build_messages("hi") == [{"role": "user", "content": "hi"}]


def test_remote_image_passed_through() -> None:
    messages = llm.build_messages("describe", ["https://cdn.example/pin.jpg"])

    assert messages[0]["content"] == [
        {"type": "text", "text": "describe"},
        {"type": "image_url", "image_url": {"url": "https://cdn.example/pin.jpg"}},
    ]


def test_local_image_sent_as_data_uri(tmp_path) -> None:
    path = tmp_path / "pin.png"
    path.write_bytes(b"\x89PNG fake")

    url = llm.build_messages("describe", [str(path)])[0]["content"][1]["image_url"]["url"]

    assert url.startswith("data:image/png;base64,")


def test_missing_local_image_raises(tmp_path) -> None:
    with pytest.raises(InferenceError):
        llm.build_messages("describe", [str(tmp_path / "gone.jpg")])


def test_invoke_without_key_is_unavailable(monkeypatch) -> None:
    monkeypatch.setattr(llm, "OPENAI_API_KEY", None)
    monkeypatch.setattr(llm, "_client", None)

    assert not llm.is_configured()
    with pytest.raises(InferenceUnavailable):
        llm.invoke("hello")
