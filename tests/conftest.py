"""
Pytest configuration and fixtures for the test suite.

Credential and tuning variables are cleared for every test and ``.env``
loading is disabled, so a developer's local secrets never reach a test run.
"""

import base64
from typing import Iterable, Optional
from unittest.mock import MagicMock

import pytest
from google.genai import types

from prompt_kiosk import config
from prompt_kiosk.config import Settings
from prompt_kiosk.media import MediaAttachment

ENV_VARS = config.API_KEY_VARS + (
    "GEMINI_MODEL",
    "GEMINI_BASE_URL",
    "GEMINI_TIMEOUT",
    "GEMINI_STREAM",
    "LOG_LEVEL",
)

# 1x1 transparent PNG
PNG_BASE64 = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mNkYAAAAAYAAjCB0C8AAAAASUVORK5CYII="


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config, "load_dotenv", lambda *args, **kwargs: False)


@pytest.fixture
def settings() -> Settings:
    return Settings(api_key="test-key")


@pytest.fixture
def png_attachment() -> MediaAttachment:
    return MediaAttachment(data=PNG_BASE64, mime_type="image/png")


def text_chunk(text: str, thought: bool = False) -> types.GenerateContentResponse:
    part = types.Part(text=text, thought=True if thought else None)
    return types.GenerateContentResponse(
        candidates=[types.Candidate(content=types.Content(role="model", parts=[part]))]
    )


def blocked_response(reason: str = "SAFETY") -> types.GenerateContentResponse:
    return types.GenerateContentResponse(
        prompt_feedback=types.GenerateContentResponsePromptFeedback(block_reason=reason)
    )


def make_genai(
    chunks: Optional[Iterable[types.GenerateContentResponse]] = None,
    response: Optional[types.GenerateContentResponse] = None,
) -> MagicMock:
    """A google-genai client double whose models answer with the given responses."""
    client = MagicMock()
    client.models.generate_content_stream.return_value = iter(list(chunks or []))
    client.models.generate_content.return_value = response
    return client


def api_error_body(code: int, status: str, message: str) -> dict:
    return {"error": {"code": code, "status": status, "message": message}}


def b64(raw: bytes) -> str:
    return base64.b64encode(raw).decode("ascii")
