import logging
from typing import Any, Iterator, Optional, Union

from google import genai
from google.genai import errors, types

from .config import Settings
from .media import MediaAttachment

logger = logging.getLogger(__name__)

BAD_REQUEST_MESSAGE = (
    "Error: Bad request. Please check your input and try again. "
    "The media format might be unsupported or the content may have been blocked."
)
UNKNOWN_ERROR_MESSAGE = "Failed to generate content due to an unknown error."
GENERIC_ERROR_PREFIX = "Error generating content: "


# --------------------------------------
# Errors
# --------------------------------------
class PromptClientError(Exception):
    """A generation failure already phrased for display."""


class ConfigurationError(RuntimeError):
    pass


class ContentBlockedError(Exception):
    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Prompt was blocked ({reason}).")


class EmptyResponseError(Exception):
    def __init__(self) -> None:
        super().__init__("The model returned no text.")


def _api_error_text(error: errors.APIError) -> str:
    status = f"{error.code} {error.status}" if error.status else str(error.code)
    return f"{status}: {error.message}" if error.message else status


def describe_error(error: object) -> str:
    """Map any failure to the message shown in the kiosk."""
    if isinstance(error, PromptClientError):
        return str(error)
    if isinstance(error, ContentBlockedError):
        return BAD_REQUEST_MESSAGE
    if isinstance(error, errors.APIError):
        if error.code == 400:
            return BAD_REQUEST_MESSAGE
        return f"{GENERIC_ERROR_PREFIX}{_api_error_text(error)}"
    if isinstance(error, Exception):
        if "400" in str(error):
            return BAD_REQUEST_MESSAGE
        return f"{GENERIC_ERROR_PREFIX}{error}"
    return UNKNOWN_ERROR_MESSAGE


# --------------------------------------
# Request assembly
# --------------------------------------
def build_contents(prompt: str, media: Optional[MediaAttachment]) -> Union[str, types.Content]:
    """Inline-data part plus optional trailing text when media is attached, else the raw prompt."""
    if media is None:
        return prompt

    parts = [types.Part.from_bytes(data=media.raw_bytes(), mime_type=media.mime_type)]
    if prompt:
        parts.append(types.Part.from_text(text=prompt))
    return types.Content(role="user", parts=parts)


def block_reason(response: Any) -> Optional[str]:
    feedback = getattr(response, "prompt_feedback", None)
    reason = getattr(feedback, "block_reason", None)
    if not reason:
        return None
    return str(getattr(reason, "value", reason))


# --------------------------------------
# Client
# --------------------------------------
class GeminiClient:
    """One-shot text generation through the google-genai SDK."""

    def __init__(self, settings: Settings, client: Optional[genai.Client] = None) -> None:
        if settings.api_key_missing:
            raise ConfigurationError("GOOGLE_API_KEY environment variable not set.")
        self.settings = settings
        if client is None:
            options: dict = {"timeout": int(settings.timeout * 1000)}
            if settings.base_url:
                options["base_url"] = settings.base_url
            client = genai.Client(api_key=settings.api_key, http_options=types.HttpOptions(**options))
        self.client = client

    def close(self) -> None:
        close = getattr(self.client, "close", None)
        if callable(close):
            close()

    def _log_request(self, media: Optional[MediaAttachment]) -> None:
        logger.info(
            "Calling %s (media=%s)",
            self.settings.model,
            media.mime_type if media is not None else "none",
        )

    def _fail(self, exc: Exception) -> PromptClientError:
        logger.error("Gemini API call failed: %s", exc, exc_info=True)
        return PromptClientError(describe_error(exc))

    def _stream_raw(self, prompt: str, media: Optional[MediaAttachment]) -> Iterator[str]:
        self._log_request(media)
        produced = False
        blocked: Optional[str] = None
        for chunk in self.client.models.generate_content_stream(
            model=self.settings.model,
            contents=build_contents(prompt, media),
        ):
            blocked = block_reason(chunk) or blocked
            text = chunk.text
            if text:
                produced = True
                yield text
        if not produced:
            if blocked:
                raise ContentBlockedError(blocked)
            raise EmptyResponseError()

    def _generate_raw(self, prompt: str, media: Optional[MediaAttachment]) -> str:
        self._log_request(media)
        response = self.client.models.generate_content(
            model=self.settings.model,
            contents=build_contents(prompt, media),
        )
        text = response.text
        if not text:
            reason = block_reason(response)
            if reason:
                raise ContentBlockedError(reason)
            raise EmptyResponseError()
        return text

    def stream(self, prompt: str, media: Optional[MediaAttachment] = None) -> Iterator[str]:
        """Yield text deltas as they arrive. Failures surface as PromptClientError."""
        try:
            yield from self._stream_raw(prompt, media)
        except Exception as exc:
            raise self._fail(exc) from exc

    def generate(self, prompt: str, media: Optional[MediaAttachment] = None) -> str:
        """Return the model's text response verbatim."""
        if self.settings.stream:
            return "".join(self.stream(prompt, media))
        try:
            return self._generate_raw(prompt, media)
        except Exception as exc:
            raise self._fail(exc) from exc
