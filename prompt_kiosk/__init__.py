from .client import GeminiClient, PromptClientError, describe_error
from .config import Settings, load_settings
from .media import MediaAttachment, encode_upload, parse_data_url

__all__ = [
    "GeminiClient",
    "MediaAttachment",
    "PromptClientError",
    "Settings",
    "describe_error",
    "encode_upload",
    "load_settings",
    "parse_data_url",
]
