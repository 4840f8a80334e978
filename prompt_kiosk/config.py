import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

# --------------------------------------
# Defaults
# --------------------------------------
API_KEY_VARS = ("API_KEY", "GOOGLE_API_KEY", "GEMINI_API_KEY")
DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_TIMEOUT = 300.0
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    api_key: Optional[str]
    model: str = DEFAULT_MODEL
    base_url: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT
    stream: bool = True
    log_level: str = "INFO"

    @property
    def api_key_missing(self) -> bool:
        return not self.api_key


def _first_non_empty(env: Mapping[str, str], names) -> Optional[str]:
    for name in names:
        value = (env.get(name) or "").strip()
        if value:
            return value
    return None


def _float_from(env: Mapping[str, str], name: str, default: float) -> float:
    raw = (env.get(name) or "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def _bool_from(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = (env.get(name) or "").strip().lower()
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    return default


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Read settings from the process environment (after loading ``.env``).

    Passing ``environ`` skips ``.env`` loading and reads only from the mapping.
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    base_url = (environ.get("GEMINI_BASE_URL") or "").strip().rstrip("/")
    return Settings(
        api_key=_first_non_empty(environ, API_KEY_VARS),
        model=(environ.get("GEMINI_MODEL") or "").strip() or DEFAULT_MODEL,
        base_url=base_url or None,
        timeout=_float_from(environ, "GEMINI_TIMEOUT", DEFAULT_TIMEOUT),
        stream=_bool_from(environ, "GEMINI_STREAM", True),
        log_level=(environ.get("LOG_LEVEL") or "INFO").strip().upper() or "INFO",
    )


def configure_logging(level: str = "INFO") -> None:
    """Install one stream handler on the package logger; safe to call on every rerun."""
    logger = logging.getLogger("prompt_kiosk")
    resolved = logging.getLevelName(level.upper())
    logger.setLevel(resolved if isinstance(resolved, int) else logging.INFO)
    if any(getattr(h, "_prompt_kiosk", False) for h in logger.handlers):
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._prompt_kiosk = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
