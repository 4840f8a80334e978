"""Session-scoped request state for the kiosk.

Every function takes the Streamlit session state (or any mutable mapping) so
the Idle -> Loading -> Success/Failed cycle can be driven without a browser.
"""

import logging
from typing import Any, Callable, Iterable, MutableMapping, Optional, Union

from .client import PromptClientError, describe_error
from .media import MediaAttachment

logger = logging.getLogger(__name__)

Generate = Callable[[str, Optional[MediaAttachment]], Union[str, Iterable[str]]]

DEFAULTS = {
    "prompt": "",
    "media": None,
    "response": "",
    "error": None,
    "is_loading": False,
    "pending": None,
    "upload_nonce": 0,
}


def init_state(ss: MutableMapping[str, Any]) -> None:
    for key, value in DEFAULTS.items():
        ss.setdefault(key, value)


def has_input(prompt: Optional[str], media: Optional[MediaAttachment]) -> bool:
    return bool((prompt or "").strip()) or media is not None


def can_submit(ss: MutableMapping[str, Any], prompt: Optional[str], api_key_present: bool) -> bool:
    if not api_key_present or ss.get("is_loading"):
        return False
    return has_input(prompt, ss.get("media"))


def submit(ss: MutableMapping[str, Any], prompt: Optional[str], api_key_present: bool) -> bool:
    """Move Idle -> Loading. Returns False (and changes nothing) when the submit is not allowed."""
    if not can_submit(ss, prompt, api_key_present):
        logger.debug("Ignoring submit (loading=%s)", bool(ss.get("is_loading")))
        return False

    ss["prompt"] = prompt or ""
    ss["error"] = None
    ss["response"] = ""
    ss["is_loading"] = True
    ss["pending"] = {"prompt": ss["prompt"], "media": ss.get("media")}
    return True


def run_pending(
    ss: MutableMapping[str, Any],
    generate: Generate,
    on_text: Optional[Callable[[str], None]] = None,
) -> bool:
    """Issue the single pending request and settle into Success or Failed.

    ``generate`` may return the full text or an iterable of text deltas; in
    the latter case ``on_text`` receives the accumulated text after each one.
    Returns True on success. Loading is always cleared afterwards.
    """
    pending = ss.get("pending")
    if not pending:
        ss["is_loading"] = False
        return False

    try:
        result = generate(pending["prompt"], pending["media"])
        if isinstance(result, str):
            text = result
        else:
            text = ""
            for chunk in result:
                text += chunk
                if on_text is not None:
                    on_text(text)
        ss["response"] = text
    except PromptClientError as exc:
        ss["error"] = str(exc)
    except Exception as exc:
        logger.exception("Unexpected failure while generating content")
        ss["error"] = describe_error(exc)
    finally:
        ss["pending"] = None
        ss["is_loading"] = False

    return ss.get("error") is None


def attach_media(ss: MutableMapping[str, Any], attachment: Optional[MediaAttachment]) -> bool:
    """Stage an attachment. Only one may be staged, and never while loading."""
    if attachment is None or ss.get("media") is not None or ss.get("is_loading"):
        return False
    ss["media"] = attachment
    return True


def remove_media(ss: MutableMapping[str, Any]) -> None:
    ss["media"] = None
    # new widget keys reset the upload controls
    ss["upload_nonce"] = int(ss.get("upload_nonce") or 0) + 1
