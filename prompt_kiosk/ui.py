import logging
from typing import Any, MutableMapping, Tuple

import streamlit as st

from . import state
from .client import GeminiClient
from .config import Settings, configure_logging, load_settings
from .media import IMAGE_TYPES, VIDEO_TYPES, encode_upload

logger = logging.getLogger(__name__)

PAGE_TITLE = "Gemini Prompt Kiosk"
PAGE_CAPTION = "Your direct interface to Google's Gemini AI"
CONFIG_ERROR_TEXT = "GOOGLE_API_KEY is not set. Please configure your environment secrets."
IDLE_HINT = "The AI's response will appear here."
PROMPT_PLACEHOLDER = "Enter a prompt or upload an image/video..."
MISSING_KEY_PLACEHOLDER = "API Key not configured"
STREAM_CURSOR = "▌"


# --------------------------------------
# Callbacks
# --------------------------------------
def _uploader_key(kind: str, ss: MutableMapping[str, Any]) -> str:
    return f"{kind}_upload_{ss['upload_nonce']}"


def _handle_upload(key: str) -> None:
    attachment = encode_upload(st.session_state.get(key))
    if state.attach_media(st.session_state, attachment):
        logger.info("Attached %s", attachment.mime_type)


def _handle_remove() -> None:
    state.remove_media(st.session_state)
    logger.info("Attachment removed")


# --------------------------------------
# Rendering
# --------------------------------------
def render_styles() -> None:
    st.markdown(
        """
        <style>
            .stApp {
                background: linear-gradient(135deg, #111827 0%, #0f172a 50%, #000000 100%);
            }
            .kiosk-title {
                text-align: center;
                font-size: 3rem;
                font-weight: 700;
                margin-bottom: 0.25rem;
                background: linear-gradient(90deg, #c084fc 0%, #6366f1 100%);
                -webkit-background-clip: text;
                -webkit-text-fill-color: transparent;
            }
            .kiosk-caption {
                text-align: center;
                color: #9ca3af;
                margin-bottom: 2rem;
            }
        </style>
        """,
        unsafe_allow_html=True,
    )


def render_header() -> None:
    st.markdown(f'<div class="kiosk-title">{PAGE_TITLE}</div>', unsafe_allow_html=True)
    st.markdown(f'<div class="kiosk-caption">{PAGE_CAPTION}</div>', unsafe_allow_html=True)


def render_config_banner() -> None:
    st.error(f"**Configuration Error:** {CONFIG_ERROR_TEXT}", icon="⚠️")


def render_response_panel(ss: MutableMapping[str, Any], api_key_present: bool) -> Tuple[Any, Any]:
    """Draw the response area and return the (status, text) placeholders."""
    with st.container(border=True):
        if ss["prompt"] and (ss["is_loading"] or ss["response"] or ss["error"]):
            st.caption(f"You: {ss['prompt']}")
        status_slot = st.empty()
        text_slot = st.empty()

    if ss["is_loading"]:
        return status_slot, text_slot
    if ss["error"]:
        text_slot.error(f"**An Error Occurred:** {ss['error']}")
    elif ss["response"]:
        text_slot.markdown(ss["response"])
    elif api_key_present:
        text_slot.caption(IDLE_HINT)
    return status_slot, text_slot


def render_attachment(ss: MutableMapping[str, Any], api_key_present: bool) -> None:
    media = ss.get("media")
    if media is None:
        return

    preview, actions = st.columns([3, 1])
    with preview:
        if media.kind == "image":
            st.image(media.raw_bytes(), caption="Media preview", width=240)
        elif media.kind == "video":
            st.video(media.raw_bytes(), format=media.mime_type, loop=True, autoplay=True, muted=True)
        else:
            st.caption(f"Attached: {media.mime_type}")
    with actions:
        st.button("Remove", key="remove_media", on_click=_handle_remove, help="Remove media")
        send_disabled = not state.can_submit(ss, "", api_key_present)
        if st.button("Send attachment", key="send_attachment", type="primary", disabled=send_disabled):
            if state.submit(ss, "", api_key_present):
                st.rerun()


def render_uploaders(ss: MutableMapping[str, Any], api_key_present: bool) -> None:
    disabled = bool(ss["is_loading"]) or not api_key_present or ss.get("media") is not None
    image_col, video_col = st.columns(2)
    for column, kind, label, types in (
        (image_col, "image", "Upload image", IMAGE_TYPES),
        (video_col, "video", "Upload video", VIDEO_TYPES),
    ):
        key = _uploader_key(kind, ss)
        with column:
            st.file_uploader(
                label,
                type=types,
                key=key,
                on_change=_handle_upload,
                args=(key,),
                disabled=disabled,
            )


def render_prompt_input(ss: MutableMapping[str, Any], api_key_present: bool) -> None:
    prompt = st.chat_input(
        PROMPT_PLACEHOLDER if api_key_present else MISSING_KEY_PLACEHOLDER,
        key="prompt_input",
        disabled=bool(ss["is_loading"]) or not api_key_present,
    )
    if prompt is None:
        return
    if state.submit(ss, prompt, api_key_present):
        st.rerun()


def generate_pending(ss: MutableMapping[str, Any], settings: Settings, status_slot: Any, text_slot: Any) -> None:
    """Run the in-flight request, streaming text into the response panel."""
    client = GeminiClient(settings)
    generate = client.stream if settings.stream else client.generate

    def show(text: str) -> None:
        text_slot.markdown(text + STREAM_CURSOR)

    try:
        with status_slot.container():
            with st.spinner("Thinking..."):
                state.run_pending(ss, generate, on_text=show)
    finally:
        client.close()


# --------------------------------------
# Main application
# --------------------------------------
def main() -> None:
    settings = load_settings()
    configure_logging(settings.log_level)
    st.set_page_config(page_title=PAGE_TITLE, page_icon="✨", layout="centered")

    ss = st.session_state
    state.init_state(ss)
    api_key_present = not settings.api_key_missing

    render_styles()
    render_header()
    if not api_key_present:
        render_config_banner()

    status_slot, text_slot = render_response_panel(ss, api_key_present)
    render_attachment(ss, api_key_present)
    render_uploaders(ss, api_key_present)
    render_prompt_input(ss, api_key_present)

    if ss["is_loading"]:
        generate_pending(ss, settings, status_slot, text_slot)
        st.rerun()
