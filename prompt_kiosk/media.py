import base64
import mimetypes
from dataclasses import dataclass
from typing import Any, Optional

# --------------------------------------
# Accepted upload types
# --------------------------------------
IMAGE_TYPES = ["png", "jpg", "jpeg", "webp", "gif", "heic", "heif"]
VIDEO_TYPES = ["mp4", "mov", "webm", "mpeg", "mpg", "avi", "3gp"]

MIME_FIX = {
    "image/x-png": "image/png",
    "image/jpg": "image/jpeg",
    "image/pjpeg": "image/jpeg",
    "video/x-m4v": "video/mp4",
}
FALLBACK_MIME = "application/octet-stream"


@dataclass(frozen=True)
class MediaAttachment:
    data: str
    mime_type: str

    @property
    def kind(self) -> str:
        if self.mime_type.startswith("image/"):
            return "image"
        if self.mime_type.startswith("video/"):
            return "video"
        return "other"

    @property
    def data_url(self) -> str:
        return to_data_url(self.mime_type, self.data)

    def raw_bytes(self) -> bytes:
        return base64.b64decode(self.data)


def normalize_mime_type(mime: Optional[str]) -> str:
    if not mime:
        return FALLBACK_MIME
    mime_lower = mime.strip().lower()
    return MIME_FIX.get(mime_lower, mime_lower) or FALLBACK_MIME


def to_data_url(mime_type: str, data: str) -> str:
    return f"data:{mime_type};base64,{data}"


def parse_data_url(data_url: Optional[str]) -> Optional[MediaAttachment]:
    """Split ``data:<mime>;base64,<data>`` into a MediaAttachment.

    The MIME type is the text between ``data:`` and the first ``;`` and the
    payload is everything after the first ``,``. Anything that is not a base64
    data URL yields ``None``.
    """
    if not data_url or not data_url.startswith("data:"):
        return None
    header, sep, data = data_url.partition(",")
    if not sep or ";base64" not in header:
        return None
    mime_type = header[len("data:") : header.index(";")]
    return MediaAttachment(data=data, mime_type=normalize_mime_type(mime_type))


def _read_bytes(uploaded_file: Any) -> Optional[bytes]:
    getvalue = getattr(uploaded_file, "getvalue", None)
    if callable(getvalue):
        return getvalue()
    read = getattr(uploaded_file, "read", None)
    if not callable(read):
        return None
    data = read()
    seek = getattr(uploaded_file, "seek", None)
    if callable(seek):
        seek(0)
    return data


def encode_upload(uploaded_file: Any) -> Optional[MediaAttachment]:
    """Convert an uploaded file into a MediaAttachment, or None if nothing was chosen."""
    if uploaded_file is None:
        return None
    data = _read_bytes(uploaded_file)
    if not data:
        return None

    name = getattr(uploaded_file, "name", None) or ""
    mime = getattr(uploaded_file, "type", None) or mimetypes.guess_type(name)[0]
    return MediaAttachment(
        data=base64.b64encode(data).decode("ascii"),
        mime_type=normalize_mime_type(mime),
    )

