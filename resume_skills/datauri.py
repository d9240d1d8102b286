"""
data:<mimetype>;base64,<payload> helpers.
"""
from __future__ import annotations
import base64, binascii, re
from typing import Tuple

FALLBACK_MIME = "application/octet-stream"

_DATA_URI_RE = re.compile(r"^data:(?P<mime>[^;,]*)(?P<params>(;[^;,]*)*?);base64,(?P<data>.*)$", re.S)


def to_data_uri(data: bytes, mime_type: str | None) -> str:
    payload = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type or FALLBACK_MIME};base64,{payload}"


def parse_data_uri(uri: str) -> Tuple[str, bytes]:
    """Return (mime, raw bytes). Raises ValueError on anything but a base64 data URI."""
    m = _DATA_URI_RE.match(uri)
    if not m:
        raise ValueError("Not a base64 data URI")
    try:
        data = base64.b64decode(m.group("data"), validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 payload: {e}") from e
    return m.group("mime") or FALLBACK_MIME, data
