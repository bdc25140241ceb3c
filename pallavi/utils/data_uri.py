from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Union
import base64
import binascii
import mimetypes
import re

MAX_ATTACHMENT_BYTES = 4 * 1024 * 1024

_DATA_URI_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)(?P<params>(;[\w.+-]+=[^;,]*)*);base64,(?P<data>[A-Za-z0-9+/=\s]*)$")


class AttachmentTooLarge(ValueError):
    def __init__(self, size: int, limit: int = MAX_ATTACHMENT_BYTES):
        super().__init__(f"Attachment is {size} bytes, limit is {limit} bytes")
        self.size = size
        self.limit = limit


@dataclass(frozen=True)
class Attachment:
    mime_type: str
    data: str #base64 payload, no prefix

    @property
    def is_image(self) -> bool:
        return self.mime_type.startswith("image/")

    @property
    def is_text(self) -> bool:
        return self.mime_type.startswith("text/")

    def to_bytes(self) -> bytes:
        return base64.b64decode(self.data)

    def to_data_uri(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"


def parse_data_uri(value: str) -> Attachment:
    """Split a `data:<mime>;base64,<payload>` string into an Attachment.

    Raises ValueError if the string is not a base64 data URI or the payload
    does not decode.
    """
    match = _DATA_URI_RE.match(value or "")
    if not match:
        raise ValueError("Expected a data URI of the form 'data:<mimetype>;base64,<encoded_data>'")
    data = re.sub(r"\s+", "", match.group("data"))
    try:
        base64.b64decode(data, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 payload in data URI: {e}") from e
    return Attachment(mime_type=match.group("mime").lower(), data=data)


def to_data_uri(content: Union[str, Path, bytes], mime_type: str | None = None, max_bytes: int = MAX_ATTACHMENT_BYTES) -> str:
    """Encode raw bytes or a file as a data URI, enforcing the size cap first."""
    if isinstance(content, (str, Path)):
        path = Path(content)
        if not path.exists():
            raise FileNotFoundError(f"Attachment file not found: {content}")
        size = path.stat().st_size
        if size > max_bytes:
            raise AttachmentTooLarge(size, max_bytes)
        if mime_type is None:
            mime_type, _ = mimetypes.guess_type(path.name)
        content = path.read_bytes()
    elif isinstance(content, bytes):
        if len(content) > max_bytes:
            raise AttachmentTooLarge(len(content), max_bytes)
    else:
        raise ValueError(f"Unsupported attachment data type: {type(content)}")

    mime_type = mime_type or "application/octet-stream"
    return f"data:{mime_type};base64,{base64.b64encode(content).decode('utf-8')}"
