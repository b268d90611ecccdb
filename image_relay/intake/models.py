"""Data structures produced by request intake."""

from __future__ import annotations

import secrets
import time
from dataclasses import dataclass

from pydantic import BaseModel, Field, StrictStr

DEFAULT_CONTENT_TYPE = "image/jpeg"
DEFAULT_EXTENSION = "jpg"


@dataclass(frozen=True, slots=True)
class NormalizedImage:
    """An uploaded image held in memory for the duration of one request."""

    filename: str
    content: bytes
    content_type: str = DEFAULT_CONTENT_TYPE


class ImageBatchRequest(BaseModel):
    """JSON body carrying base64 strings or data URLs."""

    images: list[StrictStr] = Field(min_length=1)


def _epoch_millis() -> int:
    return int(time.time() * 1000)


def default_upload_filename() -> str:
    """Filename used when a multipart part does not name its file."""

    return f"image-{_epoch_millis()}.{DEFAULT_EXTENSION}"


def generated_filename(extension: str) -> str:
    """Filename for decoded base64 content: timestamp plus a random suffix."""

    return f"image-{_epoch_millis()}-{secrets.token_hex(4)}.{extension}"
