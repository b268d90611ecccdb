"""Decode JSON batches of base64 strings and data URLs."""

from __future__ import annotations

import base64
import binascii
import json
import logging
import re
from typing import Any, Sequence

from pydantic import ValidationError

from image_relay.errors import InvalidBase64, MalformedInput, MissingOrEmptyImages
from image_relay.intake.models import (
    DEFAULT_CONTENT_TYPE,
    DEFAULT_EXTENSION,
    ImageBatchRequest,
    NormalizedImage,
    generated_filename,
)

logger = logging.getLogger(__name__)

_DATA_URL_MIME = re.compile(r"data:([A-Za-z0-9.+-]+/[A-Za-z0-9.+-]+);base64")
_EXTENSION = re.compile(r"[A-Za-z0-9]+")


def parse_batch_body(body: bytes) -> ImageBatchRequest:
    """Validate a raw JSON body into an ``ImageBatchRequest``."""

    try:
        payload: Any = json.loads(body or b"null")
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise MalformedInput("Request body is not valid JSON", str(exc)) from exc

    if not isinstance(payload, dict):
        raise MissingOrEmptyImages("Request body must be a JSON object.")

    try:
        return ImageBatchRequest.model_validate(payload)
    except ValidationError as exc:
        logger.info("Rejected image batch: %s", exc.errors(include_url=False))
        raise MissingOrEmptyImages(_first_error(exc)) from exc


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors(include_url=False)
    if not errors:
        return str(exc)
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first.get('msg', 'invalid value')}"


def content_type_and_extension(value: str) -> tuple[str, str]:
    """Infer MIME type and file extension from a ``data:`` prefix."""

    if not value.startswith("data:"):
        return DEFAULT_CONTENT_TYPE, DEFAULT_EXTENSION

    match = _DATA_URL_MIME.match(value)
    if not match:
        return DEFAULT_CONTENT_TYPE, DEFAULT_EXTENSION

    content_type = match.group(1)
    _, _, subtype = content_type.partition("/")
    extension = subtype.split("+", 1)[0]
    if not _EXTENSION.fullmatch(extension):
        extension = DEFAULT_EXTENSION
    return content_type, extension


def decode_payload(value: str) -> bytes:
    """Decode the base64 part of ``value``; raises ``binascii.Error`` on bad input."""

    _, comma, tail = value.partition(",")
    encoded = tail if comma else value
    compact = "".join(encoded.split())
    return base64.b64decode(compact, validate=True)


def decode_image(value: str, index: int) -> NormalizedImage:
    """Turn one ``images`` entry into a ``NormalizedImage``."""

    try:
        content = decode_payload(value)
    except (binascii.Error, ValueError) as exc:
        raise InvalidBase64(index, str(exc)) from exc
    if not content:
        raise InvalidBase64(index, "Decoded image is empty.")

    content_type, extension = content_type_and_extension(value)
    return NormalizedImage(
        filename=generated_filename(extension),
        content=content,
        content_type=content_type,
    )


def decode_images(images: Sequence[str]) -> list[NormalizedImage]:
    """Decode every entry in order; the first bad entry rejects the batch."""

    return [decode_image(value, index) for index, value in enumerate(images)]


def read_data_url_batch(body: bytes) -> list[NormalizedImage]:
    """Variant B intake: JSON ``{"images": [...]}`` to normalised images."""

    batch = parse_batch_body(body)
    return decode_images(batch.images)
