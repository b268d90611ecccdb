"""Read image files from multipart/form-data requests."""

from __future__ import annotations

import logging

from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.formparsers import MultiPartException
from starlette.requests import Request

from image_relay.errors import MalformedInput, NoFilesProvided
from image_relay.intake.models import DEFAULT_CONTENT_TYPE, NormalizedImage, default_upload_filename

logger = logging.getLogger(__name__)

FORM_PARSE_ERROR = "Error parsing form data"


async def read_form_files(request: Request, max_files: int = 1000) -> list[NormalizedImage]:
    """Variant A intake: every file part of the form becomes a ``NormalizedImage``.

    Parts without a filename are treated as plain fields and skipped. Missing
    filenames or content types on file parts fall back to the defaults used by
    the storefront client.
    """

    try:
        form = await request.form(max_files=max_files)
    except MultiPartException as exc:
        logger.warning("Multipart parser error: %s", exc.message)
        raise MalformedInput(FORM_PARSE_ERROR, exc.message) from exc
    except StarletteHTTPException as exc:
        # Starlette re-raises parser errors as HTTP 400 when running inside an app.
        logger.warning("Multipart parser error: %s", exc.detail)
        raise MalformedInput(FORM_PARSE_ERROR, str(exc.detail)) from exc

    images: list[NormalizedImage] = []
    try:
        for _, value in form.multi_items():
            if not isinstance(value, UploadFile):
                continue
            content = await value.read()
            images.append(
                NormalizedImage(
                    filename=value.filename or default_upload_filename(),
                    content=content,
                    content_type=value.content_type or DEFAULT_CONTENT_TYPE,
                ),
            )
    finally:
        await form.close()

    if not images:
        raise NoFilesProvided()
    return images
