"""multipart/form-data bodies for single-file uploads."""

from __future__ import annotations

import secrets
import time

import httpx

BOUNDARY_PREFIX = "----ImageRelayBoundary"

# httpx only encodes bodies as part of a request; the URL is never contacted.
_ENCODING_URL = "http://multipart.invalid/"


def generate_boundary() -> str:
    """Random hex plus the current epoch milliseconds."""

    return f"{BOUNDARY_PREFIX}{secrets.token_hex(8)}{int(time.time() * 1000)}"


class MultipartEncoder:
    """Builds a one-part multipart body with httpx's form encoder.

    The boundary is chosen per body and regenerated until it does not occur in
    the payload or the filename.
    """

    def __init__(self) -> None:
        self.boundary = generate_boundary()

    @property
    def content_type(self) -> str:
        return f"multipart/form-data; boundary={self.boundary}"

    def _ensure_unique_boundary(self, *chunks: bytes) -> None:
        while any(self.boundary.encode("ascii") in chunk for chunk in chunks):
            self.boundary = generate_boundary()

    def add_file_part(self, name: str, filename: str, content_type: str, content: bytes) -> bytes:
        """Return the complete body: one file part followed by the closing delimiter."""

        self._ensure_unique_boundary(content, filename.encode("utf-8"))
        request = httpx.Request(
            "POST",
            _ENCODING_URL,
            headers={"Content-Type": self.content_type},
            files={name: (filename, content, content_type)},
        )
        return request.read()
