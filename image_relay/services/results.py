"""Per-image upload outcomes and the batch response built from them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence, Union

ALL_UPLOADED_MESSAGE = "All images uploaded successfully"
PARTIAL_MESSAGE = "Some uploads failed"


@dataclass(frozen=True, slots=True)
class UploadSuccess:
    """File accepted by Shopify."""

    url: str
    remote_filename: str
    size_bytes: int

    success = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": True,
            "url": self.url,
            "filename": self.remote_filename,
            "size": self.size_bytes,
        }


@dataclass(frozen=True, slots=True)
class UploadFailure:
    """Upload that did not produce a Shopify file."""

    message: str

    success = False

    def to_dict(self) -> dict[str, Any]:
        return {"success": False, "error": self.message}


UploadResult = Union[UploadSuccess, UploadFailure]


@dataclass(frozen=True, slots=True)
class AggregateResponse:
    """Outcome of a whole batch, ready to be rendered as JSON."""

    results: tuple[UploadResult, ...]

    @classmethod
    def from_results(cls, results: Sequence[UploadResult]) -> "AggregateResponse":
        return cls(results=tuple(results))

    @property
    def failed_count(self) -> int:
        return sum(1 for result in self.results if not result.success)

    @property
    def all_succeeded(self) -> bool:
        return self.failed_count == 0

    @property
    def status_code(self) -> int:
        return 200 if self.all_succeeded else 207

    @property
    def message(self) -> str:
        return ALL_UPLOADED_MESSAGE if self.all_succeeded else PARTIAL_MESSAGE

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "message": self.message,
            "results": [result.to_dict() for result in self.results],
        }
        if self.all_succeeded:
            payload["count"] = len(self.results)
        else:
            payload["failedCount"] = self.failed_count
        return payload
