"""Errors that abort a relay request before or instead of uploading."""

from __future__ import annotations


class ImageRelayError(RuntimeError):
    """Base error rendered as ``{"error": ..., "message": ...}`` by the API."""

    status_code: int = 500

    def __init__(self, error: str, message: str | None = None) -> None:
        self.error = error
        self.message = message
        super().__init__(message or error)

    def to_payload(self) -> dict[str, str]:
        payload = {"error": self.error}
        if self.message:
            payload["message"] = self.message
        return payload


class ConfigurationMissing(ImageRelayError):
    """Raised when the Shopify store or access token is not configured."""

    status_code = 500


class MalformedInput(ImageRelayError):
    """Raised when the request body cannot be parsed."""

    status_code = 400


class NoFilesProvided(MalformedInput):
    """Raised when a multipart request carries no file parts."""

    def __init__(self) -> None:
        super().__init__("No files uploaded")


class MissingOrEmptyImages(MalformedInput):
    """Raised when a JSON request has no usable ``images`` array."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__("No images provided. Expected a non-empty 'images' array of strings.", message)


class InvalidBase64(MalformedInput):
    """Raised when an ``images`` entry is not valid base64."""

    def __init__(self, index: int, message: str) -> None:
        self.index = index
        super().__init__(f"Image at index {index} is not valid base64 data", message)


class InvalidImageContent(MalformedInput):
    """Raised when content verification rejects an upload."""

    def __init__(self, filename: str, message: str) -> None:
        self.filename = filename
        super().__init__(f"File {filename} is not a supported image", message)


class TooManyImages(MalformedInput):
    """Raised when a batch exceeds the configured size limit."""

    def __init__(self, received: int, limit: int) -> None:
        super().__init__(
            "Too many images in one request",
            f"Received {received} images; at most {limit} are accepted.",
        )


class InvalidConfiguration(ImageRelayError):
    """Raised when an environment variable holds an unusable value."""

    status_code = 500

    def __init__(self, variable: str, value: str, expected: str) -> None:
        self.variable = variable
        super().__init__(
            f"Invalid value for {variable}",
            f"{variable}={value!r} is not a valid {expected}.",
        )
