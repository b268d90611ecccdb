"""Request intake: multipart files and base64 data URLs."""

from .data_urls import read_data_url_batch
from .form_parts import read_form_files
from .models import NormalizedImage
from .validation import check_batch

__all__ = ["NormalizedImage", "check_batch", "read_data_url_batch", "read_form_files"]
