"""
Upload handling for the analyze endpoint.

Turns the multipart `file` field into an UploadedFile, checks presence, size
and type, and lays it out as provider-neutral request parts:

  [{"text": <instruction prompt>}, {"text": <file block>}]             text / CSV
  [{"text": <instruction prompt>}, {"mime_type": ..., "data": bytes}]  image / PDF
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from forgequote.config import DEFAULT_BINARY_MIME, MAX_FILE_SIZE
from forgequote.prompts import FORGING_ANALYSIS_PROMPT, render_file_block


class UploadError(Exception):
    """Client-side upload problem, carries the HTTP status to answer with."""

    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message}


@dataclass
class UploadedFile:
    filename: str
    content_type: str
    data: bytes

    @classmethod
    def from_storage(cls, storage) -> Optional["UploadedFile"]:
        """Build from a werkzeug FileStorage; None when the field is absent."""
        if storage is None:
            return None
        return cls(
            filename=storage.filename or "",
            content_type=(storage.mimetype or "").lower(),
            data=storage.read(),
        )

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def is_text(self) -> bool:
        return (
            "csv" in self.content_type
            or self.content_type.startswith("text/")
            or self.filename.lower().endswith(".csv")
        )

    @property
    def mime_type(self) -> str:
        return self.content_type or DEFAULT_BINARY_MIME

    def text(self) -> str:
        # utf-8-sig drops the BOM Excel writes at the start of CSV exports
        return self.data.decode("utf-8-sig", errors="replace")


def _is_supported_binary(mime_type: str) -> bool:
    return mime_type.startswith("image/") or mime_type == "application/pdf"


def validate_upload(upload: Optional[UploadedFile], max_size: int = MAX_FILE_SIZE) -> UploadedFile:
    """Raise UploadError unless the upload can be sent to the model as-is."""
    if upload is None or not upload.filename:
        raise UploadError("No file provided", 400)
    if upload.size == 0:
        raise UploadError("Uploaded file is empty", 400)
    if upload.size > max_size:
        raise UploadError(f"File too large (max {max_size // (1024 * 1024)}MB)", 413)
    if not upload.is_text and not _is_supported_binary(upload.mime_type):
        raise UploadError(
            f"Unsupported file type: {upload.mime_type}. Upload CSV, an image or a PDF "
            "(export spreadsheets to CSV first).",
            415,
        )
    return upload


def build_parts(upload: UploadedFile, prompt: str = FORGING_ANALYSIS_PROMPT) -> List[Dict[str, Any]]:
    """Prompt first, then the file either inlined as text or as a binary blob."""
    parts: List[Dict[str, Any]] = [{"text": prompt}]
    if upload.is_text:
        parts.append({"text": render_file_block(upload.filename, upload.text())})
    else:
        parts.append({"mime_type": upload.mime_type, "data": upload.data, "filename": upload.filename})
    return parts
