"""
Input preparer: validates an uploaded résumé and converts it into the single
document representation the extraction call expects.

Two representations exist and exactly one is active (RESUME_DOCUMENT_MODE):

• data_uri – the whole file as ``data:<mime>;base64,<payload>``; the model
  reads PDFs and images itself.
• text     – decoded UTF-8 text; PDFs are flattened with pdfplumber first.

Checks run empty → too large → type, so nothing is read or sent for a file
that fails any of them.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from resume_skills import config
from resume_skills.config import ANY_TYPE, DATA_URI_MODE, AllowedTypes
from resume_skills.datauri import FALLBACK_MIME, to_data_uri
from resume_skills.extractor import pdf_bytes_to_text

logger = logging.getLogger(__name__)


class UploadValidationError(ValueError):
    """Base class for files rejected before any request is sent."""

    kind = "invalid_upload"


class EmptyFileError(UploadValidationError):
    kind = "empty_file"


class FileTooLargeError(UploadValidationError):
    kind = "file_too_large"


class UnsupportedTypeError(UploadValidationError):
    kind = "unsupported_type"


class UnreadableFileError(UploadValidationError):
    kind = "unreadable_file"


@dataclass(frozen=True)
class UploadCandidate:
    """The raw file picked by the user."""

    filename: str
    mime_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    @classmethod
    def from_uploaded_file(cls, uploaded: Any) -> "UploadCandidate":
        """Build from a Streamlit UploadedFile (name / type / getvalue())."""
        return cls(
            filename=uploaded.name or "",
            mime_type=(uploaded.type or "").lower(),
            data=uploaded.getvalue(),
        )


@dataclass(frozen=True)
class PreparedDocument:
    mode: str
    content: str
    mime_type: str
    filename: str = ""

    @property
    def is_data_uri(self) -> bool:
        return self.mode == DATA_URI_MODE


def _format_size(n: int) -> str:
    mb = n / (1024 * 1024)
    return f"{mb:g}MB" if mb >= 1 else f"{n / 1024:g}KB"


def describe_allowed_types(allowed: AllowedTypes) -> str:
    if allowed == ANY_TYPE:
        return "any file type"
    return ", ".join(allowed)


def validate(candidate: UploadCandidate, max_bytes: int, allowed_types: AllowedTypes) -> None:
    """Raise the matching UploadValidationError, or return None for a good file."""
    if candidate.size <= 0:
        raise EmptyFileError("File cannot be empty.")

    if max_bytes and candidate.size > max_bytes:
        raise FileTooLargeError(
            f"File size should be less than {_format_size(max_bytes)} "
            f"(got {_format_size(candidate.size)})."
        )

    if allowed_types != ANY_TYPE and candidate.mime_type.lower() not in allowed_types:
        shown = candidate.mime_type or "unknown"
        raise UnsupportedTypeError(
            f"File type '{shown}' is not supported for skill extraction. "
            f"Allowed: {describe_allowed_types(allowed_types)}."
        )


def _decode_text(data: bytes) -> str:
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise UnreadableFileError(
            "The file is not valid UTF-8 text. Save it as UTF-8 or upload a PDF."
        ) from e


def _to_text(candidate: UploadCandidate) -> str:
    if candidate.mime_type == "application/pdf":
        try:
            text = pdf_bytes_to_text(candidate.data)
        except Exception as e:  # pdfminer has no common base error
            logger.warning("Could not read PDF %r: %s", candidate.filename, e)
            raise UnreadableFileError(f"Could not read the PDF: {e}") from e
    else:
        text = _decode_text(candidate.data)

    if not text.strip():
        raise UnreadableFileError(
            "No readable text was found in the file. Is it a scanned image?"
        )
    return text


def prepare(
    candidate: UploadCandidate,
    *,
    mode: Optional[str] = None,
    max_bytes: Optional[int] = None,
    allowed_types: Optional[AllowedTypes | Iterable[str]] = None,
) -> PreparedDocument:
    """
    Validate *candidate* and convert it for the extraction call.

    Unset arguments fall back to config.get_upload_limits().
    """
    if mode is None or max_bytes is None or allowed_types is None:
        limits = config.get_upload_limits()
        mode = mode or limits.mode
        max_bytes = limits.max_bytes if max_bytes is None else max_bytes
        if allowed_types is None and mode == limits.mode:
            allowed_types = limits.allowed_types

    if max_bytes < 0:
        raise ValueError(f"max_bytes cannot be negative, got {max_bytes} (use 0 for no limit)")

    if mode not in config.DOCUMENT_MODES:
        raise ValueError(f"Unknown document mode: {mode!r}")

    if allowed_types is None:
        allowed_types = config.DEFAULT_ALLOWED_TYPES[mode]
    elif isinstance(allowed_types, str):
        allowed_types = config.parse_allowed_types(allowed_types, mode)
    else:
        allowed_types = tuple(t.lower() for t in allowed_types)

    validate(candidate, max_bytes, allowed_types)

    mime = candidate.mime_type or FALLBACK_MIME
    if mode == DATA_URI_MODE:
        content = to_data_uri(candidate.data, mime)
    else:
        content = _to_text(candidate)

    logger.info(
        "Prepared %r (%s, %d bytes) as %s", candidate.filename, mime, candidate.size, mode
    )
    return PreparedDocument(mode=mode, content=content, mime_type=mime, filename=candidate.filename)
