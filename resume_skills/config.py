"""
Configuration settings for the resume-skills application.

This file contains configuration for the LLM providers and the upload rules.
Everything can be overridden from the environment or a local .env file.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple, Union

from dotenv import load_dotenv
load_dotenv()          # ← must be before os.getenv(...)
import os

# LLM Provider Configuration
# Set to "ollama" or "openai"
LLM_PROVIDER = os.getenv("LLM_PROVIDER", "openai").lower()

# Model Configuration
# Both defaults accept images; only OpenAI reads PDFs inline.
DEFAULT_MODEL = {
    "ollama": "llama3.2-vision",
    "openai": "gpt-4o-mini",
}
LLM_MODEL = os.getenv("LLM_MODEL")

# OpenAI Configuration
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
OPENAI_MODEL_PARAMS = {
    "temperature": 0.2,
    "max_tokens": 1024,
}

# Ollama Configuration
OLLAMA_BASE_URL = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Upload Configuration
DATA_URI_MODE = "data_uri"
TEXT_MODE = "text"
DOCUMENT_MODES = (DATA_URI_MODE, TEXT_MODE)

DEFAULT_MAX_BYTES = 5 * 1024 * 1024  # 5MB

DEFAULT_ALLOWED_TYPES = {
    DATA_URI_MODE: (
        "application/pdf",  # best for resumes
        "text/plain",
        "image/jpeg",
        "image/png",
        "image/webp",
    ),
    TEXT_MODE: (
        "text/plain",
        "application/pdf",  # read with pdfplumber
    ),
}

ANY_TYPE = "any"

AllowedTypes = Union[Tuple[str, ...], str]


@dataclass(frozen=True)
class UploadLimits:
    max_bytes: int
    allowed_types: AllowedTypes
    mode: str


def get_model_for_provider(provider: str | None = None) -> str:
    """Get the model for the specified provider (LLM_MODEL wins when set)."""
    if LLM_MODEL:
        return LLM_MODEL
    provider = (provider or LLM_PROVIDER).lower()
    return DEFAULT_MODEL.get(provider, "gpt-4o-mini")


def parse_allowed_types(raw: str | None, mode: str) -> AllowedTypes:
    """Turn the RESUME_ALLOWED_TYPES value into "any" or a tuple of MIME types."""
    if raw is None or not raw.strip():
        return DEFAULT_ALLOWED_TYPES[mode]
    if raw.strip().lower() == ANY_TYPE:
        return ANY_TYPE
    return tuple(t.strip().lower() for t in raw.split(",") if t.strip())


def get_upload_limits() -> UploadLimits:
    mode = os.getenv("RESUME_DOCUMENT_MODE", DATA_URI_MODE).strip().lower()
    if mode not in DOCUMENT_MODES:
        raise ValueError(
            f"Unsupported RESUME_DOCUMENT_MODE: {mode!r} (expected one of {', '.join(DOCUMENT_MODES)})"
        )

    raw_max = os.getenv("RESUME_MAX_BYTES", str(DEFAULT_MAX_BYTES)).strip()
    try:
        max_bytes = int(raw_max)
    except ValueError:
        raise ValueError(f"RESUME_MAX_BYTES must be a whole number of bytes, got {raw_max!r}") from None
    if max_bytes < 0:
        raise ValueError(f"RESUME_MAX_BYTES cannot be negative, got {max_bytes} (use 0 for no limit)")

    allowed = parse_allowed_types(os.getenv("RESUME_ALLOWED_TYPES"), mode)
    return UploadLimits(max_bytes=max_bytes, allowed_types=allowed, mode=mode)
