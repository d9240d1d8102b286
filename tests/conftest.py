"""
Pytest configuration and fixtures
"""
from unittest.mock import Mock

import pytest

from resume_skills import llm_client
from resume_skills.llm_client import LLMResponse
from resume_skills.preparer import UploadCandidate


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep a developer's .env / shell settings out of the tests."""
    for name in (
        "RESUME_MAX_BYTES",
        "RESUME_ALLOWED_TYPES",
        "RESUME_DOCUMENT_MODE",
        "LLM_PROVIDER",
        "LLM_MODEL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("resume_skills.config.LLM_PROVIDER", "openai")
    monkeypatch.setattr("resume_skills.config.LLM_MODEL", None)
    llm_client._llm_clients.clear()
    yield
    llm_client._llm_clients.clear()


def make_client(reply=None, side_effect=None):
    """An LLMClient double whose chat() returns *reply* as the message content."""
    client = Mock()
    if side_effect is not None:
        client.chat.side_effect = side_effect
    else:
        client.chat.return_value = LLMResponse(reply)
    return client


@pytest.fixture
def text_candidate():
    return UploadCandidate("resume.txt", "text/plain", b"Go, Rust, SQL")


@pytest.fixture
def pdf_candidate():
    return UploadCandidate("resume.pdf", "application/pdf", b"%PDF-1.7 fake body")
