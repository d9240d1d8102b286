"""
LLM-based skill extraction.

• One request per call: a fixed instruction plus the prepared résumé, with the
  reply constrained to {"skills": [str, ...]}.
• Never raises: every outcome is an ExtractionOutcome (success / empty /
  failure), and failures carry a FailureKind chosen where the error is caught.
"""

from __future__ import annotations
import enum
import json
import logging
import re
import textwrap
from dataclasses import dataclass, field
from typing import List, Optional

import httpx
import ollama
import openai
from pydantic import ValidationError

from resume_skills import config
from resume_skills.cleaner import normalise_skills
from resume_skills.datauri import parse_data_uri
from resume_skills.llm_client import (
    LLMClient,
    LLMConfigurationError,
    Message,
    MissingOutputError,
    chat,
)
from resume_skills.preparer import PreparedDocument
from resume_skills.schema_skills import SKILLS_JSON_SCHEMA, ExtractSkillsOutput

logger = logging.getLogger(__name__)

_SYSTEM_PROMPT = textwrap.dedent(
    f"""\
You are an AI resume analyzer. Your task is to extract key skills from the provided resume document.
Analyze the content of the entire document. If it is a PDF or an image, read its text first.
Then identify the key skills: technologies, tools, methods, languages and competencies.
Output ONLY valid JSON conforming to this schema (no markdown fences):

{json.dumps(SKILLS_JSON_SCHEMA, indent=2)}
"""
)

_USER_PROMPT = "Extract the key skills from this resume."

_JSON_FINDER = re.compile(r"\{.*\}", re.S)


class Status(str, enum.Enum):
    SUCCESS = "success"
    EMPTY = "empty"
    FAILURE = "failure"


class FailureKind(str, enum.Enum):
    TRANSPORT = "transport"
    SERVICE = "service"
    SCHEMA = "schema"
    CONFIGURATION = "configuration"
    UNEXPECTED = "unexpected"


_DEFAULT_DETAIL = {
    FailureKind.TRANSPORT: "could not reach the AI service",
    FailureKind.SERVICE: "the AI service reported an error",
    FailureKind.SCHEMA: "the AI reply was not a valid skill list",
    FailureKind.CONFIGURATION: "the AI provider is not configured",
    FailureKind.UNEXPECTED: "an unknown error occurred during skill extraction",
}

_HINTS = {
    FailureKind.TRANSPORT: "Check your connection and try again.",
    FailureKind.SERVICE: "The server had trouble processing your file. Please try a simpler PDF or a plain text (.txt) file.",
    FailureKind.SCHEMA: "The AI could not read this file reliably. Please try a different file; PDF or TXT work best.",
    FailureKind.CONFIGURATION: "Check the provider settings (API key, model) and try again.",
    FailureKind.UNEXPECTED: "Please try a different file or ensure it's a standard PDF, TXT, JPG, PNG, or WEBP.",
}

NO_SKILLS_NOTICE = (
    "The AI could not extract any skills from the resume. This might be due to the file's "
    "content or format. Please ensure your resume is clear and primarily text-based. "
    "PDF or TXT files work best."
)


def failure_hint(kind: FailureKind) -> str:
    return _HINTS[kind]


@dataclass(frozen=True)
class ExtractionOutcome:
    status: Status
    skills: List[str] = field(default_factory=list)
    message: Optional[str] = None
    failure_kind: Optional[FailureKind] = None

    @classmethod
    def success(cls, skills: List[str]) -> "ExtractionOutcome":
        return cls(Status.SUCCESS, skills=list(skills))

    @classmethod
    def empty(cls) -> "ExtractionOutcome":
        return cls(Status.EMPTY, message=NO_SKILLS_NOTICE)

    @classmethod
    def failure(cls, kind: FailureKind, detail: str = "") -> "ExtractionOutcome":
        detail = (detail or "").strip().rstrip(".") or _DEFAULT_DETAIL[kind]
        return cls(Status.FAILURE, message=f"Skill extraction failed: {detail}.", failure_kind=kind)


def classify_error(exc: BaseException) -> FailureKind:
    # order matters: APITimeoutError is an APIConnectionError, MissingOutputError is a ValueError
    if isinstance(exc, (openai.APIConnectionError, httpx.TransportError, ConnectionError)):
        return FailureKind.TRANSPORT
    if isinstance(exc, (openai.APIStatusError, ollama.ResponseError)):
        return FailureKind.SERVICE
    if isinstance(exc, (ValidationError, json.JSONDecodeError, MissingOutputError)):
        return FailureKind.SCHEMA
    if isinstance(exc, LLMConfigurationError):
        return FailureKind.CONFIGURATION
    return FailureKind.UNEXPECTED


def _error_detail(exc: BaseException, kind: FailureKind) -> str:
    if kind is FailureKind.SCHEMA and isinstance(exc, ValidationError):
        return f"the AI reply did not match the expected format ({exc.error_count()} error(s))"
    if isinstance(exc, openai.APIStatusError):
        return f"{exc.status_code} {exc.message}"
    if isinstance(exc, ollama.ResponseError):
        return f"{exc.status_code} {exc.error}"
    return str(exc)


def _document_parts(document: PreparedDocument) -> List[dict]:
    """Embed the document as inline media or literal text."""
    if not document.is_data_uri:
        return [{"type": "text", "text": f"Resume Document:\n{document.content}"}]

    mime, data = parse_data_uri(document.content)
    if mime.startswith("image/"):
        return [{"type": "image_url", "image_url": {"url": document.content}}]
    if mime.startswith("text/"):
        text = data.decode("utf-8-sig", errors="replace")
        return [{"type": "text", "text": f"Resume Document:\n{text}"}]
    return [{
        "type": "file",
        "file": {"filename": document.filename or "resume", "file_data": document.content},
    }]


def build_messages(document: PreparedDocument) -> List[Message]:
    return [
        {"role": "system", "content": _SYSTEM_PROMPT},
        {
            "role": "user",
            "content": [{"type": "text", "text": _USER_PROMPT}, *_document_parts(document)],
        },
    ]


def _extract_json(raw: str) -> dict:
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        if m := _JSON_FINDER.search(raw):
            return json.loads(m.group())
        raise


def parse_skills_reply(raw: str) -> List[str]:
    payload = (raw or "").strip().strip("`")
    if payload.lower().startswith("json"):
        payload = payload[4:]
    if not payload.strip():
        raise MissingOutputError("The model returned an empty reply.")
    output = ExtractSkillsOutput.model_validate(_extract_json(payload))
    return normalise_skills(output.skills)


def extract_skills(
    document: PreparedDocument,
    *,
    model: str | None = None,
    provider: str | None = None,
    client: LLMClient | None = None,
) -> ExtractionOutcome:
    """
    Ask the model for the skills in *document*. Exactly one request, no retry.

    ``client`` bypasses the shared per-provider client (used by tests and
    callers that manage their own).
    """
    provider = provider or config.LLM_PROVIDER
    model = model or config.get_model_for_provider(provider)

    try:
        messages = build_messages(document)
        if client is not None:
            rsp = client.chat(model, messages, response_schema=SKILLS_JSON_SCHEMA)
        else:
            rsp = chat(model, messages, response_schema=SKILLS_JSON_SCHEMA, provider=provider)
        if rsp is None or rsp.message is None:
            raise MissingOutputError("The model returned no output.")
        skills = parse_skills_reply(rsp.message.content)
    except Exception as exc:
        kind = classify_error(exc)
        if kind is FailureKind.UNEXPECTED:
            logger.exception("Skill extraction failed for %r", document.filename)
        else:
            logger.warning("Skill extraction failed for %r (%s): %s", document.filename, kind.value, exc)
        return ExtractionOutcome.failure(kind, _error_detail(exc, kind))

    if not skills:
        logger.info("No skills found in %r", document.filename)
        return ExtractionOutcome.empty()

    logger.info("Extracted %d skills from %r with %s/%s", len(skills), document.filename, provider, model)
    return ExtractionOutcome.success(skills)
