"""
LLM client abstraction layer to support multiple providers.

This module provides a unified interface for OpenAI and Ollama. Messages use
the OpenAI chat format; a user message may carry a list of content parts
(text, image_url, file) which each client maps to what its provider accepts.
A JSON schema can be passed to constrain the reply.
"""

from __future__ import annotations
from typing import List, Dict, Any, Optional
from abc import ABC, abstractmethod
import logging

import ollama
from openai import OpenAI

from resume_skills import config
from resume_skills.datauri import parse_data_uri

logger = logging.getLogger(__name__)

Message = Dict[str, Any]


class LLMConfigurationError(RuntimeError):
    """Raised when a client cannot be built or cannot send the given content."""


class MissingOutputError(ValueError):
    """Raised when the provider replies without any output."""


class LLMResponse:
    """Unified response object for LLM responses."""

    def __init__(self, content: str):
        self.message = MessageContent(content)


class MessageContent:
    """Message content wrapper."""

    def __init__(self, content: str):
        self.content = content


class LLMClient(ABC):
    """Abstract base class for LLM clients."""

    @abstractmethod
    def chat(
        self,
        model: str,
        messages: List[Message],
        response_schema: Optional[Dict[str, Any]] = None,
    ) -> LLMResponse:
        """Send a chat request to the LLM provider."""


class OllamaClient(LLMClient):
    """Ollama client implementation."""

    def __init__(self, host: str | None = None):
        self.client = ollama.Client(host=host or config.OLLAMA_BASE_URL)

    def chat(self, model, messages, response_schema=None) -> LLMResponse:
        """Send a chat request to Ollama."""
        kwargs: Dict[str, Any] = {}
        if response_schema is not None:
            kwargs["format"] = response_schema
        response = self.client.chat(
            model=model,
            messages=[_to_ollama_message(m) for m in messages],
            **kwargs,
        )
        return LLMResponse(response.message.content or "")


def _to_ollama_message(message: Message) -> Message:
    """Flatten OpenAI-style content parts into Ollama's content + images."""
    content = message.get("content")
    if isinstance(content, str):
        return {"role": message["role"], "content": content}

    texts: List[str] = []
    images: List[str] = []
    for part in content or []:
        kind = part.get("type")
        if kind == "text":
            texts.append(part["text"])
        elif kind == "image_url":
            uri = part["image_url"]["url"]
            # Ollama wants the bare base64 payload
            images.append(uri.split(",", 1)[1] if uri.startswith("data:") else uri)
        elif kind == "file":
            mime, _ = parse_data_uri(part["file"]["file_data"])
            raise LLMConfigurationError(
                f"Ollama cannot read '{mime}' documents inline. Upload a TXT or image file, "
                "or switch the provider to OpenAI."
            )
        else:
            raise LLMConfigurationError(f"Unsupported content part: {kind!r}")

    out: Message = {"role": message["role"], "content": "\n\n".join(texts)}
    if images:
        out["images"] = images
    return out


class OpenAIClient(LLMClient):
    """OpenAI client implementation."""

    def __init__(self, api_key: str | None = None):
        # Use provided API key or get from environment
        api_key = api_key or config.OPENAI_API_KEY
        if not api_key:
            raise LLMConfigurationError(
                "OpenAI API key is required. Set OPENAI_API_KEY environment variable or pass api_key parameter."
            )

        self.client = OpenAI(api_key=api_key)

    def chat(self, model, messages, response_schema=None) -> LLMResponse:
        """Send a chat request to OpenAI."""
        kwargs: Dict[str, Any] = {
            "temperature": config.OPENAI_MODEL_PARAMS.get("temperature", 0.2),
            "max_tokens": config.OPENAI_MODEL_PARAMS.get("max_tokens", 1024),
        }
        if response_schema is not None:
            kwargs["response_format"] = {
                "type": "json_schema",
                "json_schema": {
                    "name": response_schema.get("title", "response"),
                    "schema": response_schema,
                    "strict": True,
                },
            }

        response = self.client.chat.completions.create(
            model=model,
            messages=messages,
            **kwargs,
        )

        if not response.choices:
            raise MissingOutputError("The model returned no choices.")
        return LLMResponse(response.choices[0].message.content or "")


def get_llm_client(provider: str | None = None) -> LLMClient:
    """Factory function to get the appropriate LLM client based on configuration."""
    provider = (provider or config.LLM_PROVIDER).lower()

    if provider == "openai":
        return OpenAIClient()
    elif provider == "ollama":
        return OllamaClient()
    else:
        raise LLMConfigurationError(f"Unsupported LLM provider: {provider}")


# One client per provider, built on first use
_llm_clients: Dict[str, LLMClient] = {}


def chat(
    model: str,
    messages: List[Message],
    response_schema: Optional[Dict[str, Any]] = None,
    provider: str | None = None,
) -> LLMResponse:
    """
    Unified chat function that works with any configured LLM provider.
    """
    provider = (provider or config.LLM_PROVIDER).lower()
    client = _llm_clients.get(provider)
    if client is None:
        client = _llm_clients[provider] = get_llm_client(provider)
        logger.debug("Created %s client", provider)

    return client.chat(model, messages, response_schema=response_schema)
