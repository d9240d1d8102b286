# Unit tests for the LLM client module

from types import SimpleNamespace
from unittest.mock import Mock, patch

import pytest

from resume_skills import llm_client
from resume_skills.datauri import to_data_uri
from resume_skills.llm_client import (
    LLMConfigurationError,
    MissingOutputError,
    OllamaClient,
    OpenAIClient,
    _to_ollama_message,
    chat,
    get_llm_client,
)
from resume_skills.schema_skills import SKILLS_JSON_SCHEMA


def _completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


class TestOpenAIClient:
    """Test cases for the OpenAIClient class."""

    def test_missing_api_key(self, monkeypatch):
        monkeypatch.setattr("resume_skills.config.OPENAI_API_KEY", None)

        with pytest.raises(LLMConfigurationError) as exc_info:
            OpenAIClient()

        assert "OPENAI_API_KEY" in str(exc_info.value)

    def test_initialization_with_key(self):
        with patch("resume_skills.llm_client.OpenAI") as mock_openai:
            OpenAIClient(api_key="test-key-123")

        mock_openai.assert_called_once_with(api_key="test-key-123")

    def test_chat_sends_json_schema(self):
        with patch("resume_skills.llm_client.OpenAI") as mock_openai:
            create = mock_openai.return_value.chat.completions.create
            create.return_value = _completion('{"skills": ["Go"]}')
            client = OpenAIClient(api_key="k")

            rsp = client.chat("gpt-4o-mini", [{"role": "user", "content": "hi"}], response_schema=SKILLS_JSON_SCHEMA)

        assert rsp.message.content == '{"skills": ["Go"]}'
        kwargs = create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o-mini"
        fmt = kwargs["response_format"]
        assert fmt["type"] == "json_schema"
        assert fmt["json_schema"]["name"] == "ExtractSkillsOutput"
        assert fmt["json_schema"]["strict"] is True
        assert fmt["json_schema"]["schema"]["additionalProperties"] is False

    def test_chat_without_schema_has_no_response_format(self):
        with patch("resume_skills.llm_client.OpenAI") as mock_openai:
            create = mock_openai.return_value.chat.completions.create
            create.return_value = _completion("hello")
            OpenAIClient(api_key="k").chat("gpt-4o-mini", [])

        assert "response_format" not in create.call_args.kwargs

    def test_no_choices_is_missing_output(self):
        with patch("resume_skills.llm_client.OpenAI") as mock_openai:
            mock_openai.return_value.chat.completions.create.return_value = SimpleNamespace(choices=[])
            client = OpenAIClient(api_key="k")

            with pytest.raises(MissingOutputError):
                client.chat("gpt-4o-mini", [])

    def test_null_content_becomes_empty_string(self):
        with patch("resume_skills.llm_client.OpenAI") as mock_openai:
            mock_openai.return_value.chat.completions.create.return_value = _completion(None)

            rsp = OpenAIClient(api_key="k").chat("gpt-4o-mini", [])

        assert rsp.message.content == ""


class TestOllamaClient:
    """Test cases for the OllamaClient class."""

    def test_chat_passes_schema_as_format(self):
        with patch("resume_skills.llm_client.ollama.Client") as mock_cls:
            mock_cls.return_value.chat.return_value = SimpleNamespace(
                message=SimpleNamespace(content='{"skills": []}')
            )
            client = OllamaClient(host="http://ollama:11434")

            rsp = client.chat("llava", [{"role": "user", "content": "hi"}], response_schema=SKILLS_JSON_SCHEMA)

        mock_cls.assert_called_once_with(host="http://ollama:11434")
        kwargs = mock_cls.return_value.chat.call_args.kwargs
        assert kwargs["format"] == SKILLS_JSON_SCHEMA
        assert kwargs["messages"] == [{"role": "user", "content": "hi"}]
        assert rsp.message.content == '{"skills": []}'

    def test_text_parts_are_joined(self):
        message = {
            "role": "user",
            "content": [{"type": "text", "text": "Extract."}, {"type": "text", "text": "Go, SQL"}],
        }

        assert _to_ollama_message(message) == {"role": "user", "content": "Extract.\n\nGo, SQL"}

    def test_image_parts_become_base64_images(self):
        uri = to_data_uri(b"\x89PNG", "image/png")
        message = {
            "role": "user",
            "content": [{"type": "text", "text": "Extract."}, {"type": "image_url", "image_url": {"url": uri}}],
        }

        out = _to_ollama_message(message)

        assert out["content"] == "Extract."
        assert out["images"] == [uri.split(",", 1)[1]]

    def test_file_parts_are_refused(self):
        uri = to_data_uri(b"%PDF", "application/pdf")
        message = {"role": "user", "content": [{"type": "file", "file": {"filename": "cv.pdf", "file_data": uri}}]}

        with pytest.raises(LLMConfigurationError) as exc_info:
            _to_ollama_message(message)

        assert "application/pdf" in str(exc_info.value)


class TestFactory:

    def test_unknown_provider(self):
        with pytest.raises(LLMConfigurationError):
            get_llm_client("anthropic-via-fax")

    def test_ollama_provider(self):
        with patch("resume_skills.llm_client.ollama.Client"):
            assert isinstance(get_llm_client("Ollama"), OllamaClient)

    def test_chat_reuses_client_per_provider(self):
        fake = Mock()
        with patch("resume_skills.llm_client.get_llm_client", return_value=fake) as factory:
            chat("m", [], provider="openai")
            chat("m", [], provider="openai")

        factory.assert_called_once_with("openai")
        assert fake.chat.call_count == 2
        assert llm_client._llm_clients["openai"] is fake
