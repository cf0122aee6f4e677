"""Integration tests for LLM-backed code generation.

LiteLLM is patched; no provider is contacted.
"""

from unittest.mock import MagicMock, patch

import pytest

from codeprint.analyzers.aggregator import fold
from codeprint.analyzers.extractor import extract_fingerprint
from codeprint.llm import (
    NO_CODE_PLACEHOLDER,
    SYSTEM_PROMPT,
    CodeGenerator,
    LLMClient,
    LLMError,
    create_client,
)
from codeprint.models import AggregateProfile
from codeprint.models.llm_config import LLMConfig


def _response(content: str | None, model: str = "gpt-4") -> MagicMock:
    mock = MagicMock()
    mock.choices = [MagicMock(message=MagicMock(content=content), finish_reason="stop")]
    mock.model = model
    mock.usage = MagicMock(prompt_tokens=120, completion_tokens=40, total_tokens=160)
    return mock


@pytest.fixture
def llm_config() -> LLMConfig:
    """OpenAI config with an explicit key."""
    return LLMConfig(provider="openai", model="gpt-4", api_key="sk-test")


class TestLLMClient:
    """Tests for LLMClient.complete."""

    def test_complete(self, llm_config: LLMConfig) -> None:
        """Test request arguments and response mapping."""
        with patch("litellm.completion", return_value=_response("ok")) as mock_completion:
            response = LLMClient(llm_config).complete("prompt", system_prompt="system")

        kwargs = mock_completion.call_args.kwargs
        assert kwargs["model"] == "gpt-4"
        assert kwargs["messages"] == [
            {"role": "system", "content": "system"},
            {"role": "user", "content": "prompt"},
        ]
        assert kwargs["temperature"] == 0.2
        assert kwargs["max_tokens"] == 2000
        assert kwargs["api_key"] == "sk-test"
        assert "api_base" not in kwargs

        assert response.content == "ok"
        assert response.usage == {"prompt_tokens": 120, "completion_tokens": 40, "total_tokens": 160}
        assert response.finish_reason == "stop"

    def test_ollama_api_base_and_model_prefix(self) -> None:
        """Test local providers pass their server URL."""
        config = LLMConfig(provider="ollama", model="llama3.2")

        with patch("litellm.completion", return_value=_response("ok")) as mock_completion:
            LLMClient(config).complete("prompt", max_tokens=600)

        kwargs = mock_completion.call_args.kwargs
        assert kwargs["model"] == "ollama/llama3.2"
        assert kwargs["api_base"] == "http://localhost:11434"
        assert kwargs["max_tokens"] == 600

    def test_provider_failure(self, llm_config: LLMConfig) -> None:
        """Test provider exceptions surface as LLMError."""
        with patch("litellm.completion", side_effect=RuntimeError("boom")):
            with pytest.raises(LLMError, match="boom"):
                LLMClient(llm_config).complete("prompt")

    def test_malformed_response(self, llm_config: LLMConfig) -> None:
        """Test a response without choices raises LLMError."""
        response = _response("unused")
        response.choices = []

        with patch("litellm.completion", return_value=response):
            with pytest.raises(LLMError, match="Malformed"):
                LLMClient(llm_config).complete("prompt")

    def test_disabled_config(self) -> None:
        """Test create_client refuses a disabled config."""
        with pytest.raises(ValueError, match="disabled"):
            create_client(LLMConfig(enabled=False))


class TestCodeGenerator:
    """Tests for CodeGenerator.generate."""

    def test_generate_uses_profile_prompt(
        self, llm_config: LLMConfig, javascript_source: str
    ) -> None:
        """Test the style prompt is sent and the code stripped."""
        profile = fold([extract_fingerprint(javascript_source)])
        reply = "\nconst sumList = (items) => items.reduce((a, b) => a + b, 0);\n"

        with patch("litellm.completion", return_value=_response(reply)) as mock_completion:
            result = CodeGenerator(create_client(llm_config)).generate(profile, "Sum a list")

        messages = mock_completion.call_args.kwargs["messages"]
        assert messages[0] == {"role": "system", "content": SYSTEM_PROMPT}
        assert "Sum a list" in messages[1]["content"]
        assert "- Indentation: 2 spaces" in messages[1]["content"]

        assert result.code == reply.strip()
        assert result.prompt == messages[1]["content"]
        assert result.model == "gpt-4"
        assert not result.placeholder

    @pytest.mark.parametrize("reply", ["", "   \n", None])
    def test_empty_reply_placeholder(self, llm_config: LLMConfig, reply: str | None) -> None:
        """Test an empty reply yields the placeholder."""
        with patch("litellm.completion", return_value=_response(reply)):
            result = CodeGenerator(LLMClient(llm_config)).generate(AggregateProfile(), "Parse CSV")

        assert result.code == NO_CODE_PLACEHOLDER
        assert result.placeholder
        assert result.to_dict()["placeholder"] is True

    def test_empty_specification_not_sent(self, llm_config: LLMConfig) -> None:
        """Test an empty specification fails before any request."""
        with patch("litellm.completion") as mock_completion:
            with pytest.raises(ValueError, match="Specification cannot be empty"):
                CodeGenerator(LLMClient(llm_config)).generate(AggregateProfile(), " ")

        mock_completion.assert_not_called()
