"""Unified LLM client wrapper using LiteLLM.

Provides a consistent completion interface over every supported provider.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

import litellm

from codeprint.errors import CodeprintError
from codeprint.models.llm_config import LLMConfig

logger = logging.getLogger(__name__)


class LLMError(CodeprintError):
    """Exception raised for LLM-related errors."""

    pass


@dataclass
class LLMResponse:
    """Response from LLM completion.

    Attributes:
        content: Generated text content
        model: Model that generated the response
        usage: Token usage statistics
        finish_reason: Reason for completion (stop, length, etc.)
    """

    content: str
    model: str
    usage: dict[str, int] = field(default_factory=dict)
    finish_reason: str | None = None


class LLMClient:
    """LLM client using LiteLLM.

    Supports OpenAI, Claude (Anthropic), Gemini (Google), Ollama (local),
    and Bedrock (AWS) through a single interface.
    """

    def __init__(self, config: LLMConfig) -> None:
        """Initialize LLM client with configuration.

        Args:
            config: LLM configuration with provider, model, and credentials
        """
        self.config = config
        for warning in config.validate():
            logger.warning("LLM config: %s", warning)

    def complete(
        self,
        prompt: str,
        system_prompt: str | None = None,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        """Generate a completion from the LLM.

        Args:
            prompt: User prompt for the LLM
            system_prompt: Optional system prompt
            max_tokens: Override max_tokens from config

        Returns:
            LLMResponse with generated content

        Raises:
            LLMError: If the completion fails
        """
        messages: list[dict[str, str]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        completion_kwargs: dict[str, Any] = {
            "model": self.config.get_litellm_model_name(),
            "messages": messages,
            "temperature": self.config.temperature,
            "max_tokens": max_tokens or self.config.max_tokens,
        }
        if self.config.api_key:
            completion_kwargs["api_key"] = self.config.api_key
        if self.config.api_base:
            completion_kwargs["api_base"] = self.config.api_base

        logger.debug(
            "Requesting completion from %s (%d prompt chars)",
            completion_kwargs["model"],
            len(prompt),
        )

        try:
            response = litellm.completion(**completion_kwargs)
        except litellm.exceptions.AuthenticationError as e:
            raise LLMError(f"Authentication failed for {self.config.provider}: {e}") from e
        except litellm.exceptions.RateLimitError as e:
            raise LLMError(f"Rate limit exceeded for {self.config.provider}: {e}") from e
        except litellm.exceptions.APIConnectionError as e:
            raise LLMError(f"Connection failed to {self.config.provider}: {e}") from e
        except Exception as e:
            raise LLMError(f"LLM completion failed: {e}") from e

        try:
            choice = response.choices[0]
            content = choice.message.content or ""
        except (AttributeError, IndexError) as e:
            raise LLMError(f"Malformed completion response: {e}") from e

        usage: dict[str, int] = {}
        if getattr(response, "usage", None):
            usage = {
                "prompt_tokens": response.usage.prompt_tokens or 0,
                "completion_tokens": response.usage.completion_tokens or 0,
                "total_tokens": response.usage.total_tokens or 0,
            }

        return LLMResponse(
            content=content,
            model=getattr(response, "model", None) or self.config.model,
            usage=usage,
            finish_reason=getattr(choice, "finish_reason", None),
        )


def create_client(config: LLMConfig) -> LLMClient:
    """Create an LLM client from configuration.

    Args:
        config: LLM configuration

    Returns:
        Configured LLMClient instance

    Raises:
        ValueError: If LLM is disabled in config
    """
    if not config.enabled:
        raise ValueError("LLM is disabled in configuration")

    return LLMClient(config)
