"""LLM integration module for codeprint.

Provides a unified LLM client wrapper using LiteLLM for multi-provider
support, prompt construction from style profiles, and the code generator.
"""

from codeprint.llm.client import LLMClient, LLMError, LLMResponse, create_client
from codeprint.llm.generator import NO_CODE_PLACEHOLDER, CodeGenerator, GenerationResult
from codeprint.llm.prompts import (
    DEFAULT_PREFERENCES,
    SYSTEM_PROMPT,
    build_generation_prompt,
    style_preferences,
)
from codeprint.models.llm_config import VALID_PROVIDERS, LLMConfig

__all__ = [
    "CodeGenerator",
    "DEFAULT_PREFERENCES",
    "GenerationResult",
    "LLMClient",
    "LLMConfig",
    "LLMError",
    "LLMResponse",
    "NO_CODE_PLACEHOLDER",
    "SYSTEM_PROMPT",
    "VALID_PROVIDERS",
    "build_generation_prompt",
    "create_client",
    "style_preferences",
]
