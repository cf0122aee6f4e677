"""Style-conformant code generation."""

import logging
from dataclasses import dataclass, field
from typing import Any

from codeprint.llm.client import LLMClient
from codeprint.llm.prompts import SYSTEM_PROMPT, build_generation_prompt
from codeprint.models.profile import AggregateProfile

logger = logging.getLogger(__name__)

NO_CODE_PLACEHOLDER = "// No code generated"


@dataclass
class GenerationResult:
    """Generated code plus the prompt that produced it.

    Attributes:
        code: Generated code (or the placeholder)
        prompt: Prompt sent to the model
        model: Model that answered
        usage: Token usage statistics
        placeholder: True if the model returned nothing usable
    """

    code: str
    prompt: str
    model: str = ""
    usage: dict[str, int] = field(default_factory=dict)
    placeholder: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "code": self.code,
            "model": self.model,
            "usage": dict(self.usage),
            "placeholder": self.placeholder,
        }


class CodeGenerator:
    """Generates code from a specification in the style of a profile.

    Usage:
        generator = CodeGenerator(create_client(config.llm))
        result = generator.generate(profile, "a debounce helper")
    """

    def __init__(self, client: LLMClient) -> None:
        self.client = client

    def generate(self, profile: AggregateProfile, specification: str) -> GenerationResult:
        """Generate code for a specification.

        Args:
            profile: Aggregate profile of the target code base
            specification: Free-text description of the code to generate

        Returns:
            GenerationResult

        Raises:
            ValueError: If the specification is empty
            LLMError: If the completion fails
        """
        if profile.is_empty:
            logger.warning("Profile has no analyzed files; generating with default style")

        prompt = build_generation_prompt(profile, specification)
        response = self.client.complete(prompt, system_prompt=SYSTEM_PROMPT)

        code = response.content.strip()
        if not code:
            logger.warning("Model %s returned no code", response.model)
            return GenerationResult(
                code=NO_CODE_PLACEHOLDER,
                prompt=prompt,
                model=response.model,
                usage=response.usage,
                placeholder=True,
            )

        logger.debug("Generated %d characters of code", len(code))
        return GenerationResult(code=code, prompt=prompt, model=response.model, usage=response.usage)
