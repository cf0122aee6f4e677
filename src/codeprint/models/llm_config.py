"""LLM configuration entity for codeprint.

Defines the configuration of the provider used for style-conformant code
generation. Supports OpenAI, Claude, Gemini, Ollama, and Bedrock through
LiteLLM.
"""

import os
from dataclasses import dataclass, field

# Valid LLM providers
VALID_PROVIDERS = frozenset({"openai", "claude", "gemini", "ollama", "bedrock"})

# Environment variables LiteLLM reads when no api_key is configured
PROVIDER_KEY_ENV_VARS = {
    "openai": "OPENAI_API_KEY",
    "claude": "ANTHROPIC_API_KEY",
    "gemini": "GEMINI_API_KEY",
}

DEFAULT_OLLAMA_API_BASE = "http://localhost:11434"

MAX_TEMPERATURE = 2.0


@dataclass
class LLMConfig:
    """Configuration for the LLM provider.

    Attributes:
        provider: LLM provider (openai, claude, gemini, ollama, bedrock)
        model: Model identifier (e.g., "gpt-4", "claude-3-5-sonnet-latest")
        api_key: API key (not required for Ollama or Bedrock)
        api_base: API base URL (defaults to the local server for Ollama)
        temperature: Sampling temperature in 0..2
        max_tokens: Maximum response tokens
        enabled: Whether code generation is enabled
    """

    provider: str = "openai"
    model: str = "gpt-4"
    api_key: str | None = None
    api_base: str | None = None
    temperature: float = field(default=0.2)
    max_tokens: int = field(default=2000)
    enabled: bool = field(default=True)

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self.provider = self.provider.lower().strip()

        if self.provider not in VALID_PROVIDERS:
            raise ValueError(
                f"Invalid provider '{self.provider}'. "
                f"Must be one of: {sorted(VALID_PROVIDERS)}"
            )

        if not self.model or not self.model.strip():
            raise ValueError("Model identifier cannot be empty")
        self.model = self.model.strip()

        if not 0.0 <= self.temperature <= MAX_TEMPERATURE:
            raise ValueError(
                f"Temperature must be between 0 and {MAX_TEMPERATURE}. Got: {self.temperature}"
            )

        if self.max_tokens <= 0:
            raise ValueError(f"max_tokens must be positive. Got: {self.max_tokens}")

        if self.provider == "ollama" and not self.api_base:
            self.api_base = DEFAULT_OLLAMA_API_BASE

    @property
    def is_local(self) -> bool:
        """Return True if using a local LLM (no code leaves the machine)."""
        return self.provider == "ollama"

    def validate(self) -> list[str]:
        """Validate configuration and return warnings.

        Returns:
            List of warning messages (empty if no warnings)
        """
        warnings: list[str] = []

        env_var = PROVIDER_KEY_ENV_VARS.get(self.provider)
        if env_var and not self.api_key and not os.environ.get(env_var):
            warnings.append(f"No api_key configured for {self.provider} and {env_var} is not set")

        if self.max_tokens < 500:
            warnings.append(
                f"max_tokens is set to {self.max_tokens}, which may truncate generated code"
            )

        if self.api_base and not self.api_base.startswith(("http://", "https://")):
            warnings.append(f"api_base '{self.api_base}' does not start with http:// or https://")

        return warnings

    def to_dict(self) -> dict[str, str | int | float | bool | None]:
        """Convert to dictionary for serialization (the API key is masked)."""
        return {
            "provider": self.provider,
            "model": self.model,
            "api_key": "***" if self.api_key else None,
            "api_base": self.api_base,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "enabled": self.enabled,
        }

    @classmethod
    def from_dict(cls, data: dict[str, str | int | float | bool | None]) -> "LLMConfig":
        """Create LLMConfig from dictionary.

        Args:
            data: Dictionary with configuration values

        Returns:
            LLMConfig instance
        """
        defaults = cls()
        return cls(
            provider=str(data.get("provider") or defaults.provider),
            model=str(data.get("model") or defaults.model),
            api_key=str(data["api_key"]) if data.get("api_key") else None,
            api_base=str(data["api_base"]) if data.get("api_base") else None,
            temperature=float(data.get("temperature", defaults.temperature)),  # type: ignore[arg-type]
            max_tokens=int(data.get("max_tokens", defaults.max_tokens)),  # type: ignore[arg-type]
            enabled=bool(data.get("enabled", True)),
        )

    def get_litellm_model_name(self) -> str:
        """Get the model name in LiteLLM format.

        Returns:
            Model name formatted for LiteLLM
        """
        if self.provider == "openai":
            return self.model
        if self.provider == "claude":
            return f"anthropic/{self.model}"
        return f"{self.provider}/{self.model}"
