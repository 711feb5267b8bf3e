"""Application settings loaded from environment variables.

Environment Configuration:
    RECAP_ENV: Deployment environment (local | test | staging | prod)

LLM Provider Configuration:
    XAI_API_KEY: Credential for the Grok (xAI) provider
    XAI_API_BASE_URL: Optional base URL override for xAI (trailing slash stripped)
    OPENAI_API_KEY: Credential for the OpenAI provider
    OPENAI_API_BASE_URL: Optional base URL override for OpenAI
    LLM_DEFAULT_PROVIDER: Provider used when callers don't pick one (default: grok)
    LLM_DEFAULT_TIMEOUT_MS: Default per-call deadline in milliseconds

Logging:
    LOG_JSON: Emit JSON logs (default true); console logs otherwise

Settings are only read at startup. Adapters receive their credential and
base URL explicitly and never consult the environment at call time.
"""

from enum import Enum
from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings


class Environment(str, Enum):
    """Valid deployment environments."""

    LOCAL = "local"
    TEST = "test"
    STAGING = "staging"
    PROD = "prod"


class Settings(BaseSettings):
    """Application configuration.

    Validation rules:
    - LLM_DEFAULT_TIMEOUT_MS must be positive
    - LLM_DEFAULT_PROVIDER must have its credential set in staging and prod
    """

    recap_env: Environment = Field(default=Environment.LOCAL, alias="RECAP_ENV")

    # Provider credentials (optional individually; a provider without a key is unavailable)
    xai_api_key: str | None = Field(default=None, alias="XAI_API_KEY")
    xai_api_base_url: str | None = Field(default=None, alias="XAI_API_BASE_URL")
    openai_api_key: str | None = Field(default=None, alias="OPENAI_API_KEY")
    openai_api_base_url: str | None = Field(default=None, alias="OPENAI_API_BASE_URL")

    llm_default_provider: str = Field(default="grok", alias="LLM_DEFAULT_PROVIDER")
    llm_default_timeout_ms: int = Field(default=45_000, alias="LLM_DEFAULT_TIMEOUT_MS")

    log_json: bool = Field(default=True, alias="LOG_JSON")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "populate_by_name": True,
    }

    @model_validator(mode="after")
    def validate_llm_settings(self) -> "Settings":
        """Ensure LLM settings are coherent."""
        if self.llm_default_timeout_ms <= 0:
            raise ValueError("LLM_DEFAULT_TIMEOUT_MS must be positive")

        self.llm_default_provider = self.llm_default_provider.strip().lower()

        if self.recap_env in (Environment.STAGING, Environment.PROD):
            if not self.api_key_for(self.llm_default_provider):
                raise ValueError(
                    f"Credential for LLM_DEFAULT_PROVIDER={self.llm_default_provider} "
                    f"is required for RECAP_ENV={self.recap_env.value}"
                )

        return self

    def api_key_for(self, provider: str) -> str | None:
        """Return the configured credential for a provider, if any."""
        keys = {
            "grok": self.xai_api_key,
            "openai": self.openai_api_key,
        }
        return keys.get(provider)

    def base_url_for(self, provider: str) -> str | None:
        """Return the configured base URL override for a provider, if any."""
        urls = {
            "grok": self.xai_api_base_url,
            "openai": self.openai_api_base_url,
        }
        return urls.get(provider)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings instance loaded from environment.

    Raises:
        ValidationError: If settings are missing or invalid.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache. Useful for testing."""
    get_settings.cache_clear()
