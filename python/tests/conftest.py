"""Pytest configuration and fixtures for Recap tests.

Test isolation strategy:
- No live provider calls: HTTP is mocked with respx or a custom httpx transport
- No real credentials: keys are obvious placeholders
- Provider-related environment variables are cleared for every test, and
  the settings cache is reset so Settings() sees the test environment
"""

from collections.abc import Generator

import httpx
import pytest
import structlog

from recap.config import Settings, clear_settings_cache
from recap.services.llm import GenerateParams, GrokAdapter, OpenAIAdapter

PROVIDER_ENV_VARS = (
    "RECAP_ENV",
    "XAI_API_KEY",
    "XAI_API_BASE_URL",
    "OPENAI_API_KEY",
    "OPENAI_API_BASE_URL",
    "LLM_DEFAULT_PROVIDER",
    "LLM_DEFAULT_TIMEOUT_MS",
    "LOG_JSON",
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Strip provider configuration from the environment for every test."""
    for name in PROVIDER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("RECAP_ENV", "test")
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def httpx_client() -> httpx.AsyncClient:
    """Create an httpx AsyncClient for testing."""
    return httpx.AsyncClient()


@pytest.fixture
def test_settings() -> Settings:
    """Settings with placeholder credentials for both providers."""
    return Settings(
        RECAP_ENV="test",
        XAI_API_KEY="xai-test",
        OPENAI_API_KEY="sk-test",
        _env_file=None,
    )


@pytest.fixture
def grok_adapter(httpx_client: httpx.AsyncClient) -> GrokAdapter:
    return GrokAdapter(httpx_client, api_key="xai-test")


@pytest.fixture
def openai_adapter(httpx_client: httpx.AsyncClient) -> OpenAIAdapter:
    return OpenAIAdapter(httpx_client, api_key="sk-test")


@pytest.fixture
def basic_params() -> GenerateParams:
    return GenerateParams(prompt="2+2?")


@pytest.fixture
def log_sink() -> Generator[list[dict], None, None]:
    """Configure structlog to capture events into a list.

    Returns a list that will contain all emitted log event dicts.
    After the test, structlog is reset to its previous configuration.
    """
    events: list[dict] = []
    original_config = structlog.get_config()

    def capture_processor(logger, method_name, event_dict):
        event_dict["log_level"] = method_name
        events.append(event_dict.copy())
        raise structlog.DropEvent

    structlog.configure(
        processors=[capture_processor],
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    yield events

    structlog.configure(**original_config)
