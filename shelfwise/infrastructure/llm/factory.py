"""
LLM provider factory.

Creates the provider named in configuration.
"""

from typing import Any

from shelfwise.config import get_logger, get_settings
from shelfwise.core.exceptions import ConfigurationError
from shelfwise.core.interfaces import ILLMProvider

logger = get_logger(__name__)


def get_llm_provider(provider_type: str | None = None) -> ILLMProvider:
    """
    Get an LLM provider instance.

    Args:
        provider_type: Provider name (default from settings)

    Returns:
        ILLMProvider instance
    """
    settings = get_settings()
    provider_type = provider_type or settings.llm.provider

    if provider_type == "ollama":
        from shelfwise.infrastructure.llm.ollama import get_ollama_provider

        return get_ollama_provider()

    raise ConfigurationError(f"Unknown LLM provider: {provider_type}")


async def check_llm_health() -> dict[str, Any]:
    """Report health of the configured provider."""
    provider = get_llm_provider()
    health = await provider.check_health()
    if not health.available:
        logger.warning("llm_unhealthy", provider=health.provider, error=health.error)
    return {"primary": health.__dict__}
