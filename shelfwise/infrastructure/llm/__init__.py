"""LLM infrastructure implementations."""

from shelfwise.core.interfaces.llm import ILLMProvider
from shelfwise.infrastructure.llm.base import BaseLLMProvider, CircuitBreakerState
from shelfwise.infrastructure.llm.factory import check_llm_health, get_llm_provider
from shelfwise.infrastructure.llm.ollama import (
    OllamaProvider,
    get_ollama_provider,
    reset_ollama_provider,
)

__all__ = [
    # Interface
    "ILLMProvider",
    # Base
    "BaseLLMProvider",
    "CircuitBreakerState",
    # Ollama
    "OllamaProvider",
    "get_ollama_provider",
    "reset_ollama_provider",
    # Factory
    "get_llm_provider",
    "check_llm_health",
]
