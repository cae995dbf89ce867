"""AI modules for the mystery game."""

from .llm_client import EchoLLMClient, LLMClient, OpenRouterClient, build_messages, get_llm_client

__all__ = [
    "EchoLLMClient",
    "LLMClient",
    "OpenRouterClient",
    "build_messages",
    "get_llm_client",
]
