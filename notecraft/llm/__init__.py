"""LLM client abstractions and implementations."""

from .llm_client import LLMClient
from .replicate_client import LLMClientError, ReplicateLLMClient

__all__ = ["LLMClient", "LLMClientError", "ReplicateLLMClient"]
