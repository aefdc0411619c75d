from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class LLMClient(ABC):
    """Abstract interface for the writing assistant model."""

    @abstractmethod
    def generate_insights(self, source_context: str) -> Dict[str, Any]:
        """Return ``{"quotes": [...], "summaries": [...], "themes": [...]}``."""

    @abstractmethod
    def chat(self, source_context: str, conversation: str) -> str:
        """Reply to the last user turn of ``conversation``."""

    @abstractmethod
    def generate_image(self, prompt: str) -> Dict[str, Optional[str]]:
        """Return ``{"image_url": ..., "fallback_text": ...}``; one of them is ``None``."""
