from __future__ import annotations

import uuid
from typing import Sequence

from notecraft.core.exceptions import ValidationError
from notecraft.core.models import ChatMessage, Source
from notecraft.llm import LLMClient

from .prompting import source_context

MAX_SOURCE_CHARS = 4000


class ChatWithSources:
    """Answer the latest user message with the draft's sources as context."""

    def __init__(self, llm: LLMClient) -> None:
        self.llm = llm

    def __call__(self, messages: Sequence[ChatMessage], sources: Sequence[Source]) -> ChatMessage:
        if not messages:
            raise ValidationError("No messages provided")
        conversation = "\n\n".join(
            f"{'User' if m.role == 'user' else 'Assistant'}: {m.content}" for m in messages
        )
        reply = self.llm.chat(source_context(sources, MAX_SOURCE_CHARS), conversation)
        return ChatMessage(id=uuid.uuid4().hex[:8], role="assistant", content=reply)
