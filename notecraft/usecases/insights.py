from __future__ import annotations

import logging
from typing import Sequence

from pydantic import ValidationError as PydanticValidationError

from notecraft.core.exceptions import ValidationError
from notecraft.core.models import Insights, Source
from notecraft.llm import LLMClient, LLMClientError

from .prompting import source_context

MAX_SOURCE_CHARS = 500

logger = logging.getLogger(__name__)


class GenerateInsights:
    """Derive quotes, summaries and themes from a draft's sources."""

    def __init__(self, llm: LLMClient) -> None:
        self.llm = llm

    def __call__(self, sources: Sequence[Source]) -> Insights:
        if not sources:
            raise ValidationError("No sources provided")
        context = source_context(sources, MAX_SOURCE_CHARS, inline=True)
        data = self.llm.generate_insights(context)
        try:
            insights = Insights.model_validate(data)
        except PydanticValidationError as exc:
            raise LLMClientError("Assistant returned malformed insights") from exc
        logger.info(
            "Insights generated",
            extra={
                "sources": len(sources),
                "quotes": len(insights.quotes),
                "themes": len(insights.themes),
            },
        )
        return insights
