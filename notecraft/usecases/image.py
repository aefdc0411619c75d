from __future__ import annotations

import logging

from pydantic import ValidationError as PydanticValidationError

from notecraft.core.exceptions import ValidationError
from notecraft.core.models import GeneratedImage
from notecraft.llm import LLMClient, LLMClientError

logger = logging.getLogger(__name__)


class GenerateImage:
    """Illustrate a draft from a short text prompt."""

    def __init__(self, llm: LLMClient) -> None:
        self.llm = llm

    def __call__(self, prompt: str) -> GeneratedImage:
        prompt = prompt.strip()
        if not prompt:
            raise ValidationError("No prompt provided")
        data = self.llm.generate_image(prompt)
        try:
            image = GeneratedImage.model_validate(data)
        except PydanticValidationError as exc:
            raise LLMClientError("Image model returned a malformed result") from exc
        logger.info("Image generated", extra={"has_image": image.image_url is not None})
        return image
