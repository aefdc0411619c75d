from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import replicate
import yaml

from notecraft.core.settings import Settings, get_settings
from .llm_client import LLMClient


class LLMClientError(Exception):
    """Raised when interaction with LLM fails."""


IMAGE_FALLBACK_TEXT = "Could not generate image"

INSIGHTS_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "quotes": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "text": {"type": "string"},
                    "source": {"type": "string"},
                },
                "required": ["text", "source"],
                "additionalProperties": False,
            },
        },
        "summaries": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "text": {"type": "string"},
                    "tags": {"type": "array", "items": {"type": "string"}},
                },
                "required": ["text", "tags"],
                "additionalProperties": False,
            },
        },
        "themes": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "description": {"type": "string"},
                },
                "required": ["name", "description"],
                "additionalProperties": False,
            },
        },
    },
    "required": ["quotes", "summaries", "themes"],
    "additionalProperties": False,
}


class ReplicateLLMClient(LLMClient):
    """Writing assistant powered by Replicate-hosted models."""

    def __init__(
        self,
        settings: Settings | None = None,
        prompts_path: str | Path | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.logger = logging.getLogger(__name__)

        # Fall back to defaults if a custom Settings object is used in tests
        self.chat_model: str = getattr(self.settings, "llm_chat_model", "openai/gpt-5-nano")
        self.structured_model: str = getattr(
            self.settings, "llm_structured_model", "openai/gpt-5-structured"
        )
        self._log_payloads: bool = bool(getattr(self.settings, "llm_log_payloads", False))
        self._max_output_tokens: int = int(getattr(self.settings, "llm_max_output_tokens", 2048))
        self._max_completion_tokens: int = int(
            getattr(self.settings, "llm_max_completion_tokens", 1024)
        )
        self.image_model: str = getattr(
            self.settings, "llm_image_model", "black-forest-labs/flux-schnell"
        )
        self._image_aspect_ratio: str = getattr(self.settings, "llm_image_aspect_ratio", "16:9")

        self.prompts_path = Path(
            prompts_path if prompts_path is not None else self.settings.prompts_path
        )
        try:
            with self.prompts_path.open("r", encoding="utf-8") as fh:
                self.prompts: Dict[str, Dict[str, str]] = yaml.safe_load(fh) or {}
            self.logger.debug("Prompts loaded from: %s", str(self.prompts_path))
        except FileNotFoundError as exc:
            raise LLMClientError(f"Prompts file not found: {self.prompts_path}") from exc
        except yaml.YAMLError as exc:
            raise LLMClientError("Failed to parse prompts file") from exc

    def _prompt(self, section: str, key: str) -> str:
        try:
            return self.prompts[section][key]
        except KeyError as exc:
            raise LLMClientError(
                f"Prompt '{section}.{key}' not found in {self.prompts_path}"
            ) from exc

    def _join_output(self, out: Union[str, Dict[str, Any], Iterable[str], None]) -> str:
        if out is None:
            return ""
        if isinstance(out, str):
            return out
        if isinstance(out, dict):
            # Structured models answer with {"json_output": ...} or {"text": ...}
            if "json_output" in out:
                jo = out["json_output"]
                return jo if isinstance(jo, str) else json.dumps(jo, ensure_ascii=False)
            if isinstance(out.get("text"), str):
                return out["text"]
            return json.dumps(out, ensure_ascii=False)
        # Streaming models yield string chunks
        return "".join(str(chunk) for chunk in out)

    def _image_url(self, out: Any) -> Optional[str]:
        """First image URL in the output of an image model, if any."""
        if out is None:
            return None
        # File outputs expose ``url``; plain models return URL strings
        if isinstance(out, str) or hasattr(out, "url"):
            first = out
        elif isinstance(out, Iterable):
            first = next(iter(out), None)
        else:
            return None
        if first is None:
            return None
        url = str(getattr(first, "url", first)).strip()
        return url if url.startswith(("http", "data:")) else None

    def _clean_json_text(self, text: str) -> str:
        """Strip Markdown code fences and surrounding prose around a JSON object."""
        s = text.strip()
        if s.startswith("```"):
            lines = s.splitlines()
            closing = [i for i, line in enumerate(lines[1:], start=1) if line.strip().startswith("```")]
            if closing:
                s = "\n".join(lines[1 : closing[0]]).strip()
        if s.startswith("{") and s.endswith("}"):
            return s
        start, end = s.find("{"), s.rfind("}")
        if start != -1 and end > start:
            return s[start : end + 1]
        return s

    def _parse_json(self, text: str) -> Any:
        s = text.strip()
        if not s:
            raise LLMClientError("Empty response from Replicate when JSON was expected")
        try:
            return json.loads(s)
        except ValueError:
            cleaned = self._clean_json_text(s)
            try:
                return json.loads(cleaned)
            except ValueError as exc:
                preview = (cleaned[:200] + "…") if len(cleaned) > 200 else cleaned
                raise LLMClientError(
                    f"Failed to parse JSON from Replicate output. Preview: {preview}"
                ) from exc

    def _run(self, model: str, payload: Dict[str, Any]) -> Any:
        level = logging.INFO if self._log_payloads else logging.DEBUG
        self.logger.log(
            level,
            "Replicate request | model=%s | input=%s",
            model,
            json.dumps(payload, ensure_ascii=False, default=str),
        )
        try:
            out = replicate.run(model, input=payload)
        except Exception as exc:
            self.logger.exception("Replicate request failed: %s", exc)
            raise LLMClientError(f"Replicate request failed: {exc}") from exc
        return out

    def _call(self, model: str, payload: Dict[str, Any]) -> str:
        level = logging.INFO if self._log_payloads else logging.DEBUG
        text = self._join_output(self._run(model, payload))
        self.logger.log(level, "Replicate response | model=%s | chars=%d", model, len(text))
        if not text.strip():
            raise LLMClientError("Empty response from Replicate")
        return text

    def _messages(self, section: str, **fields: str) -> List[Dict[str, str]]:
        return [
            {"role": "system", "content": self._prompt(section, "system")},
            {"role": "user", "content": self._prompt(section, "user").format(**fields)},
        ]

    def generate_insights(self, source_context: str) -> Dict[str, Any]:
        messages = self._messages("insights", sources=source_context)
        payload: Dict[str, Any] = {
            "instructions": messages[0]["content"],
            "input_item_list": [
                {
                    "role": "user",
                    "content": [{"type": "input_text", "text": messages[1]["content"]}],
                }
            ],
            "max_output_tokens": self._max_output_tokens,
            "response_format": {
                "type": "json_schema",
                "json_schema": {"name": "newsletter_insights", "strict": True, "schema": INSIGHTS_SCHEMA},
            },
        }
        data = self._parse_json(self._call(self.structured_model, payload))
        if not isinstance(data, dict):
            raise LLMClientError("Insights response is not a JSON object")
        return data

    def chat(self, source_context: str, conversation: str) -> str:
        payload = {
            "messages": self._messages("chat", sources=source_context, conversation=conversation),
            "max_completion_tokens": self._max_completion_tokens,
        }
        return self._call(self.chat_model, payload).strip()

    def generate_image(self, prompt: str) -> Dict[str, Optional[str]]:
        payload = {
            "prompt": self._prompt("image", "user").format(prompt=prompt),
            "aspect_ratio": self._image_aspect_ratio,
        }
        url = self._image_url(self._run(self.image_model, payload))
        if url is None:
            self.logger.warning("Image model returned no image", extra={"model": self.image_model})
            return {"image_url": None, "fallback_text": IMAGE_FALLBACK_TEXT}
        return {"image_url": url, "fallback_text": None}


__all__ = ["LLMClientError", "ReplicateLLMClient", "INSIGHTS_SCHEMA", "IMAGE_FALLBACK_TEXT"]
