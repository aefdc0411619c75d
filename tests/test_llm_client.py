import json
from pathlib import Path
from types import SimpleNamespace

import pytest

from notecraft.llm import replicate_client
from notecraft.llm.replicate_client import LLMClientError, ReplicateLLMClient

PROMPTS = Path(__file__).resolve().parents[1] / "config" / "prompts.yaml"


# Stub settings with fake token
class DummySettings(SimpleNamespace):
    replicate_api_token: str = "token"
    prompts_path: Path = PROMPTS


def make_client() -> ReplicateLLMClient:
    return ReplicateLLMClient(settings=DummySettings())


def test_missing_prompts_file(tmp_path: Path) -> None:
    with pytest.raises(LLMClientError):
        ReplicateLLMClient(settings=DummySettings(), prompts_path=tmp_path / "nope.yaml")


def test_missing_prompt_section(tmp_path: Path) -> None:
    prompts = tmp_path / "prompts.yaml"
    prompts.write_text("other:\n  system: x\n", encoding="utf-8")
    client = ReplicateLLMClient(settings=DummySettings(), prompts_path=prompts)
    with pytest.raises(LLMClientError):
        client.chat("ctx", "User: hi")


def test_call_joins_streamed_chunks(monkeypatch) -> None:
    client = make_client()
    monkeypatch.setattr(replicate_client.replicate, "run", lambda model, input: iter(["Hel", "lo"]))
    assert client._call("model", {}) == "Hello"


def test_call_wraps_errors(monkeypatch) -> None:
    client = make_client()

    def boom(model, input):
        raise RuntimeError("network down")

    monkeypatch.setattr(replicate_client.replicate, "run", boom)
    with pytest.raises(LLMClientError):
        client._call("model", {})


def test_call_rejects_empty_output(monkeypatch) -> None:
    client = make_client()
    monkeypatch.setattr(replicate_client.replicate, "run", lambda model, input: "   ")
    with pytest.raises(LLMClientError):
        client._call("model", {})


def test_generate_insights_sends_schema(monkeypatch) -> None:
    client = make_client()
    expected = {"quotes": [{"text": "q", "source": "s"}], "summaries": [], "themes": []}
    seen = {}

    def fake_run(model, input):
        seen["model"] = model
        seen["input"] = input
        return {"json_output": expected}

    monkeypatch.setattr(replicate_client.replicate, "run", fake_run)
    assert client.generate_insights("Source 1 [Link]: ...") == expected
    assert seen["model"] == client.structured_model
    assert seen["input"]["response_format"]["json_schema"]["schema"]["required"] == [
        "quotes",
        "summaries",
        "themes",
    ]
    user_text = seen["input"]["input_item_list"][0]["content"][0]["text"]
    assert "Source 1 [Link]: ..." in user_text


def test_generate_insights_parses_fenced_json(monkeypatch) -> None:
    client = make_client()
    body = json.dumps({"quotes": [], "summaries": [], "themes": []})
    monkeypatch.setattr(
        replicate_client.replicate, "run", lambda model, input: f"```json\n{body}\n```"
    )
    assert client.generate_insights("ctx") == {"quotes": [], "summaries": [], "themes": []}


def test_generate_insights_invalid_json(monkeypatch) -> None:
    client = make_client()
    monkeypatch.setattr(replicate_client.replicate, "run", lambda model, input: "no json here")
    with pytest.raises(LLMClientError):
        client.generate_insights("ctx")


def test_chat_formats_prompt(monkeypatch) -> None:
    client = make_client()
    seen = {}

    def fake_run(model, input):
        seen.update(input)
        return " reply "

    monkeypatch.setattr(replicate_client.replicate, "run", fake_run)
    assert client.chat("Source 1 [Text]: notes", "User: hello") == "reply"
    messages = seen["messages"]
    assert messages[0]["role"] == "system"
    assert "Source 1 [Text]: notes" in messages[1]["content"]
    assert "User: hello" in messages[1]["content"]
    assert seen["max_completion_tokens"] == 1024


class _FileOutput:
    """Stands in for the file objects image models return."""

    def __init__(self, url: str) -> None:
        self.url = url

    def __iter__(self):
        return iter([b"binary"])


def test_generate_image_returns_first_url(monkeypatch) -> None:
    client = make_client()
    seen = {}

    def fake_run(model, input):
        seen["model"] = model
        seen.update(input)
        return [_FileOutput("https://replicate.delivery/out-0.webp")]

    monkeypatch.setattr(replicate_client.replicate, "run", fake_run)
    result = client.generate_image("a lighthouse at dawn")

    assert result == {"image_url": "https://replicate.delivery/out-0.webp", "fallback_text": None}
    assert seen["model"] == client.image_model
    assert "a lighthouse at dawn" in seen["prompt"]
    assert seen["aspect_ratio"] == "16:9"


def test_generate_image_accepts_plain_url(monkeypatch) -> None:
    client = make_client()
    monkeypatch.setattr(replicate_client.replicate, "run", lambda model, input: "https://x.io/a.png")
    assert client.generate_image("cat")["image_url"] == "https://x.io/a.png"


def test_generate_image_without_output_falls_back(monkeypatch) -> None:
    client = make_client()
    monkeypatch.setattr(replicate_client.replicate, "run", lambda model, input: [])
    assert client.generate_image("cat") == {
        "image_url": None,
        "fallback_text": replicate_client.IMAGE_FALLBACK_TEXT,
    }
