"""Integration-test fixtures for deterministic chat endpoint behavior."""

from __future__ import annotations

import json
import os
from typing import Callable

import pytest


class FakeChatEndpoint:
    """In-process stand-in for the chat-completions HTTP endpoint."""

    def __init__(self) -> None:
        """Initialize with an upper-casing translation reply."""

        self.requests: list[dict[str, object]] = []
        self.reply: Callable[[dict[str, object]], str] = _uppercase_translations

    def post(self, url: str, **kwargs: object) -> "_FakeResponse":
        """Record the request and return a successful completion."""

        self.requests.append({"url": url, **kwargs})
        payload = kwargs["json"]
        assert isinstance(payload, dict)
        content = self.reply(payload)
        return _FakeResponse(
            json.dumps({"choices": [{"message": {"content": content}}]}).encode("utf-8")
        )

    def user_prompts(self) -> list[str]:
        """Return the user prompt of every recorded request."""

        return [
            str(request["json"]["messages"][1]["content"])  # type: ignore[index]
            for request in self.requests
        ]


class _FakeResponse:
    """Successful requests response carrying a fixed body."""

    def __init__(self, content: bytes) -> None:
        self.content = content
        self.status_code = 200

    def raise_for_status(self) -> None:
        return None


def _uppercase_translations(payload: dict[str, object]) -> str:
    """Translate every sentence of a translate prompt by upper-casing it."""

    user_prompt = str(payload["messages"][1]["content"])  # type: ignore[index]
    sentences = json.loads(user_prompt.split("Input JSON: ", 1)[1])
    return json.dumps(
        [{"sid": item["sid"], "translation": item["text"].upper()} for item in sentences]
    )


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer `PDFREAD_*` settings out of CLI runs."""

    for name in list(os.environ):
        if name.startswith("PDFREAD_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def chat_endpoint(monkeypatch: pytest.MonkeyPatch) -> FakeChatEndpoint:
    """Patch the HTTP transport with a recording fake endpoint."""

    endpoint = FakeChatEndpoint()
    monkeypatch.setattr("pdfread.llm.chat_client.requests.post", endpoint.post)
    return endpoint
