"""Shared pytest fixtures for the pdfread test suite."""

from __future__ import annotations

import json
from pathlib import Path
import sys
from typing import Callable

import pytest

from pdfread.llm.cache import CacheStore
from pdfread.models.datatypes import TargetLanguage
from pdfread.telemetry.logger import configure_logging

Reply = str | Callable[[str], str]


class ScriptedChatClient:
    """Chat client double that replays scripted replies and records every call."""

    def __init__(self, replies: list[Reply]) -> None:
        """Initialize with replies consumed in order; the last one repeats."""

        self.replies = list(replies)
        self.calls: list[dict[str, object]] = []

    def complete(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
    ) -> str:
        """Record the request and return the next scripted reply."""

        self.calls.append(
            {
                "model": model,
                "temperature": temperature,
                "system_prompt": system_prompt,
                "user_prompt": user_prompt,
            }
        )
        reply = self.replies[min(len(self.calls), len(self.replies)) - 1]
        if callable(reply):
            return reply(user_prompt)
        return reply


def prompt_payload(user_prompt: str) -> list[dict[str, str]]:
    """Return the `Input JSON` sentence payload embedded in a translate prompt."""

    return json.loads(user_prompt.split("Input JSON: ", 1)[1])


def uppercase_reply(user_prompt: str) -> str:
    """Translate every requested sentence by upper-casing it."""

    return json.dumps(
        [
            {"sid": item["sid"], "translation": item["text"].upper()}
            for item in prompt_payload(user_prompt)
        ]
    )


@pytest.fixture
def scripted_client() -> Callable[..., ScriptedChatClient]:
    """Provide a factory for scripted chat clients."""

    def _factory(*replies: Reply) -> ScriptedChatClient:
        return ScriptedChatClient(list(replies))

    return _factory


@pytest.fixture
def echo_upper_reply() -> Callable[[str], str]:
    """Provide a reply function that upper-cases each requested sentence."""

    return uppercase_reply


@pytest.fixture
def japanese() -> TargetLanguage:
    """Provide a deterministic target language."""

    return TargetLanguage(label="Japanese", code="ja")


@pytest.fixture
def cache_store(tmp_path: Path) -> CacheStore:
    """Provide a cache store rooted in a temporary config directory."""

    return CacheStore(tmp_path / "config" / "translation_cache.json")


@pytest.fixture(autouse=True)
def _reset_logging() -> None:
    """Route event lines to the current test's stderr capture."""

    configure_logging(sink=sys.stderr, level="DEBUG")
