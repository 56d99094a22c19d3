"""HTTP client for OpenAI-compatible chat-completions endpoints.

Responsibilities:
- Send one chat-completions request and return `choices[0].message.content`.
- Map HTTP, network, and payload failures to `TransportError`.
- Redact credential-like tokens from provider error text.
"""

from __future__ import annotations

import json
import re
import socket
from typing import Any

import requests

from ..errors import ConfigurationError, TransportError

DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"

_MAX_PROVIDER_MESSAGE_CHARS = 180
_SECRET_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\bsk-[A-Za-z0-9_-]{8,}\b"), "[redacted-key]"),
    (re.compile(r"(?i)bearer\s+[A-Za-z0-9._-]{12,}"), "Bearer [redacted-token]"),
)
_FAILURE_HEADLINES = {
    "invalid_api_key": "Chat endpoint authentication failed",
    "insufficient_quota": "Chat endpoint quota is insufficient for this request",
    "invalid_model": "Chat endpoint rejected the selected model",
    "timeout": "Chat request timed out",
    "http_error": "Chat request failed",
}


def redact_secrets(text: str) -> str:
    """Replace API-key and bearer-token lookalikes in `text`."""

    for pattern, replacement in _SECRET_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


def _compact(text: str) -> str:
    collapsed = " ".join(text.split())
    if len(collapsed) <= _MAX_PROVIDER_MESSAGE_CHARS:
        return collapsed
    return f"{collapsed[: _MAX_PROVIDER_MESSAGE_CHARS - 1]}..."


def _provider_error(body: str) -> tuple[str, str | None]:
    """Return a redacted provider message and error code from an error body.

    OpenAI-style bodies look like `{"error": {"code": ..., "message": ...}}`;
    anything else is reported verbatim after redaction.
    """

    if not body:
        return "", None
    message, code = body, None
    try:
        payload = json.loads(body)
    except json.JSONDecodeError:
        payload = None
    error = payload.get("error") if isinstance(payload, dict) else None
    if isinstance(error, dict):
        raw_code = error.get("code")
        if raw_code is not None and str(raw_code).strip():
            code = str(raw_code).strip()
        raw_message = error.get("message")
        if isinstance(raw_message, str) and raw_message.strip():
            message = raw_message
    return _compact(redact_secrets(message)), code


def classify_http_failure(status_code: int, message: str, code: str | None) -> str:
    """Return the failure kind for a non-2xx chat response."""

    lowered = message.lower()
    code = (code or "").lower()
    if status_code == 401 or "api key" in lowered:
        return "invalid_api_key"
    quota_words = "quota" in lowered or "credits" in lowered
    if status_code == 402 or code == "insufficient_quota" or (status_code == 429 and quota_words):
        return "insufficient_quota"
    rejects_model = "model" in lowered and (
        "not found" in lowered or "does not exist" in lowered or "invalid" in lowered
    )
    if code == "model_not_found" or rejects_model:
        return "invalid_model"
    if status_code in (408, 504) or "timeout" in lowered or "timed out" in lowered:
        return "timeout"
    return "http_error"


def _content_text(content: Any) -> str:
    """Flatten string or text-part list message content; other shapes are empty."""

    if isinstance(content, str):
        return content
    if not isinstance(content, list):
        return ""
    return "".join(
        part["text"]
        for part in content
        if isinstance(part, dict) and part.get("type") == "text" and isinstance(part.get("text"), str)
    )


def first_choice_text(body: str) -> str:
    """Return `choices[0].message.content` of a chat-completions body.

    Raises:
        TransportError: If the body is not JSON, has no choices, or the first
            choice carries no message object.
    """

    try:
        payload = json.loads(body)
    except json.JSONDecodeError as exc:
        raise TransportError(
            "Chat endpoint returned an invalid JSON payload.",
            failure_kind="malformed_response",
        ) from exc

    choices = payload.get("choices") if isinstance(payload, dict) else None
    if not isinstance(choices, list):
        raise TransportError(
            "Chat endpoint response is missing a `choices` list.",
            failure_kind="malformed_response",
        )
    if not choices:
        raise TransportError("Chat endpoint returned no choices.", failure_kind="no_choices")
    message = choices[0].get("message") if isinstance(choices[0], dict) else None
    if not isinstance(message, dict):
        raise TransportError(
            "Chat endpoint response is missing `choices[0].message`.",
            failure_kind="malformed_response",
        )
    return _content_text(message.get("content"))


class ChatCompletionClient:
    """Minimal requests-based chat-completions client."""

    def __init__(
        self,
        *,
        api_key: str | None,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = 60.0,
    ) -> None:
        """Initialize HTTP client settings."""

        self.api_key = api_key.strip() if isinstance(api_key, str) else ""
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/chat/completions"

    def complete(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
    ) -> str:
        """Return the first assistant message content of a chat completion.

        Empty content is returned as an empty string; deciding whether that is
        usable is left to the caller's decode step.
        """

        if not self.api_key:
            raise ConfigurationError(
                "Missing API key for the chat endpoint.",
                hint="Run `pdfread key set` or set `PDFREAD_API_KEY`.",
            )
        body = self._post(
            {
                "model": model,
                "temperature": temperature,
                "messages": [
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
            }
        )
        return first_choice_text(body)

    def _post(self, payload: dict[str, Any]) -> str:
        """POST `payload` to the endpoint and return the UTF-8 response body."""

        try:
            response = requests.post(
                self.endpoint,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                json=payload,
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
        except requests.HTTPError as exc:
            raise _status_error(exc) from exc
        except (requests.Timeout, socket.timeout, TimeoutError) as exc:
            raise TransportError("Chat request timed out.", failure_kind="timeout") from exc
        except requests.RequestException as exc:
            raise TransportError(
                f"Chat request transport error: {_compact(redact_secrets(str(exc)))}",
                failure_kind="transport",
            ) from exc
        return bytes(response.content).decode("utf-8", errors="replace")


def _status_error(exc: requests.HTTPError) -> TransportError:
    """Build a transport error carrying the status and provider message."""

    response = exc.response
    status_code = response.status_code if response is not None else 0
    body = (
        bytes(response.content).decode("utf-8", errors="replace").strip()
        if response is not None
        else ""
    )
    message, code = _provider_error(body)
    failure_kind = classify_http_failure(status_code, message, code)
    headline = _FAILURE_HEADLINES[failure_kind]
    detail = f"{headline} (HTTP {status_code})" + (f": {message}" if message else ".")
    return TransportError(detail, failure_kind=failure_kind, status_code=status_code)
