"""Integration tests for the `translate` command."""

from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from pdfread.cli import app


def _invoke(tmp_path: Path, *args: str):
    runner = CliRunner()
    return runner.invoke(
        app,
        [
            "--config-dir",
            str(tmp_path / "config"),
            "--api-key",
            "sk-test",
            "--language-label",
            "Japanese",
            "--language-code",
            "ja",
            *args,
        ],
    )


def test_translate_text_prints_json_and_fills_cache(tmp_path: Path, chat_endpoint) -> None:
    """Translate should print results in order and persist them to the cache file."""

    result = _invoke(tmp_path, "translate", "--text", "Hello.", "--text", "World.")

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == [
        {"sid": "cli:1", "translation": "HELLO."},
        {"sid": "cli:2", "translation": "WORLD."},
    ]
    assert len(chat_endpoint.requests) == 1
    assert chat_endpoint.requests[0]["headers"]["Authorization"] == "Bearer sk-test"  # type: ignore[index]
    assert "Japanese (ja)" in chat_endpoint.user_prompts()[0]

    snapshot = json.loads((tmp_path / "config" / "translation_cache.json").read_text("utf-8"))
    assert len(snapshot["entries"]) == 2


def test_repeated_translate_is_served_from_cache(tmp_path: Path, chat_endpoint) -> None:
    """A second identical run should not call the endpoint."""

    first = _invoke(tmp_path, "translate", "--text", "Hello.")
    second = _invoke(tmp_path, "translate", "--text", "Hello.")

    assert first.exit_code == 0, first.output
    assert second.exit_code == 0, second.output
    assert json.loads(first.stdout) == json.loads(second.stdout)
    assert len(chat_endpoint.requests) == 1


def test_translate_input_file_keeps_document_ids(tmp_path: Path, chat_endpoint) -> None:
    """Sentences from an input file should keep their document-scoped ids."""

    input_file = tmp_path / "sentences.json"
    input_file.write_text(
        json.dumps([{"sid": "doc7:s2", "text": "b"}, {"sid": "doc7:s1", "text": "a"}]),
        encoding="utf-8",
    )

    result = _invoke(tmp_path, "translate", "--input", str(input_file))

    assert result.exit_code == 0, result.output
    assert [item["sid"] for item in json.loads(result.stdout)] == ["doc7:s2", "doc7:s1"]


def test_translate_rejects_malformed_input_file(tmp_path: Path, chat_endpoint) -> None:
    """An input file with bad items should fail before any request."""

    input_file = tmp_path / "sentences.json"
    input_file.write_text('[{"sid": 1, "text": "a"}]', encoding="utf-8")

    result = _invoke(tmp_path, "translate", "--input", str(input_file))

    assert result.exit_code == 1
    assert "translate failed: Item 0" in result.output
    assert chat_endpoint.requests == []


def test_translate_reports_parse_failure_after_retry(tmp_path: Path, chat_endpoint) -> None:
    """Two unusable replies should fail the command with a parse diagnostic."""

    chat_endpoint.reply = lambda _payload: "I would rather not."

    result = _invoke(tmp_path, "translate", "--text", "Hello.")

    assert result.exit_code == 1
    assert "translate failed (ParseError): Failed to parse translation JSON" in result.output
    assert len(chat_endpoint.requests) == 2
    assert chat_endpoint.user_prompts()[1].startswith("Return ONLY")


def test_translate_without_key_reports_missing_key(tmp_path: Path, chat_endpoint) -> None:
    """Without a key the command should fail with the key location and a hint."""

    runner = CliRunner()
    result = runner.invoke(
        app,
        ["--config-dir", str(tmp_path / "config"), "translate", "--text", "Hello."],
    )

    assert result.exit_code == 1
    assert "translate failed (ConfigurationError): Missing API key at:" in result.output
    assert "openrouter_key.txt" in result.output
    assert "Hint: Run `pdfread key set`" in result.output
    assert chat_endpoint.requests == []
