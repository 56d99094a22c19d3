"""Integration tests for key, vocabulary, books, and cache commands."""

from __future__ import annotations

from hashlib import sha256
import json
from pathlib import Path

from keyring.backends import fail
import pytest
from typer.testing import CliRunner

from pdfread.cli import app

LOOKUP_REPLY = (
    '```json\n{"phonetic": "/ˈbʊk/", "definitions": ['
    '{"pos": "n.", "meanings": "本"}, {"pos": "v.", "meanings": "予約する"}]}\n```'
)


def _invoke(config_dir: Path, *args: str, input: str | None = None):
    runner = CliRunner()
    return runner.invoke(app, ["--config-dir", str(config_dir), *args], input=input)


def test_key_set_info_clear_flow(tmp_path: Path) -> None:
    """Key commands should store, report, and remove the key without printing it."""

    set_result = _invoke(tmp_path, "key", "set", "--value", "  sk-or-secret  ")
    info_result = _invoke(tmp_path, "key", "info")
    clear_result = _invoke(tmp_path, "key", "clear")
    clear_again = _invoke(tmp_path, "key", "clear")

    key_path = tmp_path / "openrouter_key.txt"
    assert set_result.exit_code == 0, set_result.output
    assert f"Saved. Key stored at {key_path}." in set_result.output
    assert json.loads(info_result.stdout) == {
        "available": True,
        "exists": True,
        "location": str(key_path),
    }
    assert "sk-or-secret" not in info_result.output
    assert "Key removed." in clear_result.output
    assert "No key stored." in clear_again.output


def test_key_info_reports_unavailable_keyring(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    """With only the fail backend, key info should report the keyring as unusable."""

    monkeypatch.setattr("pdfread.credentials.keyring.get_keyring", lambda: fail.Keyring())
    config_path = tmp_path / "pdfread.yml"
    config_path.write_text("credential_backend: keyring\n", encoding="utf-8")

    result = CliRunner().invoke(
        app, ["--config", str(config_path), "--config-dir", str(tmp_path), "key", "info"]
    )

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == {
        "available": False,
        "exists": False,
        "location": "keyring:pdfread/openrouter_api_key",
    }


def test_key_set_prompts_with_hidden_input(tmp_path: Path) -> None:
    """Without `--value` the key should be read from a hidden prompt."""

    result = _invoke(tmp_path, "key", "set", input="sk-prompted\n")

    assert result.exit_code == 0, result.output
    assert (tmp_path / "openrouter_key.txt").read_text(encoding="utf-8") == "sk-prompted"


def test_key_test_uses_stored_key(tmp_path: Path, chat_endpoint) -> None:
    """Key test should send one request authenticated with the stored key."""

    chat_endpoint.reply = lambda _payload: "OK"
    _invoke(tmp_path, "key", "set", "--value", "sk-stored")

    result = _invoke(tmp_path, "key", "test")

    assert result.exit_code == 0, result.output
    assert "Connection OK." in result.output
    assert chat_endpoint.requests[0]["headers"]["Authorization"] == "Bearer sk-stored"  # type: ignore[index]


def test_lookup_and_save_then_export_vocabulary(tmp_path: Path, chat_endpoint) -> None:
    """Lookup with `--save` should print the entry and persist it for export."""

    chat_endpoint.reply = lambda _payload: LOOKUP_REPLY

    lookup_result = _invoke(
        tmp_path, "--api-key", "sk-test", "--language-code", "ja", "lookup", "book", "--save"
    )
    list_result = _invoke(tmp_path, "vocab", "list")
    export_path = tmp_path / "exports" / "vocabulary.md"
    export_result = _invoke(tmp_path, "vocab", "export", "--out", str(export_path))

    assert lookup_result.exit_code == 0, lookup_result.output
    assert "book /ˈbʊk/" in lookup_result.output
    assert "  n. 本" in lookup_result.output
    assert "Saved `book` to vocabulary." in lookup_result.output
    assert chat_endpoint.requests[0]["json"]["temperature"] == 0.1  # type: ignore[index]
    assert "book\t本; 予約する" in list_result.output
    assert export_result.exit_code == 0, export_result.output
    assert export_path.read_text(encoding="utf-8").startswith("# Vocabulary\n\n## book\n")


def test_vocab_add_and_remove(tmp_path: Path, chat_endpoint) -> None:
    """Vocab add should look words up and report re-adds; remove reports presence."""

    chat_endpoint.reply = lambda _payload: LOOKUP_REPLY

    add_result = _invoke(tmp_path, "--api-key", "sk-test", "vocab", "add", "Book")
    add_again = _invoke(tmp_path, "--api-key", "sk-test", "vocab", "add", "book")
    remove_result = _invoke(tmp_path, "vocab", "remove", "book")
    remove_again = _invoke(tmp_path, "vocab", "remove", "book")
    list_result = _invoke(tmp_path, "vocab", "list")

    assert "Saved `Book` to vocabulary." in add_result.output
    assert "Updated `Book` in vocabulary." in add_again.output
    assert "Removed `book`." in remove_result.output
    assert "`book` is not in the vocabulary." in remove_again.output
    assert "No words saved yet." in list_result.output


def test_ask_reads_context_file(tmp_path: Path, chat_endpoint) -> None:
    """Ask should send the passage and question and print the answer."""

    chat_endpoint.reply = lambda _payload: "  It is a whale.  "
    context_file = tmp_path / "passage.txt"
    context_file.write_text("Moby Dick is a white whale.", encoding="utf-8")

    result = _invoke(
        tmp_path, "--api-key", "sk-test", "ask", "What is Moby Dick?", "--context-file",
        str(context_file),
    )

    assert result.exit_code == 0, result.output
    assert result.stdout.strip() == "It is a whale."
    assert "Moby Dick is a white whale." in chat_endpoint.user_prompts()[0]


def test_books_add_progress_list_remove(tmp_path: Path) -> None:
    """Books commands should track documents by content hash with progress."""

    document = tmp_path / "novel.epub"
    document.write_bytes(b"PK\x03\x04 fake epub")
    book_id = sha256(document.read_bytes()).hexdigest()[:12]
    config_dir = tmp_path / "config"

    add_result = _invoke(config_dir, "books", "add", str(document), "--pages", "300")
    progress_result = _invoke(
        config_dir, "books", "progress", book_id, "--page", "150", "--progress", "50"
    )
    list_result = _invoke(config_dir, "books", "list")
    remove_result = _invoke(config_dir, "books", "remove", book_id)
    empty_result = _invoke(config_dir, "books", "list")

    assert add_result.exit_code == 0, add_result.output
    assert f"Book id: {book_id}" in add_result.output
    assert "novel: page 150, 50%" in progress_result.output
    assert f"{book_id}\tnovel\tepub\tpage 150/300\t50%" in list_result.output
    assert "Book removed." in remove_result.output
    assert "No recent books." in empty_result.output


def test_books_progress_unknown_id_fails(tmp_path: Path) -> None:
    """Updating an unknown book should exit with a diagnostic."""

    result = _invoke(tmp_path, "books", "progress", "deadbeef", "--page", "2", "--progress", "1")

    assert result.exit_code == 1
    assert "books progress failed: Unknown book id `deadbeef`." in result.output


def test_cache_info_reports_entry_count(tmp_path: Path, chat_endpoint) -> None:
    """Cache info should show the snapshot path and number of entries."""

    _invoke(tmp_path, "--api-key", "sk-test", "translate", "--text", "a", "--text", "b")

    result = _invoke(tmp_path, "cache", "info")

    assert result.exit_code == 0, result.output
    assert f"Cache file: {tmp_path / 'translation_cache.json'}" in result.output
    assert "Entries: 2" in result.output
