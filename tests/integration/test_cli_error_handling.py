"""CLI error-handling tests for concise diagnostics."""

from __future__ import annotations

from pathlib import Path

from pytest import MonkeyPatch
from typer.testing import CliRunner

from pdfread.cli import app
from pdfread.errors import TransportError


def test_missing_config_file_is_reported(tmp_path: Path) -> None:
    """A missing `--config` path should fail with a configuration hint."""

    runner = CliRunner()
    result = runner.invoke(
        app, ["--config", str(tmp_path / "missing.yml"), "cache", "info"]
    )

    assert result.exit_code == 1
    assert "pdfread failed (ConfigurationError): Config file not found" in result.output
    assert "Hint: Provide an existing path via `--config <path.yaml>`." in result.output


def test_invalid_config_value_is_reported(tmp_path: Path) -> None:
    """Invalid YAML values should be reported with the offending key."""

    config_path = tmp_path / "pdfread.yml"
    config_path.write_text("temperature: 9\n", encoding="utf-8")

    runner = CliRunner()
    result = runner.invoke(app, ["--config", str(config_path), "cache", "info"])

    assert result.exit_code == 1
    assert "Invalid configuration" in result.output
    assert "between 0 and 2" in result.output


def test_yaml_config_dir_is_used(tmp_path: Path) -> None:
    """A YAML `config_dir` should decide where state files live."""

    state_dir = tmp_path / "state"
    config_path = tmp_path / "pdfread.yml"
    config_path.write_text(f"config_dir: {state_dir}\n", encoding="utf-8")

    runner = CliRunner()
    result = runner.invoke(app, ["--config", str(config_path), "cache", "info"])

    assert result.exit_code == 0, result.output
    assert f"Cache file: {state_dir / 'translation_cache.json'}" in result.output
    assert "Entries: 0" in result.output


def test_transport_error_is_reported_with_type(
    monkeypatch: MonkeyPatch, tmp_path: Path
) -> None:
    """Transport failures should surface their detail and exit with code 1."""

    def _failing_complete(*_: object, **__: object) -> str:
        """Raise an authentication failure."""

        raise TransportError(
            "Chat endpoint authentication failed (HTTP 401): bad key",
            failure_kind="invalid_api_key",
            status_code=401,
        )

    monkeypatch.setattr(
        "pdfread.provider_factory.LazyKeyChatClient.complete", _failing_complete
    )
    runner = CliRunner()

    result = runner.invoke(
        app,
        ["--config-dir", str(tmp_path), "--api-key", "sk-bad", "lookup", "word"],
    )

    assert result.exit_code == 1
    assert "lookup failed (TransportError): Chat endpoint authentication failed (HTTP 401)" in (
        result.output
    )


def test_out_of_range_temperature_option_is_rejected(tmp_path: Path) -> None:
    """A CLI temperature outside 0..2 should fail runtime resolution."""

    runner = CliRunner()
    result = runner.invoke(
        app, ["--config-dir", str(tmp_path), "--temperature", "4", "cache", "info"]
    )

    assert result.exit_code == 1
    assert "Invalid runtime setting" in result.output


def test_corrupt_cache_file_is_reported(tmp_path: Path) -> None:
    """A corrupt cache snapshot should fail with a persistence diagnostic."""

    (tmp_path / "translation_cache.json").write_text("{oops", encoding="utf-8")

    runner = CliRunner()
    result = runner.invoke(app, ["--config-dir", str(tmp_path), "cache", "info"])

    assert result.exit_code == 1
    assert "cache info failed (PersistenceError)" in result.output
    assert "Hint: Delete or repair the file and retry." in result.output
