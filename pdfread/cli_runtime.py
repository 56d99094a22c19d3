"""CLI runtime resolution helpers.

This module isolates config-file loading, runtime source assembly, and API
key prompting from the command wiring layer.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping

import typer

from .config import ConfigLoader, ReaderConfig, ResolvedRuntime, RuntimeConfigSources
from .errors import ConfigurationError
from .parsing import normalize_optional_string


def load_reader_config(config_file: Path | None, config_dir: Path | None) -> ReaderConfig:
    """Load YAML config when requested, else environment config, with dir override."""

    try:
        if config_file is not None:
            config = ConfigLoader.from_yaml(config_file)
        else:
            config = ConfigLoader.from_env()
        if config_dir is not None:
            config = ConfigLoader.apply_overrides(config, config_dir=config_dir)
    except FileNotFoundError as exc:
        raise ConfigurationError(
            f"Config file not found: `{config_file}`.",
            hint="Provide an existing path via `--config <path.yaml>`.",
        ) from exc
    except ValueError as exc:
        raise ConfigurationError(
            f"Invalid configuration: {exc}",
            hint="Fix config values and rerun.",
        ) from exc

    return config


def collect_runtime_cli_values(**values: str | float | None) -> dict[str, str]:
    """Return normalized CLI runtime values, skipping options that were not given."""

    runtime_cli_values: dict[str, str] = {}
    for key, value in values.items():
        normalized = normalize_optional_string(value)
        if normalized is not None:
            runtime_cli_values[key] = normalized
    return runtime_cli_values


def resolve_runtime(
    config: ReaderConfig,
    runtime_cli_values: Mapping[str, str],
    env: Mapping[str, str] | None = None,
) -> ResolvedRuntime:
    """Resolve runtime values with CLI > env > config precedence."""

    sources = RuntimeConfigSources(
        cli=dict(runtime_cli_values),
        env=os.environ if env is None else env,
    )
    try:
        return config.resolved_runtime(sources)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid runtime setting: {exc}") from exc


def prompt_for_api_key(api_key: str | None) -> str:
    """Return an explicit API key or prompt for one with hidden input."""

    normalized = normalize_optional_string(api_key)
    if normalized is not None:
        return normalized

    prompted = normalize_optional_string(
        typer.prompt(
            "OpenRouter API key (hidden)",
            default="",
            hide_input=True,
            show_default=False,
        )
    )
    if prompted is None:
        raise ConfigurationError("Please enter an API key.")
    return prompted
