"""Configuration model and loaders for pdfread.

Responsibilities:
- Define reader configuration as a typed dataclass.
- Provide deterministic precedence resolution for runtime model/key settings.
- Provide loader entry points for file- and environment-based configuration.

Key types:
- `ReaderConfig`: normalized settings for translation, lookup, and storage.
- `RuntimeConfigSources`: optional value sources for precedence resolution.
- `ResolvedRuntime`: resolved model, language, and API key values.
- `ConfigLoader`: static construction helpers for `ReaderConfig`.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from .models.datatypes import TargetLanguage
from .parsing import normalize_optional_string, parse_optional_float, parse_required_float

DEFAULT_MODEL = "openai/gpt-4o-mini"
DEFAULT_TARGET_LANGUAGE = TargetLanguage(label="Chinese (Simplified)", code="zh-CN")
DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"
_SUPPORTED_CREDENTIAL_BACKENDS = frozenset({"file", "keyring"})

CACHE_FILE_NAME = "translation_cache.json"
VOCABULARY_FILE_NAME = "vocabulary.json"
RECENT_BOOKS_FILE_NAME = "recent_books.json"
KEY_FILE_NAME = "openrouter_key.txt"


def default_config_dir() -> Path:
    """Return the per-user config directory."""

    return Path.home() / ".pdfread"


@dataclass(frozen=True, slots=True)
class RuntimeConfigSources:
    """Source mappings used for deterministic runtime value precedence.

    Attributes:
        cli: Values explicitly provided by CLI arguments.
        env: Values loaded from environment variables.
    """

    cli: Mapping[str, str] = field(default_factory=dict)
    env: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ResolvedRuntime:
    """Runtime values resolved for one command invocation."""

    model: str
    temperature: float
    target_language: TargetLanguage
    api_key: str | None = None


@dataclass(slots=True)
class ReaderConfig:
    """Settings shared by the orchestrators, stores, and CLI.

    Attributes:
        config_dir: Directory holding the cache, key, and library files.
        model: Chat model identifier sent to the endpoint.
        temperature: Sampling temperature for sentence translation.
        target_language_label: Human-readable target language name.
        target_language_code: Target language identifier.
        base_url: OpenAI-compatible endpoint root.
        timeout_seconds: Transport timeout for one request.
        api_key: Optional API key overriding the credential store.
        credential_backend: `file` or `keyring`.
    """

    config_dir: Path = field(default_factory=default_config_dir)
    model: str = DEFAULT_MODEL
    temperature: float = 0.0
    target_language_label: str = DEFAULT_TARGET_LANGUAGE.label
    target_language_code: str = DEFAULT_TARGET_LANGUAGE.code
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = 60.0
    api_key: str | None = None
    credential_backend: str = "file"

    @property
    def cache_path(self) -> Path:
        return self.config_dir / CACHE_FILE_NAME

    @property
    def vocabulary_path(self) -> Path:
        return self.config_dir / VOCABULARY_FILE_NAME

    @property
    def recent_books_path(self) -> Path:
        return self.config_dir / RECENT_BOOKS_FILE_NAME

    @property
    def target_language(self) -> TargetLanguage:
        return TargetLanguage(label=self.target_language_label, code=self.target_language_code)

    def validate(self) -> None:
        """Validate configuration values before use."""

        self._require_non_empty(self.model, "model")
        self._require_non_empty(self.target_language_label, "target_language_label")
        self._require_non_empty(self.target_language_code, "target_language_code")
        self._require_non_empty(self.base_url, "base_url")
        if not 0.0 <= self.temperature <= 2.0:
            raise ValueError("`temperature` must be between 0 and 2.")
        if self.timeout_seconds <= 0:
            raise ValueError("`timeout_seconds` must be positive.")
        if self.credential_backend not in _SUPPORTED_CREDENTIAL_BACKENDS:
            supported = ", ".join(sorted(_SUPPORTED_CREDENTIAL_BACKENDS))
            raise ValueError(
                f"Unsupported `credential_backend` value `{self.credential_backend}`; "
                f"supported: {supported}."
            )

    def resolved_runtime(self, sources: RuntimeConfigSources | None = None) -> ResolvedRuntime:
        """Resolve model, language, and key with deterministic source precedence.

        Precedence for each key is: `cli` > `env` > config field value.
        """

        resolved_sources = sources if sources is not None else RuntimeConfigSources()
        model = self._resolve_value("model", "PDFREAD_MODEL", self.model, resolved_sources)
        temperature_text = self._resolve_value(
            "temperature", "PDFREAD_TEMPERATURE", str(self.temperature), resolved_sources
        )
        label = self._resolve_value(
            "language_label",
            "PDFREAD_LANGUAGE_LABEL",
            self.target_language_label,
            resolved_sources,
        )
        code = self._resolve_value(
            "language_code",
            "PDFREAD_LANGUAGE_CODE",
            self.target_language_code,
            resolved_sources,
        )
        api_key = (
            self._normalized_lookup(resolved_sources.cli, "api_key")
            or self._normalized_lookup(resolved_sources.env, "PDFREAD_API_KEY")
            or normalize_optional_string(self.api_key)
        )
        temperature = parse_required_float(temperature_text, "temperature")
        if not 0.0 <= temperature <= 2.0:
            raise ValueError("`temperature` must be between 0 and 2.")
        return ResolvedRuntime(
            model=model,
            temperature=temperature,
            target_language=TargetLanguage(label=label, code=code),
            api_key=api_key,
        )

    def _resolve_value(
        self,
        key: str,
        env_key: str,
        default_value: str | None,
        sources: RuntimeConfigSources,
    ) -> str:
        """Resolve a runtime value from sources in deterministic precedence order."""

        cli_value = self._normalized_lookup(sources.cli, key)
        if cli_value is not None:
            return cli_value

        env_value = self._normalized_lookup(sources.env, env_key)
        if env_value is not None:
            return env_value

        normalized_default = normalize_optional_string(default_value)
        if normalized_default is None:
            raise ValueError(f"`{key}` could not be resolved from CLI, env, or config.")
        return normalized_default

    @staticmethod
    def _normalized_lookup(mapping: Mapping[str, str], key: str) -> str | None:
        """Return a stripped mapping value for a key or `None` when missing/blank."""

        if key not in mapping:
            return None
        return normalize_optional_string(mapping.get(key))

    @staticmethod
    def _require_non_empty(value: str, field_name: str) -> None:
        """Validate that string fields are not empty."""

        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"`{field_name}` must be a non-empty string.")


class ConfigLoader:
    """Factory methods for creating `ReaderConfig` from external sources."""

    _SUPPORTED_YAML_KEYS = frozenset(
        {
            "config_dir",
            "model",
            "temperature",
            "target_language_label",
            "target_language_code",
            "base_url",
            "timeout_seconds",
            "api_key",
            "credential_backend",
        }
    )

    @staticmethod
    def from_yaml(path: Path) -> ReaderConfig:
        """Create a validated config from a YAML file."""

        raw_text = path.read_text(encoding="utf-8")
        try:
            payload = yaml.safe_load(raw_text)
        except yaml.YAMLError as exc:
            raise ValueError(f"YAML `{path}` could not be parsed: {exc}") from exc
        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ValueError(f"YAML `{path}` must contain a mapping at the top level.")
        return ConfigLoader._build_config_from_mapping(payload, source_label=f"YAML `{path}`")

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> ReaderConfig:
        """Create a validated config from `PDFREAD_*` environment variables."""

        env_map: Mapping[str, str] = os.environ if env is None else env
        payload: dict[str, Any] = {}
        for key in ConfigLoader._SUPPORTED_YAML_KEYS:
            value = normalize_optional_string(env_map.get(f"PDFREAD_{key.upper()}"))
            if value is not None:
                payload[key] = value
        return ConfigLoader._build_config_from_mapping(payload, source_label="environment")

    @staticmethod
    def apply_overrides(config: ReaderConfig, **overrides: Any) -> ReaderConfig:
        """Return a validated copy of `config` with non-`None` overrides applied."""

        changes = {key: value for key, value in overrides.items() if value is not None}
        updated = replace(config, **changes)
        updated.validate()
        return updated

    @staticmethod
    def _build_config_from_mapping(
        payload: Mapping[str, Any], source_label: str
    ) -> ReaderConfig:
        """Build and validate config from a parsed mapping."""

        unknown = sorted(str(key) for key in payload if key not in ConfigLoader._SUPPORTED_YAML_KEYS)
        if unknown:
            raise ValueError(f"{source_label} has unknown key(s): {', '.join(unknown)}.")

        config = ReaderConfig()
        config_dir = normalize_optional_string(payload.get("config_dir"))
        if config_dir is not None:
            config.config_dir = Path(config_dir).expanduser()
        for key in (
            "model",
            "target_language_label",
            "target_language_code",
            "base_url",
            "credential_backend",
        ):
            value = normalize_optional_string(payload.get(key))
            if value is not None:
                setattr(config, key, value)
        config.api_key = normalize_optional_string(payload.get("api_key"))

        temperature = parse_optional_float(payload.get("temperature"), "temperature")
        if temperature is not None:
            config.temperature = temperature
        timeout_seconds = parse_optional_float(payload.get("timeout_seconds"), "timeout_seconds")
        if timeout_seconds is not None:
            config.timeout_seconds = timeout_seconds

        try:
            config.validate()
        except ValueError as exc:
            raise ValueError(f"{source_label}: {exc}") from exc
        return config
