"""Credential storage for the chat endpoint API key.

Responsibilities:
- Persist the API key in the reader config directory or the OS keyring.
- Provide deterministic read/write/delete operations for the key.
- Avoid logging or exposing secret values in diagnostics.

Key types:
- `CredentialStore`: interface for API key persistence.
- `FileCredentialStore`: plain-text key file in the config directory (default).
- `KeyringCredentialStore`: keyring-backed secure credential storage.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Any

import keyring
from keyring.errors import KeyringError

from .config import KEY_FILE_NAME
from .errors import ConfigurationError, PersistenceError

_DEFAULT_SERVICE_NAME = "pdfread"
_DEFAULT_ACCOUNT_NAME = "openrouter_api_key"


class CredentialStore:
    """Interface for API key persistence."""

    def describe(self) -> str:
        """Return a non-secret description of where the key lives."""

        raise NotImplementedError

    def is_available(self) -> bool:
        """Return whether the backing storage can be used."""

        raise NotImplementedError

    def get_api_key(self) -> str | None:
        """Load the stored API key, returning `None` when missing or blank."""

        raise NotImplementedError

    def set_api_key(self, api_key: str) -> None:
        """Persist an API key."""

        raise NotImplementedError

    def clear_api_key(self) -> bool:
        """Delete a stored API key and return whether one existed."""

        raise NotImplementedError


def _normalize_api_key(api_key: str) -> str:
    normalized = api_key.strip()
    if not normalized:
        raise ValueError("API key must be a non-empty string.")
    return normalized


@dataclass(slots=True)
class FileCredentialStore(CredentialStore):
    """API key stored as a single trimmed line in the config directory."""

    config_dir: Path

    @property
    def key_path(self) -> Path:
        """Return the key file path."""

        return self.config_dir / KEY_FILE_NAME

    def describe(self) -> str:
        return str(self.key_path)

    def is_available(self) -> bool:
        return True

    def get_api_key(self) -> str | None:
        try:
            value = self.key_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise PersistenceError(
                f"Failed to read API key file `{self.key_path}`: {exc}",
                path=self.key_path,
            ) from exc
        normalized = value.strip()
        return normalized or None

    def set_api_key(self, api_key: str) -> None:
        normalized = _normalize_api_key(api_key)
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            self.key_path.write_text(normalized, encoding="utf-8")
            os.chmod(self.key_path, 0o600)
        except OSError as exc:
            raise PersistenceError(
                f"Failed to write API key file `{self.key_path}`: {exc}",
                path=self.key_path,
            ) from exc

    def clear_api_key(self) -> bool:
        if not self.key_path.exists():
            return False
        try:
            self.key_path.unlink()
        except OSError as exc:
            raise PersistenceError(
                f"Failed to delete API key file `{self.key_path}`: {exc}",
                path=self.key_path,
            ) from exc
        return True


@dataclass(slots=True)
class KeyringCredentialStore(CredentialStore):
    """Secure credential store backed by the `keyring` package."""

    service_name: str = _DEFAULT_SERVICE_NAME
    account_name: str = _DEFAULT_ACCOUNT_NAME

    def _keyring_module(self) -> Any:
        """Return the keyring module used for storage operations."""

        return keyring

    def describe(self) -> str:
        return f"keyring:{self.service_name}/{self.account_name}"

    def is_available(self) -> bool:
        """Return `False` when only keyring's fail backend is configured."""

        backend = self._keyring_module().get_keyring()
        return type(backend).__module__ != "keyring.backends.fail"

    def get_api_key(self) -> str | None:
        try:
            value = self._keyring_module().get_password(self.service_name, self.account_name)
        except KeyringError as exc:
            raise ConfigurationError(
                f"Failed to read API key from keyring: {exc}",
                hint="Configure a keyring backend or use `credential_backend: file`.",
            ) from exc
        if value is None:
            return None
        normalized = value.strip()
        return normalized or None

    def set_api_key(self, api_key: str) -> None:
        normalized = _normalize_api_key(api_key)
        try:
            self._keyring_module().set_password(self.service_name, self.account_name, normalized)
        except KeyringError as exc:
            raise ConfigurationError(
                f"Failed to store API key in keyring: {exc}",
                hint="Configure a keyring backend or use `credential_backend: file`.",
            ) from exc

    def clear_api_key(self) -> bool:
        if self.get_api_key() is None:
            return False
        try:
            self._keyring_module().delete_password(self.service_name, self.account_name)
        except KeyringError as exc:
            raise ConfigurationError(
                f"Failed to delete API key from keyring: {exc}",
                hint="Configure a keyring backend or use `credential_backend: file`.",
            ) from exc
        return True


def require_api_key(store: CredentialStore) -> str:
    """Return the stored API key or raise when it is missing or blank."""

    api_key = store.get_api_key()
    if api_key is None:
        raise ConfigurationError(
            f"Missing API key at: {store.describe()}",
            hint="Run `pdfread key set` to store an OpenRouter API key.",
        )
    return api_key


def create_credential_store(backend: str, config_dir: Path) -> CredentialStore:
    """Create the credential store for a configured backend name."""

    if backend == "file":
        return FileCredentialStore(config_dir=config_dir)
    if backend == "keyring":
        return KeyringCredentialStore()
    raise ValueError(f"Unsupported credential backend `{backend}`.")
