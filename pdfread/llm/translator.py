"""Cached batch translation of document sentences.

Responsibilities:
- Partition a batch into cache hits and misses by sentence fingerprint.
- Issue one remote request for all misses, with one stricter retry when the
  reply cannot be decoded.
- Persist new translations in a single save and return results in caller order.
"""

from __future__ import annotations

from typing import Protocol, Sequence

from ..errors import ParseError, PersistenceError
from ..models.datatypes import Sentence, TargetLanguage, TranslationResult
from ..telemetry.logger import EventLogger
from .cache import CacheStore
from .decoding import decode_translations
from .extraction import extract_json
from .fingerprint import sentence_fingerprint
from .prompts import PromptLibrary


class ChatClient(Protocol):
    """Protocol for the remote chat-completions collaborator."""

    def complete(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
    ) -> str:
        """Return assistant message content for one request."""


class SentenceTranslator:
    """Translate sentence batches through a persistent fingerprint cache."""

    def __init__(
        self,
        cache_store: CacheStore,
        client: ChatClient,
        prompts: PromptLibrary | None = None,
        logger: EventLogger | None = None,
    ) -> None:
        """Initialize the translator with its cache store and chat client."""

        self.cache_store = cache_store
        self.client = client
        self.prompts = prompts if prompts is not None else PromptLibrary()
        self.logger = logger if logger is not None else EventLogger("translate")

    def translate(
        self,
        model: str,
        temperature: float,
        target_language: TargetLanguage,
        sentences: Sequence[Sentence],
    ) -> list[TranslationResult]:
        """Translate sentences, reusing cached results and dropping unresolved ids."""

        if not sentences:
            return []

        cache = self.cache_store.load()
        resolved: dict[str, str] = {}
        missing: list[Sentence] = []
        missing_by_sid: dict[str, Sentence] = {}
        for sentence in sentences:
            cached = cache.get(sentence_fingerprint(sentence, model, target_language.code))
            if cached is not None:
                resolved[sentence.sid] = cached
            elif sentence.sid not in missing_by_sid:
                missing.append(sentence)
                missing_by_sid[sentence.sid] = sentence

        self.logger.info(
            "cache_partition",
            model=model,
            language=target_language.code,
            hits=cache.hits,
            misses=cache.misses,
            requested=len(missing),
            hit_rate=f"{cache.hit_rate():.2f}",
        )

        if missing:
            decoded = self._request_translations(model, temperature, target_language, missing)
            stored = 0
            for item in decoded:
                source = missing_by_sid.get(item.sid)
                if source is None:
                    continue
                cache.set(
                    sentence_fingerprint(source, model, target_language.code),
                    item.translation,
                )
                resolved[item.sid] = item.translation
                stored += 1
            self.logger.info(
                "batch_resolved",
                requested=len(missing),
                resolved=stored,
                dropped=len(missing) - stored,
            )
            try:
                self.cache_store.save(cache)
            except PersistenceError as exc:
                self.logger.failure("cache_save_failed", exc)
                exc.results = self._assemble(sentences, resolved)
                raise

        return self._assemble(sentences, resolved)

    def _request_translations(
        self,
        model: str,
        temperature: float,
        target_language: TargetLanguage,
        missing: Sequence[Sentence],
    ) -> list[TranslationResult]:
        """Request translations for misses, retrying once with a stricter prompt."""

        system_prompt = self.prompts.translation_system_prompt()
        content = self.client.complete(
            model=model,
            temperature=temperature,
            system_prompt=system_prompt,
            user_prompt=self.prompts.translate_prompt(target_language, missing),
        )
        try:
            return decode_translations(extract_json(content, "array"))
        except ParseError as exc:
            self.logger.warning("parse_retry", error_type=type(exc).__name__)

        content = self.client.complete(
            model=model,
            temperature=temperature,
            system_prompt=system_prompt,
            user_prompt=self.prompts.strict_translate_prompt(target_language, missing),
        )
        try:
            return decode_translations(extract_json(content, "array"))
        except ParseError as exc:
            self.logger.failure("parse_failed", exc)
            raise ParseError(
                f"Failed to parse translation JSON: {exc.reason}",
                snippet=exc.snippet,
            ) from exc

    @staticmethod
    def _assemble(
        sentences: Sequence[Sentence],
        resolved: dict[str, str],
    ) -> list[TranslationResult]:
        """Return results in caller order for ids that have a translation."""

        return [
            TranslationResult(sid=sentence.sid, translation=resolved[sentence.sid])
            for sentence in sentences
            if sentence.sid in resolved
        ]
