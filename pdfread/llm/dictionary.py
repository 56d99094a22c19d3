"""Dictionary-style word lookups through the remote chat endpoint."""

from __future__ import annotations

from ..errors import ParseError
from ..models.datatypes import TargetLanguage, WordLookupResult
from ..telemetry.logger import EventLogger
from .decoding import decode_word_lookup
from .extraction import extract_json
from .prompts import PromptLibrary
from .translator import ChatClient

WORD_LOOKUP_TEMPERATURE = 0.1


class WordLookup:
    """Look up one word per call; results are never cached."""

    def __init__(
        self,
        client: ChatClient,
        prompts: PromptLibrary | None = None,
        logger: EventLogger | None = None,
    ) -> None:
        """Initialize the lookup with its chat client."""

        self.client = client
        self.prompts = prompts if prompts is not None else PromptLibrary()
        self.logger = logger if logger is not None else EventLogger("lookup")

    def lookup(self, model: str, target_language: TargetLanguage, word: str) -> WordLookupResult:
        """Return phonetic and ordered definitions for `word`.

        Any decode failure is terminal for the call; there is no retry.
        """

        normalized_word = word.strip()
        if not normalized_word:
            raise ValueError("Word must be a non-empty string.")

        content = self.client.complete(
            model=model,
            temperature=WORD_LOOKUP_TEMPERATURE,
            system_prompt=self.prompts.word_lookup_system_prompt(),
            user_prompt=self.prompts.word_lookup_prompt(normalized_word, target_language),
        )
        try:
            result = decode_word_lookup(extract_json(content, "object"))
        except ParseError as exc:
            self.logger.failure("parse_failed", exc, model=model)
            raise
        self.logger.info(
            "lookup_resolved",
            model=model,
            language=target_language.code,
            definitions=len(result.definitions),
        )
        return result
