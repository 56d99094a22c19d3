"""Prompt template library for translation, word lookup, and reader chat.

Responsibilities:
- Centralize prompt construction for every remote call.
- Keep system prompts constant and independent of the request payload.
"""

from __future__ import annotations

import json
from typing import Sequence

from ..models.datatypes import Sentence, TargetLanguage


def _sentences_json(sentences: Sequence[Sentence]) -> str:
    return json.dumps([sentence.to_payload() for sentence in sentences], ensure_ascii=False)


class PromptLibrary:
    """Build prompt strings for supported LLM tasks."""

    def translation_system_prompt(self) -> str:
        """Return the fixed system prompt requiring strict JSON output."""

        return " ".join(
            (
                "You are a translation engine.",
                "Translate into the specified target language.",
                "Output STRICT JSON ONLY.",
                "No markdown, no explanations, no extra text.",
            )
        )

    def translate_prompt(
        self,
        target_language: TargetLanguage,
        sentences: Sequence[Sentence],
    ) -> str:
        """Return the batch translation prompt for the given sentences."""

        return (
            f"Target language: {target_language.label} ({target_language.code})\n"
            "Translation style: faithful, clear, readable\n"
            'Output format: JSON array of {"sid": string, "translation": string}, '
            "one item per input sid.\n"
            f"Input JSON: {_sentences_json(sentences)}"
        )

    def strict_translate_prompt(
        self,
        target_language: TargetLanguage,
        sentences: Sequence[Sentence],
    ) -> str:
        """Return the retry prompt demanding only the JSON array."""

        return (
            "Return ONLY this JSON array format with no extra text: "
            '[{"sid": "...", "translation": "..."}]. '
            f"Target language: {target_language.label} ({target_language.code})\n"
            f"Input JSON: {_sentences_json(sentences)}"
        )

    def word_lookup_system_prompt(self) -> str:
        """Return the fixed system prompt for dictionary lookups."""

        return (
            "You are a bilingual dictionary. Output STRICT JSON ONLY. "
            "No markdown, no explanations, no extra text."
        )

    def word_lookup_prompt(self, word: str, target_language: TargetLanguage) -> str:
        """Return the dictionary lookup prompt for one word."""

        return (
            f"Word: {word}\n"
            f"Target language: {target_language.label} ({target_language.code})\n"
            "Return a JSON object with this shape:\n"
            '{"phonetic": "IPA pronunciation", '
            '"definitions": [{"pos": "part of speech", '
            '"meanings": "meanings in the target language, separated by semicolons"}]}\n'
            "Order definitions from most to least common."
        )

    def reader_chat_system_prompt(self) -> str:
        """Return the system prompt for questions about the reading context."""

        return (
            "You are a reading assistant. Answer the reader's question using the "
            "provided document context. If the context does not contain the answer, "
            "say so briefly. Be concise."
        )

    def reader_chat_prompt(self, context: str, question: str) -> str:
        """Return the user prompt combining reading context and question."""

        return f"Context:\n{context}\n\nQuestion: {question}"
