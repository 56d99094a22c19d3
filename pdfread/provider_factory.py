"""Factory helpers wiring configuration into orchestrators and stores.

Responsibilities:
- Resolve the API key from explicit runtime values or the credential store.
- Build the chat client, orchestrators, and library stores for one command.
"""

from __future__ import annotations

from .config import ReaderConfig, ResolvedRuntime
from .credentials import CredentialStore, create_credential_store, require_api_key
from .library.recent_books import RecentBooksStore
from .library.vocabulary import VocabularyStore
from .llm.assistant import ContextAssistant
from .llm.cache import CacheStore
from .llm.chat_client import ChatCompletionClient
from .llm.dictionary import WordLookup
from .llm.translator import SentenceTranslator


class LazyKeyChatClient:
    """Chat client that reads the credential only when a request is issued.

    Fully cached translation batches never touch the credential store.
    """

    def __init__(
        self,
        config: ReaderConfig,
        credential_store: CredentialStore,
        api_key: str | None = None,
    ) -> None:
        self.config = config
        self.credential_store = credential_store
        self.api_key = api_key
        self._client: ChatCompletionClient | None = None

    def complete(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
    ) -> str:
        """Resolve the credential on first use and delegate the request."""

        if self._client is None:
            api_key = self.api_key or require_api_key(self.credential_store)
            self._client = ChatCompletionClient(
                api_key=api_key,
                base_url=self.config.base_url,
                timeout_seconds=self.config.timeout_seconds,
            )
        return self._client.complete(
            model=model,
            temperature=temperature,
            system_prompt=system_prompt,
            user_prompt=user_prompt,
        )


class ProviderFactory:
    """Factory for configured reader services."""

    def __init__(self, config: ReaderConfig, runtime: ResolvedRuntime | None = None) -> None:
        self.config = config
        self.runtime = runtime if runtime is not None else config.resolved_runtime()

    def create_credential_store(self) -> CredentialStore:
        """Create the configured credential store."""

        return create_credential_store(self.config.credential_backend, self.config.config_dir)

    def create_chat_client(self) -> LazyKeyChatClient:
        """Create a chat client bound to the resolved or stored API key."""

        return LazyKeyChatClient(
            config=self.config,
            credential_store=self.create_credential_store(),
            api_key=self.runtime.api_key,
        )

    def create_translator(self) -> SentenceTranslator:
        return SentenceTranslator(
            cache_store=CacheStore(self.config.cache_path),
            client=self.create_chat_client(),
        )

    def create_word_lookup(self) -> WordLookup:
        return WordLookup(client=self.create_chat_client())

    def create_assistant(self) -> ContextAssistant:
        return ContextAssistant(client=self.create_chat_client())

    def create_vocabulary_store(self) -> VocabularyStore:
        return VocabularyStore(self.config.vocabulary_path)

    def create_recent_books_store(self) -> RecentBooksStore:
        return RecentBooksStore(self.config.recent_books_path)

    def create_cache_store(self) -> CacheStore:
        return CacheStore(self.config.cache_path)
