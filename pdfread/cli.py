"""Command-line interface for pdfread.

Responsibilities:
- Expose the reader backend operations as user-facing commands.
- Convert CLI options into `ReaderConfig`/`ResolvedRuntime` and run services.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

from dataclasses import dataclass
from hashlib import sha256
import json
from pathlib import Path
from typing import Annotated

import typer

from .cli_rendering import (
    echo_recent_books,
    echo_translations,
    echo_vocabulary,
    echo_word_lookup,
    exit_with_command_error,
)
from .cli_runtime import (
    collect_runtime_cli_values,
    load_reader_config,
    prompt_for_api_key,
    resolve_runtime,
)
from .config import ReaderConfig, ResolvedRuntime
from .errors import PersistenceError
from .io.file_reader import read_document_bytes
from .models.datatypes import Sentence, WordLookupResult
from .provider_factory import ProviderFactory
from .telemetry.logger import configure_logging

app = typer.Typer(
    name="pdfread",
    no_args_is_help=True,
    help="pdfread reader backend CLI.",
)
key_app = typer.Typer(no_args_is_help=True, help="Manage the OpenRouter API key.")
vocab_app = typer.Typer(no_args_is_help=True, help="Manage saved vocabulary.")
books_app = typer.Typer(no_args_is_help=True, help="Manage recently opened books.")
cache_app = typer.Typer(no_args_is_help=True, help="Inspect the translation cache.")
app.add_typer(key_app, name="key")
app.add_typer(vocab_app, name="vocab")
app.add_typer(books_app, name="books")
app.add_typer(cache_app, name="cache")


@dataclass(slots=True)
class CommandState:
    """Configuration resolved once per CLI invocation."""

    config: ReaderConfig
    runtime: ResolvedRuntime

    @property
    def factory(self) -> ProviderFactory:
        return ProviderFactory(self.config, self.runtime)


def _state(ctx: typer.Context) -> CommandState:
    state = ctx.obj
    if not isinstance(state, CommandState):
        raise RuntimeError("CLI state is not initialized.")
    return state


def _save_to_vocabulary(state: CommandState, word: str, result: WordLookupResult) -> str:
    """Save a looked-up word and return the confirmation line."""

    vocabulary = state.factory.create_vocabulary_store()
    replaced = vocabulary.contains(word)
    entry = vocabulary.add_word(word, result.phonetic, result.definitions)
    if replaced:
        return f"Updated `{entry.word}` in vocabulary."
    return f"Saved `{entry.word}` to vocabulary."


@app.callback()
def main_callback(
    ctx: typer.Context,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to YAML config file."),
    ] = None,
    config_dir: Annotated[
        Path | None,
        typer.Option("--config-dir", help="Directory for cache, key, and library files."),
    ] = None,
    model: Annotated[
        str | None, typer.Option("--model", help="Chat model id override.")
    ] = None,
    temperature: Annotated[
        float | None, typer.Option("--temperature", help="Translation temperature override.")
    ] = None,
    language_label: Annotated[
        str | None,
        typer.Option("--language-label", help="Target language name, e.g. `Japanese`."),
    ] = None,
    language_code: Annotated[
        str | None,
        typer.Option("--language-code", help="Target language code, e.g. `ja`."),
    ] = None,
    api_key: Annotated[
        str | None,
        typer.Option(
            "--api-key",
            help="API key override. Prefer `pdfread key set` to avoid shell history.",
        ),
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", help="Emit event log lines on stderr.")
    ] = False,
) -> None:
    """Resolve configuration shared by all commands."""

    configure_logging(level="DEBUG" if verbose else "WARNING")
    try:
        config = load_reader_config(config_file, config_dir)
        runtime = resolve_runtime(
            config,
            collect_runtime_cli_values(
                model=model,
                temperature=temperature,
                language_label=language_label,
                language_code=language_code,
                api_key=api_key,
            ),
        )
    except Exception as exc:
        exit_with_command_error("pdfread", exc)
    ctx.obj = CommandState(config=config, runtime=runtime)


def _load_sentences(input_file: Path | None, texts: list[str] | None) -> list[Sentence]:
    """Build the sentence batch from a JSON file and/or repeated `--text` values."""

    sentences: list[Sentence] = []
    if input_file is not None:
        payload = json.loads(input_file.read_text(encoding="utf-8"))
        if not isinstance(payload, list):
            raise ValueError(f"`{input_file}` must contain a JSON array of {{sid, text}}.")
        for index, item in enumerate(payload):
            if (
                not isinstance(item, dict)
                or not isinstance(item.get("sid"), str)
                or not isinstance(item.get("text"), str)
            ):
                raise ValueError(f"Item {index} in `{input_file}` needs string `sid` and `text`.")
            sentences.append(Sentence(sid=item["sid"], text=item["text"]))
    for index, text in enumerate(texts or [], start=1):
        sentences.append(Sentence(sid=f"cli:{index}", text=text))
    return sentences


@app.command("translate")
def translate_command(
    ctx: typer.Context,
    input_file: Annotated[
        Path | None,
        typer.Option("--input", help="JSON file with an array of `{sid, text}` objects."),
    ] = None,
    text: Annotated[
        list[str] | None,
        typer.Option("--text", help="Sentence text; repeat for several sentences."),
    ] = None,
) -> None:
    """Translate sentences through the fingerprint cache and print JSON results."""

    state = _state(ctx)
    try:
        sentences = _load_sentences(input_file, text)
        results = state.factory.create_translator().translate(
            state.runtime.model,
            state.runtime.temperature,
            state.runtime.target_language,
            sentences,
        )
    except PersistenceError as exc:
        if exc.results:
            echo_translations(exc.results)
        exit_with_command_error("translate", exc)
    except Exception as exc:
        exit_with_command_error("translate", exc)
    echo_translations(results)


@app.command("lookup")
def lookup_command(
    ctx: typer.Context,
    word: Annotated[str, typer.Argument(help="Word to look up.")],
    save: Annotated[
        bool, typer.Option("--save", help="Add the word to the vocabulary list.")
    ] = False,
) -> None:
    """Look up a word's phonetic and definitions in the target language."""

    state = _state(ctx)
    try:
        result = state.factory.create_word_lookup().lookup(
            state.runtime.model,
            state.runtime.target_language,
            word,
        )
        confirmation = _save_to_vocabulary(state, word, result) if save else None
    except Exception as exc:
        exit_with_command_error("lookup", exc)
    echo_word_lookup(word.strip(), result)
    if confirmation:
        typer.echo(confirmation)


@app.command("ask")
def ask_command(
    ctx: typer.Context,
    question: Annotated[str, typer.Argument(help="Question about the context.")],
    context_file: Annotated[
        Path,
        typer.Option("--context-file", help="Text file with the passage being read."),
    ],
) -> None:
    """Ask a question about a passage of the current document."""

    state = _state(ctx)
    try:
        context = context_file.read_text(encoding="utf-8")
        answer = state.factory.create_assistant().ask(state.runtime.model, context, question)
    except Exception as exc:
        exit_with_command_error("ask", exc)
    typer.echo(answer)


@key_app.command("set")
def key_set_command(
    ctx: typer.Context,
    value: Annotated[
        str | None,
        typer.Option("--value", help="API key value. Omit to enter it with hidden input."),
    ] = None,
) -> None:
    """Store the API key in the configured credential store."""

    state = _state(ctx)
    try:
        store = state.factory.create_credential_store()
        store.set_api_key(prompt_for_api_key(value))
    except Exception as exc:
        exit_with_command_error("key set", exc)
    typer.echo(f"Saved. Key stored at {store.describe()}.")


@key_app.command("info")
def key_info_command(ctx: typer.Context) -> None:
    """Report whether an API key is stored, without printing it."""

    state = _state(ctx)
    try:
        store = state.factory.create_credential_store()
        available = store.is_available()
        exists = available and store.get_api_key() is not None
    except Exception as exc:
        exit_with_command_error("key info", exc)
    typer.echo(
        json.dumps({"available": available, "exists": exists, "location": store.describe()})
    )


@key_app.command("test")
def key_test_command(ctx: typer.Context) -> None:
    """Send one minimal request to verify the stored key and model."""

    state = _state(ctx)
    try:
        state.factory.create_chat_client().complete(
            model=state.runtime.model,
            temperature=0.0,
            system_prompt="Reply with OK.",
            user_prompt="ping",
        )
    except Exception as exc:
        exit_with_command_error("key test", exc)
    typer.echo("Connection OK.")


@key_app.command("clear")
def key_clear_command(ctx: typer.Context) -> None:
    """Delete the stored API key."""

    state = _state(ctx)
    try:
        removed = state.factory.create_credential_store().clear_api_key()
    except Exception as exc:
        exit_with_command_error("key clear", exc)
    typer.echo("Key removed." if removed else "No key stored.")


@vocab_app.command("list")
def vocab_list_command(ctx: typer.Context) -> None:
    """List saved words."""

    state = _state(ctx)
    try:
        entries = state.factory.create_vocabulary_store().list_words()
    except Exception as exc:
        exit_with_command_error("vocab list", exc)
    echo_vocabulary(entries)


@vocab_app.command("add")
def vocab_add_command(
    ctx: typer.Context,
    word: Annotated[str, typer.Argument(help="Word to look up and save.")],
) -> None:
    """Look up a word and save it with its definitions."""

    state = _state(ctx)
    try:
        result = state.factory.create_word_lookup().lookup(
            state.runtime.model,
            state.runtime.target_language,
            word,
        )
        confirmation = _save_to_vocabulary(state, word, result)
    except Exception as exc:
        exit_with_command_error("vocab add", exc)
    typer.echo(confirmation)


@vocab_app.command("remove")
def vocab_remove_command(
    ctx: typer.Context,
    word: Annotated[str, typer.Argument(help="Word to remove.")],
) -> None:
    """Remove a saved word."""

    state = _state(ctx)
    try:
        removed = state.factory.create_vocabulary_store().remove_word(word)
    except Exception as exc:
        exit_with_command_error("vocab remove", exc)
    typer.echo(f"Removed `{word}`." if removed else f"`{word}` is not in the vocabulary.")


@vocab_app.command("export")
def vocab_export_command(
    ctx: typer.Context,
    out: Annotated[
        Path | None,
        typer.Option("--out", help="Write markdown to this file instead of stdout."),
    ] = None,
) -> None:
    """Export saved words as markdown."""

    state = _state(ctx)
    try:
        markdown = state.factory.create_vocabulary_store().export_markdown()
        if out is not None:
            out.parent.mkdir(parents=True, exist_ok=True)
            out.write_text(markdown, encoding="utf-8")
    except Exception as exc:
        exit_with_command_error("vocab export", exc)
    if out is None:
        typer.echo(markdown, nl=False)
    else:
        typer.echo(f"Vocabulary exported to {out}")


@books_app.command("list")
def books_list_command(ctx: typer.Context) -> None:
    """List recently opened books."""

    state = _state(ctx)
    try:
        books = state.factory.create_recent_books_store().list_books()
    except Exception as exc:
        exit_with_command_error("books list", exc)
    echo_recent_books(books)


@books_app.command("add")
def books_add_command(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="PDF or EPUB document path.")],
    title: Annotated[str | None, typer.Option("--title", help="Display title.")] = None,
    author: Annotated[str | None, typer.Option("--author", help="Author name.")] = None,
    pages: Annotated[int, typer.Option("--pages", help="Total page count.")] = 0,
) -> None:
    """Record a document as opened, identified by its content hash."""

    state = _state(ctx)
    try:
        document_id = sha256(read_document_bytes(path)).hexdigest()[:12]
        book = state.factory.create_recent_books_store().add_book(
            id=document_id,
            file_path=str(path.resolve()),
            file_name=path.name,
            file_type="epub" if path.suffix.lower() == ".epub" else "pdf",
            title=title or path.stem,
            author=author,
            total_pages=pages,
        )
    except Exception as exc:
        exit_with_command_error("books add", exc)
    typer.echo(f"Book id: {book.id}")


@books_app.command("progress")
def books_progress_command(
    ctx: typer.Context,
    book_id: Annotated[str, typer.Argument(help="Book id.")],
    page: Annotated[int, typer.Option("--page", help="Last visited page.")],
    progress: Annotated[float, typer.Option("--progress", help="Progress percentage.")],
) -> None:
    """Store the reading position of a book."""

    state = _state(ctx)
    try:
        book = state.factory.create_recent_books_store().update_progress(book_id, page, progress)
    except KeyError:
        exit_with_command_error("books progress", ValueError(f"Unknown book id `{book_id}`."))
    except Exception as exc:
        exit_with_command_error("books progress", exc)
    typer.echo(f"{book.title}: page {book.last_page}, {book.progress:.0f}%")


@books_app.command("remove")
def books_remove_command(
    ctx: typer.Context,
    book_id: Annotated[str, typer.Argument(help="Book id.")],
) -> None:
    """Forget a recently opened book."""

    state = _state(ctx)
    try:
        removed = state.factory.create_recent_books_store().remove_book(book_id)
    except Exception as exc:
        exit_with_command_error("books remove", exc)
    typer.echo("Book removed." if removed else f"Unknown book id `{book_id}`.")


@cache_app.command("info")
def cache_info_command(ctx: typer.Context) -> None:
    """Show the cache file location and entry count."""

    state = _state(ctx)
    try:
        cache = state.factory.create_cache_store().load()
    except Exception as exc:
        exit_with_command_error("cache info", exc)
    typer.echo(f"Cache file: {state.config.cache_path}")
    typer.echo(f"Entries: {len(cache)}")


def main() -> None:
    """Run the Typer application."""

    app()
