"""CLI output and error rendering helpers.

This module centralizes user-facing CLI presentation for command diagnostics,
word lookups, vocabulary rows, and recent-book rows.
"""

from __future__ import annotations

import json
from typing import NoReturn, Sequence

import typer

from .errors import ReaderError
from .models.datatypes import RecentBook, TranslationResult, VocabularyEntry, WordLookupResult


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    if isinstance(exc, ReaderError):
        typer.secho(
            f"{command_name} failed ({type(exc).__name__}): {exc.detail}",
            fg=typer.colors.RED,
            err=True,
        )
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def echo_translations(results: Sequence[TranslationResult]) -> None:
    """Print translation results as a JSON array."""

    typer.echo(
        json.dumps([result.to_payload() for result in results], ensure_ascii=False, indent=2)
    )


def echo_word_lookup(word: str, result: WordLookupResult) -> None:
    """Print a word lookup as a compact dictionary entry."""

    header = f"{word} /{result.phonetic.strip('/')}/" if result.phonetic else word
    typer.echo(header)
    if not result.definitions:
        typer.echo("  (no definitions)")
    for definition in result.definitions:
        prefix = f"{definition.pos} " if definition.pos else ""
        typer.echo(f"  {prefix}{definition.meanings}")


def echo_vocabulary(entries: Sequence[VocabularyEntry]) -> None:
    """Print saved words, one per row."""

    if not entries:
        typer.echo("No words saved yet.")
        return
    for entry in entries:
        meanings = "; ".join(definition.meanings for definition in entry.definitions)
        typer.echo(f"{entry.word}\t{meanings}")


def echo_recent_books(books: Sequence[RecentBook]) -> None:
    """Print recent books with progress, most recent first."""

    if not books:
        typer.echo("No recent books.")
        return
    for book in books:
        typer.echo(
            f"{book.id}\t{book.title}\t{book.file_type}\t"
            f"page {book.last_page}/{book.total_pages}\t{book.progress:.0f}%"
        )
