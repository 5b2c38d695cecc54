"""Shared plumbing for CLI commands: logging setup and the abort policy."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import NoReturn

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from transarch.core.errors import TransarchError

# Diagnostics go to stderr; stdout is reserved for generated code.
err_console = Console(stderr=True)


def configure_logging(level: str) -> None:
    """Route transarch logging through rich on stderr."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@contextmanager
def abort_on_error() -> Iterator[None]:
    """Turn any build failure or bad setting into a printed error and exit status 1."""
    try:
        yield
    except TransarchError as exc:
        _abort(str(exc), exc)
    except ValidationError as exc:
        _abort(f"invalid configuration: {exc}", exc)


def _abort(message: str, exc: Exception) -> NoReturn:
    err_console.print(f"[bold red]error:[/bold red] {escape(message)}", soft_wrap=True)
    raise typer.Exit(code=1) from exc
