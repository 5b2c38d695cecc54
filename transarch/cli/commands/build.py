"""``transarch build`` / ``transarch wasm`` — compile a fragment and emit code.

Reads a fragment from a file, runs a build session, and writes the
generated embedding module to ``--output`` or to stdout.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.markup import escape

from transarch.cli.driver import abort_on_error, err_console
from transarch.config import TransarchConfig
from transarch.core.errors import TransarchError
from transarch.core.session import BuildSession
from transarch.models.artifacts import Artifact


def _read_fragment(source: Path) -> str:
    try:
        return source.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise TransarchError(f"failed to read fragment {source}: {exc}") from exc


def _write_module(
    session: BuildSession, artifact: Artifact, name: str, output: Path | None
) -> None:
    text = session.emit(artifact, name=name)
    if output is None:
        typer.echo(text, nl=False)
        return

    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise TransarchError(f"failed to write {output}: {exc}") from exc
    err_console.print(
        f"[bold green]Wrote[/bold green] {escape(str(output))} "
        f"([dim]{artifact.kind}, target {escape(artifact.target)}[/dim])"
    )


def build_cmd(
    source: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        help="File holding the fragment to compile.",
    ),
    target: str = typer.Option(
        None,
        "--target",
        "-t",
        help="Target triple. Defaults to the fragment's leading string literal.",
    ),
    tree: bool = typer.Option(
        False,
        "--tree",
        help="Embed the whole output directory as a Dir instead of one binary.",
    ),
    name: str = typer.Option(
        "ARTIFACT",
        "--name",
        "-n",
        help="Constant name in the generated module.",
    ),
    output: Path = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the generated module here instead of stdout.",
    ),
) -> None:
    """Cross-compile a fragment and emit a module embedding the result."""
    with abort_on_error():
        session = BuildSession(TransarchConfig())
        fragment = _read_fragment(source)
        if tree:
            artifact: Artifact = session.compile_tree(fragment, target)
        else:
            artifact = session.compile(fragment, target)
        _write_module(session, artifact, name, output)


def wasm_cmd(
    source: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        help="File holding the fragment to compile.",
    ),
    name: str = typer.Option(
        "WASM",
        "--name",
        "-n",
        help="Constant name in the generated module.",
    ),
    output: Path = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the generated module here instead of stdout.",
    ),
) -> None:
    """Build a wasm module and emit it as a bytes constant."""
    with abort_on_error():
        session = BuildSession(TransarchConfig())
        artifact = session.wasm(_read_fragment(source))
        _write_module(session, artifact, name, output)
