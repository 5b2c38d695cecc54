"""Main Typer application — imports and registers all CLI commands.

Entry point: ``transarch`` (configured via pyproject.toml scripts).
"""

from __future__ import annotations

import typer

from transarch.cli.commands.build import build_cmd, wasm_cmd
from transarch.cli.commands.root_cmd import root_cmd
from transarch.cli.driver import abort_on_error, configure_logging
from transarch.config import TransarchConfig

app = typer.Typer(
    name="transarch",
    help="Transarch: cross-compile a fragment and embed its artifacts.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        None, "--log-level", help="Logging level (default: TRANSARCH_LOG_LEVEL or INFO)."
    ),
) -> None:
    """Transarch: cross-compile a fragment and embed its artifacts."""
    with abort_on_error():
        level = log_level or TransarchConfig().log_level
    configure_logging(level)


# Register subcommands
app.command(name="build", help="Compile a fragment and emit an embedding module.")(build_cmd)
app.command(name="wasm", help="Compile a fragment to wasm and emit a bytes constant.")(wasm_cmd)
app.command(name="root", help="Show the build output root and staging project.")(root_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
