"""``transarch root`` — show where builds will be staged."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape

from transarch.cli.driver import abort_on_error
from transarch.config import TransarchConfig
from transarch.core.session import BuildSession

console = Console()


def root_cmd() -> None:
    """Locate the build output root and the staging project."""
    with abort_on_error():
        config = TransarchConfig()
        project = BuildSession(config).project

    rows = [
        ("Output root", str(project.root.parent.parent)),
        ("Staging", str(project.root)),
        ("Toolchain", config.toolchain),
        ("Profile", config.profile),
    ]
    for label, value in rows:
        # One line per value, never wrapped.
        console.print(f"[bold]{label + ':':<13}[/bold] {escape(value)}", soft_wrap=True)
