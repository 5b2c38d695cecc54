"""Toolchain invoker — runs the external compiler against the staging project.

One blocking child process per build.  Standard output and error are
inherited so diagnostics stream straight into the host build's console.
There is no timeout and no retry: a stalled compiler stalls the build.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path

from transarch.core.errors import TransarchError

logger = logging.getLogger(__name__)


class ToolchainError(TransarchError):
    """Raised when the external compiler cannot produce output."""


class ToolchainSpawnError(ToolchainError):
    """Raised when the compiler process cannot be started."""


class ToolchainExitError(ToolchainError):
    """Raised when the compiler exits with a non-zero status."""

    def __init__(self, argv: Sequence[str], returncode: int) -> None:
        super().__init__(
            f"failed to execute {argv[0]}: exit status {returncode} "
            f"({' '.join(argv)})"
        )
        self.argv = list(argv)
        self.returncode = returncode


class ToolchainInvoker:
    """Spawns ``<command> build --target=<t> --color=<c>``.

    Parameters
    ----------
    command:
        Driver program and any leading arguments, e.g. ``("cargo",)`` or
        ``("cargo", "+nightly")``.
    color:
        Value passed to ``--color``.
    """

    def __init__(
        self, command: Sequence[str] = ("cargo",), *, color: str = "always"
    ) -> None:
        if not command:
            raise ValueError("toolchain command must not be empty")
        self.command = list(command)
        self.color = color

    def argv_for(self, target: str) -> list[str]:
        return [*self.command, "build", f"--target={target}", f"--color={self.color}"]

    def build(self, project_dir: Path, target: str) -> None:
        """Build *project_dir* for *target*, blocking until the child exits."""
        argv = self.argv_for(target)
        logger.info("Building %s for %s", project_dir, target)

        try:
            completed = subprocess.run(argv, cwd=project_dir, check=False)
        except OSError as exc:
            raise ToolchainSpawnError(f"failed to run {argv[0]}: {exc}") from exc

        if completed.returncode != 0:
            raise ToolchainExitError(argv, completed.returncode)
        logger.debug("%s finished for %s", argv[0], target)
