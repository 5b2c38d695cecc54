"""Staging project — the reused scratch crate a fragment is compiled in.

Layout::

    <build-root>/target/<namespace>/<project_name>/
        Cargo.toml          written once, never rewritten
        src/lib.rs          overwritten on every invocation
        target/<target-id>/<profile>/   toolchain output

Only one compilation may safely be in flight per staging project: two
concurrent invocations race on ``src/lib.rs``.
"""

from __future__ import annotations

import logging
from pathlib import Path

from transarch.core.errors import TransarchError

logger = logging.getLogger(__name__)

MANIFEST_TEMPLATE = """\
[package]
name = "{package_name}"
version = "0.1.0"
edition = "2021"

[lib]
crate-type = ["cdylib", "rlib"]

[workspace]
members = []
"""


class StagingError(TransarchError):
    """Raised when the staging project cannot be located or written."""


def find_build_root(
    start: Path | None = None,
    *,
    marker: str = "Cargo.toml",
    output_dir_name: str = "target",
) -> Path:
    """Return the output directory of the enclosing build.

    Walks *start* (default: the current directory) and its ancestors for
    the first directory containing both *marker* as a file and
    *output_dir_name* as a directory, and returns that output directory.
    """
    origin = Path(start).resolve() if start else Path.cwd()
    for candidate in (origin, *origin.parents):
        if (candidate / marker).is_file() and (candidate / output_dir_name).is_dir():
            return candidate / output_dir_name
    raise StagingError(
        f"no target dir found: no ancestor of {origin} holds both "
        f"{marker} and {output_dir_name}/"
    )


class StagingProject:
    """The scratch crate under the build output root.

    Parameters
    ----------
    output_root:
        The enclosing build's output directory (see ``find_build_root``).
    namespace, project_name:
        Subpath of the project under *output_root*.
    package_name:
        Package name written into the manifest.
    """

    def __init__(
        self,
        output_root: Path,
        *,
        namespace: str = "transarch",
        project_name: str = "transarch-tmp-crate",
        package_name: str = "transarch-tmp-pkg",
    ) -> None:
        self.root = Path(output_root) / namespace / project_name
        self.package_name = package_name

    @property
    def manifest_path(self) -> Path:
        return self.root / "Cargo.toml"

    @property
    def source_path(self) -> Path:
        return self.root / "src" / "lib.rs"

    @property
    def artifact_stem(self) -> str:
        """File stem the toolchain gives the library artifact."""
        return self.package_name.replace("-", "_")

    def output_dir(self, target: str, profile: str = "debug") -> Path:
        """Where the toolchain leaves its output for *target*."""
        return self.root / "target" / target / profile

    def ensure(self) -> None:
        """Create the project tree and manifest on first use.

        An existing manifest is left untouched.
        """
        src_dir = self.source_path.parent
        try:
            src_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StagingError(f"setup failed: failed to create {src_dir}: {exc}") from exc

        if self.manifest_path.exists():
            return

        try:
            self.manifest_path.write_text(
                MANIFEST_TEMPLATE.format(package_name=self.package_name),
                encoding="utf-8",
            )
        except OSError as exc:
            raise StagingError(
                f"setup failed: failed to create {self.manifest_path}: {exc}"
            ) from exc
        logger.info("Created staging project at %s", self.root)

    def write_source(self, text: str) -> Path:
        """Overwrite the project's single source file with *text*."""
        try:
            self.source_path.write_text(text, encoding="utf-8")
        except OSError as exc:
            raise StagingError(
                f"setup failed: failed to create {self.source_path}: {exc}"
            ) from exc
        logger.debug("Wrote %d chars to %s", len(text), self.source_path)
        return self.source_path

    def __repr__(self) -> str:
        return f"<StagingProject root={str(self.root)!r}>"
