"""Build session — the central coordinator for transarch builds.

A ``BuildSession`` wires together the StagingProject, ToolchainInvoker and
BlobStore.  Each call runs the full pipeline:

    stage fragment -> invoke toolchain -> harvest output -> blobs

and returns an artifact model.  Turning that artifact into code
(``emit``) or into a runtime value (``load``) is a separate second step.

The blob store lock covers id allocation only.  Writes to the staging
project's source file, the toolchain run and the harvest reads are not
serialized; concurrent sessions sharing one staging project race on it.
"""

from __future__ import annotations

import logging
import re
import shlex
from pathlib import Path

from transarch.config import TransarchConfig
from transarch.core.blob_store import BlobStore, default_store
from transarch.core.codegen import build_dir, emit_module, read_blob
from transarch.core.errors import TransarchError
from transarch.core.harvester import artifact_file_name, harvest_binary, harvest_tree
from transarch.core.staging import StagingProject, find_build_root
from transarch.core.toolchain import ToolchainInvoker
from transarch.models.artifacts import Artifact, BinaryArtifact, TreeArtifact
from transarch.models.vdir import Dir

logger = logging.getLogger(__name__)

_TARGET_LITERAL = re.compile(r'\s*"(?P<target>(?:[^"\\\n]|\\.)*)"')
# Anything else that looks like a literal: numbers, other quotes, prefixed
# or unterminated strings.
_OTHER_LITERAL = re.compile(r"""\s*(?:[0-9]|'|[bBrRfFuU]+["']|")""")


class TargetError(TransarchError):
    """Raised when no usable target is supplied."""


def split_target(source: str) -> tuple[str, str]:
    """Split a leading ``"<target>"`` literal off a fragment.

    Escape sequences inside the literal are kept as written, not decoded.
    Returns ``(target, remaining_source)``.
    """
    match = _TARGET_LITERAL.match(source)
    if match is None:
        if _OTHER_LITERAL.match(source):
            raise TargetError("target must be a string")
        raise TargetError("no target provided")

    target = match.group("target")
    if not target.isascii():
        raise TargetError("target must be a string")
    if not target.strip():
        raise TargetError("no target provided")
    return target, source[match.end():]


class BuildSession:
    """Compiles fragments and harvests the results.

    Parameters
    ----------
    config:
        Build configuration.  Uses defaults (and TRANSARCH_* env) if not
        provided.
    store:
        Blob store to allocate ids from.  Defaults to the process-wide
        ``default_store()``; pass a separate store only for an isolated
        numbering.
    invoker:
        Toolchain invoker.  Built from ``config.toolchain`` if None.
    start:
        Directory the build-root search starts from.  Defaults to the
        current directory at first use.
    """

    def __init__(
        self,
        config: TransarchConfig | None = None,
        *,
        store: BlobStore | None = None,
        invoker: ToolchainInvoker | None = None,
        start: Path | None = None,
    ) -> None:
        self.config = config or TransarchConfig()
        self.store = store if store is not None else default_store()
        self.invoker = invoker or ToolchainInvoker(
            shlex.split(self.config.toolchain), color=self.config.color
        )
        self._start = start
        self._project: StagingProject | None = None

    # ------------------------------------------------------------------
    # Staging
    # ------------------------------------------------------------------

    @property
    def project(self) -> StagingProject:
        """The staging project, located on first access."""
        if self._project is None:
            output_root = find_build_root(
                self._start,
                marker=self.config.build_root_marker,
                output_dir_name=self.config.output_dir_name,
            )
            self._project = StagingProject(
                output_root,
                namespace=self.config.namespace,
                project_name=self.config.project_name,
                package_name=self.config.package_name,
            )
        return self._project

    def _build(self, source: str, target: str | None) -> tuple[Path, str]:
        if target is None:
            target, source = split_target(source)
        logger.info("Compiling fragment (%d chars) for %s", len(source), target)

        project = self.project
        project.ensure()
        project.write_source(source)
        self.invoker.build(project.root, target)
        return project.output_dir(target, self.config.profile), target

    # ------------------------------------------------------------------
    # Compile
    # ------------------------------------------------------------------

    def compile(self, source: str, target: str | None = None) -> BinaryArtifact:
        """Build *source* and harvest the single library artifact.

        When *target* is None the fragment must start with a string
        literal naming it.
        """
        output_dir, target = self._build(source, target)
        file_name = artifact_file_name(self.project.artifact_stem, target)
        blob = harvest_binary(output_dir, file_name, self.store)
        return BinaryArtifact(target=target, blob=blob)

    def compile_tree(self, source: str, target: str | None = None) -> TreeArtifact:
        """Build *source* and harvest the whole output directory."""
        output_dir, target = self._build(source, target)
        tree = harvest_tree(output_dir, self.store)
        return TreeArtifact(target=target, root=tree)

    def wasm(self, source: str) -> BinaryArtifact:
        """Build a wasm module for the configured wasm target."""
        return self.compile(source, self.config.wasm_target)

    # ------------------------------------------------------------------
    # Second phase
    # ------------------------------------------------------------------

    def emit(self, artifact: Artifact, name: str = "ARTIFACT") -> str:
        """Generated module text embedding *artifact* as a constant."""
        return emit_module(artifact, name)

    def load(self, artifact: Artifact) -> bytes | Dir:
        """The embedded value itself: bytes for a binary, a ``Dir`` for a tree."""
        if isinstance(artifact, BinaryArtifact):
            return read_blob(artifact.blob)
        return build_dir(artifact.root)

    def __repr__(self) -> str:
        return f"<BuildSession toolchain={self.config.toolchain!r} blobs={self.store.allocated}>"

