"""Embedding code generator.

Turns harvested artifacts into Python source that rebuilds them as
constants when the generated module is imported:

* a binary artifact becomes one bytes literal;
* a tree artifact becomes a nested ``Dir.from_mapping({...})`` expression
  with ``FileEntry`` leaves and ``DirEntry`` branches.

``build_dir`` produces the same ``Dir`` value directly from a
``BlobTree``, with no text in between.
"""

from __future__ import annotations

import ast
import keyword
import logging

from transarch.core.errors import TransarchError
from transarch.models.artifacts import Artifact, BinaryArtifact, Blob, BlobTree
from transarch.models.vdir import Dir, DirEntry, FileEntry

logger = logging.getLogger(__name__)

GENERATED_HEADER = "# Generated by transarch. Do not edit.\n"
TREE_IMPORT = "from transarch import Dir, DirEntry, FileEntry\n"


class CodegenError(TransarchError):
    """Raised when embedding code cannot be generated."""


def read_blob(blob: Blob) -> bytes:
    """Exact bytes of a stored blob."""
    try:
        return blob.path.read_bytes()
    except OSError as exc:
        raise CodegenError(f"failed to read blob{blob.id} at {blob.path}: {exc}") from exc


def emit_bytes(blob: Blob) -> str:
    """Bytes-literal expression holding the blob's exact content."""
    return repr(read_blob(blob))


def emit_tree(tree: BlobTree) -> str:
    """Nested expression that builds a ``Dir`` mirroring *tree*."""
    items: list[str] = []
    for name, blob in tree.files.items():
        items.append(f"{name!r}: FileEntry(data={emit_bytes(blob)})")
    for name, subtree in tree.dirs.items():
        items.append(f"{name!r}: DirEntry(dir={emit_tree(subtree)})")
    return "Dir.from_mapping({" + ", ".join(items) + "})"


def emit_expression(artifact: Artifact) -> str:
    if isinstance(artifact, BinaryArtifact):
        return emit_bytes(artifact.blob)
    return emit_tree(artifact.root)


def emit_module(artifact: Artifact, name: str = "ARTIFACT") -> str:
    """Complete module text binding *name* to the embedded artifact.

    Raises
    ------
    CodegenError
        *name* is not a usable identifier, or the generated text does
        not parse.
    """
    if not name.isidentifier() or keyword.iskeyword(name):
        raise CodegenError(f"{name!r} is not a valid constant name")

    parts = [GENERATED_HEADER, f"# target: {artifact.target}\n", "\n"]
    if not isinstance(artifact, BinaryArtifact):
        parts.append(TREE_IMPORT + "\n")
    parts.append(f"{name} = {emit_expression(artifact)}\n")
    text = "".join(parts)

    try:
        ast.parse(text)
    except SyntaxError as exc:
        raise CodegenError(f"generated code for {name} does not parse: {exc}") from exc

    logger.debug("Emitted %d chars for %s (%s)", len(text), name, artifact.kind)
    return text


def build_dir(tree: BlobTree) -> Dir:
    """Build a ``Dir`` straight from a harvested tree."""
    mapping: dict[str, FileEntry | DirEntry] = {}
    for name, blob in tree.files.items():
        mapping[name] = FileEntry(data=read_blob(blob))
    for name, subtree in tree.dirs.items():
        mapping[name] = DirEntry(dir=build_dir(subtree))
    return Dir.from_mapping(mapping)
