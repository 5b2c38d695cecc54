"""Artifact harvester — copies toolchain output into the blob store.

Two modes:

* ``harvest_binary`` picks the one artifact named by the per-target
  naming convention.
* ``harvest_tree`` walks the whole output directory and mirrors its
  shape as a ``BlobTree``.

Blobs are written beside the output directory (``<output_dir>/../blob<N>``)
so a directory walk never sees them.  Entries are visited in
``os.scandir`` order, which is unordered; only blob numbering depends on
it, never the resulting name-keyed tree.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from transarch.core.blob_store import BlobStore
from transarch.core.errors import TransarchError
from transarch.models.artifacts import Blob, BlobTree

logger = logging.getLogger(__name__)


class HarvestError(TransarchError):
    """Raised when the toolchain output cannot be harvested."""


def artifact_file_name(stem: str, target: str) -> str:
    """Name the toolchain gives a dynamic library built for *target*."""
    if target.startswith("wasm32") or target.startswith("wasm64"):
        return f"{stem}.wasm"
    if "-windows" in target:
        return f"{stem}.dll"
    if "-apple-" in target:
        return f"lib{stem}.dylib"
    return f"lib{stem}.so"


def harvest_binary(output_dir: Path, file_name: str, store: BlobStore) -> Blob:
    """Copy the single expected artifact out of *output_dir*."""
    output_dir = Path(output_dir)
    source = output_dir / file_name
    if not source.is_file():
        raise HarvestError(f"expected artifact {source} was not produced")
    blob = store.store(source, output_dir.parent)
    logger.info("Harvested %s as blob%d", file_name, blob.id)
    return blob


def harvest_tree(output_dir: Path, store: BlobStore) -> BlobTree:
    """Copy every file under *output_dir*, keeping the directory shape."""
    output_dir = Path(output_dir)
    if not output_dir.is_dir():
        raise HarvestError(f"toolchain output directory {output_dir} does not exist")
    tree = _harvest_dir(output_dir, store, output_dir.parent)
    logger.info("Harvested %d files from %s", tree.blob_count, output_dir)
    return tree


def _harvest_dir(directory: Path, store: BlobStore, blob_dir: Path) -> BlobTree:
    files: dict[str, Blob] = {}
    dirs: dict[str, BlobTree] = {}

    try:
        with os.scandir(directory) as it:
            entries = list(it)
    except OSError as exc:
        raise HarvestError(f"failed to read {directory}: {exc}") from exc

    for entry in entries:
        name = _utf8_name(entry, directory)
        path = Path(entry.path)
        if entry.is_dir():
            dirs[name] = _harvest_dir(path, store, blob_dir)
        else:
            files[name] = store.store(path, blob_dir)

    return BlobTree(files=files, dirs=dirs)


def _utf8_name(entry: os.DirEntry, directory: Path) -> str:
    # Undecodable bytes come back as lone surrogates, which refuse to encode.
    try:
        entry.name.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise HarvestError(
            f"non UTF-8 file name {entry.name!r} in {directory} is not supported"
        ) from exc
    return entry.name
