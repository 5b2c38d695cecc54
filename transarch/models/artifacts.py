"""Harvested blob and artifact models (immutable)."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class Blob(BaseModel):
    """One harvested file, copied to ``blob<id>`` beside the output dir.

    The bytes at ``path`` are an unmodified copy of ``source`` as it was
    at harvest time.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    path: Path
    source: Path
    size_bytes: int = 0


class BlobTree(BaseModel):
    """Directory shape of a harvest: file names to blobs, subdirs to trees."""

    model_config = ConfigDict(frozen=True)

    files: dict[str, Blob] = Field(default_factory=dict)
    dirs: dict[str, BlobTree] = Field(default_factory=dict)

    def iter_blobs(self) -> Iterator[Blob]:
        """Yield every blob in the tree, depth first."""
        yield from self.files.values()
        for subtree in self.dirs.values():
            yield from subtree.iter_blobs()

    @property
    def blob_count(self) -> int:
        return sum(1 for _ in self.iter_blobs())


class BinaryArtifact(BaseModel):
    """Single-binary harvest: the one expected output file for a target."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["binary"] = "binary"
    target: str
    blob: Blob


class TreeArtifact(BaseModel):
    """Directory harvest: the whole output tree for a target."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["tree"] = "tree"
    target: str
    root: BlobTree


Artifact = Union[BinaryArtifact, TreeArtifact]
