"""Transarch data models — all Pydantic v2, all frozen (immutable)."""

from transarch.models.artifacts import (
    Artifact,
    BinaryArtifact,
    Blob,
    BlobTree,
    TreeArtifact,
)
from transarch.models.vdir import (
    Dir,
    DirEntry,
    Entry,
    EntryNotFoundError,
    FileEntry,
)

__all__ = [
    # artifacts
    "Artifact",
    "BinaryArtifact",
    "Blob",
    "BlobTree",
    "TreeArtifact",
    # virtual directory
    "Dir",
    "DirEntry",
    "Entry",
    "EntryNotFoundError",
    "FileEntry",
]
