"""Read-only virtual directory of embedded artifacts.

A ``Dir`` mirrors a harvested toolchain output tree.  It is built once
(either by generated code through ``Dir.from_mapping`` or directly by
``transarch.core.codegen.build_dir``) and is never mutated afterwards.
The only query is ``Dir.file(path)``.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from types import MappingProxyType
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class EntryNotFoundError(LookupError):
    """Raised when a path does not lead to a file in a ``Dir``."""

    def __init__(self, path: str) -> None:
        super().__init__(f"file not found: {path}")
        self.path = path


class FileEntry(BaseModel):
    """A leaf holding the exact bytes of one produced artifact."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["file"] = "file"
    data: bytes


class DirEntry(BaseModel):
    """A nested directory."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["dir"] = "dir"
    dir: Dir


Entry = Annotated[Union[FileEntry, DirEntry], Field(discriminator="kind")]


class Dir(BaseModel):
    """Immutable name -> Entry mapping addressed by slash-delimited paths."""

    model_config = ConfigDict(frozen=True)

    entries: Mapping[str, Entry] = Field(default_factory=dict, validate_default=True)

    @field_validator("entries")
    @classmethod
    def _read_only(cls, value: Mapping[str, Entry]) -> Mapping[str, Entry]:
        # A private copy behind a read-only view; the tree never changes.
        return MappingProxyType(dict(value))

    @field_serializer("entries")
    def _dump_entries(self, value: Mapping[str, Entry]) -> dict:
        return dict(value)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, FileEntry | DirEntry]) -> Dir:
        """Convert a transient name -> Entry mapping into a ``Dir``."""
        return cls(entries=dict(mapping))

    def file(self, path: str | Sequence[str]) -> bytes:
        """Return the bytes of the file at *path*.

        Segments are consumed one at a time.  As soon as a segment names a
        file, that file's bytes are returned and any remaining segments are
        ignored, so ``file("a/extra")`` yields ``a`` when ``a`` is a file.

        Raises
        ------
        EntryNotFoundError
            A segment is missing, or the path ends on a directory.
        """
        if isinstance(path, str):
            display = path
            segments: Sequence[str] = path.split("/")
        else:
            segments = list(path)
            display = "/".join(segments)

        entries = self.entries
        for segment in segments:
            entry = entries.get(segment)
            if entry is None:
                raise EntryNotFoundError(display)
            if isinstance(entry, FileEntry):
                return entry.data
            entries = entry.dir.entries

        raise EntryNotFoundError(display)


DirEntry.model_rebuild()
Dir.model_rebuild()
