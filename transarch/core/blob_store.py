"""Append-only blob store with a monotonic id allocator.

Each harvested file is copied to ``<dir>/blob<id>``.  Ids start at 0 for
each store and increase by one per stored file.  A single lock guards the
counter; it does not serialize the copies themselves, nor anything else
in the pipeline.

Sessions that are not handed a store share ``default_store()``, so ids
are unique for the lifetime of the process.  Ids are not persisted: a new
process starts again at 0, and stale ``blob<N>`` files from an earlier
run stay on disk until a new harvest reuses the same id and overwrites
them.
"""

from __future__ import annotations

import errno
import logging
import shutil
import threading
from pathlib import Path

from transarch.core.errors import TransarchError
from transarch.models.artifacts import Blob

logger = logging.getLogger(__name__)


class BlobStoreError(TransarchError):
    """Raised when a harvested file cannot be copied into the store."""


class StorageExhaustedError(BlobStoreError):
    """Raised when the disk fills up while copying a blob."""


class BlobStore:
    """Allocates blob ids and copies harvested files under them.

    Share one instance between sessions (or threads) that must never reuse
    an id.  ``default_store()`` is the instance shared by default.

    Parameters
    ----------
    first_id:
        Id handed out by the first ``allocate()`` call.
    """

    def __init__(self, first_id: int = 0) -> None:
        self._lock = threading.Lock()
        self._next_id = first_id
        self._first_id = first_id

    @property
    def allocated(self) -> int:
        """Number of ids handed out so far."""
        with self._lock:
            return self._next_id - self._first_id

    def allocate(self) -> int:
        """Reserve and return the next blob id."""
        with self._lock:
            blob_id = self._next_id
            self._next_id += 1
        return blob_id

    @staticmethod
    def blob_path(directory: Path, blob_id: int) -> Path:
        return Path(directory) / f"blob{blob_id}"

    def store(self, source: Path, into: Path) -> Blob:
        """Copy *source* to ``into/blob<id>`` and return its ``Blob``.

        The source is copied, never moved, so the toolchain output stays
        intact for the rest of the harvest.
        """
        source = Path(source)
        blob_id = self.allocate()
        dest = self.blob_path(into, blob_id)

        try:
            shutil.copyfile(source, dest)
        except OSError as exc:
            if exc.errno == errno.ENOSPC:
                raise StorageExhaustedError(
                    f"your drive is full while copying {source} to {dest}. "
                    "Free space with `cargo clean` and retry."
                ) from exc
            raise BlobStoreError(
                f"failed to copy {source} to {dest}: {exc}"
            ) from exc

        size = dest.stat().st_size
        logger.debug("Stored blob%d (%d bytes) from %s", blob_id, size, source)
        return Blob(id=blob_id, path=dest, source=source, size_bytes=size)


_DEFAULT_STORE = BlobStore()


def default_store() -> BlobStore:
    """The process-wide store used by sessions built without one."""
    return _DEFAULT_STORE
