"""Transarch: embed cross-compiled fragments into a host program.

A fragment plus a target go in; the verbatim compiled artifact comes back
as constant data, either raw bytes or a read-only ``Dir`` tree addressed
by path:

    session = BuildSession()
    artifact = session.compile_tree('"wasm32-unknown-unknown" pub fn hi() {}')
    module_text = session.emit(artifact, name="ASSETS")

Generated modules import ``Dir``, ``DirEntry`` and ``FileEntry`` from here.
"""

__version__ = "0.1.0"
__description__ = "Cross-compile a fragment at build time and embed its artifacts"

from transarch.models.vdir import Dir, DirEntry, Entry, EntryNotFoundError, FileEntry
from transarch.core.errors import TransarchError
from transarch.core.session import BuildSession

__all__ = [
    "BuildSession",
    "Dir",
    "DirEntry",
    "Entry",
    "EntryNotFoundError",
    "FileEntry",
    "TransarchError",
    "__version__",
]
