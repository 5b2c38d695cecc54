"""Root of the build-time exception hierarchy.

Every fallible boundary (filesystem, process spawn/wait, target parsing,
code generation) raises a subclass of ``TransarchError``.  Nothing inside
the pipeline recovers from one; the CLI is the single place that turns it
into an aborted build.
"""

from __future__ import annotations


class TransarchError(RuntimeError):
    """Base class for every failure that aborts the host build."""
