"""Transarch CLI — Typer-based command-line interface.

Provides the ``transarch`` command: the single top-level driver that runs
a build session and turns any ``TransarchError`` into an aborted build
(exit status 1).
"""
