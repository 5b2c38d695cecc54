"""End-to-end integration tests — fragment in, embedded data out.

These tests exercise BuildSession, StagingProject, ToolchainInvoker,
the harvester, BlobStore and the code generator working together, with
the fake toolchain standing in for cargo.
"""

from __future__ import annotations

import importlib.util
import sys
from pathlib import Path

import pytest

from transarch.core.blob_store import BlobStore
from transarch.core.session import BuildSession
from transarch.models.vdir import Dir, EntryNotFoundError


def _import_generated(path: Path, module_name: str):
    spec = importlib.util.spec_from_file_location(module_name, path)
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    finally:
        sys.modules.pop(module_name, None)
    return module


class TestFullPipeline:
    """compile -> emit -> import generated module -> resolve."""

    def test_binary_embedding(self, session: BuildSession, tmp_path: Path):
        artifact = session.wasm("pub fn hi() -> u32 { 7 }")
        generated = tmp_path / "hi_wasm.py"
        generated.write_text(session.emit(artifact, name="HI_WASM"), encoding="utf-8")

        module = _import_generated(generated, "hi_wasm_generated")
        assert module.HI_WASM == artifact.blob.source.read_bytes()

    def test_tree_embedding(self, session: BuildSession, tmp_path: Path):
        artifact = session.compile_tree('"wasm32-unknown-unknown"\npub fn hi() {}')
        generated = tmp_path / "assets.py"
        generated.write_text(session.emit(artifact, name="ASSETS"), encoding="utf-8")

        assets = _import_generated(generated, "assets_generated").ASSETS
        assert isinstance(assets, Dir)
        assert assets == session.load(artifact)

        out = session.project.output_dir("wasm32-unknown-unknown")
        for path in out.rglob("*"):
            if path.is_file():
                rel = path.relative_to(out).as_posix()
                assert assets.file(rel) == path.read_bytes()

        with pytest.raises(EntryNotFoundError):
            assets.file("deps")
        with pytest.raises(EntryNotFoundError):
            assets.file("missing.wasm")

    def test_staging_project_is_reused(self, session: BuildSession):
        session.wasm("fn one() {}")
        manifest = session.project.manifest_path
        first_manifest = manifest.read_bytes()
        first_mtime = manifest.stat().st_mtime_ns

        session.wasm("fn two() {}")
        assert manifest.read_bytes() == first_manifest
        assert manifest.stat().st_mtime_ns == first_mtime
        assert session.project.source_path.read_text(encoding="utf-8") == "fn two() {}"

    def test_earlier_blobs_survive_later_builds(self, session: BuildSession):
        first = session.wasm("fn one() {}")
        first_bytes = first.blob.path.read_bytes()
        second = session.wasm("fn two() {}")

        assert first.blob.path.read_bytes() == first_bytes
        assert second.blob.path.read_bytes() != first_bytes
        assert first_bytes.endswith(b"fn one() {}")

    def test_default_sessions_share_numbering(self, config, build_root: Path):
        first_session = BuildSession(config, start=build_root)
        first = first_session.wasm("fn one() {}")
        second = BuildSession(config, start=build_root).wasm("fn two() {}")

        assert (first.blob.id, second.blob.id) == (0, 1)
        assert first_session.load(first).endswith(b"fn one() {}")
        assert first_session.load(second).endswith(b"fn two() {}")

    def test_restart_reuses_ids_and_overwrites_stale_blobs(
        self, config, build_root: Path
    ):
        # Each process starts its own numbering; two fresh stores stand in
        # for two separate runs.
        first = BuildSession(config, store=BlobStore(), start=build_root).wasm("fn one() {}")
        again = BuildSession(config, store=BlobStore(), start=build_root).wasm("fn two() {}")

        assert first.blob.id == again.blob.id == 0
        assert again.blob.path == first.blob.path
        assert first.blob.path.read_bytes().endswith(b"fn two() {}")
