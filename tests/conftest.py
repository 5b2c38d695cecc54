"""Shared test fixtures for transarch."""

from __future__ import annotations

import shlex
import sys
from collections.abc import Callable
from pathlib import Path

import pytest

from transarch.config import TransarchConfig
from transarch.core import blob_store as blob_store_module
from transarch.core.blob_store import BlobStore
from transarch.core.session import BuildSession
from transarch.core.toolchain import ToolchainInvoker

FAKE_CARGO = Path(__file__).parent / "fixtures" / "fake_cargo.py"


@pytest.fixture(autouse=True)
def fresh_default_store(monkeypatch: pytest.MonkeyPatch) -> BlobStore:
    """Give every test its own process-wide store, starting at id 0."""
    store = BlobStore()
    monkeypatch.setattr(blob_store_module, "_DEFAULT_STORE", store)
    return store


@pytest.fixture
def fake_toolchain() -> str:
    """Toolchain command line that runs the fake cargo script."""
    return shlex.join([sys.executable, str(FAKE_CARGO)])


@pytest.fixture
def fake_invoker() -> ToolchainInvoker:
    """A ToolchainInvoker wired to the fake cargo script."""
    return ToolchainInvoker([sys.executable, str(FAKE_CARGO)], color="never")


@pytest.fixture
def build_root(tmp_path: Path) -> Path:
    """A host project directory holding Cargo.toml and target/."""
    root = tmp_path / "host"
    (root / "target").mkdir(parents=True)
    (root / "Cargo.toml").write_text('[package]\nname = "host"\n', encoding="utf-8")
    return root


@pytest.fixture
def blob_store() -> BlobStore:
    """Provide a fresh BlobStore starting at id 0."""
    return BlobStore()


@pytest.fixture
def config(fake_toolchain: str) -> TransarchConfig:
    """Config pointing at the fake toolchain."""
    return TransarchConfig(toolchain=fake_toolchain, color="never")


@pytest.fixture
def session(
    config: TransarchConfig, blob_store: BlobStore, build_root: Path
) -> BuildSession:
    """A BuildSession rooted in the temp host project."""
    return BuildSession(config, store=blob_store, start=build_root)


@pytest.fixture
def make_output_tree(tmp_path: Path) -> Callable[[dict[str, bytes]], Path]:
    """Factory fixture: lay out ``{relative/path: bytes}`` as a toolchain output dir.

    The returned directory sits at ``<tmp>/out/<target>/debug`` so blobs
    land in ``<tmp>/out/<target>``.
    """

    def _factory(files: dict[str, bytes], target: str = "test-target") -> Path:
        out = tmp_path / "out" / target / "debug"
        out.mkdir(parents=True, exist_ok=True)
        for rel, data in files.items():
            path = out / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        return out

    return _factory
