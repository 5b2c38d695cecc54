"""Build configuration — env-driven.

Centralized config using pydantic-settings.  Reads from a .env file and
TRANSARCH_* environment variables, so a host build can redirect the
toolchain or the staging layout without code changes.
"""

from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class TransarchConfig(BaseSettings):
    """Configuration for one build session.

    Examples
    --------
    Override via environment::

        export TRANSARCH_TOOLCHAIN="cargo +nightly"
        export TRANSARCH_PROFILE=release
        export TRANSARCH_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="TRANSARCH_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # External compiler driver, split with shlex before spawning
    toolchain: str = "cargo"
    color: Literal["always", "never", "auto"] = "always"
    profile: str = "debug"

    # Build root discovery: the first ancestor holding both of these
    build_root_marker: str = "Cargo.toml"
    output_dir_name: str = "target"

    # Staging project layout under the output dir
    namespace: str = "transarch"
    project_name: str = "transarch-tmp-crate"
    package_name: str = "transarch-tmp-pkg"

    wasm_target: str = "wasm32-unknown-unknown"

    log_level: str = "INFO"

