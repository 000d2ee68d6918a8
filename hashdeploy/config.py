"""Runtime configuration — env-driven.

Centralized settings using pydantic-settings.  Reads from a .env file and
HASHDEPLOY_* environment variables.  Core components take explicit values;
only the plugin layer and the CLI read these settings.
"""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class HashdeploySettings(BaseSettings):
    """Settings with environment variable overrides.

    Examples
    --------
    Override via environment::

        export HASHDEPLOY_HASH_ALGORITHM=sha256
        export HASHDEPLOY_MAX_CONCURRENT_RELOCATIONS=4
        export HASHDEPLOY_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="HASHDEPLOY_",
        env_file_encoding="utf-8",
    )

    # Runtime
    log_level: str = "INFO"

    # Relocation
    hash_algorithm: str = "sha1"
    chunk_size: int = 64 * 1024
    max_concurrent_relocations: int = 8  # 0 means unbounded
    cleanup_partial_files: bool = True

    # Descriptor naming
    reconfigure_descriptor_suffix: bool = False


# Module-level singleton — import as `from hashdeploy.config import config`
config = HashdeploySettings()
