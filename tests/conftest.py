"""Shared test fixtures for hashdeploy."""

from __future__ import annotations

import json
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pytest

from hashdeploy.config import HashdeploySettings
from hashdeploy.core.relocator import ArtifactRelocator
from hashdeploy.host.service import LoggingCliLog, ManifestService
from hashdeploy.models.manifest import ServiceManifest

FIXED_MOMENT = datetime(2024, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)
FIXED_PREFIX = "1704164645678-2024-01-02T03:04:05.678Z"


@pytest.fixture
def tmp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for test artifacts."""
    return tmp_path


@pytest.fixture
def relocator() -> ArtifactRelocator:
    return ArtifactRelocator(chunk_size=4)


@pytest.fixture
def settings() -> HashdeploySettings:
    """Settings pinned to defaults regardless of the environment."""
    return HashdeploySettings(
        _env_file=None,
        hash_algorithm="sha1",
        max_concurrent_relocations=8,
        reconfigure_descriptor_suffix=False,
    )


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    return lambda: FIXED_MOMENT


@pytest.fixture
def cli_log() -> LoggingCliLog:
    return LoggingCliLog("hashdeploy.test", keep_messages=True)


@pytest.fixture
def make_artifact(tmp_dir: Path) -> Callable[..., Path]:
    """Factory fixture: write a file with the given bytes and return its path."""

    def _factory(name: str = "handler.zip", content: bytes = b"artifact-bytes") -> Path:
        path = tmp_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        return path

    return _factory


@pytest.fixture
def make_manifest(tmp_dir: Path) -> Callable[..., Path]:
    """Factory fixture: write a service manifest JSON and return its path."""

    def _factory(
        functions: dict[str, dict[str, Any]] | None = None,
        **overrides: Any,
    ) -> Path:
        data: dict[str, Any] = {
            "service": "orders",
            "provider": {
                "stage": "prod",
                "deployment_prefix": "deploy",
                "deployment_bucket": "orders-deployments",
            },
            "package": {},
            "functions": functions or {},
        }
        data.update(overrides)
        path = tmp_dir / "service.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _factory


@pytest.fixture
def make_service(make_manifest: Callable[..., Path]) -> Callable[..., ManifestService]:
    """Factory fixture: build a ManifestService over a fresh manifest file."""

    def _factory(
        functions: dict[str, dict[str, Any]] | None = None, **overrides: Any
    ) -> ManifestService:
        return ManifestService.load(make_manifest(functions, **overrides))

    return _factory


@pytest.fixture
def parse_manifest() -> Callable[[Path], ServiceManifest]:
    return lambda path: ServiceManifest.model_validate_json(path.read_text(encoding="utf-8"))


@pytest.fixture
def fixed_prefix() -> str:
    """Time bucket produced by ``fixed_clock``."""
    return FIXED_PREFIX
