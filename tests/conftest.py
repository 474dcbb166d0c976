"""
Pytest configuration and shared fixtures for ForgeKit tests.
"""

import io
import tarfile
from pathlib import Path
from typing import Callable, Dict, Optional

import pytest

from forgekit.config.parser import TargetConfig


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that need the network or external tools",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture
def workdir(tmp_path, monkeypatch) -> Path:
    """Run the test with a fresh temporary directory as working directory."""
    directory = tmp_path / "work"
    directory.mkdir()
    monkeypatch.chdir(directory)
    return directory


@pytest.fixture
def make_tarball() -> Callable[..., bytes]:
    """
    Factory building an in-memory .tar.gz with one top-level directory.

    Usage:
        data = make_tarball("foo-2.0", {"configure": "#!/bin/sh\\n"})
    """

    def _make(top_level: str, files: Optional[Dict[str, str]] = None) -> bytes:
        files = files if files is not None else {"README": "hello\n"}
        buffer = io.BytesIO()
        with tarfile.open(fileobj=buffer, mode="w:gz") as tar:
            directory = tarfile.TarInfo(top_level)
            directory.type = tarfile.DIRTYPE
            directory.mode = 0o755
            tar.addfile(directory)

            for name, content in files.items():
                data = content.encode("utf-8")
                info = tarfile.TarInfo(f"{top_level}/{name}")
                info.size = len(data)
                info.mode = 0o755
                tar.addfile(info, io.BytesIO(data))
        return buffer.getvalue()

    return _make


@pytest.fixture
def target_config() -> Callable[..., TargetConfig]:
    """Factory for TargetConfig records with sensible defaults."""

    def _make(**overrides) -> TargetConfig:
        values = {
            "name": "foo",
            "version_command": "--version",
            "version": "2.0",
            "mirror": "https://example.com/foo-{version}.tar.gz",
        }
        values.update(overrides)
        return TargetConfig(**values)

    return _make
