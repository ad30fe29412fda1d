"""
Pytest configuration and shared fixtures for v8kit tests.
"""

from pathlib import Path
from typing import Dict

import pytest

from v8kit.core.config import Settings
from v8kit.core.directory import SOURCE_TREE_MARKER
from v8kit.core.platform import HostPlatform


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture(params=list(HostPlatform), ids=lambda p: p.value)
def any_platform(request) -> HostPlatform:
    """Each supported build host in turn."""
    return request.param


@pytest.fixture
def manifest_dir(tmp_path: Path) -> Path:
    """Crate root with the vendored source tree checked out."""
    root = tmp_path / "rusty_v8"
    (root / SOURCE_TREE_MARKER).mkdir(parents=True)
    return root


@pytest.fixture
def out_dir(tmp_path: Path) -> Path:
    """Cargo OUT_DIR nested the way cargo lays it out."""
    path = tmp_path / "target" / "debug" / "build" / "rusty_v8-d9e5a424d4f96994" / "out"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def target_dir(out_dir: Path) -> Path:
    """The profile target directory above OUT_DIR."""
    return out_dir.parents[2]


@pytest.fixture
def cargo_env(manifest_dir: Path, out_dir: Path) -> Dict[str, str]:
    """Minimal environment cargo gives a build script for a debug build."""
    return {
        "CARGO": "/home/dev/.cargo/bin/cargo",
        "CARGO_MANIFEST_DIR": str(manifest_dir),
        "OUT_DIR": str(out_dir),
        "PROFILE": "debug",
        "PATH": "/usr/bin",
    }


@pytest.fixture
def make_settings():
    """Factory building Settings from keyword variables."""

    def _make(base: Dict[str, str] = None, **env) -> Settings:
        environ = dict(base or {})
        environ.update(env)
        return Settings.from_environ(environ)

    return _make


@pytest.fixture(autouse=True)
def reset_caches():
    """Reset module-level caches between tests."""
    from v8kit.core import platform

    platform.clear_platform_cache()
    yield
