"""
Pytest configuration and fixtures.

Provides fabricated build trees, staging directories and settings shared by
all test modules.
"""

import tempfile
from pathlib import Path
from typing import Generator

import pytest
from loguru import logger

from doc_dig.config import Settings, get_settings
from doc_dig.models import ArtifactDescriptor
from doc_dig.native.platform import APPLE, LINUX

_ENV_VARS = (
    "OUT_DIR",
    "CARGO_MANIFEST_DIR",
    "CARGO_CFG_TARGET_OS",
    "DOC_DIG_OUT_DIR",
    "DOC_DIG_MANIFEST_DIR",
    "DOC_DIG_TARGET_OS",
    "DOC_DIG_STAGING_DIR",
    "DOC_DIG_ARTIFACT_STEM",
    "DOC_DIG_DEPENDENCY_PREFIX",
    "DOC_DIG_OCR_LANGUAGE",
    "DOC_DIG_LOG_LEVEL",
)


# ==============================================================================
# Environment Fixtures
# ==============================================================================


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Isolate tests from build-tool variables and cached settings."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    # CLI tests attach sinks to streams that are closed after the test
    logger.remove()


# ==============================================================================
# Directory Fixtures
# ==============================================================================


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def target_root(temp_dir: Path) -> Path:
    """Target-triple directory of a fabricated build tree."""
    root = temp_dir / "target" / "x86_64-unknown-linux-gnu"
    root.mkdir(parents=True)
    return root


@pytest.fixture
def out_dir(target_root: Path) -> Path:
    """Output directory of this crate's build invocation in the debug profile."""
    path = target_root / "debug" / "build" / "doc_dig-0f3a9c" / "out"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def staging_dir(temp_dir: Path) -> Path:
    """Runtime staging directory (not created)."""
    return temp_dir / "priv" / "native"


# ==============================================================================
# Descriptor Fixtures
# ==============================================================================


@pytest.fixture
def linux_descriptor() -> ArtifactDescriptor:
    """Primary artifact descriptor on Linux."""
    return ArtifactDescriptor.for_platform(LINUX)


@pytest.fixture
def apple_descriptor() -> ArtifactDescriptor:
    """Primary artifact descriptor on macOS."""
    return ArtifactDescriptor.for_platform(APPLE)


# ==============================================================================
# Settings Fixtures
# ==============================================================================


@pytest.fixture
def test_settings(out_dir: Path, staging_dir: Path) -> Settings:
    """Create test settings pointing at the fabricated tree."""
    return Settings(
        out_dir=out_dir,
        staging_dir=staging_dir,
        target_os="linux",
    )


# ==============================================================================
# Helpers
# ==============================================================================


def write_file(path: Path, content: bytes = b"\x7fELF") -> Path:
    """Create a file and its parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    return path


@pytest.fixture
def make_file():
    """Return the file-creation helper."""
    return write_file
