"""
v8kit/toolchain/locator.py

System clang detection.

Chromium's ``clang_base_path`` GN arg works with:

- Apple clang and clang from homebrew's ``llvm@x`` packages
- the official binaries from releases.llvm.org
- unversioned (Linux) packages of clang, if recent enough

It does not work with the version-suffixed packages commonly found in Linux
package managers, which is why a system clang is only used when the user
points CLANG_BASE_PATH at an installation root.
"""

import logging
import re
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from packaging.version import InvalidVersion, Version

from ..core.config import Settings
from ..core.platform import HostPlatform

logger = logging.getLogger(__name__)

# Version floors for a usable system clang. These are documented but not
# enforced: the version check only confirms that the compiler runs.
MIN_APPLE_CLANG_VERSION = Version("11.0")
MIN_LLVM_CLANG_VERSION = Version("8.0")

# Only the version check is bounded. A clang that hangs on --version is
# treated as unusable and the bundled clang is used instead.
VERSION_CHECK_TIMEOUT = 30

SYSTEM = "system"
DOWNLOADED = "downloaded"


@dataclass(frozen=True)
class ToolchainPath:
    """
    A clang installation root.

    Attributes:
        path: Directory containing ``bin/clang``
        source: 'system' (CLANG_BASE_PATH) or 'downloaded' (bundled clang)
    """

    path: Path
    source: str

    @property
    def is_system(self) -> bool:
        return self.source == SYSTEM

    def __str__(self) -> str:
        return f"{self.path} ({self.source})"


def clang_executable(base_path: Path, platform: HostPlatform) -> Path:
    """Get the clang binary inside an installation root."""
    return Path(base_path) / "bin" / platform.executable("clang")


def parse_clang_version(output: str) -> Optional[Version]:
    """
    Extract the clang version from ``clang --version`` output.

    Example:
        >>> parse_clang_version("Apple clang version 12.0.0 (clang-1200.0.32.29)")
        <Version('12.0.0')>
        >>> parse_clang_version("no version here") is None
        True
    """
    match = re.search(r"clang version (\d+(?:\.\d+)*)", output)
    if not match:
        return None
    try:
        return Version(match.group(1))
    except InvalidVersion:
        return None


def minimum_version_for(output: str) -> Version:
    """Get the version floor that applies to this clang flavor."""
    if output.lstrip().startswith("Apple"):
        return MIN_APPLE_CLANG_VERSION
    return MIN_LLVM_CLANG_VERSION


def is_compatible_clang_version(clang_path: Path) -> bool:
    """
    Check a clang binary with ``--version``.

    A compiler counts as compatible when it launches and exits zero. The parsed
    version is only logged.

    Args:
        clang_path: Path to the clang executable

    Returns:
        True if the version check succeeded
    """
    try:
        result = subprocess.run(
            [str(clang_path), "--version"],
            capture_output=True,
            text=True,
            timeout=VERSION_CHECK_TIMEOUT,
            check=False,
        )
    except subprocess.TimeoutExpired:
        logger.debug(f"Timeout probing {clang_path}")
        return False
    except OSError as e:
        logger.debug(f"Failed to run {clang_path}: {e}")
        return False

    if result.returncode != 0:
        logger.debug(f"{clang_path} --version returned {result.returncode}")
        return False

    version = parse_clang_version(result.stdout)
    if version is None:
        logger.debug(f"Could not parse clang version from: {result.stdout[:200]}")
    else:
        floor = minimum_version_for(result.stdout)
        if version < floor:
            logger.info(f"clang {version} is older than the tested minimum {floor}")
        else:
            logger.debug(f"Detected clang {version} at {clang_path}")

    return True


def find_compatible_system_clang(
    settings: Settings, platform: HostPlatform
) -> Optional[ToolchainPath]:
    """
    Find a user-supplied clang installation.

    Never raises: any failure means falling back to the bundled clang.

    Args:
        settings: Resolved settings (reads CLANG_BASE_PATH)
        platform: Build host

    Returns:
        ToolchainPath tagged 'system', or None
    """
    base_path = settings.clang_base_path
    if base_path is not None:
        clang_path = clang_executable(base_path, platform)
        if is_compatible_clang_version(clang_path):
            logger.info(f"clang_base_path {base_path}")
            return ToolchainPath(path=base_path, source=SYSTEM)
        logger.warning(f"CLANG_BASE_PATH is set but {clang_path} is not usable")

    logger.info("using Chromiums clang")
    return None
