"""
GN and Ninja acquisition.

V8 is generated with GN and built with Ninja. Both can come from the user
(``GN``/``NINJA`` variables, ``ninja`` on PATH) or from the prebuilt bundle
fetched by ``tools/gn_ninja_binaries.py``. The bundle lays binaries out as::

    <scratch>/gn_ninja_binaries/<tag>/gn[.exe]
    <scratch>/gn_ninja_binaries/<tag>/ninja[.exe]

where ``<tag>`` is ``win``, ``linux64`` or ``mac``.

If GN_NINJA_BINARIES_URL is set, ``<url>/<tag>.zip`` is downloaded and
unpacked into the same place instead of running the helper script. The archive
is checked against GN_NINJA_BINARIES_SHA256 when that is set.
"""

import logging
import shutil
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Mapping, Optional

from ..core.config import Settings
from ..core.download import download_file
from ..core.exceptions import DownloadError, ToolDownloadError
from ..core.filesystem import (
    ArchiveExtractionError,
    extract_archive,
    make_executable,
)
from ..core.platform import HostPlatform

logger = logging.getLogger(__name__)

GN_NINJA_SCRIPT = Path("tools") / "gn_ninja_binaries.py"
BUNDLE_DIR_NAME = "gn_ninja_binaries"

GN = "gn"
NINJA = "ninja"


@dataclass(frozen=True)
class DownloadTarget:
    """
    Where one prebuilt tool lands for a given host.

    Attributes:
        tool: 'gn' or 'ninja'
        platform: Build host
        destination: Scratch directory handed to the download helper

    Example:
        >>> target = DownloadTarget("gn", HostPlatform.LINUX, Path("/t/gn_ninja_binaries"))
        >>> target.executable_path
        PosixPath('/t/gn_ninja_binaries/gn_ninja_binaries/linux64/gn')
    """

    tool: str
    platform: HostPlatform
    destination: Path

    @property
    def platform_dir(self) -> Path:
        return Path(self.destination) / BUNDLE_DIR_NAME / self.platform.tag

    @property
    def executable_path(self) -> Path:
        return self.platform_dir / self.platform.executable(self.tool)

    def exists(self) -> bool:
        return self.executable_path.exists()

    def script_command(self, python: Optional[str] = None) -> list:
        """Get the helper script invocation that fetches this target."""
        return [
            python or sys.executable,
            str(Path(".") / GN_NINJA_SCRIPT),
            "--dir",
            str(self.destination),
        ]

    def archive_url(self, base_url: str) -> str:
        """Get the bundle archive URL for this target's platform."""
        return f"{base_url.rstrip('/')}/{self.platform.tag}.zip"


@dataclass(frozen=True)
class BuildTools:
    """Resolved GN and Ninja commands."""

    gn: str
    ninja: str

    def as_env(self) -> Dict[str, str]:
        """Variables the build invoker reads its tools from."""
        return {"GN": self.gn, "NINJA": self.ninja}


def need_gn_ninja_download(
    settings: Settings, which: Callable[[str], Optional[str]] = shutil.which
) -> bool:
    """
    Check whether the prebuilt GN/Ninja bundle is needed.

    The user's tools are used only when GN is set and Ninja is available,
    either through NINJA or on PATH.
    """
    has_ninja = which(NINJA) is not None or settings.ninja is not None
    return not (has_ninja and settings.gn is not None)


class GnNinjaDownloader:
    """
    Download the prebuilt GN/Ninja bundle for one host.

    Existing binaries are never refetched, so repeated runs are free.
    """

    def __init__(
        self,
        root_dir: Path,
        destination: Path,
        platform: HostPlatform,
        env: Optional[Mapping[str, str]] = None,
        python: Optional[str] = None,
        archive_base_url: Optional[str] = None,
        archive_sha256: Optional[str] = None,
    ):
        """
        Initialize downloader.

        Args:
            root_dir: Project root holding the helper script
            destination: Scratch directory (target/<profile>/gn_ninja_binaries)
            platform: Build host
            env: Environment for the helper script (inherited if None)
            python: Interpreter running the script (defaults to the current one)
            archive_base_url: Fetch ``<url>/<tag>.zip`` instead of running the script
            archive_sha256: Expected SHA-256 of the archive (not verified if None)
        """
        self.root_dir = Path(root_dir)
        self.destination = Path(destination)
        self.platform = platform
        self.env = dict(env) if env is not None else None
        self.python = python
        self.archive_base_url = archive_base_url
        self.archive_sha256 = archive_sha256

    @property
    def gn(self) -> DownloadTarget:
        return DownloadTarget(GN, self.platform, self.destination)

    @property
    def ninja(self) -> DownloadTarget:
        return DownloadTarget(NINJA, self.platform, self.destination)

    def is_installed(self) -> bool:
        return self.gn.exists() and self.ninja.exists()

    def download(self) -> BuildTools:
        """
        Make sure both binaries exist, fetching them at most once.

        Returns:
            BuildTools pointing into the bundle

        Raises:
            ToolDownloadError: If the fetch fails or a binary is still missing
        """
        if self.is_installed():
            logger.debug(f"GN and Ninja already present in {self.gn.platform_dir}")
        elif self.archive_base_url:
            self._fetch_archive()
        else:
            self._run_script()

        for target in (self.gn, self.ninja):
            if not target.exists():
                raise ToolDownloadError(
                    f"{target.tool} not found at {target.executable_path} after download"
                )

        return BuildTools(
            gn=str(self.gn.executable_path), ninja=str(self.ninja.executable_path)
        )

    def _run_script(self):
        command = self.gn.script_command(self.python)
        logger.info(f"Downloading GN and Ninja into {self.destination}")

        try:
            result = subprocess.run(
                command, cwd=self.root_dir, env=self.env, check=False
            )
        except OSError as e:
            raise ToolDownloadError(f"{GN_NINJA_SCRIPT} download failed: {e}") from e

        if result.returncode != 0:
            raise ToolDownloadError(
                f"{GN_NINJA_SCRIPT} download failed with exit code {result.returncode}"
            )

    def _fetch_archive(self):
        url = self.gn.archive_url(self.archive_base_url)
        archive_path = self.destination / "downloads" / f"{self.platform.tag}.zip"
        logger.info(f"Downloading GN and Ninja from {url}")

        try:
            download_file(url, archive_path, expected_sha256=self.archive_sha256)
            extract_archive(archive_path, self.gn.platform_dir)
        except (DownloadError, ArchiveExtractionError) as e:
            raise ToolDownloadError(f"GN/Ninja download failed: {e}") from e
        finally:
            archive_path.unlink(missing_ok=True)

        # Zip archives do not carry Unix permissions
        for target in (self.gn, self.ninja):
            if target.exists():
                make_executable(target.executable_path)


def acquire_build_tools(
    settings: Settings,
    downloader: GnNinjaDownloader,
    which: Callable[[str], Optional[str]] = shutil.which,
) -> BuildTools:
    """
    Resolve GN and Ninja, downloading them only when needed.

    Args:
        settings: Resolved settings (GN, NINJA)
        downloader: Bundle downloader for this host
        which: PATH lookup

    Returns:
        BuildTools for the build invoker
    """
    if not need_gn_ninja_download(settings, which):
        tools = BuildTools(gn=settings.gn, ninja=settings.ninja or NINJA)
        logger.debug(f"Using user-provided GN and Ninja: {tools}")
        return tools

    return downloader.download()
