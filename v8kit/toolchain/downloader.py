"""
Bundled clang download.

When no usable system clang exists, Chromium's own clang is fetched with the
``tools/clang/scripts/update.py`` script shipped in the V8 checkout. It goes
into the shared target directory rather than the source tree, because cargo
does not allow build scripts to modify the source directory.
"""

import logging
import subprocess
import sys
from pathlib import Path
from typing import Mapping, Optional

from ..core.directory import BuildRootResolver
from ..core.exceptions import ToolchainDownloadError
from .locator import DOWNLOADED, ToolchainPath

logger = logging.getLogger(__name__)

CLANG_UPDATE_SCRIPT = Path("tools") / "clang" / "scripts" / "update.py"


class ClangDownloader:
    """
    Fetch Chromium's clang into the shared target directory.

    Example:
        >>> downloader = ClangDownloader(root_dir, BuildRootResolver(out_dir))
        >>> toolchain = downloader.download()
        >>> print(toolchain.path)
    """

    def __init__(
        self,
        root_dir: Path,
        resolver: BuildRootResolver,
        env: Optional[Mapping[str, str]] = None,
        python: Optional[str] = None,
    ):
        """
        Initialize clang downloader.

        Args:
            root_dir: Project root holding the update script
            resolver: Resolves the destination directory
            env: Environment for the update script (inherited if None)
            python: Interpreter running the script (defaults to the current one)
        """
        self.root_dir = Path(root_dir)
        self.resolver = resolver
        self.env = dict(env) if env is not None else None
        self.python = python or sys.executable

    @property
    def install_dir(self) -> Path:
        return self.resolver.clang_dir()

    def command(self) -> list:
        """Get the update script invocation."""
        return [
            self.python,
            str(Path(".") / CLANG_UPDATE_SCRIPT),
            "--output-dir",
            str(self.install_dir),
        ]

    def download(self) -> ToolchainPath:
        """
        Run the update script.

        The script itself skips the download when the requested revision is
        already present.

        Returns:
            ToolchainPath tagged 'downloaded'

        Raises:
            ToolchainDownloadError: If the script fails or leaves no clang behind
        """
        clang_base_path = self.install_dir
        logger.info(f"clang_base_path {clang_base_path}")

        try:
            result = subprocess.run(
                self.command(), cwd=self.root_dir, env=self.env, check=False
            )
        except OSError as e:
            raise ToolchainDownloadError(f"clang download failed: {e}") from e

        if result.returncode != 0:
            raise ToolchainDownloadError(
                f"clang download failed: {CLANG_UPDATE_SCRIPT} exited with "
                f"code {result.returncode}"
            )

        if not clang_base_path.exists():
            raise ToolchainDownloadError(
                f"clang download failed: {clang_base_path} does not exist"
            )

        return ToolchainPath(path=clang_base_path, source=DOWNLOADED)
