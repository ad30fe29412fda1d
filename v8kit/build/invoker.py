"""
GN generation and Ninja execution.

``gn gen`` runs when the output directory has no build graph yet, or when the
GN arguments differ from those of the previous gen (recorded as a hash in
``v8kit_args.stamp``). Otherwise Ninja regenerates the graph by itself whenever
a ``BUILD.gn`` file or ``args.gn`` changes.
"""

import hashlib
import logging
import subprocess
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from ..core.exceptions import BuildExecutionError, BuildGenerationError
from ..packages.tool_downloader import BuildTools
from .args import GnArgs

logger = logging.getLogger(__name__)

TARGET = "rusty_v8"

ARGS_FILE = "args.gn"
BUILD_FILE = "build.ninja"
ARGS_STAMP = "v8kit_args.stamp"

# Always set for GN and Ninja: use the locally installed Windows SDK instead of
# Google's internal one, and keep .pyc files out of the source tree (cargo
# publish rejects them).
BUILD_ENVIRONMENT = {
    "DEPOT_TOOLS_WIN_TOOLCHAIN": "0",
    "PYTHONDONTWRITEBYTECODE": "1",
}


def build_environment(
    base: Mapping[str, str], tools: Optional[BuildTools] = None
) -> Dict[str, str]:
    """
    Create the environment GN, Ninja and the download helpers run in.

    Args:
        base: Settings environment
        tools: Resolved GN/Ninja, exported as GN and NINJA

    Returns:
        New environment dictionary; ``base`` is not modified
    """
    env = dict(base)
    env.update(BUILD_ENVIRONMENT)
    if tools is not None:
        env.update(tools.as_env())
    return env


def parse_ninja_deps(output: str) -> List[str]:
    """
    Parse ``ninja -t deps`` output into dependency paths.

    Output looks like::

        obj/v8/foo.o: #deps 2, deps mtime 1589 (VALID)
            ../../v8/src/foo.cc
            ../../v8/src/foo.h

    Returns:
        Unique dependency paths, relative to the output directory, in order
    """
    deps: List[str] = []
    seen = set()
    for line in output.splitlines():
        if not line or not line[0].isspace():
            continue
        dep = line.strip()
        if dep and dep not in seen:
            seen.add(dep)
            deps.append(dep)
    return deps


class GnBuilder:
    """
    Run GN and Ninja for one output directory.

    Example:
        >>> builder = GnBuilder(root_dir, gn_out_dir, tools, env)
        >>> builder.maybe_gen(args)
        >>> builder.build()
    """

    def __init__(
        self,
        root_dir: Path,
        gn_out_dir: Path,
        tools: BuildTools,
        env: Optional[Mapping[str, str]] = None,
    ):
        """
        Initialize builder.

        Args:
            root_dir: GN source root (CARGO_MANIFEST_DIR)
            gn_out_dir: Build graph output directory (OUT_DIR/gn_out)
            tools: GN and Ninja commands
            env: Base environment for GN and Ninja
        """
        self.root_dir = Path(root_dir)
        self.gn_out_dir = Path(gn_out_dir)
        self.tools = tools
        self.env = build_environment(env or {}, tools)

    def args_hash(self, args: GnArgs) -> str:
        return f"sha256:{hashlib.sha256(args.render().encode('utf-8')).hexdigest()}"

    def needs_gen(self, args: GnArgs) -> bool:
        """
        Check whether ``gn gen`` has to run.

        Generation is needed if:
        - The output directory or its build.ninja is missing
        - No arguments were recorded by a previous gen
        - The arguments changed since the previous gen
        """
        if not (self.gn_out_dir.exists() and (self.gn_out_dir / BUILD_FILE).exists()):
            logger.debug(f"gn gen needed: no build graph in {self.gn_out_dir}")
            return True

        stamp = self.gn_out_dir / ARGS_STAMP
        if not stamp.exists():
            logger.debug("gn gen needed: no recorded arguments")
            return True

        if stamp.read_text(encoding="utf-8").strip() != self.args_hash(args):
            logger.debug("gn gen needed: arguments changed")
            return True

        return False

    def gen_command(self, args: GnArgs) -> List[str]:
        return [
            self.tools.gn,
            f"--root={self.root_dir}",
            "gen",
            str(self.gn_out_dir),
            f"--args={args.render()}",
        ]

    def ninja_command(self, *extra: str) -> List[str]:
        return [self.tools.ninja, "-C", str(self.gn_out_dir), *extra]

    def maybe_gen(self, args: GnArgs) -> Path:
        """
        Generate the build graph unless an up-to-date one already exists.

        Args:
            args: GN arguments

        Returns:
            The output directory

        Raises:
            BuildGenerationError: If GN fails, or the output directory or its
                args.gn is missing afterwards
        """
        generated = self.needs_gen(args)
        if generated:
            command = self.gen_command(args)
            logger.info(" ".join(command))
            try:
                result = subprocess.run(command, env=self.env, check=False)
            except OSError as e:
                raise BuildGenerationError(f"gn gen failed to start: {e}") from e
            if result.returncode != 0:
                raise BuildGenerationError(
                    f"gn gen failed with exit code {result.returncode}"
                )
        else:
            logger.debug(f"Build graph already present in {self.gn_out_dir}")

        if not self.gn_out_dir.exists():
            raise BuildGenerationError(
                f"gn gen did not create output directory {self.gn_out_dir}"
            )
        if not (self.gn_out_dir / ARGS_FILE).exists():
            raise BuildGenerationError(
                f"gn gen did not create {self.gn_out_dir / ARGS_FILE}"
            )

        if generated:
            (self.gn_out_dir / ARGS_STAMP).write_text(
                self.args_hash(args) + "\n", encoding="utf-8"
            )
        return self.gn_out_dir

    def build(self, target: str = TARGET):
        """
        Build one target with Ninja.

        Raises:
            BuildExecutionError: If Ninja fails or cannot be started
        """
        command = self.ninja_command(target)
        logger.info(" ".join(command))

        try:
            result = subprocess.run(command, env=self.env, check=False)
        except OSError as e:
            raise BuildExecutionError(target, -1, detail=str(e)) from e

        if result.returncode != 0:
            raise BuildExecutionError(target, result.returncode)

    def deps(self) -> List[Path]:
        """
        List the existing source files recorded in Ninja's deps log.

        A failed query is reported and yields no dependencies; the library has
        already been built at this point.
        """
        command = self.ninja_command("-t", "deps")
        try:
            result = subprocess.run(
                command, env=self.env, capture_output=True, text=True, check=False
            )
        except OSError as e:
            logger.warning(f"ninja -t deps failed: {e}")
            return []

        if result.returncode != 0:
            logger.warning(f"ninja -t deps exited with code {result.returncode}")
            return []

        paths = []
        for dep in parse_ninja_deps(result.stdout):
            path = self.gn_out_dir / dep
            if path.exists():
                paths.append(path)
        return paths

    def library_dir(self) -> Path:
        """Directory holding the built static library."""
        return self.gn_out_dir / "obj"

