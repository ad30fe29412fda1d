"""
v8kit command-line entry point.

A crate's ``build.rs`` runs ``python -m v8kit`` (or the ``v8kit`` script); all
inputs come from the environment cargo sets up for build scripts.
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Mapping, Optional

from v8kit.build.pipeline import BuildPipeline
from v8kit.core.config import CARGO_MANIFEST_DIR, Settings
from v8kit.core.exceptions import V8KitError

try:
    from importlib.metadata import version

    __version__ = version("v8kit")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)


class CLI:
    """v8kit command-line interface."""

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        """
        Initialize CLI with argument parser.

        Args:
            environ: Environment to read settings from (os.environ if None)
        """
        self.environ = environ if environ is not None else os.environ
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="v8kit",
            description="Build V8 for a cargo build script and print link directives",
            epilog="Configuration is read from the environment cargo provides.",
        )
        parser.add_argument(
            "--version", action="version", version=f"v8kit {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help=(
                "YAML file with variable defaults (default: $V8KIT_CONFIG, "
                "else <CARGO_MANIFEST_DIR>/v8kit.yaml if present)"
            ),
        )
        parser.add_argument(
            "--project-root",
            type=Path,
            metavar="PATH",
            help="Project root if CARGO_MANIFEST_DIR is not set (default: current directory)",
        )
        return parser

    def parse_args(self, argv: Optional[List[str]] = None) -> argparse.Namespace:
        return self.parser.parse_args(argv)

    def run(self, argv: Optional[List[str]] = None) -> int:
        """
        Run the build.

        Args:
            argv: Command-line arguments (sys.argv[1:] if None)

        Returns:
            Exit code: 0 on success, 1 on any fatal error
        """
        args = self.parse_args(argv)
        self._configure_logging(args)

        environ = dict(self.environ)
        if CARGO_MANIFEST_DIR not in environ:
            environ[CARGO_MANIFEST_DIR] = str(args.project_root or Path.cwd())

        try:
            settings = Settings.from_environ(environ, config_file=args.config)
            BuildPipeline(settings).run()
        except V8KitError as e:
            logger.error(str(e))
            if args.verbose:
                import traceback

                traceback.print_exc()
            return 1

        return 0

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            stream=sys.stderr,
            force=True,
        )


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
