"""
The v8kit build pipeline.

Runs in this order, each step either completing or raising a V8KitError:

1. classify the invocation (skip for docs, RLS and trybuild passes)
2. check the vendored source tree
3. resolve GN and Ninja, downloading them if needed
4. find a system clang, or download Chromium's clang
5. detect sccache
6. assemble GN args
7. ``gn gen`` and ``ninja``
8. print cargo link directives
"""

import logging
import shutil
from typing import Callable, Optional

from ..caching.detection import NOT_USING_SCCACHE, SccacheDetector
from ..core.config import TRIGGER_VARIABLES, Settings
from ..core.context import BuildContext
from ..core.directory import BuildRootResolver, ensure_source_tree
from ..packages.tool_downloader import GnNinjaDownloader, acquire_build_tools
from ..toolchain.downloader import ClangDownloader
from ..toolchain.locator import ToolchainPath, find_compatible_system_clang
from .args import GnArgs, assemble_gn_args
from .directives import (
    DirectiveWriter,
    LinkSearchDirective,
    RerunIfChanged,
    link_directives,
    rerun_if_env_changed,
)
from .invoker import GnBuilder, build_environment

logger = logging.getLogger(__name__)


class BuildPipeline:
    """
    Drive one build script run.

    Example:
        >>> settings = Settings.from_environ(os.environ)
        >>> BuildPipeline(settings).run()
    """

    def __init__(
        self,
        settings: Settings,
        context: Optional[BuildContext] = None,
        resolver: Optional[BuildRootResolver] = None,
        writer: Optional[DirectiveWriter] = None,
        which: Callable[[str], Optional[str]] = shutil.which,
        python: Optional[str] = None,
    ):
        """
        Initialize pipeline.

        Args:
            settings: Resolved settings
            context: Build context (derived from settings if None)
            resolver: Scratch directory resolver (derived from OUT_DIR if None)
            writer: Directive output (stdout if None)
            which: PATH lookup
            python: Interpreter for the download helper scripts
        """
        self.settings = settings
        self.context = context or BuildContext.from_settings(settings)
        self._resolver = resolver
        self.writer = writer or DirectiveWriter()
        self.which = which
        self.python = python

    @property
    def resolver(self) -> BuildRootResolver:
        if self._resolver is None:
            self._resolver = BuildRootResolver(self.context.out_dir)
        return self._resolver

    def run(self):
        """
        Build V8 and print link directives, as the invocation calls for.

        Raises:
            V8KitError: On any fatal condition
        """
        if self.context.should_build:
            self.build_v8()
        else:
            logger.info(f"Skipping V8 build ({self._skip_reason()})")

        if self.context.should_emit_link_flags:
            self.print_link_flags()

    def build_v8(self):
        root_dir = self.context.root_dir
        ensure_source_tree(root_dir)

        env = build_environment(self.settings.environ)

        downloader = GnNinjaDownloader(
            root_dir=root_dir,
            destination=self.resolver.gn_ninja_dir(),
            platform=self.context.platform,
            env=env,
            python=self.python,
            archive_base_url=self.settings.gn_ninja_binaries_url,
            archive_sha256=self.settings.gn_ninja_binaries_sha256,
        )
        tools = acquire_build_tools(self.settings, downloader, self.which)

        gn_args = self.gn_args(env)

        builder = GnBuilder(root_dir, self.resolver.gn_out_dir(), tools, env)
        builder.maybe_gen(gn_args)
        builder.build()

        self.writer.emit(LinkSearchDirective(builder.library_dir()))
        self.writer.emit_all(RerunIfChanged(path) for path in builder.deps())
        self.writer.emit_all(rerun_if_env_changed(TRIGGER_VARIABLES))

    def toolchain(self, env=None) -> ToolchainPath:
        """Find a system clang, falling back to Chromium's clang."""
        toolchain = find_compatible_system_clang(self.settings, self.context.platform)
        if toolchain is not None:
            return toolchain

        downloader = ClangDownloader(
            self.context.root_dir, self.resolver, env=env, python=self.python
        )
        return downloader.download()

    def gn_args(self, env=None) -> GnArgs:
        toolchain = self.toolchain(env)

        sccache = SccacheDetector(self.settings, self.which).detect()
        if sccache is None:
            self.writer.warning(NOT_USING_SCCACHE)

        return assemble_gn_args(
            self.context, toolchain, sccache, self.settings.gn_args
        )

    def print_link_flags(self):
        self.writer.emit_all(link_directives(self.context.platform))

    def _skip_reason(self) -> str:
        environment = self.context.environment
        reasons = []
        if environment.is_trybuild:
            reasons.append("trybuild")
        if environment.is_cargo_doc:
            reasons.append("cargo doc")
        if environment.is_rls:
            reasons.append("rls")
        return ", ".join(reasons)
