"""
Build context: what kind of cargo invocation is running and what it needs.

The context is derived once from Settings and then only read. Three signals
can make a full V8 build pointless:

- ``DENO_TRYBUILD`` - trybuild compile-check tests, no artifact needed
- ``RUSTDOCFLAGS`` - ``cargo doc`` (docs.rs builds)
- ``CARGO`` whose file stem starts with ``rls`` - the Rust language server

Link directives are still emitted for trybuild passes, since those compile
and link test crates.
"""

import logging
from dataclasses import dataclass
from pathlib import Path, PureWindowsPath
from typing import Optional

from . import config as cfg
from .config import Settings
from .exceptions import ConfigurationError
from .platform import HostPlatform, detect_host_platform

logger = logging.getLogger(__name__)

RLS_PREFIX = "rls"


@dataclass(frozen=True)
class EnvironmentClass:
    """Which skip signals are present in the environment."""

    is_trybuild: bool
    is_cargo_doc: bool
    is_rls: bool

    @property
    def should_build(self) -> bool:
        return not (self.is_trybuild or self.is_cargo_doc or self.is_rls)

    @property
    def should_emit_link_flags(self) -> bool:
        return not (self.is_cargo_doc or self.is_rls)


def classify_environment(settings: Settings) -> EnvironmentClass:
    """
    Compute the skip signals for this invocation.

    Pure function of settings; presence of a variable counts even when its
    value is empty.
    """
    return EnvironmentClass(
        is_trybuild=settings.is_set(cfg.TRYBUILD),
        is_cargo_doc=settings.is_set(cfg.RUSTDOCFLAGS),
        is_rls=is_language_server(settings.get(cfg.CARGO)),
    )


def is_language_server(cargo: Optional[str]) -> bool:
    """
    Check whether the invoking driver is the Rust language server.

    Example:
        >>> is_language_server("/home/me/.cargo/bin/rls")
        True
        >>> is_language_server("/home/me/.cargo/bin/cargo")
        False
    """
    if not cargo:
        return False
    # PureWindowsPath splits on both separators.
    return PureWindowsPath(cargo).stem.startswith(RLS_PREFIX)


def parse_profile(profile: Optional[str]) -> bool:
    """
    Map cargo's PROFILE to debug mode.

    Args:
        profile: 'debug', 'release', or None (defaults to debug)

    Returns:
        True for a debug build

    Raises:
        ConfigurationError: For any other profile value
    """
    if profile is None or profile == "debug":
        return True
    if profile == "release":
        return False
    raise ConfigurationError(f"unhandled PROFILE value {profile}")


@dataclass(frozen=True)
class BuildContext:
    """
    Process-wide facts every pipeline stage reads.

    Attributes:
        environment: Skip signals
        platform: Build host
        is_debug: Debug profile requested
        root_dir: Project root handed to GN (CARGO_MANIFEST_DIR)
        out_dir: Absolute cargo OUT_DIR
    """

    environment: EnvironmentClass
    platform: HostPlatform
    is_debug: bool
    root_dir: Optional[Path] = None
    out_dir: Optional[Path] = None

    @property
    def should_build(self) -> bool:
        return self.environment.should_build

    @property
    def should_emit_link_flags(self) -> bool:
        return self.environment.should_emit_link_flags

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        platform: Optional[HostPlatform] = None,
        cwd: Optional[Path] = None,
    ) -> "BuildContext":
        """
        Derive the context for this run.

        PROFILE, OUT_DIR and CARGO_MANIFEST_DIR are only required when a build
        will actually happen.

        Args:
            settings: Resolved settings
            platform: Build host (auto-detected if None)
            cwd: Directory a relative OUT_DIR is resolved against

        Raises:
            ConfigurationError: If a required variable is missing or invalid
        """
        environment = classify_environment(settings)
        platform = platform or detect_host_platform()
        # Skipped passes never read PROFILE
        is_debug = True
        if environment.should_build:
            is_debug = parse_profile(settings.profile)

        root_dir = settings.manifest_dir
        out_dir = settings.out_dir

        if environment.should_build:
            missing = [
                name
                for name, value in (
                    (cfg.PROFILE, settings.profile),
                    (cfg.OUT_DIR, out_dir),
                    (cfg.CARGO_MANIFEST_DIR, root_dir),
                )
                if value is None
            ]
            if missing:
                raise ConfigurationError(
                    f"Required variable(s) not set: {', '.join(missing)}"
                )

        if out_dir is not None and not out_dir.is_absolute():
            out_dir = (cwd or Path.cwd()) / out_dir

        context = cls(
            environment=environment,
            platform=platform,
            is_debug=is_debug,
            root_dir=root_dir,
            out_dir=out_dir,
        )
        logger.debug(f"Build context: {context}")
        return context
