"""
Cargo build script directives.

Cargo reads ``cargo:`` lines from a build script's stdout; everything else
v8kit reports goes through logging to stderr.
"""

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, TextIO

from ..core.platform import HostPlatform

LIBRARY_NAME = "rusty_v8"

# System libraries V8's Windows build links against
WINDOWS_SYSTEM_LIBRARIES = ("winmm", "dbghelp")

STATIC = "static"
DYLIB = "dylib"


@dataclass(frozen=True)
class LinkDirective:
    """Link a library into the crate."""

    kind: str
    name: str

    def __str__(self) -> str:
        return f"cargo:rustc-link-lib={self.kind}={self.name}"


@dataclass(frozen=True)
class LinkSearchDirective:
    """Add a native library search directory."""

    path: Path

    def __str__(self) -> str:
        return f"cargo:rustc-link-search=native={self.path}"


@dataclass(frozen=True)
class RerunIfChanged:
    path: Path

    def __str__(self) -> str:
        return f"cargo:rerun-if-changed={self.path}"


@dataclass(frozen=True)
class RerunIfEnvChanged:
    name: str

    def __str__(self) -> str:
        return f"cargo:rerun-if-env-changed={self.name}"


@dataclass(frozen=True)
class CargoWarning:
    """A warning cargo shows to the developer."""

    message: str

    def __str__(self) -> str:
        return f"cargo:warning={self.message}"


def link_directives(platform: HostPlatform) -> List[LinkDirective]:
    """
    Get the link directives for the built library.

    Example:
        >>> [str(d) for d in link_directives(HostPlatform.LINUX)]
        ['cargo:rustc-link-lib=static=rusty_v8']
    """
    directives = [LinkDirective(STATIC, LIBRARY_NAME)]
    if platform.is_windows:
        directives.extend(LinkDirective(DYLIB, lib) for lib in WINDOWS_SYSTEM_LIBRARIES)
    return directives


def rerun_if_env_changed(names: Iterable[str]) -> List[RerunIfEnvChanged]:
    return [RerunIfEnvChanged(name) for name in names]


class DirectiveWriter:
    """
    Write directives to cargo.

    Keeps every directive written so tests and callers can inspect them.
    """

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream
        self.written: List[str] = []

    def emit(self, directive):
        line = str(directive)
        self.written.append(line)
        stream = self.stream or sys.stdout
        print(line, file=stream, flush=True)

    def emit_all(self, directives: Iterable):
        for directive in directives:
            self.emit(directive)

    def warning(self, message: str):
        self.emit(CargoWarning(message))
