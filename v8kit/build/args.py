"""
GN argument assembly.

GN reads ``--args`` as a sequence of ``key=value`` assignments, and a later
assignment to the same key wins. Arguments are therefore appended in
increasing precedence and never deduplicated:

1. ``is_debug``
2. ``clang_base_path`` (plus compatibility flags for a system clang)
3. ``cc_wrapper`` (plus a Windows workaround)
4. GN_ARGS tokens, verbatim
"""

import logging
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Union

from ..core.context import BuildContext
from ..core.platform import HostPlatform
from ..toolchain.locator import ToolchainPath

logger = logging.getLogger(__name__)

GnValue = Union[bool, int, str, Path]


def gn_string(value: Union[str, Path]) -> str:
    """
    Quote a value as a GN string literal.

    Backslashes, double quotes and ``$`` are escaped.

    Example:
        >>> print(gn_string("/opt/llvm"))
        "/opt/llvm"
    """
    escaped = str(value).replace("\\", "\\\\").replace('"', '\\"').replace("$", "\\$")
    return f'"{escaped}"'


def gn_value(value: GnValue) -> str:
    """Render a Python value as a GN literal."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    return gn_string(value)


class GnArgs:
    """
    Ordered GN arguments.

    Example:
        >>> args = GnArgs()
        >>> args.set("is_debug", False)
        >>> args.extend_raw(["symbol_level=0"])
        >>> args.render()
        'is_debug=false symbol_level=0'
    """

    def __init__(self):
        self.assignments: List[str] = []
        self.extra: List[str] = []

    def set(self, key: str, value: GnValue):
        """Append ``key=value``."""
        self.assignments.append(f"{key}={gn_value(value)}")

    def extend_raw(self, tokens: Iterable[str]):
        """Append user-supplied tokens without validation."""
        self.extra.extend(tokens)

    def keys(self) -> List[str]:
        return [arg.split("=", 1)[0] for arg in self]

    def __contains__(self, key: str) -> bool:
        return key in self.keys()

    def __iter__(self) -> Iterator[str]:
        return iter(self.assignments + self.extra)

    def __len__(self) -> int:
        return len(self.assignments) + len(self.extra)

    def as_list(self) -> List[str]:
        return list(self)

    def render(self) -> str:
        """Join into the value of ``gn gen --args=``."""
        return " ".join(self)

    def __repr__(self) -> str:
        return f"GnArgs({self.as_list()!r})"


def debug_flag(args: GnArgs, is_debug: bool, platform: HostPlatform):
    # rustc cannot link against a V8 debug build on Windows.
    args.set("is_debug", is_debug and not platform.is_windows)


def clang_flags(args: GnArgs, toolchain: ToolchainPath):
    args.set("clang_base_path", toolchain.path)
    if toolchain.is_system:
        args.set("treat_warnings_as_errors", False)
        # Chromium's clang plugins are not built for a system clang
        args.set("clang_use_chrome_plugins", False)


def cc_wrapper(args: GnArgs, sccache_path: Path, platform: HostPlatform):
    """
    Route compiles through sccache.

    sccache on Windows reports some warnings as errors
    (https://github.com/mozilla/sccache/issues/264).
    """
    args.set("cc_wrapper", sccache_path)
    if platform.is_windows:
        args.set("treat_warnings_as_errors", False)


def assemble_gn_args(
    context: BuildContext,
    toolchain: ToolchainPath,
    sccache_path: Optional[Path] = None,
    extra_args: Iterable[str] = (),
) -> GnArgs:
    """
    Build the full GN argument list.

    Args:
        context: Build context (debug mode, platform)
        toolchain: System or downloaded clang
        sccache_path: sccache executable, if one was found
        extra_args: GN_ARGS tokens

    Returns:
        GnArgs in precedence order
    """
    args = GnArgs()
    debug_flag(args, context.is_debug, context.platform)
    clang_flags(args, toolchain)
    if sccache_path is not None:
        cc_wrapper(args, sccache_path, context.platform)
    args.extend_raw(extra_args)

    logger.debug(f"gn args: {args.render()}")
    return args
