"""
Centralized exception hierarchy for v8kit.

Components raise these; only the CLI converts them into a process exit code.
"""

from typing import Optional


# ============================================================================
# Base Exceptions
# ============================================================================


class V8KitError(Exception):
    """Base exception for all v8kit errors."""

    pass


class ConfigurationError(V8KitError):
    """Raised when settings are missing, malformed, or unrecognized."""

    pass


class SourceTreeMissingError(V8KitError):
    """Raised when the vendored source checkout is not present."""

    def __init__(self, marker: str):
        self.marker = marker
        super().__init__(
            "missing source code. Run 'git submodule update --init --recursive'"
        )


# ============================================================================
# Toolchain-related Exceptions
# ============================================================================


class ToolchainError(V8KitError):
    """Base exception for compiler toolchain errors."""

    pass


class ToolchainDownloadError(ToolchainError):
    """Raised when the bundled clang cannot be fetched."""

    pass


class ToolDownloadError(V8KitError):
    """Raised when GN or Ninja cannot be fetched or found after fetching."""

    pass


class DownloadError(V8KitError):
    """Raised when an archive download fails."""

    pass


class ChecksumError(DownloadError):
    """Raised when a downloaded archive does not match its expected hash."""

    pass


# ============================================================================
# Build Exceptions
# ============================================================================


class BuildError(V8KitError):
    """Base exception for build graph generation and execution errors."""

    pass


class BuildGenerationError(BuildError):
    """Raised when `gn gen` fails or leaves its outputs missing."""

    pass


class BuildExecutionError(BuildError):
    """Raised when ninja fails."""

    def __init__(self, target: str, returncode: int, detail: Optional[str] = None):
        self.target = target
        self.returncode = returncode
        self.detail = detail
        if detail:
            message = f"ninja failed to start building '{target}': {detail}"
        else:
            message = f"ninja failed building '{target}' (exit code {returncode})"
        super().__init__(message)
