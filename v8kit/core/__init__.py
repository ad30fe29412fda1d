"""
Core functionality for v8kit.

This package contains the foundational modules that other components depend on.
"""

from .config import Settings

from .context import (
    BuildContext,
    EnvironmentClass,
    classify_environment,
)

from .directory import (
    BuildRootResolver,
    ensure_source_tree,
)

from .platform import (
    HostPlatform,
    detect_host_platform,
    clear_platform_cache,
)

from .exceptions import (
    V8KitError,
    ConfigurationError,
    SourceTreeMissingError,
    ToolchainError,
    ToolchainDownloadError,
    ToolDownloadError,
    DownloadError,
    ChecksumError,
    BuildError,
    BuildGenerationError,
    BuildExecutionError,
)

__all__ = [
    "Settings",
    "BuildContext",
    "EnvironmentClass",
    "classify_environment",
    "BuildRootResolver",
    "ensure_source_tree",
    "HostPlatform",
    "detect_host_platform",
    "clear_platform_cache",
    "V8KitError",
    "ConfigurationError",
    "SourceTreeMissingError",
    "ToolchainError",
    "ToolchainDownloadError",
    "ToolDownloadError",
    "DownloadError",
    "ChecksumError",
    "BuildError",
    "BuildGenerationError",
    "BuildExecutionError",
]
