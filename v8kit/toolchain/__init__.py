"""
Compiler toolchain module for v8kit.

This module provides functionality for:
- System clang detection (CLANG_BASE_PATH)
- Chromium clang download
"""

from v8kit.toolchain.locator import (
    ToolchainPath,
    find_compatible_system_clang,
    is_compatible_clang_version,
)
from v8kit.toolchain.downloader import ClangDownloader

__all__ = [
    "ToolchainPath",
    "find_compatible_system_clang",
    "is_compatible_clang_version",
    "ClangDownloader",
]
