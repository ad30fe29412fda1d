"""
Build tool acquisition for v8kit.

Provides GN and Ninja, either from the user or from a prebuilt bundle.
"""

from .tool_downloader import (
    BuildTools,
    DownloadTarget,
    GnNinjaDownloader,
    acquire_build_tools,
    need_gn_ninja_download,
)

__all__ = [
    "BuildTools",
    "DownloadTarget",
    "GnNinjaDownloader",
    "acquire_build_tools",
    "need_gn_ninja_download",
]
