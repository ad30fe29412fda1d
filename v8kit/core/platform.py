"""
Host platform detection for v8kit.

Only three hosts can build V8 through this pipeline: Windows, Linux and macOS.
Each maps to the directory tag used by the prebuilt GN/Ninja bundle.

Usage:
    from v8kit.core.platform import detect_host_platform

    host = detect_host_platform()
    print(host.tag)           # 'linux64'
    print(host.executable("gn"))  # 'gn'
"""

import enum
import functools
import platform

from .exceptions import ConfigurationError


class HostPlatform(enum.Enum):
    """
    Supported build hosts.

    The value is the normalized OS name used throughout v8kit.
    """

    WINDOWS = "windows"
    LINUX = "linux"
    MACOS = "macos"

    @property
    def tag(self) -> str:
        """
        Directory tag of the prebuilt GN/Ninja bundle for this host.

        Example:
            >>> HostPlatform.WINDOWS.tag
            'win'
        """
        return _PLATFORM_TAGS[self]

    @property
    def is_windows(self) -> bool:
        return self is HostPlatform.WINDOWS

    def executable(self, name: str) -> str:
        """
        Get the executable file name for a tool on this host.

        Example:
            >>> HostPlatform.WINDOWS.executable("ninja")
            'ninja.exe'
            >>> HostPlatform.LINUX.executable("ninja")
            'ninja'
        """
        return f"{name}.exe" if self.is_windows else name


_PLATFORM_TAGS = {
    HostPlatform.WINDOWS: "win",
    HostPlatform.LINUX: "linux64",
    HostPlatform.MACOS: "mac",
}


@functools.lru_cache(maxsize=1)
def detect_host_platform() -> HostPlatform:
    """
    Detect the current build host.

    This function is cached - it only runs detection once per process.

    Returns:
        HostPlatform for the running interpreter

    Raises:
        ConfigurationError: If the operating system is not supported
    """
    system = platform.system().lower()

    if system == "windows":
        return HostPlatform.WINDOWS
    elif system == "linux":
        return HostPlatform.LINUX
    elif system == "darwin":
        return HostPlatform.MACOS
    else:
        raise ConfigurationError(f"Unsupported operating system: {system}")


def clear_platform_cache():
    """Force the next detect_host_platform() call to re-detect."""
    detect_host_platform.cache_clear()


__all__ = [
    "HostPlatform",
    "detect_host_platform",
    "clear_platform_cache",
]
