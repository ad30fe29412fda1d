"""
Build cache integration for v8kit.

Modules:
    detection: Detect sccache for use as GN's cc_wrapper
"""

from .detection import SccacheDetector

__all__ = ["SccacheDetector"]
