"""
v8kit CLI module.

This module provides the command-line entry point used by build scripts.
"""

from .parser import CLI, main

__all__ = ["CLI", "main"]
