"""
Entry point for running v8kit as a module.

Usage: python -m v8kit [options]
"""

from v8kit.cli.parser import main

if __name__ == "__main__":
    main()
