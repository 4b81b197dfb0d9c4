"""
Entry point for running the buildpack CLI as a module.

Usage: python -m sops_buildpack.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
