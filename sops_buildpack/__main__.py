"""
Entry point for running the buildpack as a module.

Usage: python -m sops_buildpack compile BUILD_DIR CACHE_DIR ENV_DIR
"""

from sops_buildpack.cli.parser import main

if __name__ == "__main__":
    main()
