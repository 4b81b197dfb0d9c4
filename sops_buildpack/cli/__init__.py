"""
sops buildpack CLI module.

This module provides the command-line interface behind the bin/ scripts.
"""

from .parser import CLI, main
from . import utils

__all__ = ["CLI", "main", "utils"]
