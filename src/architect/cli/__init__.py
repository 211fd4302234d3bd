"""
CLI module for Architect.

Provides the command-line interface using Click.
"""

from architect.cli.main import cli, main

__all__ = ["main", "cli"]
