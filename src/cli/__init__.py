"""
CLI module for the spam unsubscribe tool.

Provides click-based command-line interface with subcommands.
"""

from .main import cli

__all__ = ['cli']
