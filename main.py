#!/usr/bin/env python3
"""
Command-line entry point for the spam unsubscribe tool.

    python main.py <command> [options]
"""

from src.cli import cli


def main():
    """Main CLI entry point."""
    cli()


if __name__ == '__main__':
    main()
