#!/usr/bin/env python3
"""
Main CLI for the Font Scanner
=============================

Run from a source checkout with ``python main.py list``; installed copies
expose the same commands as ``fontscan``.
"""

from src.fontscan.cli import cli

if __name__ == "__main__":
    cli()
