#!/usr/bin/env python3
"""
Entry point for the uploader CLI.

Run with: python -m uploader
"""

from .cli import cli

if __name__ == '__main__':
    cli()
