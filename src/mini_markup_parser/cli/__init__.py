"""Command-line interface for the mini markup parser.

Provides the ``mini-markup`` tool for batch parsing, validation and tree
dumping of markup files.
"""

from .main import main

__all__ = ["main"]
