"""Recursive-descent parser and its error taxonomy."""

from .errors import (
    DepthLimitExceeded,
    LiteralMismatch,
    ParseError,
    QuoteMismatch,
    TagMismatch,
    UnexpectedEof,
)
from .parser import Parser, parse

__all__ = [
    "DepthLimitExceeded",
    "LiteralMismatch",
    "ParseError",
    "QuoteMismatch",
    "TagMismatch",
    "UnexpectedEof",
    "Parser",
    "parse",
]
