"""Mini Markup Parser.

A strict, single-pass recursive-descent parser that turns markup text into a
minimal DOM of text and element nodes, rejecting anything that is not
well-formed.

Progressive API Disclosure:
- Level 1: parse() returns the root node and raises ParseError on bad input
- Level 2: parse_string(), parse_bytes(), parse_file() return a ParseResult
- Level 3: MarkupParser with a ParserConfig for repeated, configured parsing
"""

__version__ = "0.1.0"
__author__ = "Mini Markup Parser Team"

from .api import MarkupParser, parse_bytes, parse_file, parse_string
from .dom import ElementData, Node, Text, debug_dump, to_markup
from .parsing import (
    DepthLimitExceeded,
    LiteralMismatch,
    ParseError,
    QuoteMismatch,
    TagMismatch,
    UnexpectedEof,
    parse,
)
from .shared import ParserConfig, ParseResult

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: core parser
    "parse",

    # Level 2: result-returning functions
    "parse_string",
    "parse_bytes",
    "parse_file",

    # Level 3: configured parser
    "MarkupParser",
    "ParserConfig",

    # Tree model
    "Node",
    "Text",
    "ElementData",
    "debug_dump",
    "to_markup",

    # Results and errors
    "ParseResult",
    "ParseError",
    "UnexpectedEof",
    "LiteralMismatch",
    "QuoteMismatch",
    "TagMismatch",
    "DepthLimitExceeded",
]
