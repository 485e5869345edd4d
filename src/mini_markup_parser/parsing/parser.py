"""Recursive-descent markup parser.

The parser walks the source text once, front to back, with a single cursor.
Each grammar production is one method; the methods call each other in the
same shape as the grammar::

    nodes      := (whitespace? node)*
    node       := element | text
    element    := '<' name attributes '>' nodes '</' name '>'
    attributes := (whitespace attr)*
    attr       := name '=' attrvalue
    attrvalue  := '"' [^"]* '"' | "'" [^']* "'"
    text       := [^<]*
    name       := [A-Za-z0-9]*

Violations raise a :class:`~mini_markup_parser.parsing.errors.ParseError`
subclass that propagates straight out of :func:`parse`; no partial tree is
ever returned.
"""

import logging
import string
from typing import Callable, Dict, List, Optional, Tuple, Type

from mini_markup_parser.dom.node import AttrMap, Node
from mini_markup_parser.parsing.errors import (
    DepthLimitExceeded,
    LiteralMismatch,
    ParseError,
    QuoteMismatch,
    TagMismatch,
    UnexpectedEof,
)
from mini_markup_parser.shared.config import ParserConfig

logger = logging.getLogger(__name__)

NAME_CHARS = frozenset(string.ascii_letters + string.digits)
QUOTE_CHARS = ('"', "'")
CLOSE_TAG_MARKER = "</"

# Placeholders reported by LiteralMismatch when the expectation is a class of
# characters rather than a fixed literal
EXPECTED_NAME = "name"
EXPECTED_QUOTE = "quote"
EXPECTED_EOF = "end of input"


def _byte_length(text: str) -> int:
    return len(text.encode("utf-8", "surrogatepass"))


def _is_name_char(char: str) -> bool:
    return char in NAME_CHARS


class Parser:
    """Cursor over one source string.

    ``position`` is the byte offset of the cursor in the UTF-8 encoding of
    ``input`` and only ever moves forward. A parser instance is used for one
    document and must not be shared between threads.
    """

    def __init__(self, source: str, config: Optional[ParserConfig] = None) -> None:
        self.input = source
        self.position = 0
        self.config = config or ParserConfig()
        self.nodes_created = 0
        # Character index matching ``position``
        self._cursor = 0
        self._depth = 0

    # ------------------------------------------------------------------
    # Primitives
    # ------------------------------------------------------------------

    def eof(self) -> bool:
        return self._cursor >= len(self.input)

    def peek(self) -> str:
        """Return the current character without consuming it."""
        if self.eof():
            raise self._error(UnexpectedEof)
        return self.input[self._cursor]

    def starts_with(self, literal: str) -> bool:
        return self.input.startswith(literal, self._cursor)

    def expect(self, literal: str) -> None:
        """Consume ``literal`` or fail with the literal and the byte offset."""
        if self.starts_with(literal):
            self._cursor += len(literal)
            self.position += _byte_length(literal)
            return

        found = self.input[self._cursor:self._cursor + len(literal)]
        if len(found) < len(literal) and literal.startswith(found):
            raise self._error(UnexpectedEof)
        raise self._error(LiteralMismatch, literal, found=found)

    def advance(self) -> str:
        """Consume and return the current character."""
        char = self.peek()
        self._cursor += 1
        self.position += _byte_length(char)
        return char

    def consume_while(self, predicate: Callable[[str], bool]) -> str:
        """Consume characters while ``predicate`` holds and return the run."""
        start = end = self._cursor
        length = len(self.input)
        while end < length and predicate(self.input[end]):
            end += 1

        run = self.input[start:end]
        self._cursor = end
        self.position += _byte_length(run)
        return run

    def skip_whitespace(self) -> None:
        self.consume_while(str.isspace)

    # ------------------------------------------------------------------
    # Grammar
    # ------------------------------------------------------------------

    def parse_name(self) -> str:
        """Parse a tag or attribute name."""
        name = self.consume_while(_is_name_char)
        if not name and not self.config.allow_empty_names:
            raise self._error(LiteralMismatch, EXPECTED_NAME, found=self.peek())
        return name

    def parse_node(self) -> Node:
        if self.starts_with("<"):
            return self.parse_element()
        return self.parse_text()

    def parse_text(self) -> Node:
        self.nodes_created += 1
        return Node.text(self.consume_while(lambda char: char != "<"))

    def parse_attr_value(self) -> str:
        """Parse a quoted attribute value and return it without the quotes."""
        opening_index = self._cursor
        opening = self.advance()
        if opening not in QUOTE_CHARS:
            raise self._error(
                LiteralMismatch, EXPECTED_QUOTE, found=opening, char_index=opening_index
            )

        value = self.consume_while(lambda char: char != opening)
        if self.eof():
            # The value was never closed. If the other quote character shows
            # up inside it, that is where the author meant to close it.
            other = QUOTE_CHARS[1] if opening == QUOTE_CHARS[0] else QUOTE_CHARS[0]
            stray = value.find(other)
            if stray != -1:
                raise self._error(
                    QuoteMismatch, opening, other,
                    char_index=opening_index + 1 + stray,
                )
            raise self._error(UnexpectedEof)

        self.advance()
        return value

    def parse_attr(self) -> Tuple[str, str]:
        name = self.parse_name()
        self.expect("=")
        value = self.parse_attr_value()
        return name, value

    def parse_attributes(self) -> AttrMap:
        """Parse attributes up to, not including, the closing ``>``.

        A repeated attribute name keeps the last value.
        """
        attrs: Dict[str, str] = {}
        while True:
            self.skip_whitespace()
            if self.peek() == ">":
                break

            name, value = self.parse_attr()
            attrs[name] = value

        return attrs

    def parse_element(self) -> Node:
        if self._depth >= self.config.max_depth:
            raise self._error(DepthLimitExceeded, self.config.max_depth)

        self.expect("<")
        tag_name = self.parse_name()
        attrs = self.parse_attributes()
        self.expect(">")

        self._depth += 1
        children = self.parse_nodes()
        self._depth -= 1

        self.expect(CLOSE_TAG_MARKER)
        closing_index = self._cursor
        closing_name = self.consume_while(_is_name_char)
        if closing_name != tag_name:
            raise self._error(
                TagMismatch, tag_name, closing_name, char_index=closing_index
            )
        self.expect(">")

        self.nodes_created += 1
        return Node.elem(tag_name, attrs, children)

    def parse_nodes(self) -> List[Node]:
        """Parse sibling nodes until end of input or a closing tag."""
        nodes = []
        while True:
            self.skip_whitespace()
            if self.eof() or self.starts_with(CLOSE_TAG_MARKER):
                break
            nodes.append(self.parse_node())

        return nodes

    def parse_document(self) -> Node:
        """Parse the whole input and return exactly one root node.

        A single top-level node is returned as is; otherwise the top-level
        nodes are wrapped in a synthetic ``config.root_tag`` element.
        """
        try:
            nodes = self.parse_nodes()
        except RecursionError:
            # The interpreter stack ran out before max_depth was reached,
            # e.g. the recursion limit was lowered after the config was built
            raise self._error(DepthLimitExceeded, self._depth) from None

        if not self.eof():
            # Only a stray closing tag can stop the top-level loop early
            raise self._error(
                LiteralMismatch,
                EXPECTED_EOF,
                found=self.input[self._cursor:self._cursor + len(CLOSE_TAG_MARKER)],
            )

        if len(nodes) == 1:
            root = nodes[0]
        else:
            self.nodes_created += 1
            root = Node.elem(self.config.root_tag, {}, nodes)

        logger.debug(
            "Parsed %d top-level nodes, %d nodes total, %d bytes",
            len(nodes), self.nodes_created, self.position,
        )
        return root

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def location(self, char_index: Optional[int] = None) -> Tuple[int, int]:
        """1-based ``(line, column)`` of a character index, default the cursor."""
        index = self._cursor if char_index is None else char_index
        line = self.input.count("\n", 0, index) + 1
        column = index - (self.input.rfind("\n", 0, index) + 1) + 1
        return line, column

    def _error(
        self,
        error_class: Type[ParseError],
        *args: object,
        char_index: Optional[int] = None,
        **kwargs: object,
    ) -> ParseError:
        index = self._cursor if char_index is None else char_index
        if index == self._cursor:
            position = self.position
        else:
            position = _byte_length(self.input[:index])
        line, column = self.location(index)
        return error_class(*args, position=position, line=line, column=column, **kwargs)


def parse(source: str, config: Optional[ParserConfig] = None) -> Node:
    """Parse ``source`` and return the root node of its tree.

    Raises:
        ParseError: on any grammar or well-formedness violation.

    Examples:
        >>> root = parse('<a><b>hi</b></a>')
        >>> root.tag_name, root.children[0].tag_name
        ('a', 'b')
        >>> parse('').tag_name
        'html'
    """
    return Parser(source, config).parse_document()
