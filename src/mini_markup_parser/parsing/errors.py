"""Parse error taxonomy.

Every grammar violation aborts the parse with one of these exceptions. They
carry the byte offset at which the violation was detected and, when the
parser knows the input, the 1-based line and column of that offset.
"""

from typing import Any, Dict, Optional


class ParseError(Exception):
    """Base class for fatal parse failures."""

    def __init__(
        self,
        message: str,
        position: int,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        self.message = message
        self.position = position
        self.line = line
        self.column = column
        super().__init__(self._format())

    def _format(self) -> str:
        where = f"byte {self.position}"
        if self.line is not None and self.column is not None:
            where += f" (line {self.line}, column {self.column})"
        return f"{self.message} at {where}"

    @property
    def kind(self) -> str:
        return type(self).__name__

    def details(self) -> Dict[str, Any]:
        """Kind-specific fields, overridden by subclasses."""
        return {}

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "kind": self.kind,
            "message": self.message,
            "position": self.position,
        }
        if self.line is not None:
            result["line"] = self.line
            result["column"] = self.column
        result.update(self.details())
        return result


class UnexpectedEof(ParseError):
    """A read ran past the end of the input."""

    def __init__(self, position: int, **kwargs: Any) -> None:
        super().__init__("Unexpected end of input", position, **kwargs)


class LiteralMismatch(ParseError):
    """The input did not contain the literal required at the cursor."""

    def __init__(
        self,
        expected: str,
        position: int,
        found: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        self.expected = expected
        self.found = found
        message = f"Expected {expected!r}"
        if found is not None:
            message += f" but found {found!r}"
        super().__init__(message, position, **kwargs)

    def details(self) -> Dict[str, Any]:
        return {"expected": self.expected, "found": self.found}


class QuoteMismatch(ParseError):
    """An attribute value was closed with a different quote than it was opened with."""

    def __init__(self, opening: str, closing: str, position: int, **kwargs: Any) -> None:
        self.opening = opening
        self.closing = closing
        super().__init__(
            f"Attribute value opened with {opening!r} but closed with {closing!r}",
            position,
            **kwargs,
        )

    def details(self) -> Dict[str, Any]:
        return {"opening": self.opening, "closing": self.closing}


class TagMismatch(ParseError):
    """A closing tag name differs from its opening tag name."""

    def __init__(self, opening: str, closing: str, position: int, **kwargs: Any) -> None:
        self.opening = opening
        self.closing = closing
        super().__init__(
            f"Closing tag </{closing}> does not match opening tag <{opening}>",
            position,
            **kwargs,
        )

    def details(self) -> Dict[str, Any]:
        return {"opening": self.opening, "closing": self.closing}


class DepthLimitExceeded(ParseError):
    """Elements are nested deeper than the configured limit."""

    def __init__(self, max_depth: int, position: int, **kwargs: Any) -> None:
        self.max_depth = max_depth
        super().__init__(
            f"Element nesting exceeds maximum depth of {max_depth}",
            position,
            **kwargs,
        )

    def details(self) -> Dict[str, Any]:
        return {"max_depth": self.max_depth}
