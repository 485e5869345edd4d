"""Result-returning parser API.

The core :func:`mini_markup_parser.parsing.parse` raises on the first grammar
violation. The functions and the :class:`MarkupParser` class in this module
run the same parse but never raise for bad input: they return a
:class:`ParseResult` that holds either the complete tree or the error that
aborted the parse, plus diagnostics and timing information.
"""

import codecs
import time
from pathlib import Path
from typing import Any, BinaryIO, Dict, Optional, TextIO, Tuple, Union

from mini_markup_parser.parsing import ParseError, Parser
from mini_markup_parser.shared import (
    DiagnosticSeverity,
    ParseResult,
    ParserConfig,
    PerformanceMetrics,
    get_logger,
)

# Type definitions for input data
InputType = Union[str, bytes, Path, BinaryIO, TextIO]

PREVIEW_LENGTH = 100  # Max length for content preview in logs
MS_PER_SECOND = 1000

DEFAULT_ENCODING = "utf-8"

# Longest marks first: the UTF-32-LE mark begins with the UTF-16-LE one
BYTE_ORDER_MARKS = (
    (codecs.BOM_UTF32_LE, "utf-32-le"),
    (codecs.BOM_UTF32_BE, "utf-32-be"),
    (codecs.BOM_UTF8, "utf-8"),
    (codecs.BOM_UTF16_LE, "utf-16-le"),
    (codecs.BOM_UTF16_BE, "utf-16-be"),
)


def decode_source(data: bytes, encoding: Optional[str] = None) -> Tuple[str, str]:
    """Decode raw bytes into source text.

    An explicit ``encoding`` wins; otherwise a byte order mark selects the
    codec, falling back to UTF-8. The mark itself is never part of the text.

    Returns:
        Tuple of decoded text and the encoding that was used

    Raises:
        UnicodeDecodeError: if the bytes are not valid in the chosen encoding
        LookupError: if ``encoding`` names an unknown codec
    """
    for mark, mark_encoding in BYTE_ORDER_MARKS:
        if data.startswith(mark) and (
            encoding is None
            or codecs.lookup(encoding).name == codecs.lookup(mark_encoding).name
        ):
            return data[len(mark):].decode(mark_encoding), mark_encoding

    chosen = encoding or DEFAULT_ENCODING
    return data.decode(chosen), chosen


def parse_string(
    text: str,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None,
) -> ParseResult:
    """Parse markup from a string.

    Examples:
        >>> result = parse_string('<a id="1">Hello</a>')
        >>> result.success
        True
        >>> result.root.attrs['id']
        '1'

        >>> result = parse_string('<a></b>')
        >>> result.success, result.error.kind
        (False, 'TagMismatch')
    """
    logger = get_logger(__name__, correlation_id, "parse_string")
    logger.debug(
        "Starting string parse operation",
        extra={
            "content_length": len(text),
            "preview": (
                text[:PREVIEW_LENGTH] + "..."
                if len(text) > PREVIEW_LENGTH else text
            ),
        }
    )
    return _parse_text(text, config or ParserConfig(), correlation_id)


def parse_bytes(
    data: bytes,
    encoding: Optional[str] = None,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None,
    source_name: Optional[str] = None,
) -> ParseResult:
    """Decode ``data`` (see :func:`decode_source`) and parse it."""
    start_time = time.perf_counter()
    try:
        text, used_encoding = decode_source(data, encoding)
    except (UnicodeDecodeError, LookupError) as e:
        return _create_error_result(
            f"Could not decode input: {e}",
            correlation_id,
            (time.perf_counter() - start_time) * MS_PER_SECOND,
            source_name=source_name,
        )

    result = _parse_text(
        text, config or ParserConfig(), correlation_id, source_name=source_name
    )
    result.add_diagnostic(
        DiagnosticSeverity.INFO,
        f"Input decoded as {used_encoding}",
        "decoder",
        details={"encoding": used_encoding, "byte_length": len(data)},
    )
    return result


def parse_file(
    file_path: Union[str, Path],
    encoding: Optional[str] = None,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None,
) -> ParseResult:
    """Parse markup from a file.

    Missing files, directories, unreadable files and undecodable content all
    produce a failed result rather than an exception.

    Examples:
        >>> result = parse_file('missing.html')
        >>> result.success
        False
        >>> 'not found' in result.error_message.lower()
        True
    """
    start_time = time.perf_counter()
    logger = get_logger(__name__, correlation_id, "parse_file")
    path_obj = Path(file_path)

    logger.info(
        "Starting file parse operation",
        extra={"file_path": str(path_obj), "encoding_override": encoding}
    )

    error_message = None
    if not path_obj.exists():
        error_message = f"File not found: {path_obj}"
    elif not path_obj.is_file():
        error_message = f"Path is not a file: {path_obj}"

    if error_message is None:
        try:
            data = path_obj.read_bytes()
        except PermissionError:
            error_message = f"Permission denied accessing file: {path_obj}"
        except OSError as e:
            error_message = f"Could not read file {path_obj}: {e}"

    if error_message is not None:
        return _create_error_result(
            error_message,
            correlation_id,
            (time.perf_counter() - start_time) * MS_PER_SECOND,
            source_name=str(path_obj),
        )

    return parse_bytes(
        data,
        encoding=encoding,
        config=config,
        correlation_id=correlation_id,
        source_name=str(path_obj),
    )


def _parse_text(
    text: str,
    config: ParserConfig,
    correlation_id: Optional[str],
    source_name: Optional[str] = None,
) -> ParseResult:
    """Run the core parser and wrap its outcome in a ParseResult."""
    start_time = time.perf_counter()
    logger = get_logger(__name__, correlation_id, "parse_text")
    parser = Parser(text, config)

    try:
        root = parser.parse_document()
    except ParseError as e:
        result = ParseResult(
            error=e, correlation_id=correlation_id, source_name=source_name
        )
        position = {"offset": e.position}
        if e.line is not None and e.column is not None:
            position.update({"line": e.line, "column": e.column})
        result.add_diagnostic(
            DiagnosticSeverity.CRITICAL,
            str(e),
            "parser",
            position=position,
            details={"kind": e.kind, **e.details()},
        )
        logger.warning(
            "Parse aborted",
            extra={"error_kind": e.kind, "byte_offset": e.position}
        )
    else:
        result = ParseResult(
            root=root, correlation_id=correlation_id, source_name=source_name
        )

    processing_time = (time.perf_counter() - start_time) * MS_PER_SECOND
    result.performance = PerformanceMetrics(
        processing_time_ms=processing_time,
        characters_processed=len(text),
        bytes_processed=parser.position,
        nodes_created=parser.nodes_created,
    )

    logger.debug(
        "Parse completed",
        extra={
            "success": result.success,
            "nodes_created": parser.nodes_created,
            "processing_time_ms": processing_time,
        }
    )
    return result


def _create_error_result(
    error_message: str,
    correlation_id: Optional[str],
    processing_time: float,
    source_name: Optional[str] = None,
) -> ParseResult:
    """Create a failed result for problems outside the grammar itself."""
    result = ParseResult(correlation_id=correlation_id, source_name=source_name)
    result.performance.processing_time_ms = processing_time
    result.add_diagnostic(
        DiagnosticSeverity.CRITICAL,
        error_message,
        "api_parser"
    )
    return result


class MarkupParser:
    """Configured, reusable parser front end.

    Each call to :meth:`parse` builds a fresh core parser, so one instance may
    be reused for many documents; it only accumulates usage statistics.

    Examples:
        >>> parser = MarkupParser(ParserConfig.lenient())
        >>> parser.parse('<>x</>').success
        True
        >>> parser.statistics['total_parses']
        1
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, self.correlation_id, "markup_parser")

        self._parse_count = 0
        self._successful_parses = 0
        self._total_processing_time = 0.0

        self.logger.debug(
            "MarkupParser initialized",
            extra={"config_name": self.config.name}
        )

    def parse(
        self,
        input_data: InputType,
        encoding: Optional[str] = None,
        correlation_id_override: Optional[str] = None
    ) -> ParseResult:
        """Parse a string, bytes, a path or a readable file object."""
        correlation_id = correlation_id_override or self.correlation_id

        if isinstance(input_data, str):
            result = _parse_text(input_data, self.config, correlation_id)
        elif isinstance(input_data, bytes):
            result = parse_bytes(
                input_data, encoding, self.config, correlation_id
            )
        elif isinstance(input_data, Path):
            result = parse_file(input_data, encoding, self.config, correlation_id)
        elif hasattr(input_data, "read"):
            content = input_data.read()
            if isinstance(content, bytes):
                result = parse_bytes(content, encoding, self.config, correlation_id)
            else:
                result = _parse_text(content, self.config, correlation_id)
        else:
            raise TypeError(
                f"Unsupported input type: {type(input_data).__name__}"
            )

        self._record(result)
        return result

    def parse_file(
        self, file_path: Union[str, Path], encoding: Optional[str] = None
    ) -> ParseResult:
        result = parse_file(file_path, encoding, self.config, self.correlation_id)
        self._record(result)
        return result

    def _record(self, result: ParseResult) -> None:
        self._parse_count += 1
        self._total_processing_time += result.performance.processing_time_ms
        if result.success:
            self._successful_parses += 1

        self.logger.bind(result.correlation_id, source_name=result.source_name).info(
            "Configured parse completed",
            extra={
                "success": result.success,
                "total_parses": self._parse_count,
            }
        )

    def reconfigure(self, config: ParserConfig) -> None:
        """Replace the configuration used for subsequent parses."""
        self.config = config
        self.logger.info(
            "Parser reconfigured", extra={"config_name": config.name}
        )

    @property
    def statistics(self) -> Dict[str, Any]:
        """Get parser usage statistics."""
        return {
            "total_parses": self._parse_count,
            "successful_parses": self._successful_parses,
            "success_rate": (
                self._successful_parses / self._parse_count
                if self._parse_count > 0 else 0.0
            ),
            "total_processing_time_ms": self._total_processing_time,
            "average_processing_time_ms": (
                self._total_processing_time / self._parse_count
                if self._parse_count > 0 else 0.0
            ),
            "correlation_id": self.correlation_id,
        }

    def reset_statistics(self) -> None:
        """Reset parser usage statistics."""
        self._parse_count = 0
        self._total_processing_time = 0.0
        self._successful_parses = 0
