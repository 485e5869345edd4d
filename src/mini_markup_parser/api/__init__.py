"""Result-returning API and integration adapters."""

from .adapters import (
    AdapterMetadata,
    AdapterType,
    BeautifulSoupAdapter,
    ConversionResult,
    ElementTreeAdapter,
    IntegrationAdapter,
    LxmlAdapter,
    get_adapter,
    list_available_adapters,
    register_adapter,
)
from .parser import (
    MarkupParser,
    decode_source,
    parse_bytes,
    parse_file,
    parse_string,
)

__all__ = [
    "AdapterMetadata",
    "AdapterType",
    "BeautifulSoupAdapter",
    "ConversionResult",
    "ElementTreeAdapter",
    "IntegrationAdapter",
    "LxmlAdapter",
    "get_adapter",
    "list_available_adapters",
    "register_adapter",
    "MarkupParser",
    "decode_source",
    "parse_bytes",
    "parse_file",
    "parse_string",
]
