"""Integration adapters between parsed trees and other tree libraries.

Each adapter converts a successful :class:`ParseResult` into the target
library's tree (``to_target``) and converts a target tree back into a
:class:`ParseResult` (``from_target``). Third-party libraries are imported
lazily so that an adapter whose library is missing simply reports itself as
unavailable.
"""

import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable, Dict, List, Optional, Type

from mini_markup_parser.dom import ElementData, Node, Text, to_markup
from mini_markup_parser.dom.node import unknown_node_type
from mini_markup_parser.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    ParseResult,
    ParserConfig,
    get_logger,
)
from mini_markup_parser.shared.config import is_name


class AdapterType(Enum):
    """Types of integration adapters."""

    XML_LIBRARY = auto()     # ElementTree, lxml
    HTML_LIBRARY = auto()    # BeautifulSoup


@dataclass
class AdapterMetadata:
    """Metadata about an integration adapter."""

    name: str
    adapter_type: AdapterType
    target_library: str
    description: str


@dataclass
class ConversionResult:
    """Result of a conversion operation."""

    success: bool
    converted_data: Any
    original_data: Any
    conversion_time_ms: float
    errors: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)


def _append_text(children: List[Node], text: Optional[str]) -> None:
    """Add character data the way the parser would see it.

    The parser skips whitespace before every node, so leading whitespace is
    dropped and whitespace-only runs vanish.
    """
    if text:
        text = text.lstrip()
        if text:
            children.append(Node.text(text))


def _check_names(tag_name: str, attr_names: List[str]) -> None:
    for name in [tag_name, *attr_names]:
        if not is_name(name):
            raise ValueError(
                f"Name {name!r} cannot be represented: names are ASCII "
                "letters and digits only"
            )


class IntegrationAdapter(ABC):
    """Abstract base class for all integration adapters."""

    def __init__(
        self,
        correlation_id: Optional[str] = None,
        config: Optional[ParserConfig] = None,
    ) -> None:
        self.correlation_id = correlation_id
        self.config = config or ParserConfig()
        self._logger = get_logger(__name__, correlation_id, self.__class__.__name__)

    @property
    @abstractmethod
    def metadata(self) -> AdapterMetadata:
        """Get adapter metadata."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the target library can be imported."""

    @abstractmethod
    def _convert_to(self, root: Node) -> Any:
        """Build the target representation of ``root``."""

    @abstractmethod
    def _convert_from(self, target_data: Any) -> Node:
        """Build a tree from the target representation."""

    def to_target(self, parse_result: ParseResult) -> ConversionResult:
        """Convert a successful ParseResult to the target format."""
        start_time = time.perf_counter()

        if not parse_result.success or parse_result.root is None:
            return self._create_error_result(
                "ParseResult is not successful or has no tree",
                parse_result,
                (time.perf_counter() - start_time) * 1000
            )

        try:
            converted = self._convert_to(parse_result.root)
        except (ValueError, TypeError) as e:
            return self._create_error_result(
                f"Failed to convert to {self.metadata.target_library}: {e}",
                parse_result,
                (time.perf_counter() - start_time) * 1000
            )

        return ConversionResult(
            success=True,
            converted_data=converted,
            original_data=parse_result,
            conversion_time_ms=(time.perf_counter() - start_time) * 1000,
            metadata={"element_count": parse_result.element_count},
        )

    def from_target(self, target_data: Any) -> ConversionResult:
        """Convert target-format data to a ParseResult."""
        start_time = time.perf_counter()

        try:
            root = self._convert_from(target_data)
        except (ValueError, TypeError, AttributeError) as e:
            return self._create_error_result(
                f"Failed to convert from {self.metadata.target_library}: {e}",
                target_data,
                (time.perf_counter() - start_time) * 1000
            )

        parse_result = ParseResult(root=root, correlation_id=self.correlation_id)
        return ConversionResult(
            success=True,
            converted_data=parse_result,
            original_data=target_data,
            conversion_time_ms=(time.perf_counter() - start_time) * 1000,
            metadata={"element_count": parse_result.element_count},
        )

    def _create_error_result(
        self,
        error_message: str,
        original_data: Any,
        conversion_time_ms: float = 0.0
    ) -> ConversionResult:
        self._logger.warning(
            "Conversion failed", extra={"adapter": self.metadata.name}
        )
        return ConversionResult(
            success=False,
            converted_data=None,
            original_data=original_data,
            conversion_time_ms=conversion_time_ms,
            errors=[error_message],
            diagnostics=[
                DiagnosticEntry(
                    severity=DiagnosticSeverity.ERROR,
                    message=error_message,
                    component=self.__class__.__name__,
                    correlation_id=self.correlation_id
                )
            ]
        )


class _EtreeAdapter(IntegrationAdapter):
    """Shared conversion for libraries implementing the ElementTree API."""

    @abstractmethod
    def _element_factory(self) -> Callable[..., Any]:
        """Return the library's element constructor."""

    def _convert_to(self, root: Node) -> Any:
        if not isinstance(root.node_type, ElementData):
            raise ValueError("Root node is not an element")
        return self._build(root, self._element_factory())

    def _build(self, node: Node, make_element: Callable[..., Any]) -> Any:
        data = node.node_type
        target = make_element(data.tag_name, attrib=dict(data.attrs))
        last_child = None
        for child in node.children:
            if isinstance(child.node_type, Text):
                if last_child is None:
                    target.text = (target.text or "") + child.node_type.content
                else:
                    last_child.tail = (last_child.tail or "") + child.node_type.content
            elif isinstance(child.node_type, ElementData):
                last_child = self._build(child, make_element)
                target.append(last_child)
            else:
                raise unknown_node_type(child)
        return target

    def _convert_from(self, target_data: Any) -> Node:
        if not isinstance(getattr(target_data, "tag", None), str):
            raise TypeError("Target data is not an element")

        children: List[Node] = []
        _append_text(children, target_data.text)
        for child in target_data:
            # Comments and processing instructions have non-string tags;
            # only the text that follows them survives
            if isinstance(child.tag, str):
                children.append(self._convert_from(child))
            _append_text(children, child.tail)

        attrs = {str(key): str(value) for key, value in target_data.attrib.items()}
        _check_names(target_data.tag, list(attrs))
        return Node.elem(target_data.tag, attrs, children)


class ElementTreeAdapter(_EtreeAdapter):
    """Adapter for xml.etree.ElementTree."""

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="elementtree",
            adapter_type=AdapterType.XML_LIBRARY,
            target_library="xml.etree.ElementTree",
            description="Conversion between ParseResult and ElementTree elements",
        )

    def is_available(self) -> bool:
        return True

    def _element_factory(self) -> Callable[..., Any]:
        import xml.etree.ElementTree as ET
        return ET.Element


class LxmlAdapter(_EtreeAdapter):
    """Adapter for lxml.etree."""

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="lxml",
            adapter_type=AdapterType.XML_LIBRARY,
            target_library="lxml",
            description="Conversion between ParseResult and lxml.etree elements",
        )

    def is_available(self) -> bool:
        try:
            import lxml.etree  # noqa: F401
            return True
        except ImportError:
            return False

    def _element_factory(self) -> Callable[..., Any]:
        import lxml.etree
        return lxml.etree.Element


class BeautifulSoupAdapter(IntegrationAdapter):
    """Adapter for BeautifulSoup, using the standard library html.parser backend."""

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="beautifulsoup",
            adapter_type=AdapterType.HTML_LIBRARY,
            target_library="beautifulsoup4",
            description="Conversion between ParseResult and BeautifulSoup documents",
        )

    def is_available(self) -> bool:
        try:
            import bs4  # noqa: F401
            return True
        except ImportError:
            return False

    def _convert_to(self, root: Node) -> Any:
        from bs4 import BeautifulSoup
        return BeautifulSoup(to_markup(root), "html.parser")

    def _convert_from(self, target_data: Any) -> Node:
        from bs4 import BeautifulSoup, Tag

        if isinstance(target_data, BeautifulSoup):
            nodes = self._convert_contents(target_data)
            if len(nodes) == 1:
                return nodes[0]
            return Node.elem(self.config.root_tag, {}, nodes)
        if isinstance(target_data, Tag):
            return self._convert_tag(target_data)
        raise TypeError("Target data is not a BeautifulSoup document or tag")

    def _convert_tag(self, tag: Any) -> Node:
        attrs = {}
        for key, value in tag.attrs.items():
            # Multi-valued attributes such as class come back as lists
            attrs[key] = " ".join(value) if isinstance(value, list) else str(value)
        _check_names(tag.name, list(attrs))
        return Node.elem(tag.name, attrs, self._convert_contents(tag))

    def _convert_contents(self, tag: Any) -> List[Node]:
        from bs4 import NavigableString, Tag
        from bs4.element import PreformattedString

        children: List[Node] = []
        for item in tag.children:
            if isinstance(item, Tag):
                children.append(self._convert_tag(item))
            elif isinstance(item, NavigableString) and not isinstance(
                item, PreformattedString
            ):
                _append_text(children, str(item))
        return children


class AdapterRegistry:
    """Registry for managing integration adapters."""

    def __init__(self) -> None:
        self._adapters: Dict[str, Type[IntegrationAdapter]] = {}
        self._lock = threading.RLock()

    def register(self, adapter_class: Type[IntegrationAdapter]) -> None:
        """Register an adapter class under its metadata name."""
        with self._lock:
            name = adapter_class().metadata.name
            self._adapters[name] = adapter_class

    def get_adapter(
        self,
        adapter_name: str,
        correlation_id: Optional[str] = None,
        config: Optional[ParserConfig] = None,
    ) -> Optional[IntegrationAdapter]:
        """Get an adapter instance by name, ``None`` if unknown or unavailable."""
        with self._lock:
            adapter_class = self._adapters.get(adapter_name)
        if adapter_class is None:
            return None

        instance = adapter_class(correlation_id, config)
        return instance if instance.is_available() else None

    def list_available_adapters(self) -> List[AdapterMetadata]:
        with self._lock:
            classes = list(self._adapters.values())
        instances = [adapter_class() for adapter_class in classes]
        return [
            instance.metadata for instance in instances if instance.is_available()
        ]


_adapter_registry = AdapterRegistry()


def register_adapter(adapter_class: Type[IntegrationAdapter]) -> None:
    """Register an integration adapter globally."""
    _adapter_registry.register(adapter_class)


def get_adapter(
    adapter_name: str,
    correlation_id: Optional[str] = None,
    config: Optional[ParserConfig] = None,
) -> Optional[IntegrationAdapter]:
    """Get a registered adapter instance."""
    return _adapter_registry.get_adapter(adapter_name, correlation_id, config)


def list_available_adapters() -> List[AdapterMetadata]:
    """List all available integration adapters."""
    return _adapter_registry.list_available_adapters()


for _adapter_class in (ElementTreeAdapter, LxmlAdapter, BeautifulSoupAdapter):
    register_adapter(_adapter_class)
