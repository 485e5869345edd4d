"""Tests for integration adapters."""

import xml.etree.ElementTree as ET

import pytest

from mini_markup_parser.api.adapters import (
    AdapterRegistry,
    AdapterType,
    BeautifulSoupAdapter,
    ElementTreeAdapter,
    LxmlAdapter,
    get_adapter,
    list_available_adapters,
    _EtreeAdapter,
)
from mini_markup_parser.api.parser import parse_string
from mini_markup_parser.dom import Node
from mini_markup_parser.shared import ParseResult


SAMPLE = '<root id="r"><item n="1">first</item>between<item n="2">second</item>after</root>'


class TestElementTreeAdapter:
    """Test conversion to and from xml.etree.ElementTree."""

    def setup_method(self):
        self.adapter = ElementTreeAdapter(correlation_id="test-et")

    def test_metadata(self):
        metadata = self.adapter.metadata
        assert metadata.name == "elementtree"
        assert metadata.adapter_type == AdapterType.XML_LIBRARY
        assert self.adapter.is_available()

    def test_to_target(self):
        """Test that text children map onto text and tail."""
        conversion = self.adapter.to_target(parse_string(SAMPLE))

        assert conversion.success
        element = conversion.converted_data
        assert element.tag == "root"
        assert element.get("id") == "r"
        items = list(element)
        assert [item.text for item in items] == ["first", "second"]
        assert items[0].tail == "between"
        assert items[1].tail == "after"
        assert conversion.metadata["element_count"] == 3

    def test_leading_text_becomes_element_text(self):
        conversion = self.adapter.to_target(parse_string("<p>Hello <b>x</b></p>"))
        assert conversion.converted_data.text == "Hello "

    def test_round_trip_preserves_tree(self):
        """Test to_target followed by from_target."""
        original = parse_string(SAMPLE)
        element = self.adapter.to_target(original).converted_data
        back = self.adapter.from_target(element)

        assert back.success
        assert back.converted_data.root == original.root

    def test_from_target_drops_leading_whitespace(self):
        """Test that whitespace between tags is dropped as the parser would."""
        element = ET.fromstring("<a>\n  <b>x</b>\n</a>")
        root = self.adapter.from_target(element).converted_data.root

        assert root == Node.elem("a", {}, [Node.elem("b", {}, [Node.text("x")])])

    def test_from_target_skips_comments(self):
        element = ET.Element("a")
        comment = ET.Comment("note")
        comment.tail = "after"
        element.append(comment)

        root = self.adapter.from_target(element).converted_data.root
        assert root.children == [Node.text("after")]

    def test_from_target_rejects_unrepresentable_names(self):
        element = ET.Element("my-tag")
        conversion = self.adapter.from_target(element)

        assert not conversion.success
        assert "cannot be represented" in conversion.errors[0]

    def test_to_target_rejects_failed_result(self):
        conversion = self.adapter.to_target(parse_string("<a></b>"))

        assert not conversion.success
        assert conversion.converted_data is None
        assert conversion.diagnostics[0].component == "ElementTreeAdapter"

    def test_to_target_rejects_text_root(self):
        conversion = self.adapter.to_target(ParseResult(root=Node.text("x")))
        assert not conversion.success

    def test_from_target_rejects_non_element(self):
        conversion = self.adapter.from_target("not an element")
        assert not conversion.success


class TestLxmlAdapter:
    """Test conversion to and from lxml."""

    def setup_method(self):
        pytest.importorskip("lxml")
        self.adapter = LxmlAdapter()

    def test_round_trip(self):
        original = parse_string(SAMPLE)
        conversion = self.adapter.to_target(original)

        assert conversion.success
        assert conversion.converted_data.tag == "root"
        assert self.adapter.from_target(conversion.converted_data).converted_data.root == original.root

    def test_from_parsed_lxml_document(self):
        from lxml import etree

        element = etree.fromstring("<a x='1'><!-- c --><b>y</b></a>")
        root = self.adapter.from_target(element).converted_data.root

        assert root.attrs == {"x": "1"}
        assert [child.tag_name for child in root.children] == ["b"]


class TestBeautifulSoupAdapter:
    """Test conversion to and from BeautifulSoup."""

    def setup_method(self):
        pytest.importorskip("bs4")
        self.adapter = BeautifulSoupAdapter()

    def test_to_target(self):
        conversion = self.adapter.to_target(parse_string('<div id="x"><p>hi</p></div>'))

        assert conversion.success
        soup = conversion.converted_data
        assert soup.find("div")["id"] == "x"
        assert soup.find("p").get_text() == "hi"

    def test_round_trip(self):
        original = parse_string('<div id="x"><p>hi</p>there</div>')
        soup = self.adapter.to_target(original).converted_data
        back = self.adapter.from_target(soup).converted_data.root

        assert back == original.root

    def test_multiple_top_level_nodes_are_wrapped(self):
        from bs4 import BeautifulSoup

        soup = BeautifulSoup("<a>1</a><b>2</b>", "html.parser")
        root = self.adapter.from_target(soup).converted_data.root

        assert root.tag_name == "html"
        assert [child.tag_name for child in root.children] == ["a", "b"]

    def test_multi_valued_attribute_is_joined(self):
        from bs4 import BeautifulSoup

        soup = BeautifulSoup('<p class="a b">x</p>', "html.parser")
        root = self.adapter.from_target(soup.p).converted_data.root

        assert root.attrs == {"class": "a b"}

    def test_comments_are_skipped(self):
        from bs4 import BeautifulSoup

        soup = BeautifulSoup("<p><!-- note -->text</p>", "html.parser")
        root = self.adapter.from_target(soup).converted_data.root

        assert root.children == [Node.text("text")]

    def test_rejects_other_data(self):
        assert not self.adapter.from_target(["not", "soup"]).success


class TestAdapterRegistry:
    """Test adapter registration and lookup."""

    def test_builtin_adapters_registered(self):
        names = [metadata.name for metadata in list_available_adapters()]
        assert "elementtree" in names

    def test_get_adapter(self):
        adapter = get_adapter("elementtree", correlation_id="req-9")
        assert isinstance(adapter, ElementTreeAdapter)
        assert adapter.correlation_id == "req-9"

    def test_unknown_adapter(self):
        assert get_adapter("nonexistent") is None

    def test_unavailable_adapter_is_hidden(self):
        class MissingAdapter(ElementTreeAdapter):
            @property
            def metadata(self):
                metadata = super().metadata
                metadata.name = "missing"
                return metadata

            def is_available(self):
                return False

        registry = AdapterRegistry()
        registry.register(MissingAdapter)

        assert registry.get_adapter("missing") is None
        assert registry.list_available_adapters() == []


class TestEtreeAdapterBase:
    """Test the shared ElementTree-API adapter base."""

    def test_element_factory_required(self):
        class NoFactoryAdapter(_EtreeAdapter):
            @property
            def metadata(self):
                return ElementTreeAdapter().metadata

            def is_available(self):
                return True

        with pytest.raises(TypeError, match="_element_factory"):
            NoFactoryAdapter()
