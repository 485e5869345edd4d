"""Tests for tree navigation helpers."""

import pytest

from mini_markup_parser.dom import (
    Node,
    find,
    find_all,
    find_by_attribute,
    get_element_by_id,
    iter_elements,
    iter_nodes,
    text_content,
    tree_depth,
    tree_statistics,
)
from mini_markup_parser.dom.traversal import iter_with_depth
from mini_markup_parser.parsing import parse


@pytest.fixture
def document():
    """Small document used across traversal tests."""
    return parse(
        '<body><div id="a" class="box"><p>one</p><p>two</p></div>'
        '<div id="b">three</div></body>'
    )


class TestIteration:
    """Test document-order iteration."""

    def test_iter_nodes_document_order(self, document):
        """Test that nodes come back in document order."""
        labels = [node.tag_name or node.content for node in iter_nodes(document)]
        assert labels == ["body", "div", "p", "one", "p", "two", "div", "three"]

    def test_iter_elements_skips_text(self, document):
        """Test that only elements are yielded."""
        tags = [node.tag_name for node in iter_elements(document)]
        assert tags == ["body", "div", "p", "p", "div"]

    def test_iter_with_depth(self):
        """Test depth annotations."""
        root = parse("<a><b>x</b></a>")
        depths = [depth for _, depth in iter_with_depth(root)]
        assert depths == [0, 1, 2]

    def test_deep_tree_does_not_recurse(self):
        """Test iteration over a tree deeper than the recursion limit."""
        node = Node.text("leaf")
        for _ in range(5000):
            node = Node.elem("d", {}, [node])

        assert tree_depth(node) == 5000
        assert text_content(node) == "leaf"


class TestSearch:
    """Test element lookup helpers."""

    def test_find_first_match(self, document):
        """Test find returns the first matching element."""
        found = find(document, "div")
        assert found is not None
        assert found.attrs["id"] == "a"

    def test_find_includes_root(self, document):
        """Test that the root itself can match."""
        assert find(document, "body") is document

    def test_find_missing(self, document):
        """Test find returns None when nothing matches."""
        assert find(document, "table") is None

    def test_find_all(self, document):
        """Test collecting every match."""
        assert [p.children[0].content for p in find_all(document, "p")] == ["one", "two"]

    def test_find_by_attribute_name(self, document):
        """Test attribute presence search."""
        assert len(find_by_attribute(document, "id")) == 2

    def test_find_by_attribute_value(self, document):
        """Test attribute value search."""
        matches = find_by_attribute(document, "class", "box")
        assert [m.attrs["id"] for m in matches] == ["a"]

    def test_get_element_by_id(self, document):
        """Test id lookup."""
        element = get_element_by_id(document, "b")
        assert element is not None
        assert text_content(element) == "three"
        assert get_element_by_id(document, "zzz") is None


class TestMeasurements:
    """Test aggregate measurements."""

    def test_text_content(self, document):
        """Test concatenated text."""
        assert text_content(document) == "onetwothree"

    def test_tree_depth_of_single_node(self):
        """Test that a lone root has depth zero."""
        assert tree_depth(Node.text("x")) == 0

    def test_tree_statistics(self, document):
        """Test element, text and attribute counts."""
        stats = tree_statistics(document)

        assert stats["element_count"] == 5
        assert stats["text_count"] == 3
        assert stats["attribute_count"] == 3
        assert stats["max_depth"] == 3
        assert stats["tag_distribution"] == {"body": 1, "div": 2, "p": 2}

    def test_statistics_reject_unknown_payload(self):
        """Test that an unknown payload is reported."""
        root = Node.elem("a", {}, [Node(children=[], node_type=None)])
        with pytest.raises(TypeError):
            tree_statistics(root)
