"""Tests for the tree model."""

from dataclasses import FrozenInstanceError

import pytest

from mini_markup_parser.dom import ElementData, Node, Text
from mini_markup_parser.dom.node import unknown_node_type


class TestNodeConstruction:
    """Test node factory methods."""

    def test_text_node(self):
        """Test building a text node."""
        node = Node.text("hello")

        assert node.children == []
        assert node.node_type == Text("hello")
        assert node.is_text
        assert not node.is_element

    def test_element_node(self):
        """Test building an element node with children."""
        child = Node.text("x")
        node = Node.elem("div", {"id": "main"}, [child])

        assert node.node_type == ElementData("div", {"id": "main"})
        assert node.children == [child]
        assert node.is_element
        assert not node.is_text

    def test_element_data_defaults_to_no_attributes(self):
        """Test ElementData default attribute map."""
        assert ElementData("p").attrs == {}

    def test_text_payload_is_immutable(self):
        """Test that Text cannot be modified after construction."""
        text = Text("fixed")
        with pytest.raises(FrozenInstanceError):
            text.content = "changed"

    def test_structural_equality(self):
        """Test that equal trees compare equal."""
        first = Node.elem("a", {"x": "1"}, [Node.text("hi")])
        second = Node.elem("a", {"x": "1"}, [Node.text("hi")])
        third = Node.elem("a", {"x": "2"}, [Node.text("hi")])

        assert first == second
        assert first != third


class TestNodeAccessors:
    """Test variant-aware convenience properties."""

    def test_element_accessors(self):
        """Test accessors on an element node."""
        node = Node.elem("span", {"class": "c"}, [])

        assert node.tag_name == "span"
        assert node.attrs == {"class": "c"}
        assert node.content is None

    def test_text_accessors(self):
        """Test accessors on a text node."""
        node = Node.text("words")

        assert node.tag_name is None
        assert node.attrs == {}
        assert node.content == "words"

    def test_unknown_node_type_error(self):
        """Test the error raised for a payload outside the closed set."""
        node = Node(children=[], node_type="not a payload")
        error = unknown_node_type(node)

        assert isinstance(error, TypeError)
        assert "str" in str(error)
