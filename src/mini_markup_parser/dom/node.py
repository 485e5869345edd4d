"""Tree model produced by the parser.

A document is a tree of :class:`Node` values. Each node carries exactly one of
two payloads, :class:`Text` or :class:`ElementData`, in its ``node_type``
field. The set of payloads is closed: code that inspects a node handles both
variants and treats anything else as a programming error.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

AttrMap = Dict[str, str]


@dataclass(frozen=True)
class Text:
    """Raw character data."""

    content: str


@dataclass
class ElementData:
    """Tag name and attributes of an element node."""

    tag_name: str
    attrs: AttrMap = field(default_factory=dict)


NodeType = Union[Text, ElementData]


@dataclass
class Node:
    """One vertex of the document tree.

    Children are kept in document order and are always empty for text nodes.
    Nodes are built bottom-up by the parser and never mutated afterwards.
    """

    children: List["Node"]
    node_type: NodeType

    @classmethod
    def text(cls, data: str) -> "Node":
        """Build a text node."""
        return cls(children=[], node_type=Text(data))

    @classmethod
    def elem(
        cls, tag_name: str, attrs: AttrMap, children: List["Node"]
    ) -> "Node":
        """Build an element node from already-constructed children."""
        return cls(children=children, node_type=ElementData(tag_name, attrs))

    @property
    def is_text(self) -> bool:
        return isinstance(self.node_type, Text)

    @property
    def is_element(self) -> bool:
        return isinstance(self.node_type, ElementData)

    @property
    def tag_name(self) -> Optional[str]:
        """Tag name for element nodes, ``None`` for text nodes."""
        if isinstance(self.node_type, ElementData):
            return self.node_type.tag_name
        return None

    @property
    def attrs(self) -> AttrMap:
        """Attribute mapping for element nodes, empty for text nodes."""
        if isinstance(self.node_type, ElementData):
            return self.node_type.attrs
        return {}

    @property
    def content(self) -> Optional[str]:
        """Character data for text nodes, ``None`` for element nodes."""
        if isinstance(self.node_type, Text):
            return self.node_type.content
        return None


def unknown_node_type(node: Node) -> TypeError:
    """Error for a node whose payload is neither Text nor ElementData."""
    return TypeError(
        f"Unknown node type: {type(node.node_type).__name__}"
    )
