"""Document tree model and helpers.

Key Components:
    Node: One vertex of the tree, carrying a Text or ElementData payload
    Text: Raw character data payload
    ElementData: Tag name and attribute payload
"""

from .node import AttrMap, ElementData, Node, NodeType, Text
from .render import debug_dump, from_dict, to_dict, to_markup
from .traversal import (
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

__all__ = [
    "AttrMap",
    "ElementData",
    "Node",
    "NodeType",
    "Text",
    "debug_dump",
    "from_dict",
    "to_dict",
    "to_markup",
    "find",
    "find_all",
    "find_by_attribute",
    "get_element_by_id",
    "iter_elements",
    "iter_nodes",
    "text_content",
    "tree_depth",
    "tree_statistics",
]
