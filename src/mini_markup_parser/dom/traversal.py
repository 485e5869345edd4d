"""Navigation helpers over a parsed tree.

All walks are iterative so that documents nested up to the parser's depth
limit can be inspected without growing the interpreter stack.
"""

from typing import Any, Dict, Iterator, List, Optional, Tuple

from mini_markup_parser.dom.node import ElementData, Node, Text, unknown_node_type


def iter_nodes(root: Node) -> Iterator[Node]:
    """Yield ``root`` and all of its descendants in document order."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def iter_with_depth(root: Node) -> Iterator[Tuple[Node, int]]:
    """Yield ``(node, depth)`` pairs in document order, root at depth 0."""
    stack = [(root, 0)]
    while stack:
        node, depth = stack.pop()
        yield node, depth
        stack.extend((child, depth + 1) for child in reversed(node.children))


def iter_elements(root: Node) -> Iterator[Node]:
    """Yield element nodes only, in document order."""
    return (node for node in iter_nodes(root) if node.is_element)


def find(root: Node, tag_name: str) -> Optional[Node]:
    """Find the first element (including ``root``) with a matching tag name."""
    return next(
        (node for node in iter_elements(root) if node.tag_name == tag_name),
        None,
    )


def find_all(root: Node, tag_name: str) -> List[Node]:
    """Find all elements (including ``root``) with a matching tag name."""
    return [node for node in iter_elements(root) if node.tag_name == tag_name]


def find_by_attribute(
    root: Node, name: str, value: Optional[str] = None
) -> List[Node]:
    """Find elements by attribute name and optionally value."""
    return [
        node for node in iter_elements(root)
        if name in node.attrs and (value is None or node.attrs[name] == value)
    ]


def get_element_by_id(root: Node, id_value: str) -> Optional[Node]:
    """Find element by ID attribute value."""
    return next(iter(find_by_attribute(root, "id", id_value)), None)


def text_content(root: Node) -> str:
    """Concatenate the character data of every text node under ``root``."""
    parts = []
    for node in iter_nodes(root):
        if isinstance(node.node_type, Text):
            parts.append(node.node_type.content)
        elif not isinstance(node.node_type, ElementData):
            raise unknown_node_type(node)
    return "".join(parts)


def tree_depth(root: Node) -> int:
    """Depth of the deepest node, a lone root has depth 0."""
    return max(depth for _, depth in iter_with_depth(root))


def tree_statistics(root: Node) -> Dict[str, Any]:
    """Count elements, text nodes and attributes, and measure depth."""
    element_count = 0
    text_count = 0
    attribute_count = 0
    max_depth = 0
    tag_distribution: Dict[str, int] = {}

    for node, depth in iter_with_depth(root):
        max_depth = max(max_depth, depth)
        if isinstance(node.node_type, ElementData):
            element_count += 1
            attribute_count += len(node.node_type.attrs)
            tag = node.node_type.tag_name
            tag_distribution[tag] = tag_distribution.get(tag, 0) + 1
        elif isinstance(node.node_type, Text):
            text_count += 1
        else:
            raise unknown_node_type(node)

    return {
        "element_count": element_count,
        "text_count": text_count,
        "attribute_count": attribute_count,
        "max_depth": max_depth,
        "tag_distribution": tag_distribution,
    }
