"""Textual renderings of a parsed tree.

``debug_dump`` is the human-readable tree listing printed by the command-line
tool, ``to_markup`` writes the tree back out as source text, and ``to_dict``
produces JSON-ready data.
"""

import json
from typing import Any, Dict, List

from mini_markup_parser.dom.node import ElementData, Node, Text, unknown_node_type

DUMP_INDENT = "  "


def _format_attrs(attrs: Dict[str, str]) -> str:
    items = ", ".join(
        f"{json.dumps(key)}: {json.dumps(value)}"
        for key, value in sorted(attrs.items())
    )
    return "{" + items + "}"


def debug_dump(root: Node, indent: str = DUMP_INDENT) -> str:
    """Render an indented listing of the tree, one node per line.

    Example:
        >>> from mini_markup_parser.parsing import parse
        >>> print(debug_dump(parse('<a x="1">hi</a>')))
        Element(a, {"x": "1"})
          Text("hi")
    """
    lines: List[str] = []

    def visit(node: Node, depth: int) -> None:
        prefix = indent * depth
        if isinstance(node.node_type, Text):
            lines.append(f"{prefix}Text({json.dumps(node.node_type.content)})")
        elif isinstance(node.node_type, ElementData):
            data = node.node_type
            lines.append(f"{prefix}Element({data.tag_name}, {_format_attrs(data.attrs)})")
            for child in node.children:
                visit(child, depth + 1)
        else:
            raise unknown_node_type(node)

    visit(root, 0)
    return "\n".join(lines)


def _quote_attr_value(value: str) -> str:
    if '"' not in value:
        return f'"{value}"'
    if "'" not in value:
        return f"'{value}'"
    raise ValueError(
        f"Attribute value {value!r} contains both quote characters and "
        "cannot be written without entities"
    )


def to_markup(root: Node) -> str:
    """Serialize the tree back to markup.

    Whitespace-only regions between tags are not part of the tree, so the
    output is compact; parsing it yields a tree equal to ``root``.

    Raises:
        ValueError: if a text node contains ``<`` or an attribute value
            contains both kinds of quote, neither of which the grammar can
            express.
    """
    parts: List[str] = []

    def visit(node: Node) -> None:
        if isinstance(node.node_type, Text):
            content = node.node_type.content
            if "<" in content:
                raise ValueError(f"Text content {content!r} contains '<'")
            parts.append(content)
        elif isinstance(node.node_type, ElementData):
            data = node.node_type
            parts.append(f"<{data.tag_name}")
            for key, value in data.attrs.items():
                parts.append(f" {key}={_quote_attr_value(value)}")
            parts.append(">")
            for child in node.children:
                visit(child)
            parts.append(f"</{data.tag_name}>")
        else:
            raise unknown_node_type(node)

    visit(root)
    return "".join(parts)


def to_dict(root: Node) -> Dict[str, Any]:
    """Convert the tree to nested dictionaries."""
    if isinstance(root.node_type, Text):
        return {"type": "text", "content": root.node_type.content}
    if isinstance(root.node_type, ElementData):
        return {
            "type": "element",
            "tag_name": root.node_type.tag_name,
            "attrs": dict(root.node_type.attrs),
            "children": [to_dict(child) for child in root.children],
        }
    raise unknown_node_type(root)


def from_dict(data: Dict[str, Any]) -> Node:
    """Rebuild a tree from the output of :func:`to_dict`."""
    node_kind = data.get("type")
    if node_kind == "text":
        return Node.text(data["content"])
    if node_kind == "element":
        return Node.elem(
            data["tag_name"],
            dict(data.get("attrs", {})),
            [from_dict(child) for child in data.get("children", [])],
        )
    raise ValueError(f"Unknown node type in dictionary: {node_kind!r}")
