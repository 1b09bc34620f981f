"""HTML serialization utilities for live tree nodes."""

from __future__ import annotations

from typing import Any

from . import flags
from .constants import COMMENT_NODE_NAME, PREFORMATTED_ELEMENT_SET, TEXT_NODE_NAME, VOID_ELEMENT_SET


def _escape_text(text: str | None) -> str:
    if not text:
        return ""
    return str(text).replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _escape_attr_value(value: str | None) -> str:
    if value is None:
        return ""
    return str(value).replace("&", "&amp;").replace('"', "&quot;")


def serialize_start_tag(name: str, attrs: dict[str, str | None] | None) -> str:
    parts: list[str] = ["<", name]
    for key, value in (attrs or {}).items():
        # Boolean attributes are stored with an empty value
        if value is None or value == "":
            parts.extend([" ", key])
            continue
        parts.extend([" ", key, '="', _escape_attr_value(value), '"'])
    parts.append(">")
    return "".join(parts)


def serialize_end_tag(name: str) -> str:
    return f"</{name}>"


def to_html(node: Any, indent: int = 0, indent_size: int | None = None, *, pretty: bool = False) -> str:
    """Convert node to an HTML string.

    With ``pretty=False`` (the default) the result is the exact outer markup of
    the node, the same string a browser reports as ``outerHTML``. With
    ``pretty=True`` block children are put on their own indented lines.
    """
    if indent_size is None:
        indent_size = flags.PRETTY_INDENT
    if not pretty:
        parts: list[str] = []
        _write_compact(node, parts)
        return "".join(parts)
    return _node_to_html(node, indent, indent_size, in_pre=False)


def _write_compact(node: Any, parts: list[str]) -> None:
    name: str = node.name
    if name == TEXT_NODE_NAME:
        parts.append(_escape_text(node.data))
        return
    if name == COMMENT_NODE_NAME:
        parts.append(f"<!--{node.data or ''}-->")
        return

    parts.append(serialize_start_tag(name, node.attrs))
    # A void element that was given children keeps its end tag so no content is lost
    if name in VOID_ELEMENT_SET and not node.children:
        return
    for child in node.children:
        _write_compact(child, parts)
    parts.append(serialize_end_tag(name))


def _node_to_html(node: Any, indent: int, indent_size: int, *, in_pre: bool) -> str:
    """Helper to convert a node to pretty HTML."""
    prefix = " " * (indent * indent_size) if not in_pre else ""
    name: str = node.name

    # Text node
    if name == TEXT_NODE_NAME:
        if in_pre:
            return _escape_text(node.data)
        text = node.data.strip() if node.data else ""
        if text:
            return f"{prefix}{_escape_text(text)}"
        return ""

    # Comment node
    if name == COMMENT_NODE_NAME:
        return f"{prefix}<!--{node.data or ''}-->"

    open_tag = serialize_start_tag(name, node.attrs)
    children = node.children
    if not children:
        if name in VOID_ELEMENT_SET:
            return f"{prefix}{open_tag}"
        return f"{prefix}{open_tag}{serialize_end_tag(name)}"

    content_pre = in_pre or name in PREFORMATTED_ELEMENT_SET
    if content_pre:
        inner = "".join(_node_to_html(child, 0, indent_size, in_pre=True) for child in children)
        return f"{prefix}{open_tag}{inner}{serialize_end_tag(name)}"

    # Check if all children are text-only (inline rendering)
    if all(c.name == TEXT_NODE_NAME for c in children):
        text = "".join(c.data or "" for c in children)
        return f"{prefix}{open_tag}{_escape_text(text)}{serialize_end_tag(name)}"

    # Render with child indentation
    parts = [f"{prefix}{open_tag}"]
    for child in children:
        child_html = _node_to_html(child, indent + 1, indent_size, in_pre=False)
        if child_html:
            parts.append(child_html)
    parts.append(f"{prefix}{serialize_end_tag(name)}")
    return "\n".join(parts)


def to_test_format(node: Any, indent: int = 0) -> str:
    """Convert node to html5lib test format string.

    Uses '| ' prefixes and two-space indentation per level, one line per node
    and per attribute (attributes sorted), which makes tree shapes easy to
    compare in tests.
    """
    if node.name == COMMENT_NODE_NAME:
        return f"| {' ' * indent}<!-- {node.data or ''} -->"

    if node.name == TEXT_NODE_NAME:
        return f'| {" " * indent}"{node.data or ""}"'

    sections = [f"| {' ' * indent}<{node.name}>"]
    padding = " " * (indent + 2)
    for key, value in sorted(node.attrs.items()):
        sections.append(f'| {padding}{key}="{value or ""}"')
    sections.extend(to_test_format(child, indent + 2) for child in node.children)
    return "\n".join(sections)
