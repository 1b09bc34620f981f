import logging

from .chain import Chain
from .dom import CommentNode, DomNode, ElementNode, Event, TextNode
from .errors import BoundaryError, CapabilityError, ChainError, DescriptorError, StructureError
from .nodes import CharacterData, Comment, Element, Node, Text, build, create_node
from .serialize import to_html, to_test_format
from .tags import TagDescriptor, parse_tag

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "BoundaryError",
    "CapabilityError",
    "Chain",
    "ChainError",
    "CharacterData",
    "Comment",
    "CommentNode",
    "DescriptorError",
    "DomNode",
    "Element",
    "ElementNode",
    "Event",
    "Node",
    "StructureError",
    "TagDescriptor",
    "Text",
    "TextNode",
    "build",
    "create_node",
    "parse_tag",
    "to_html",
    "to_test_format",
]
