"""HTML Element Constants

Element sets consulted by the serializer and the tag descriptor parser.
Lists keep a stable iteration order; the frozenset twins are for lookups.

Usage:
    from chaindom.constants import VOID_ELEMENTS, TYPED_ELEMENTS

References:
    - https://html.spec.whatwg.org/multipage/syntax.html#void-elements
"""

# Elements that never carry an end tag when empty
VOID_ELEMENTS = [
    "area",
    "base",
    "basefont",
    "bgsound",
    "br",
    "col",
    "embed",
    "hr",
    "img",
    "input",
    "keygen",
    "link",
    "meta",
    "param",
    "source",
    "track",
    "wbr",
]

# Elements whose bare `@meta` descriptor suffix sets the `type` attribute
TYPED_ELEMENTS = [
    "button",
    "input",
]

# Elements whose text content is rendered verbatim when pretty printing
PREFORMATTED_ELEMENTS = [
    "pre",
    "textarea",
]

# Pseudo tag names used by the live tree for non-element nodes
TEXT_NODE_NAME = "#text"
COMMENT_NODE_NAME = "#comment"

# Builder node kinds accepted by `next(tag, kind)` / `down(tag, kind)`
KIND_ELEMENT = "element"
KIND_TEXT = "text"
KIND_COMMENT = "comment"

VOID_ELEMENT_SET = frozenset(VOID_ELEMENTS)
TYPED_ELEMENT_SET = frozenset(TYPED_ELEMENTS)
PREFORMATTED_ELEMENT_SET = frozenset(PREFORMATTED_ELEMENTS)
