"""Tag descriptor parsing.

A descriptor is ``tag[#id][@meta]...``:

    input              plain tag
    input#name         tag with id
    input@submit       bare meta: sets ``type`` on typed elements (input, button)
    button@like:link   ``key:value`` meta: sets one dataset entry
    a#home@nav:main@rank:1
                       several dataset entries can be chained
"""

import logging

from .constants import TYPED_ELEMENT_SET
from .errors import DescriptorError

logger = logging.getLogger(__name__)


class TagDescriptor:
    __slots__ = ("dataset", "id", "tag", "type")

    def __init__(self, tag, id=None, type=None, dataset=None):
        self.tag = tag
        self.id = id
        self.type = type
        self.dataset = dataset if dataset is not None else {}

    def __eq__(self, other):
        if not isinstance(other, TagDescriptor):
            return NotImplemented
        return (self.tag, self.id, self.type, self.dataset) == (other.tag, other.id, other.type, other.dataset)

    def __repr__(self):
        parts = [repr(self.tag)]
        if self.id:
            parts.append(f"id={self.id!r}")
        if self.type:
            parts.append(f"type={self.type!r}")
        if self.dataset:
            parts.append(f"dataset={self.dataset!r}")
        return f"TagDescriptor({', '.join(parts)})"


def parse_tag(descriptor):
    """Split a tag descriptor into tag name, id, type and dataset entries.

    Args:
        descriptor: String of the form ``tag[#id][@meta]...``

    Returns:
        A TagDescriptor. Unknown tag names are passed through untouched.

    Raises:
        DescriptorError: if the descriptor is not a string or has no tag name.

    """
    if not isinstance(descriptor, str):
        msg = f"tag descriptor must be a string, got {type(descriptor).__name__}"
        raise DescriptorError("bad-descriptor-type", msg)

    head, *metas = descriptor.split("@")
    tag, _, element_id = head.partition("#")
    tag = tag.strip()
    if not tag:
        raise DescriptorError("empty-tag-name", f"no tag name in descriptor {descriptor!r}")

    result = TagDescriptor(tag, id=element_id or None)
    for meta in metas:
        if not meta:
            continue
        key, sep, value = meta.partition(":")
        if sep:
            result.dataset[key] = value
        elif tag in TYPED_ELEMENT_SET:
            result.type = meta
        else:
            logger.debug("ignoring type meta %r on <%s>", meta, tag)
    return result
