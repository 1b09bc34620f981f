"""Live tree used as the rendering target of the builder.

A small in-memory analogue of a browser DOM. Every builder node owns exactly
one of these nodes; the builder only relies on the module-level primitives at
the bottom of this file (create, insert after, prepend, remove, serialize),
the element mutation helpers and event dispatch.
"""

import logging
import re
from collections.abc import MutableMapping

from .constants import COMMENT_NODE_NAME, TEXT_NODE_NAME
from .errors import StructureError
from .serialize import to_html

logger = logging.getLogger(__name__)

_CAMEL_RE = re.compile(r"[A-Z]")
_KEBAB_RE = re.compile(r"-([a-z])")


def camel_to_kebab(name):
    """Convert a dataset/style property name (``fooBar``) to attribute form (``foo-bar``)."""
    return _CAMEL_RE.sub(lambda m: "-" + m.group(0).lower(), name)


def kebab_to_camel(name):
    return _KEBAB_RE.sub(lambda m: m.group(1).upper(), name)


class DomNode:
    """Represents a live tree node.
    - name: tag name for elements, '#text' / '#comment' otherwise
    - parent: reference to parent node (or None when detached)
    - children: list of child nodes
    - next_sibling/previous_sibling: references to adjacent nodes in the tree.
    """

    __slots__ = (
        "children",
        "name",
        "next_sibling",
        "parent",
        "previous_sibling",
    )

    def __init__(self, name):
        if name is None or name == "":
            msg = "Empty name passed to DomNode constructor"
            raise ValueError(msg)
        self.name = name
        self.parent = None
        self.children = []
        self.next_sibling = None
        self.previous_sibling = None

    @property
    def is_element(self):
        return False

    def _unlink(self):
        """Detach self from its current parent, fixing up sibling links."""
        parent = self.parent
        if parent is None:
            return
        if self.previous_sibling:
            self.previous_sibling.next_sibling = self.next_sibling
        if self.next_sibling:
            self.next_sibling.previous_sibling = self.previous_sibling
        parent.children.remove(self)
        self.parent = None
        self.next_sibling = None
        self.previous_sibling = None

    def _would_create_circular_reference(self, child):
        """Check if adding child would create a circular reference."""
        current = self
        while current is not None:
            if current is child:
                return True
            current = current.parent
        return False

    def _relink(self, index):
        """Refresh sibling links around children[index]."""
        child = self.children[index]
        child.previous_sibling = self.children[index - 1] if index > 0 else None
        child.next_sibling = self.children[index + 1] if index + 1 < len(self.children) else None
        if child.previous_sibling:
            child.previous_sibling.next_sibling = child
        if child.next_sibling:
            child.next_sibling.previous_sibling = child

    def insert_child_at(self, index, child):
        """Insert a child at the specified index (out-of-range appends)."""
        if self._would_create_circular_reference(child):
            msg = f"Adding {child.name} as child of {self.name} would create circular reference"
            raise StructureError("circular-reference", msg)

        child._unlink()
        if index < 0 or index > len(self.children):
            index = len(self.children)
        child.parent = self
        self.children.insert(index, child)
        self._relink(index)

    def append_child(self, child):
        self.insert_child_at(len(self.children), child)

    def prepend_child(self, child):
        self.insert_child_at(0, child)

    def insert_before(self, new_node, reference_node):
        """Insert new_node right before reference_node; append when reference is None."""
        if reference_node is None:
            self.append_child(new_node)
            return
        if reference_node.parent is not self:
            msg = f"{reference_node.name} is not a child of {self.name}"
            raise StructureError("not-a-child", msg)
        if new_node is reference_node:
            return
        # Detach first: index of the reference may shift when new_node is an earlier sibling
        new_node._unlink()
        self.insert_child_at(self.children.index(reference_node), new_node)

    def insert_after(self, new_node, reference_node):
        """Insert new_node right after reference_node."""
        if reference_node.parent is not self:
            msg = f"{reference_node.name} is not a child of {self.name}"
            raise StructureError("not-a-child", msg)
        if new_node is reference_node:
            return
        self.insert_before(new_node, reference_node.next_sibling)

    def remove_child(self, child):
        """Remove a child node, updating all sibling links.

        Args:
            child: The DomNode to remove

        """
        if child.parent is not self:
            return
        child._unlink()

    def remove_all_children(self):
        for child in list(self.children):
            child._unlink()

    def iter_tree(self):
        """Traverse depth-first, yielding self then descendants."""
        yield self
        for child in self.children:
            yield from child.iter_tree()

    @property
    def text_content(self):
        return "".join(node.data for node in self.iter_tree() if node.name == TEXT_NODE_NAME)

    def __str__(self):
        return to_html(self)


class CharacterDataNode(DomNode):
    """Leaf node holding character data (text and comments)."""

    __slots__ = ("data",)

    def __init__(self, name, data=""):
        super().__init__(name)
        self.data = "" if data is None else str(data)

    def append_data(self, data):
        self.data += str(data)

    @property
    def text_content(self):
        return self.data

    @text_content.setter
    def text_content(self, value):
        self.data = "" if value is None else str(value)

    def __repr__(self):
        return f"{type(self).__name__}({self.data[:30]!r})"


class TextNode(CharacterDataNode):
    __slots__ = ()

    def __init__(self, data=""):
        super().__init__(TEXT_NODE_NAME, data)


class CommentNode(CharacterDataNode):
    __slots__ = ()

    def __init__(self, data=""):
        super().__init__(COMMENT_NODE_NAME, data)


class Event:
    """An event delivered synchronously by ``ElementNode.dispatch_event``."""

    __slots__ = ("bubbles", "current_target", "detail", "propagation_stopped", "target", "type")

    def __init__(self, type, detail=None, bubbles=True):
        self.type = type
        self.detail = detail
        self.bubbles = bubbles
        self.target = None
        self.current_target = None
        self.propagation_stopped = False

    def stop_propagation(self):
        self.propagation_stopped = True

    def __repr__(self):
        return f"Event({self.type!r})"


class ClassList:
    """Token list view over an element's ``class`` attribute."""

    __slots__ = ("_element",)

    def __init__(self, element):
        self._element = element

    def _tokens(self):
        return (self._element.attrs.get("class") or "").split()

    def _store(self, tokens):
        if tokens:
            self._element.attrs["class"] = " ".join(tokens)
        else:
            self._element.attrs.pop("class", None)

    def add(self, *names):
        tokens = self._tokens()
        for name in names:
            if name not in tokens:
                tokens.append(name)
        self._store(tokens)

    def remove(self, *names):
        self._store([t for t in self._tokens() if t not in names])

    def toggle(self, name, force=None):
        present = name in self._tokens()
        wanted = (not present) if force is None else bool(force)
        if wanted and not present:
            self.add(name)
        elif not wanted and present:
            self.remove(name)
        return wanted

    def contains(self, name):
        return name in self._tokens()

    __contains__ = contains

    def __iter__(self):
        return iter(self._tokens())

    def __len__(self):
        return len(self._tokens())


class _AttributeMapping(MutableMapping):
    __slots__ = ("_element",)

    def __init__(self, element):
        self._element = element

    def __repr__(self):
        return f"{type(self).__name__}({dict(self)!r})"


class Dataset(_AttributeMapping):
    """``data-*`` attributes addressed by camelCase name, like ``HTMLElement.dataset``."""

    __slots__ = ()

    def __getitem__(self, name):
        return self._element.attrs["data-" + camel_to_kebab(name)]

    def __setitem__(self, name, value):
        self._element.attrs["data-" + camel_to_kebab(name)] = str(value)

    def __delitem__(self, name):
        del self._element.attrs["data-" + camel_to_kebab(name)]

    def __iter__(self):
        return (kebab_to_camel(k[5:]) for k in list(self._element.attrs) if k.startswith("data-"))

    def __len__(self):
        return sum(1 for k in self._element.attrs if k.startswith("data-"))


class Style(_AttributeMapping):
    """Inline ``style`` attribute as an ordered property mapping."""

    __slots__ = ()

    def _read(self):
        props = {}
        for decl in (self._element.attrs.get("style") or "").split(";"):
            prop, sep, value = decl.partition(":")
            if sep and prop.strip():
                props[prop.strip()] = value.strip()
        return props

    def _write(self, props):
        if props:
            self._element.attrs["style"] = "; ".join(f"{k}: {v}" for k, v in props.items()) + ";"
        else:
            self._element.attrs.pop("style", None)

    def __getitem__(self, name):
        return self._read()[camel_to_kebab(name)]

    def __setitem__(self, name, value):
        props = self._read()
        props[camel_to_kebab(name)] = str(value)
        self._write(props)

    def __delitem__(self, name):
        props = self._read()
        del props[camel_to_kebab(name)]
        self._write(props)

    def __iter__(self):
        return iter(self._read())

    def __len__(self):
        return len(self._read())


class ElementNode(DomNode):
    __slots__ = ("attrs", "listeners")

    def __init__(self, name, attrs=None):
        super().__init__(name)
        self.attrs = dict(attrs) if attrs else {}
        self.listeners = {}

    @property
    def is_element(self):
        return True

    def get_attribute(self, name):
        return self.attrs.get(name)

    def set_attribute(self, name, value):
        self.attrs[name] = "" if value is None else str(value)

    def remove_attribute(self, name):
        self.attrs.pop(name, None)

    def has_attribute(self, name):
        return name in self.attrs

    @property
    def id(self):
        return self.attrs.get("id")

    @id.setter
    def id(self, value):
        self.set_attribute("id", value)

    @property
    def class_list(self):
        return ClassList(self)

    @property
    def dataset(self):
        return Dataset(self)

    @property
    def style(self):
        return Style(self)

    @property
    def text_content(self):
        return super().text_content

    @text_content.setter
    def text_content(self, value):
        self.remove_all_children()
        if value:
            self.append_child(TextNode(value))

    def add_event_listener(self, type, handler):
        handlers = self.listeners.setdefault(type, [])
        if handler not in handlers:
            handlers.append(handler)

    def remove_event_listener(self, type, handler):
        handlers = self.listeners.get(type)
        if handlers and handler in handlers:
            handlers.remove(handler)
            if not handlers:
                del self.listeners[type]

    def dispatch_event(self, event):
        """Deliver event to self, then bubble through ancestors.

        Listeners run synchronously. Each node's listener list is copied before
        delivery, so a listener may add or remove listeners (or rebuild parts of
        the tree) without disturbing the dispatch in progress.

        Returns:
            True unless a listener stopped propagation.

        """
        event.target = self
        current = self
        while current is not None:
            handlers = current.listeners.get(event.type) if current.is_element else None
            if handlers:
                event.current_target = current
                logger.debug("dispatch: %s on <%s>", event.type, current.name)
                for handler in list(handlers):
                    handler(event)
            if event.propagation_stopped or not event.bubbles:
                break
            current = current.parent
        event.current_target = None
        return not event.propagation_stopped

    def __repr__(self):
        return f"ElementNode(<{self.name}>, children={len(self.children)})"


# Rendering target primitives consumed by the builder


def create_element(tag):
    return ElementNode(tag)


def create_text(data):
    return TextNode(data)


def create_comment(data):
    return CommentNode(data)


def insert_after(reference, node):
    """Place node directly after reference inside reference's parent."""
    if reference.parent is None:
        msg = f"cannot insert after detached <{reference.name}>"
        raise StructureError("detached-reference", msg)
    reference.parent.insert_after(node, reference)


def prepend_child(parent, node):
    parent.prepend_child(node)


def append_child(parent, node):
    parent.append_child(node)


def remove_from_parent(node):
    if node.parent is not None:
        node.parent.remove_child(node)


def serialize_subtree(node):
    return to_html(node)
