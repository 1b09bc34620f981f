"""Builder nodes and the cursor navigation protocol.

Every call returns a node, the new cursor::

    ul = build("ul#menu")
    ul.down("li").text("one").next("li").text("two").up().up().attr("role", "list")

Mutations return the node they were called on; ``next``/``down`` return the
node they created or spliced in; ``up`` returns the parent, except right after
``text()`` or ``down([])``, where it returns the node itself.
"""

import json
import logging
from collections.abc import Mapping
from functools import reduce

from . import dom
from .chain import Chain
from .constants import KIND_COMMENT, KIND_ELEMENT, KIND_TEXT
from .errors import BoundaryError, CapabilityError, DescriptorError
from .gate import attach_at_chain_position, set_mounted, when_mounted
from .serialize import to_html
from .tags import parse_tag

logger = logging.getLogger(__name__)

_NO_KEY = object()


def create_node(descriptor, kind=None):
    """Create a standalone node of the variant named by kind.

    For elements descriptor is a tag descriptor; for text and comment nodes it
    is the character data.
    """
    if kind is None or kind == KIND_ELEMENT:
        return Element(descriptor)
    if kind == KIND_TEXT:
        return Text(descriptor)
    if kind == KIND_COMMENT:
        return Comment(descriptor)
    raise DescriptorError("unknown-kind", f"unknown node kind {kind!r}")


class Node:
    """Base builder node: owns one live node and navigates the shared chain.

    - el: the live node this builder node owns
    - chain: the Chain shared by every node of the tree
    - level: depth from the chain's root (root = 0)
    - parent / next_sibling / first_child: cached neighbors, maintained by the chain
    - mounted: when False, gated mutations are skipped and ``el`` is detached
    """

    __slots__ = (
        "_down_deferred",
        "_key",
        "chain",
        "el",
        "first_child",
        "level",
        "live_parent",
        "mounted",
        "next_sibling",
        "parent",
    )

    def __init__(self, el):
        self.el = el
        self.level = 0
        self.parent = None
        self.next_sibling = None
        self.first_child = None
        self.mounted = True
        self.live_parent = None
        self._key = _NO_KEY
        self._down_deferred = False
        # A node always belongs to a chain; a fresh one is the root of its own
        self.chain = None
        Chain().add_root(self)

    @property
    def has_key(self):
        return self._key is not _NO_KEY

    @property
    def head(self):
        """Root of the tree this node belongs to."""
        return self.chain.head

    start = head

    def if_(self, flag):
        """Mount (True) or unmount (False) this node, see ``chaindom.gate``."""
        return set_mounted(self, flag)

    def mount(self):
        return set_mounted(self, True)

    def unmount(self):
        return set_mounted(self, False)

    def key(self, key):
        """Tag this node for a later ``node(key)`` lookup."""
        self._key = key
        return self

    def node(self, key):
        """Find the first node of this tree tagged with key; None when absent."""
        return self.chain.find_by_key(key)

    def iter_chain(self):
        return iter(self.chain)

    def next(self, tag=None, kind=None):
        """Add a next sibling and return it.

        Args:
            tag: a tag descriptor (or character data for text/comment kinds),
                an existing Node to splice in, or a sequence of either, which
                is added left to right, each after the previous one.
            kind: "element" (default), "text" or "comment"

        Returns:
            The new sibling; self when tag is empty.

        Raises:
            BoundaryError: self is a root, which cannot have siblings.

        """
        if not tag:
            return self
        self._down_deferred = False
        if isinstance(tag, (list, tuple)):
            return reduce(lambda cursor, item: cursor.next(item, kind), tag, self)
        if isinstance(tag, Node):
            return self._splice_next(tag)
        return self._splice_next(create_node(tag, kind))

    def _splice_next(self, node):
        if self.parent is None:
            msg = f"{self!r} is a root; it cannot have a next sibling"
            raise BoundaryError("sibling-of-root", msg)
        self.chain.insert_as_next_sibling(self, node)
        if node.mounted:
            if self.el.parent is not None:
                dom.insert_after(self.el, node.el)
            else:
                attach_at_chain_position(node, self.parent.el)
        else:
            dom.remove_from_parent(node.el)
        return node

    def down(self, tag=None, kind=None):
        """Leaf nodes hold no children: only the bare form (same as ``up``) works."""
        if not tag and not isinstance(tag, (list, tuple)):
            return self.up()
        msg = f"{type(self).__name__} nodes cannot have children"
        raise CapabilityError("leaf-has-no-children", msg)

    def up(self):
        """Return the parent, or self when ``down([])`` deferred a descent.

        Raises:
            BoundaryError: self is a root and no descent is deferred.

        """
        if self._down_deferred:
            self._down_deferred = False
            return self
        if self.parent is None:
            raise BoundaryError("up-from-root", f"{self!r} is a root; there is nothing above it")
        return self.parent

    def to_html(self, pretty=False):
        return to_html(self.el, pretty=pretty)

    def __repr__(self):
        return f"{type(self).__name__}(level={self.level})"


class CharacterData(Node):
    """Leaf node holding character data."""

    __slots__ = ()

    @property
    def value(self):
        return self.el.data

    @when_mounted
    def text(self, text, replace=False):
        """Append to the character data, or replace it entirely."""
        if replace:
            self.el.text_content = text
        else:
            self.el.append_data(text)
        return self

    def __repr__(self):
        return f"{type(self).__name__}({self.el.data[:30]!r}, level={self.level})"


class Text(CharacterData):
    __slots__ = ()

    def __init__(self, text=""):
        super().__init__(dom.create_text(text))

    def __str__(self):
        return self.el.data


class Comment(CharacterData):
    __slots__ = ()

    def __init__(self, text=""):
        super().__init__(dom.create_comment(text))

    def __str__(self):
        return f"<!--{self.el.data}-->"


class _ListenerGroup:
    """The callbacks registered through ``on`` for one event type.

    A single live listener is installed per event type; it fans out to the
    callbacks in registration order.
    """

    __slots__ = ("callbacks", "handler", "ids")

    def __init__(self, event):
        self.callbacks = []
        self.ids = []

        def handler(e):
            logger.debug("dispatch: %s", event)
            for callback in list(self.callbacks):
                callback(e)

        self.handler = handler


def _class_names(value):
    if isinstance(value, str):
        return value.split()
    names = []
    for item in value:
        names.extend(str(item).split())
    return names


class Element(Node):
    """Element node built from a tag descriptor.

    - ``Element("input")``: tag
    - ``Element("input#name")``: tag with id
    - ``Element("input@submit")``: tag with its type set
    - ``Element("button@like:link")``: tag with a dataset entry
    """

    __slots__ = ("events", "tag")

    def __init__(self, tag_info):
        descriptor = parse_tag(tag_info)
        super().__init__(dom.create_element(descriptor.tag))
        self.tag = descriptor.tag
        self.events = {}
        if descriptor.id:
            self.id(descriptor.id)
        if descriptor.type:
            self.attr("type", descriptor.type)
        for name, value in descriptor.dataset.items():
            self.data(name, value)

    def down(self, tag=None, kind=None):
        """Add a first child and return it.

        Args:
            tag: a tag descriptor (or character data for text/comment kinds),
                an existing Node, or a sequence. For a sequence the first item
                becomes the first child and the rest follow it as siblings; the
                first child is returned. An empty sequence defers the descent:
                self is returned and the next ``up()`` (or bare ``down()``)
                returns self again instead of the parent.
            kind: "element" (default), "text" or "comment"

        Returns:
            The new first child; with no tag, the same as ``up()``.

        """
        if isinstance(tag, (list, tuple)):
            if not tag:
                self._down_deferred = True
                return self
            first = self.down(tag[0], kind)
            reduce(lambda cursor, item: cursor.next(item, kind), tag[1:], first)
            return first
        if isinstance(tag, Node):
            return self._splice_down(tag)
        if tag:
            return self._splice_down(create_node(tag, kind))
        return self.up()

    def _splice_down(self, node):
        self._down_deferred = False
        self.chain.insert_as_first_child(self, node)
        if node.mounted:
            dom.prepend_child(self.el, node.el)
        else:
            dom.remove_from_parent(node.el)
        return node

    def text(self, text, replace=False):
        """Append a text node, or replace all content (children included) with text.

        Text opens the element's content the way ``down([])`` does, so the
        ``up()`` that directly follows closes it and stays on this element
        instead of returning the parent; a second ``up()`` reaches the parent::

            build("ul").down("li").text("one").up().next("li")

        The content is only written while the element is mounted, but the
        ``up()`` behavior is the same either way.
        """
        self._down_deferred = True
        return self._write_text(text, replace)

    @when_mounted
    def _write_text(self, text, replace):
        if replace:
            self.empty()
        if text:
            dom.append_child(self.el, dom.create_text(text))
        return self

    @when_mounted
    def attr(self, name, value=True):
        """Set attributes.

        Args:
            name: attribute name, or a mapping of names to values
            value: ``True`` sets a boolean (empty) attribute; ``False`` or
                ``None`` removes the attribute; anything else is stored as str.

        """
        if isinstance(name, Mapping):
            for key, item in name.items():
                self.attr(key, item)
        elif value is False or value is None:
            self.el.remove_attribute(name)
        elif value is True:
            self.el.set_attribute(name, "")
        else:
            self.el.set_attribute(name, value)
        return self

    @when_mounted
    def data(self, name, value=None):
        """Set dataset entries; mappings and sequences are stored as JSON, None removes."""
        if isinstance(name, Mapping):
            for key, item in name.items():
                self.data(key, item)
            return self
        dataset = self.el.dataset
        if value is None:
            dataset.pop(name, None)
        elif isinstance(value, (Mapping, list, tuple)):
            dataset[name] = json.dumps(value)
        else:
            dataset[name] = value
        return self

    @when_mounted
    def style(self, inline_style):
        """Append a ``prop: value`` string to the inline style, or update it from a mapping."""
        if isinstance(inline_style, str):
            current = (self.el.get_attribute("style") or "").strip()
            if current and not current.endswith(";"):
                current += ";"
            self.el.set_attribute("style", current + inline_style)
        else:
            style = self.el.style
            for prop, value in inline_style.items():
                if value is None:
                    style.pop(prop, None)
                else:
                    style[prop] = value
        return self

    @when_mounted
    def id(self, value):
        self.el.id = value
        return self

    @when_mounted
    def class_(self, adds=None, removes=None, toggles=None, empty=None):
        """Edit the class attribute.

        Args:
            adds: classes to add (space separated string or sequence)
            removes: classes to remove
            toggles: classes to toggle
            empty: True clears existing classes first (as does passing True
                for any other argument)

        """
        if any(arg is True for arg in (adds, removes, toggles, empty)):
            self.el.remove_attribute("class")
        class_list = self.el.class_list
        if adds and adds is not True:
            class_list.add(*_class_names(adds))
        if removes and removes is not True:
            class_list.remove(*_class_names(removes))
        if toggles and toggles is not True:
            for name in _class_names(toggles):
                class_list.toggle(name)
        return self

    @when_mounted
    def on(self, event, callback, id=None):
        """Register callback for event; id makes a later ``off`` easier."""
        if not callable(callback):
            return self
        group = self.events.get(event)
        if group is None:
            group = self.events[event] = _ListenerGroup(event)
            self.el.add_event_listener(event, group.handler)
        group.callbacks.append(callback)
        group.ids.append(id)
        return self

    @when_mounted
    def off(self, event, callback_or_id):
        """Remove one callback registered with ``on``, by the callback itself or by its id."""
        group = self.events.get(event)
        if callback_or_id is None or group is None:
            return self
        if callable(callback_or_id):
            matches = [i for i, cb in enumerate(group.callbacks) if cb is callback_or_id]
        else:
            matches = [i for i, cb_id in enumerate(group.ids) if cb_id == callback_or_id]
        if matches:
            del group.callbacks[matches[0]]
            del group.ids[matches[0]]
        if not group.callbacks:
            self.el.remove_event_listener(event, group.handler)
            del self.events[event]
        return self

    @when_mounted
    def empty(self):
        """Remove every child, from the live tree and from the chain.

        Removed children become roots of their own chains and can be spliced
        back in with ``next``/``down``.
        """
        self.chain.remove_descendants(self)
        self.el.remove_all_children()
        return self

    def dispatch(self, event_type, detail=None):
        """Fire an event on the live node (see ``ElementNode.dispatch_event``)."""
        self.el.dispatch_event(dom.Event(event_type, detail))
        return self

    def __str__(self):
        return to_html(self.el)

    def __repr__(self):
        return f"Element(<{self.tag}>, level={self.level})"


def build(tag_info):
    """Start a new tree: a fresh chain holding a single root element."""
    return Element(tag_info)
