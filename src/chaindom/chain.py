"""The chain: one tree stored as a flat, pre-order sequence of builder nodes.

Every builder node of a tree holds a reference to the same Chain. Tree shape
is carried entirely by position and ``level`` (root = 0): a node's descendants
occupy the contiguous block right after it, and that block ends at the first
later position whose level is not deeper than the node's own. That position
holds the node's next sibling when the levels are equal; otherwise it is where
a new last sibling goes.

The ``parent``, ``next_sibling`` and ``first_child`` attributes on nodes are
caches. They are kept correct on every splice but lookups never depend on
them alone: a cache that does not pass validation falls back to a level scan.
"""

import logging

from . import flags
from .errors import StructureError

logger = logging.getLogger(__name__)


class Chain:
    __slots__ = ("_nodes",)

    def __init__(self):
        self._nodes = []

    def __len__(self):
        return len(self._nodes)

    def __iter__(self):
        return iter(self._nodes)

    def __getitem__(self, index):
        return self._nodes[index]

    def __contains__(self, node):
        return any(n is node for n in self._nodes)

    def __repr__(self):
        return f"Chain({len(self._nodes)} nodes)"

    @property
    def head(self):
        """The root node of the tree (first entry), or None when empty."""
        return self._nodes[0] if self._nodes else None

    def index(self, node):
        for i, candidate in enumerate(self._nodes):
            if candidate is node:
                return i
        msg = f"{node!r} is not part of this chain"
        raise StructureError("not-in-chain", msg)

    def block_end(self, index):
        """Return the first position after the descendant block of the node at index."""
        level = self._nodes[index].level
        end = index + 1
        size = len(self._nodes)
        while end < size and self._nodes[end].level > level:
            end += 1
        return end

    def descendants(self, node):
        start = self.index(node)
        return self._nodes[start + 1 : self.block_end(start)]

    def children(self, node):
        level = node.level + 1
        return [n for n in self.descendants(node) if n.level == level]

    def find_by_key(self, key):
        """Return the first node whose key equals key, or None."""
        for node in self._nodes:
            if node.has_key and node._key == key:
                return node
        return None

    def add_root(self, node):
        """Start the chain with node at level 0."""
        if self._nodes:
            raise StructureError("chain-not-empty", "a chain can only have one root")
        node.level = 0
        node.parent = None
        node.chain = self
        self._nodes.append(node)
        return node

    # Splicing

    def _previous_sibling(self, index):
        level = self._nodes[index].level
        i = index - 1
        while i >= 0 and self._nodes[i].level > level:
            i -= 1
        if i >= 0 and self._nodes[i].level == level:
            return self._nodes[i]
        return None

    def _sibling_at(self, index, level):
        if index < len(self._nodes) and self._nodes[index].level == level:
            return self._nodes[index]
        return None

    def _take_block(self, index):
        """Cut the node at index and its descendants out, fixing neighbor caches."""
        node = self._nodes[index]
        end = self.block_end(index)
        following = self._sibling_at(end, node.level)
        previous = self._previous_sibling(index)
        if previous is not None and previous.next_sibling is node:
            previous.next_sibling = following
        if node.parent is not None and node.parent.first_child is node:
            node.parent.first_child = following
        block = self._nodes[index:end]
        del self._nodes[index:end]
        return block

    def _detach(self, node):
        """Remove node's block from whatever chain holds it; returns the block."""
        source = node.chain
        if source is None or node not in source:
            return [node]
        return source._take_block(source.index(node))

    def _place(self, block, position, level):
        delta = level - block[0].level
        for moved in block:
            moved.level += delta
            moved.chain = self
        self._nodes[position:position] = block

    def _check_not_inside(self, node, target):
        """Refuse to splice node somewhere inside its own subtree."""
        if node is target:
            raise StructureError("self-splice", f"cannot splice {node!r} relative to itself")
        if node.chain is self and node in self:
            start = self.index(node)
            end = self.block_end(start)
            if any(n is target for n in self._nodes[start:end]):
                msg = f"cannot move {node!r} into its own subtree"
                raise StructureError("circular-splice", msg)

    def _cached_next_position(self, anchor):
        cached = anchor.next_sibling
        if cached is None or cached.chain is not self:
            return None
        if cached.parent is not anchor.parent or cached.level != anchor.level:
            return None
        return self.index(cached)

    def insert_as_next_sibling(self, anchor, node):
        """Insert node (and its subtree, if any) as the next sibling of anchor.

        The insertion point is the cached ``anchor.next_sibling`` when it is
        still valid, otherwise the end of anchor's descendant block found by a
        level scan, otherwise the end of the chain.

        Returns:
            node, now at ``anchor.level`` with ``anchor.parent`` as parent.

        """
        self._check_not_inside(node, anchor)
        block = self._detach(node)

        anchor_index = self.index(anchor)
        position = self._cached_next_position(anchor)
        scanned = position is None
        if scanned:
            position = self.block_end(anchor_index)
        displaced = self._sibling_at(position, anchor.level)

        self._place(block, position, anchor.level)
        node.parent = anchor.parent
        node.next_sibling = displaced
        anchor.next_sibling = node

        if flags.DEBUG:
            logger.debug(
                "next: %r after %r at %d (level %d, %s)",
                node, anchor, position, anchor.level, "scan" if scanned else "cached",
            )
        return node

    def insert_as_first_child(self, parent, node):
        """Insert node (and its subtree, if any) directly after parent.

        A first child precedes every existing descendant of parent, and that
        descendant block always starts right after parent, so no scan is needed.
        """
        self._check_not_inside(node, parent)
        block = self._detach(node)

        parent_index = self.index(parent)
        position = parent_index + 1
        previous_first = self._sibling_at(position, parent.level + 1)

        self._place(block, position, parent.level + 1)
        node.parent = parent
        node.next_sibling = previous_first
        parent.first_child = node

        if flags.DEBUG:
            logger.debug("down: %r under %r at %d (level %d)", node, parent, position, node.level)
        return node

    def remove_descendants(self, node):
        """Cut every descendant of node out of the chain.

        Each removed child becomes the root of a fresh chain holding its own
        subtree, so it stays navigable and can be spliced back in later.

        Returns:
            The removed children, in order.

        """
        start = self.index(node) + 1
        end = self.block_end(start - 1)
        block = self._nodes[start:end]
        del self._nodes[start:end]
        node.first_child = None

        roots = []
        current = None
        for removed in block:
            if removed.level == node.level + 1:
                if current is not None:
                    current._close_chain()
                removed.parent = None
                removed.live_parent = None
                current = Chain()
                roots.append(removed)
            current._nodes.append(removed)
            removed.chain = current
        if current is not None:
            current._close_chain()
        for root in roots:
            root.next_sibling = None

        if flags.DEBUG:
            logger.debug("empty: removed %d nodes under %r", len(block), node)
        return roots

    def _close_chain(self):
        """Re-level a chain built from a cut block so its root sits at level 0."""
        delta = self._nodes[0].level
        for moved in self._nodes:
            moved.level -= delta
