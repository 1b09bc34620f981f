"""Mutation gate: mounting, unmounting and the guard on mutation methods.

An unmounted node keeps its place in the chain (navigation, key lookup and
structural calls keep working) but its live node is detached from the live
parent, and every gated mutation method becomes a no-op that still returns
the node so call chains are not broken.
"""

import logging
from functools import wraps

from . import dom, flags

logger = logging.getLogger(__name__)


def when_mounted(method):
    """Skip the wrapped mutation and return self while the node is unmounted."""

    @wraps(method)
    def gated(self, *args, **kwargs):
        if not self.mounted:
            if flags.DEBUG:
                logger.debug("skipped %s on unmounted %r", method.__name__, self)
            return self
        return method(self, *args, **kwargs)

    gated.gated = True
    return gated


def next_attached_sibling(node, live_parent):
    """Return the live node of the first later sibling already attached to live_parent."""
    chain = node.chain
    index = chain.block_end(chain.index(node))
    while index < len(chain):
        candidate = chain[index]
        if candidate.level < node.level:
            break
        if candidate.level == node.level and candidate.el.parent is live_parent:
            return candidate.el
        index = chain.block_end(index)
    return None


def attach_at_chain_position(node, live_parent):
    """Attach node's live node to live_parent at the position its chain entry implies."""
    live_parent.insert_before(node.el, next_attached_sibling(node, live_parent))


def set_mounted(node, flag):
    """Mount or unmount node; calls that do not change the state do nothing."""
    flag = bool(flag)
    if flag == node.mounted:
        return node

    if not flag:
        node.live_parent = node.el.parent
        dom.remove_from_parent(node.el)
        node.mounted = False
        if flags.DEBUG:
            logger.debug("unmount %r", node)
        return node

    node.mounted = True
    # The chain parent wins: the node may have been spliced elsewhere while unmounted
    live_parent = node.parent.el if node.parent is not None else node.live_parent
    if live_parent is None:
        return node
    if flags.REMOUNT_IN_PLACE:
        attach_at_chain_position(node, live_parent)
    else:
        dom.append_child(live_parent, node.el)
    if flags.DEBUG:
        logger.debug("remount %r under <%s>", node, live_parent.name)
    return node
