"""Errors raised by the builder.

Structural and capability errors are raised immediately: a wrong cursor
returned silently would corrupt every call chained after it. Looking up a
missing key is not an error (it returns ``None``) and neither is mutating an
unmounted node (a deliberate no-op).
"""


class ChainError(Exception):
    """Base class for builder errors, carrying a short machine-readable code."""

    def __init__(self, code, message=None):
        self.code = code
        self.message = message or code
        super().__init__(self.message)

    def __repr__(self):
        return f"{type(self).__name__}({self.code!r})"

    def __str__(self):
        if self.message != self.code:
            return f"{self.code} - {self.message}"
        return self.code


class CapabilityError(ChainError, TypeError):
    """A node variant was asked for something it cannot do (``down`` on a leaf)."""


class BoundaryError(ChainError):
    """Navigation ran off the tree (``up`` from a root, sibling of a root)."""


class StructureError(ChainError, ValueError):
    """A splice would break the tree shape, e.g. moving a node into its own subtree."""


class DescriptorError(ChainError, ValueError):
    """A tag descriptor string could not be parsed."""
