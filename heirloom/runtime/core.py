"""Core data structures for shared member storage."""

from __future__ import annotations

from typing import Any, Iterator, Optional

_MISSING = object()


def _identity_name(identity) -> str:
    if identity is None:
        return "<data>"
    return getattr(identity, "__qualname__", None) or repr(identity)


class Layer:
    """Members contributed by one ``share`` call, linked to the layer below."""

    __slots__ = ("identity", "members", "parent")

    def __init__(self, identity, members: dict, parent: Optional["Layer"] = None):
        self.identity = identity
        self.members = members
        self.parent = parent

    def __repr__(self) -> str:  # pragma: no cover - representation helper
        return f"<Layer {_identity_name(self.identity)} keys={list(self.members)}>"


class ProtectedData(Layer):
    """Head of one owner's delegation chain.

    ``members`` holds values assigned through a facade at runtime. ``parent``
    is the most-derived declared layer; further down the chain there may be
    another owner's ``ProtectedData`` when this one was seeded from it.
    """

    __slots__ = ()

    def __init__(self, parent: Optional[Layer] = None):
        super().__init__(None, {}, parent)

    def splice(self, identity, members: dict) -> Layer:
        """Insert a new declared layer directly under the head."""

        layer = Layer(identity, members, self.parent)
        self.parent = layer
        return layer

    def chain(self) -> Iterator[Layer]:
        node: Optional[Layer] = self
        while node is not None:
            yield node
            node = node.parent

    def lookup(self, key) -> Any:
        for node in self.chain():
            if key in node.members:
                return node.members[key]
        raise KeyError(key)

    def declared(self, key, default=_MISSING) -> Any:
        """Resolve ``key`` in declared layers only, skipping assigned values."""

        for node in self.chain():
            if isinstance(node, ProtectedData):
                continue
            if key in node.members:
                return node.members[key]
        if default is _MISSING:
            raise KeyError(key)
        return default

    def assign(self, key, value) -> None:
        self.members[key] = value

    def __contains__(self, key) -> bool:
        return any(key in node.members for node in self.chain())

    def __repr__(self) -> str:  # pragma: no cover - representation helper
        depth = sum(1 for _ in self.chain()) - 1
        return f"<ProtectedData assigned={list(self.members)} depth={depth}>"


__all__ = [
    "Layer",
    "ProtectedData",
]
