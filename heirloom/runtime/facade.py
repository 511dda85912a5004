"""Facade objects handed back by ``share``."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from ..accessors import BoundAccessor
from ..constants import SUPER_ATTRIBUTE
from .core import ProtectedData

# Facade entry for members that live in the data chain.
DATA_ENTRY = object()

# Mangled slot names; these must never fall through to member lookup.
_PRIVATE_PREFIXES = ("_SharedFacade__", "_SuperFacade__")


def _is_internal(name) -> bool:
    if not isinstance(name, str):
        return False
    if name.startswith(_PRIVATE_PREFIXES):
        return True
    return name.startswith("__") and name.endswith("__")


def _refuse_copy(facade):
    raise TypeError(
        f"{type(facade).__name__} is bound to its owner and cannot be copied or pickled"
    )


class SuperFacade:
    """Ancestor view of the members a layer redeclared.

    Each entry is either a snapshot of the ancestor value taken when the layer
    registered, or the ancestor's bound accessor. Keys missing here resolve in
    the parent ``SuperFacade``.
    """

    __slots__ = ("__entries", "__parent")

    def __init__(self, entries: Optional[dict] = None, parent: Optional["SuperFacade"] = None):
        object.__setattr__(self, "_SuperFacade__entries", dict(entries or {}))
        object.__setattr__(self, "_SuperFacade__parent", parent)

    def __find(self, key):
        node = self
        while node is not None:
            if key in node.__entries:
                return node, node.__entries[key]
            node = node.__parent
        raise KeyError(key)

    @property
    def super(self) -> "SuperFacade":
        parent = self.__parent
        return parent if parent is not None else SuperFacade()

    def __getitem__(self, key):
        _, entry = self.__find(key)
        if isinstance(entry, BoundAccessor):
            return entry.read()
        return entry

    def __setitem__(self, key, value):
        _, entry = self.__find(key)
        if isinstance(entry, BoundAccessor):
            entry.write(value)
        else:
            self.__entries[key] = value

    def __getattr__(self, name):
        if _is_internal(name):
            raise AttributeError(name)
        try:
            return self[name]
        except KeyError:
            raise AttributeError(f"no ancestor member {name!r}") from None

    def __setattr__(self, name, value):
        try:
            self[name] = value
        except KeyError:
            raise AttributeError(f"no ancestor member {name!r}") from None

    def __delattr__(self, name):
        raise AttributeError("ancestor members cannot be deleted")

    def __contains__(self, key) -> bool:
        try:
            self.__find(key)
        except KeyError:
            return False
        return True

    def __iter__(self):
        seen = set()
        node = self
        while node is not None:
            for key in node.__entries:
                if key not in seen:
                    seen.add(key)
                    yield key
            node = node.__parent

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __copy__(self):
        _refuse_copy(self)

    def __deepcopy__(self, memo):
        _refuse_copy(self)

    def __reduce_ex__(self, protocol):
        _refuse_copy(self)

    def __dir__(self):
        return sorted(k for k in self if isinstance(k, str)) + [SUPER_ATTRIBUTE]

    def __repr__(self) -> str:
        return f"<SuperFacade keys={list(self)!r}>"


class SharedFacade:
    """Attribute and item access to every member known at one layer.

    Entries are declared per facade; a key that this facade does not declare
    resolves through the parent facade. Data entries read and write the data
    chain of the owner this facade belongs to, accessor entries call the bound
    get/set directly.
    """

    __slots__ = ("__identity", "__data", "__entries", "__parent", "__super")

    def __init__(
        self,
        identity,
        data: ProtectedData,
        entries: dict,
        parent: Optional["SharedFacade"] = None,
        super_facade: Optional[SuperFacade] = None,
    ):
        set_slot = object.__setattr__
        set_slot(self, "_SharedFacade__identity", identity)
        set_slot(self, "_SharedFacade__data", data)
        set_slot(self, "_SharedFacade__entries", dict(entries))
        set_slot(self, "_SharedFacade__parent", parent)
        set_slot(
            self,
            "_SharedFacade__super",
            super_facade if super_facade is not None else SuperFacade(),
        )

    def __entry(self, key):
        node = self
        while node is not None:
            if key in node.__entries:
                return node.__entries[key]
            node = node.__parent
        raise KeyError(key)

    @property
    def super(self) -> SuperFacade:
        return self.__super

    def __getitem__(self, key):
        entry = self.__entry(key)
        if entry is DATA_ENTRY:
            return self.__data.lookup(key)
        return entry.read()

    def __setitem__(self, key, value):
        entry = self.__entry(key)
        if entry is DATA_ENTRY:
            self.__data.assign(key, value)
        else:
            entry.write(value)

    def __delitem__(self, key):
        raise TypeError("shared members cannot be deleted")

    def __getattr__(self, name):
        if _is_internal(name):
            raise AttributeError(name)
        try:
            return self[name]
        except KeyError:
            raise AttributeError(f"no shared member {name!r}") from None

    def __setattr__(self, name, value):
        try:
            self[name] = value
        except KeyError:
            raise AttributeError(f"no shared member {name!r}") from None

    def __delattr__(self, name):
        raise AttributeError("shared members cannot be deleted")

    def __contains__(self, key) -> bool:
        try:
            self.__entry(key)
        except KeyError:
            return False
        return True

    def __iter__(self):
        seen = set()
        node = self
        while node is not None:
            for key in node.__entries:
                if key not in seen:
                    seen.add(key)
                    yield key
            node = node.__parent

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __copy__(self):
        _refuse_copy(self)

    def __deepcopy__(self, memo):
        _refuse_copy(self)

    def __reduce_ex__(self, protocol):
        _refuse_copy(self)

    def __dir__(self):
        return sorted(k for k in self if isinstance(k, str)) + [SUPER_ATTRIBUTE]

    def __repr__(self) -> str:
        name = getattr(self.__identity, "__qualname__", self.__identity)
        return f"<SharedFacade {name} keys={list(self)!r}>"


def resolve_entry(facade: SharedFacade, key):
    """Return the entry ``facade`` resolves for ``key``; raises ``KeyError``."""

    return facade._SharedFacade__entry(key)


@dataclass(frozen=True)
class FacadeInfo:
    """Read-only view of one facade's internals, used by analysis tooling."""

    identity: Any
    data: ProtectedData
    members: list
    accessors: list
    super_keys: list
    parent: Optional[SharedFacade]


def facade_info(facade: SharedFacade) -> FacadeInfo:
    if not isinstance(facade, SharedFacade):
        raise TypeError(f"Expected a SharedFacade, got {type(facade).__name__}")
    entries = facade._SharedFacade__entries
    sup = facade._SharedFacade__super
    return FacadeInfo(
        identity=facade._SharedFacade__identity,
        data=facade._SharedFacade__data,
        members=[k for k, e in entries.items() if e is DATA_ENTRY],
        accessors=[k for k, e in entries.items() if e is not DATA_ENTRY],
        super_keys=list(sup._SuperFacade__entries),
        parent=facade._SharedFacade__parent,
    )


__all__ = [
    "DATA_ENTRY",
    "FacadeInfo",
    "SharedFacade",
    "SuperFacade",
    "facade_info",
    "resolve_entry",
]
