"""Shared member registry: ``share`` and the record bookkeeping behind it.

Every owner carries a side table in its own ``__dict__`` mapping a class
identity to a :class:`Record`. Keeping the table on the owner means records
(and the bound methods inside them, which reference the owner) are collected
together with the owner. Process-wide state is limited to weak collections:
the set of participating classes and the guard alias table.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
import logging
import threading
import weakref
from typing import Iterator, Optional

from ..accessors import Accessor, bind_member
from ..constants import LOGGER_NAME, RECORDS_ATTRIBUTE, SUPER_ATTRIBUTE
from ..errors import InvalidIdentityError, InvalidMembersError, InvalidOwnerError
from .core import ProtectedData
from .facade import DATA_ENTRY, SharedFacade, SuperFacade, resolve_entry

logger = logging.getLogger(f"{LOGGER_NAME}.registry")

_PARTICIPANTS: "weakref.WeakSet[type]" = weakref.WeakSet()
_ALIASES: "weakref.WeakKeyDictionary[type, type]" = weakref.WeakKeyDictionary()
_LOCK = threading.RLock()


@dataclass
class Record:
    """Protected data and facades for one (class identity, owner) pair."""

    identity: type
    data: ProtectedData
    facade: SharedFacade
    seed: Optional["Record"] = None

    @property
    def super(self) -> SuperFacade:
        return self.facade.super

    def __repr__(self) -> str:  # pragma: no cover - representation helper
        return f"<Record {self.identity.__qualname__} keys={list(self.facade)!r}>"


def canonical_identity(identity):
    """Follow guard aliases back to the class that was originally wrapped."""

    while True:
        try:
            target = _ALIASES.get(identity)
        except TypeError:
            return identity
        if target is None:
            return identity
        identity = target


def alias_identity(wrapper: type, wrapped: type) -> None:
    """Make ``wrapper`` resolve to the registry entries of ``wrapped``."""

    with _LOCK:
        _ALIASES[wrapper] = canonical_identity(wrapped)
    logger.debug("aliased %s to %s", wrapper.__qualname__, wrapped.__qualname__)


def aliases_of(identity) -> list:
    """Return the guard wrappers that resolve to ``identity``."""

    identity = canonical_identity(identity)
    return [wrapper for wrapper, target in list(_ALIASES.items()) if target is identity]


def is_participant(identity) -> bool:
    return canonical_identity(identity) in _PARTICIPANTS


def get_participants() -> list:
    return list(_PARTICIPANTS)


def nearest_participant(identity: type) -> Optional[type]:
    """Return the closest ancestor in ``identity.__mro__`` that has shared members."""

    identity = canonical_identity(identity)
    for base in identity.__mro__[1:]:
        candidate = canonical_identity(base)
        if candidate is identity:
            continue
        if candidate in _PARTICIPANTS:
            return candidate
    return None


class RecordTable(weakref.WeakKeyDictionary):
    """Records of one owner, keyed by class identity.

    The table remembers which owner it was created for. A shallow copy of the
    owner carries the same table in its ``__dict__``; the registry treats such
    a table as absent for the copy. Copying the table itself yields an empty
    table and pickling it is refused.
    """

    def __init__(self, owner):
        super().__init__()
        # id() is stable while the owner lives, and the table dies with it.
        self.owner_id = id(owner)

    def belongs_to(self, owner) -> bool:
        return self.owner_id == id(owner)

    def __copy__(self):
        return RecordTable(None)

    def __deepcopy__(self, memo):
        return RecordTable(None)

    def __reduce_ex__(self, protocol):
        raise TypeError("shared member records are bound to their owner and cannot be pickled")


def _owner_table(owner, create: bool = False) -> Optional[RecordTable]:
    table = vars(owner).get(RECORDS_ATTRIBUTE)
    if table is not None and not table.belongs_to(owner):
        logger.debug("ignoring record table copied onto %r", owner)
        table = None
    if table is None and create:
        table = RecordTable(owner)
        if isinstance(owner, type):
            type.__setattr__(owner, RECORDS_ATTRIBUTE, table)
        else:
            vars(owner)[RECORDS_ATTRIBUTE] = table
    return table


def _canonical_owner(owner):
    return canonical_identity(owner) if isinstance(owner, type) else owner


def get_record(owner, identity) -> Optional[Record]:
    owner = _canonical_owner(owner)
    try:
        table = _owner_table(owner)
    except TypeError:
        return None
    if table is None:
        return None
    return table.get(canonical_identity(identity))


def iter_records(owner) -> Iterator[Record]:
    """Yield every record the owner holds, in registration order."""

    table = _owner_table(_canonical_owner(owner))
    if table:
        yield from list(table.values())


def _validate(owner, identity, members):
    if owner is None or not hasattr(owner, "__dict__"):
        raise InvalidOwnerError(owner)
    if not isinstance(identity, type):
        raise InvalidIdentityError(identity)
    if not isinstance(members, Mapping):
        raise InvalidMembersError(
            f"expected a mapping, got {type(members).__name__}"
        )
    if SUPER_ATTRIBUTE in members:
        raise InvalidMembersError(f"{SUPER_ATTRIBUTE!r} is reserved for ancestor access")


def _find_seed(owner, identity, table):
    """Return ``(seed, same_owner)`` for a new layer of ``identity``."""

    existing = table.get(identity) if table is not None else None
    if existing is not None:
        return existing, True
    ancestor = nearest_participant(identity)
    if ancestor is None:
        return None, True
    seed_owner = ancestor if owner is identity else owner
    seed_table = _owner_table(seed_owner)
    seed = seed_table.get(ancestor) if seed_table is not None else None
    if seed is None:
        logger.debug(
            "%s participates but holds no record for %r; %s starts a new chain",
            ancestor.__qualname__,
            seed_owner,
            identity.__qualname__,
        )
    return seed, seed_owner is owner


def _super_entries(seed: Record, keys) -> dict:
    entries = {}
    for key in keys:
        try:
            entry = resolve_entry(seed.facade, key)
        except KeyError:
            continue
        if entry is not DATA_ENTRY:
            entries[key] = entry
            continue
        try:
            entries[key] = seed.data.declared(key)
        except KeyError:
            continue
    return entries


def share(owner, identity=None, members=None) -> SharedFacade:
    """Register ``members`` as a new layer for ``identity`` scoped to ``owner``.

    ``share(instance, Class, members)`` shares per instance;
    ``share(Class, members)`` shares statically with the class as owner.
    Returns the layer's :class:`SharedFacade`. Layers must be registered
    base-to-derived for a derived facade to see its ancestors.
    """

    if isinstance(owner, type):
        if members is None and not isinstance(identity, type):
            identity, members = owner, identity
        elif identity is None:
            identity = owner
    _validate(owner, identity, members)

    with _LOCK:
        identity = canonical_identity(identity)
        owner = _canonical_owner(owner)
        table = _owner_table(owner, create=True)
        previous = table.get(identity)
        seed, same_owner = _find_seed(owner, identity, table)

        if seed is None:
            data = ProtectedData()
        elif same_owner:
            data = seed.data
        else:
            data = ProtectedData(parent=seed.data)

        plain = {}
        entries = {}
        for key, value in members.items():
            if isinstance(value, Accessor):
                entries[key] = value.bind(owner, key)
            else:
                plain[key] = bind_member(value, owner)
                entries[key] = DATA_ENTRY

        super_entries = _super_entries(seed, members) if seed is not None else {}
        data.splice(identity, plain)
        facade = SharedFacade(
            identity,
            data,
            entries,
            parent=seed.facade if seed is not None else None,
            super_facade=SuperFacade(
                super_entries,
                parent=seed.super if seed is not None else None,
            ),
        )

        if previous is not None:
            previous.facade = facade
        else:
            table[identity] = Record(identity, data, facade, seed)
        _PARTICIPANTS.add(identity)

    logger.debug(
        "shared %d member(s) for %s on %r (seed=%s)",
        len(members),
        identity.__qualname__,
        owner,
        seed.identity.__qualname__ if seed is not None else None,
    )
    return facade


__all__ = [
    "Record",
    "RecordTable",
    "alias_identity",
    "aliases_of",
    "canonical_identity",
    "get_participants",
    "get_record",
    "is_participant",
    "iter_records",
    "nearest_participant",
    "share",
]
