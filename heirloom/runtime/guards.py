"""Construction guards: ``abstract`` and ``final`` class wrappers."""

from __future__ import annotations

import functools
import logging

from ..constants import GUARD_ABSTRACT, GUARD_ATTRIBUTE, GUARD_FINAL, LOGGER_NAME
from ..errors import AbstractClassError, FinalClassError, UnimplementedOperationError
from .registry import alias_identity

logger = logging.getLogger(f"{LOGGER_NAME}.guards")

# Names a final wrapper keeps for itself instead of forwarding.
_WRAPPER_OWN = frozenset(
    {GUARD_ATTRIBUTE, "__doc__", "__module__", "__name__", "__qualname__"}
)


def guard_kind(cls):
    """Return the guard kind a class was created with, or ``None``."""

    try:
        return vars(cls).get(GUARD_ATTRIBUTE)
    except TypeError:
        return None


def _sealed_ancestor(classes):
    for base in classes:
        for candidate in getattr(base, "__mro__", ()):
            if guard_kind(candidate) == GUARD_FINAL:
                return candidate
    return None


class GuardMeta(type):
    """Metaclass shared by guard wrappers and everything derived from them.

    Construction is checked against the class being constructed: an abstract
    wrapper refuses to build itself, and no class may be built when a final
    wrapper sits strictly above it in its MRO. Declaring a subclass of a final
    wrapper is refused here as well. Attribute writes and deletes on a final
    wrapper are forwarded to the class it wraps, except for the wrapper's own
    metadata (``__doc__``, ``__module__``, ``__name__``, ``__qualname__``),
    which stays on the wrapper.
    """

    def __new__(mcls, name, bases, namespace, **kwargs):
        if namespace.get(GUARD_ATTRIBUTE) is None:
            sealed = _sealed_ancestor(bases)
            if sealed is not None:
                raise FinalClassError(f"Cannot extend final class {sealed.__name__}")
        return super().__new__(mcls, name, bases, namespace, **kwargs)

    def __call__(cls, *args, **kwargs):
        if guard_kind(cls) == GUARD_ABSTRACT:
            raise AbstractClassError(
                f"Class {cls.__name__} is abstract and cannot be instantiated directly"
            )
        if any(guard_kind(base) == GUARD_FINAL for base in cls.__mro__[1:]):
            raise FinalClassError(
                "Cannot create an instance of a descendant of a final class"
            )
        return super().__call__(*args, **kwargs)

    def __setattr__(cls, name, value):
        if guard_kind(cls) == GUARD_FINAL and name not in _WRAPPER_OWN:
            setattr(cls.__wrapped__, name, value)
        else:
            super().__setattr__(name, value)

    def __delattr__(cls, name):
        if guard_kind(cls) == GUARD_FINAL and name not in _WRAPPER_OWN:
            delattr(cls.__wrapped__, name)
        else:
            super().__delattr__(name)


@functools.lru_cache(maxsize=None)
def _guard_metaclass(base_meta):
    """Combine ``GuardMeta`` with the metaclass of the class being wrapped."""

    if issubclass(base_meta, GuardMeta):
        return base_meta
    if base_meta is type:
        return GuardMeta
    return type(f"Guard{base_meta.__name__}", (GuardMeta, base_meta), {})


def _wrap(kind, klass, extra=None):
    namespace = {
        GUARD_ATTRIBUTE: kind,
        "__module__": klass.__module__,
        "__qualname__": klass.__qualname__,
        "__doc__": klass.__doc__,
        "__wrapped__": klass,
        "__slots__": (),
    }
    namespace.update(extra or {})
    meta = _guard_metaclass(type(klass))
    wrapper = meta(klass.__name__, (klass,), namespace)
    alias_identity(wrapper, klass)
    logger.debug("created %s guard for %s", kind, klass.__qualname__)
    return wrapper


def abstract(target):
    """Guard a class against direct construction, or stub out a method.

    Given a class, returns a subclass that only derived classes can construct.
    Given a name, returns a function that raises when called, for methods
    subclasses are required to override.
    """

    if isinstance(target, str):
        name = target

        def unimplemented(*args, **kwargs):
            raise UnimplementedOperationError(f"{name}() must be overridden")

        unimplemented.__name__ = name
        unimplemented.__qualname__ = name
        return unimplemented
    if not isinstance(target, type):
        raise TypeError("abstract parameter must be a class or string")
    if guard_kind(target) == GUARD_ABSTRACT:
        return target
    return _wrap(GUARD_ABSTRACT, target)


def final(target):
    """Guard a class against being extended.

    The wrapper constructs instances of the wrapped class (``type(obj)`` is the
    wrapper, ``isinstance(obj, target)`` holds) and refuses subclasses both at
    declaration time and at construction time.
    """

    if not isinstance(target, type):
        raise TypeError("final parameter must be a class")
    if guard_kind(target) == GUARD_FINAL:
        return target
    label = target.__name__

    def __init_subclass__(cls, **kwargs):
        raise FinalClassError(f"Cannot extend final class {label}")

    return _wrap(
        GUARD_FINAL,
        target,
        {"__init_subclass__": classmethod(__init_subclass__)},
    )


__all__ = [
    "GuardMeta",
    "abstract",
    "final",
    "guard_kind",
]
