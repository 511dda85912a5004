"""Accessor tagging and owner binding for shared members."""

from collections.abc import Mapping
import types


def bind_member(value, owner):
    """Bind ``value`` to ``owner`` the way a class namespace binds attributes.

    Plain functions become bound methods of ``owner``; ``staticmethod`` objects
    are unwrapped and stay unbound; ``classmethod`` objects bind to the owner's
    class (or to the owner itself when it is a class). Everything else,
    including other callables, is returned unchanged.
    """

    if isinstance(value, staticmethod):
        return value.__func__
    if isinstance(value, classmethod):
        target = owner if isinstance(owner, type) else type(owner)
        return types.MethodType(value.__func__, target)
    if isinstance(value, types.FunctionType):
        return types.MethodType(value, owner)
    return value


class BoundAccessor:
    """An accessor whose ``get``/``set`` are bound to one owner."""

    __slots__ = ("name", "fget", "fset")

    def __init__(self, fget, fset, name=None):
        self.fget = fget
        self.fset = fset
        self.name = name

    def read(self):
        if self.fget is None:
            raise AttributeError(f"shared accessor {self.name!r} is write-only")
        return self.fget()

    def write(self, value):
        if self.fset is None:
            raise AttributeError(f"shared accessor {self.name!r} is read-only")
        self.fset(value)

    def __repr__(self):  # pragma: no cover - representation helper
        flags = ("get" if self.fget else "") + ("/set" if self.fset else "")
        return f"<BoundAccessor {self.name!r} {flags}>"


class Accessor:
    """Marks a get/set pair so ``share`` installs it on the facade only."""

    __slots__ = ("fget", "fset")

    def __init__(self, fget=None, fset=None):
        for label, fn in (("get", fget), ("set", fset)):
            if fn is not None and not callable(fn):
                raise TypeError(f"accessor {label} must be callable, got {type(fn).__name__}")
        self.fget = fget
        self.fset = fset

    def bind(self, owner, name=None):
        fget = None if self.fget is None else bind_member(self.fget, owner)
        fset = None if self.fset is None else bind_member(self.fset, owner)
        return BoundAccessor(fget, fset, name)

    def __repr__(self):  # pragma: no cover - representation helper
        return f"<Accessor get={self.fget!r} set={self.fset!r}>"


def accessor(descriptor=None, /, **parts):
    """Tag a get/set pair for ``share``.

    Accepts a mapping with ``"get"``/``"set"`` keys, a ``property``, or the
    same keys as keyword arguments. Returns ``None`` when neither half is
    present.
    """

    if descriptor is None:
        descriptor = parts
    if isinstance(descriptor, property):
        if descriptor.fget is None and descriptor.fset is None:
            return None
        return Accessor(descriptor.fget, descriptor.fset)
    if not isinstance(descriptor, Mapping):
        return None
    if "get" not in descriptor and "set" not in descriptor:
        return None
    return Accessor(descriptor.get("get"), descriptor.get("set"))


def is_accessor(value):
    return isinstance(value, Accessor)


__all__ = [
    "Accessor",
    "BoundAccessor",
    "accessor",
    "bind_member",
    "is_accessor",
]
