"""Self-reference and bulk definition helpers."""

from __future__ import annotations

from collections.abc import Mapping

from ..constants import CLASS_OF_ATTRIBUTE, DEFINE_DEFAULTS

_DESCRIPTOR_KEYS = {"value", "get", "set", "writable", "enumerable", "configurable", "doc"}


class SelfReference:
    """Read-only attribute resolving to the object it is read from."""

    def __init__(self, name: str):
        self.name = name

    def __get__(self, instance, owner=None):
        return owner if instance is None else instance

    def __set__(self, instance, value):
        raise AttributeError(f"{self.name!r} is read-only")

    def __delete__(self, instance):
        raise AttributeError(f"{self.name!r} is read-only")


class ReadOnlyValue:
    """Read-only attribute holding a fixed value."""

    def __init__(self, name: str, value):
        self.name = name
        self.value = value

    def __get__(self, instance, owner=None):
        return self.value

    def __set__(self, instance, value):
        raise AttributeError(f"{self.name!r} is read-only")

    def __delete__(self, instance):
        raise AttributeError(f"{self.name!r} is read-only")


def save_self(obj, name: str) -> None:
    """Expose ``obj`` as ``obj.<name>``.

    For an instance the descriptor is installed on its class, so every
    instance reads itself back. For a class it also installs
    ``CLASS_OF_ATTRIBUTE`` so instances can reach the class that saved itself
    without going through ``type(self)``.
    """

    if not isinstance(name, str) or not name.isidentifier():
        raise TypeError(f"save_self name must be an identifier, got {name!r}")
    target = obj if isinstance(obj, type) else type(obj)
    if not isinstance(vars(target).get(name), SelfReference):
        setattr(target, name, SelfReference(name))
    if isinstance(obj, type):
        setattr(obj, CLASS_OF_ATTRIBUTE, ReadOnlyValue(CLASS_OF_ATTRIBUTE, obj))


def _normalize(name, entry) -> dict:
    if not isinstance(entry, Mapping):
        raise TypeError(f"definition for {name!r} must be a mapping")
    unknown = set(entry) - _DESCRIPTOR_KEYS
    if unknown:
        raise TypeError(f"definition for {name!r} has unknown keys: {sorted(unknown)}")
    if "value" in entry and ("get" in entry or "set" in entry):
        raise TypeError(f"definition for {name!r} mixes a value with get/set")
    desc = dict(entry)
    for key, default in DEFINE_DEFAULTS.items():
        if key == "writable" and "value" not in desc:
            continue
        desc.setdefault(key, default)
    return desc


def define(cls, members) -> dict:
    """Install partial descriptors on ``cls`` and return them normalised.

    Each entry of ``members`` maps an attribute name to any of ``value``,
    ``get``, ``set``, ``writable``, ``enumerable``, ``configurable`` and
    ``doc``. ``enumerable``, ``configurable`` and ``writable`` default to
    ``True``; ``writable`` is only filled in when a ``value`` is given.
    """

    if not isinstance(cls, type):
        raise TypeError("define target must be a class")
    if not isinstance(members, Mapping):
        raise TypeError("define members must be a mapping")

    normalized = {name: _normalize(name, entry) for name, entry in members.items()}
    for name, desc in normalized.items():
        if "value" in desc:
            if desc["writable"]:
                attribute = desc["value"]
            else:
                attribute = ReadOnlyValue(name, desc["value"])
        else:
            attribute = property(desc.get("get"), desc.get("set"), doc=desc.get("doc"))
        setattr(cls, name, attribute)
    return normalized


__all__ = [
    "ReadOnlyValue",
    "SelfReference",
    "define",
    "save_self",
]
