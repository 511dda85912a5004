"""Tests for ``heirloom.accessors``."""

from __future__ import annotations

import functools
import types

import pytest

from heirloom import Accessor, BoundAccessor, accessor, bind_member, is_accessor, share


def _getter(self):
    return "got"


def _setter(self, value):
    self.value = value


class Owner:
    pass


def test_accessor_from_mapping():
    tagged = accessor({"get": _getter, "set": _setter})

    assert isinstance(tagged, Accessor)
    assert tagged.fget is _getter
    assert tagged.fset is _setter
    assert is_accessor(tagged)


def test_accessor_from_keywords_and_partial_pairs():
    getter_only = accessor(get=_getter)
    setter_only = accessor(set=_setter)

    assert getter_only.fget is _getter and getter_only.fset is None
    assert setter_only.fget is None and setter_only.fset is _setter


def test_accessor_from_property():
    tagged = accessor(property(_getter, _setter))

    assert tagged.fget is _getter
    assert tagged.fset is _setter


@pytest.mark.parametrize("value", [{}, {"foo": "bar"}, 123, "get", property()])
def test_accessor_returns_none_without_get_or_set(value):
    assert accessor(value) is None


def test_accessor_rejects_non_callables():
    with pytest.raises(TypeError, match="accessor get must be callable"):
        accessor({"get": "nope"})
    with pytest.raises(TypeError, match="accessor set must be callable"):
        Accessor(fset=1)


def test_bind_produces_bound_halves():
    owner = Owner()
    bound = accessor(get=_getter, set=_setter).bind(owner, "field")

    assert isinstance(bound, BoundAccessor)
    assert bound.read() == "got"
    bound.write(7)
    assert owner.value == 7
    assert bound.name == "field"


def test_bound_accessor_missing_halves():
    with pytest.raises(AttributeError, match="write-only"):
        BoundAccessor(None, print, "out").read()
    with pytest.raises(AttributeError, match="read-only"):
        BoundAccessor(lambda: 1, None, "in").write(2)


def test_bind_member_binds_functions():
    owner = Owner()
    bound = bind_member(_getter, owner)

    assert isinstance(bound, types.MethodType)
    assert bound.__self__ is owner
    assert bound() == "got"


def test_bind_member_follows_class_namespace_rules():
    owner = Owner()

    def plain():
        return "static"

    def which(cls):
        return cls

    assert bind_member(staticmethod(plain), owner) is plain
    assert bind_member(classmethod(which), owner)() is Owner
    assert bind_member(classmethod(which), Owner)() is Owner


def test_bind_member_leaves_other_values_alone():
    owner = Owner()
    partial = functools.partial(_getter, owner)

    assert bind_member(len, owner) is len
    assert bind_member(partial, owner) is partial
    assert bind_member(42, owner) == 42


def test_plain_mapping_member_is_data_not_accessor():
    owner = Owner()
    prot = share(owner, Owner, {"config": {"get": 1}})

    assert prot.config == {"get": 1}
