"""Tests for ``save_self`` and ``define``."""

from __future__ import annotations

import pytest

from heirloom import CLASS_OF_ATTRIBUTE, ReadOnlyValue, SelfReference, define, save_self


def test_save_self_on_an_instance():
    class Widget:
        def __init__(self):
            save_self(self, "myself")

    first = Widget()
    second = Widget()

    assert first.myself is first
    assert second.myself is second
    assert isinstance(vars(Widget)["myself"], SelfReference)
    with pytest.raises(AttributeError, match="read-only"):
        first.myself = second


def test_save_self_on_a_class():
    class Widget:
        pass

    save_self(Widget, "pvt")
    inst = Widget()

    assert Widget.pvt is Widget
    assert inst.klass is Widget
    assert getattr(inst, CLASS_OF_ATTRIBUTE) is Widget
    with pytest.raises(AttributeError):
        inst.klass = object


def test_save_self_requires_an_identifier():
    class Widget:
        pass

    with pytest.raises(TypeError, match="must be an identifier"):
        save_self(Widget, "not a name")
    with pytest.raises(TypeError):
        save_self(Widget, 1)


class MyClass:
    pass


def test_define_installs_and_normalizes_descriptors():
    result = define(
        MyClass,
        {
            "prop1": {"value": 10},
            "prop2": {"get": lambda self: 20, "enumerable": False},
            "prop3": {"value": lambda: 30, "writable": False},
        },
    )
    inst = MyClass()

    assert MyClass.prop1 == 10
    assert inst.prop1 == 10
    assert inst.prop2 == 20
    assert inst.prop3() == 30

    assert result["prop1"] == {
        "value": 10,
        "enumerable": True,
        "configurable": True,
        "writable": True,
    }
    assert result["prop2"]["enumerable"] is False
    assert result["prop2"]["configurable"] is True
    assert "writable" not in result["prop2"]
    assert result["prop3"]["writable"] is False
    assert isinstance(vars(MyClass)["prop3"], ReadOnlyValue)


def test_define_read_only_values_reject_writes():
    class Frozen:
        pass

    define(Frozen, {"limit": {"value": 3, "writable": False}})

    with pytest.raises(AttributeError, match="read-only"):
        Frozen().limit = 4


def test_define_accessor_with_setter():
    class Box:
        def __init__(self):
            self._size = 0

    define(
        Box,
        {
            "size": {
                "get": lambda self: self._size,
                "set": lambda self, value: setattr(self, "_size", value),
                "doc": "Box size.",
            }
        },
    )
    box = Box()
    box.size = 9

    assert box.size == 9
    assert Box.size.__doc__ == "Box size."


@pytest.mark.parametrize(
    "target, members, message",
    [
        (None, {}, "define target must be a class"),
        (MyClass, None, "define members must be a mapping"),
        (MyClass, {"x": 1}, "must be a mapping"),
        (MyClass, {"x": {"colour": 1}}, "unknown keys"),
        (MyClass, {"x": {"value": 1, "get": print}}, "mixes a value with get/set"),
    ],
)
def test_define_rejects_bad_input(target, members, message):
    with pytest.raises(TypeError, match=message):
        define(target, members)
