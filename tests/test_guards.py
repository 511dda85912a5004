"""Tests for the ``abstract`` and ``final`` class guards."""

from __future__ import annotations

import pytest

from heirloom import (
    AbstractClassError,
    ConstructionPolicyError,
    FinalClassError,
    GUARD_ABSTRACT,
    GUARD_FINAL,
    UnimplementedOperationError,
    abstract,
    aliases_of,
    canonical_identity,
    final,
    get_record,
    guard_kind,
    is_participant,
    share,
)


@abstract
class Animal:
    """Something that makes a sound."""

    def __init__(self, sound):
        self.__prot = share(
            self, Animal, {"sound": sound, "speak": lambda self: self.__prot.sound}
        )


class Dog(Animal):
    def __init__(self):
        super().__init__("woof")
        self.__prot = share(
            self, Dog, {"speak": lambda self: self.__prot.super.speak().upper()}
        )

    def prot(self):
        return self.__prot


@final
class Sealed:
    def __init__(self):
        self.__prot = share(self, Sealed, {"n": 5})

    def prot(self):
        return self.__prot


class Shield:
    def __init_subclass__(cls, **kwargs):
        pass


def test_abstract_class_refuses_direct_construction():
    with pytest.raises(AbstractClassError, match="Class Animal is abstract"):
        Animal("meow")


def test_abstract_class_allows_subclasses():
    dog = Dog()

    assert isinstance(dog, Animal)
    assert isinstance(dog, Animal.__wrapped__)
    assert dog.prot().speak() == "WOOF"
    assert dog.prot().sound == "woof"


def test_guard_wrapper_keeps_class_metadata():
    assert Animal.__name__ == "Animal"
    assert Animal.__qualname__ == Animal.__wrapped__.__qualname__
    assert Animal.__module__ == __name__
    assert Animal.__doc__ == "Something that makes a sound."
    assert guard_kind(Animal) == GUARD_ABSTRACT
    assert guard_kind(Dog) is None


def test_wrapper_and_wrapped_class_share_records():
    dog = Dog()
    wrapped = Animal.__wrapped__

    assert canonical_identity(Animal) is wrapped
    assert get_record(dog, Animal) is get_record(dog, wrapped)
    assert is_participant(Animal)
    assert Animal in aliases_of(wrapped)


def test_registering_against_the_undecorated_class():
    class Plain:
        def __init__(self):
            self.__prot = share(self, __class__, {"v": 1})

    guarded = abstract(Plain)

    class Child(guarded):
        def __init__(self):
            super().__init__()
            self.__prot = share(self, Child, {"w": 2})

        def prot(self):
            return self.__prot

    child = Child()

    assert child.prot().v == 1
    assert child.prot().w == 2
    assert get_record(child, Plain) is get_record(child, guarded)


def test_abstract_is_idempotent():
    assert abstract(Animal) is Animal


def test_abstract_placeholder_raises_when_called():
    placeholder = abstract("area")

    with pytest.raises(UnimplementedOperationError, match=r"area\(\) must be overridden"):
        placeholder()
    assert issubclass(UnimplementedOperationError, NotImplementedError)


def test_abstract_placeholder_as_method():
    class Figure:
        area = abstract("area")

    class Circle(Figure):
        def area(self):
            return 3

    with pytest.raises(UnimplementedOperationError):
        Figure().area()
    assert Circle().area() == 3


def test_abstract_rejects_other_values():
    with pytest.raises(TypeError, match="abstract parameter must be a class or string"):
        abstract(123)


def test_final_class_constructs_instances():
    obj = Sealed()

    assert type(obj) is Sealed
    assert isinstance(obj, Sealed.__wrapped__)
    assert obj.prot().n == 5
    assert guard_kind(Sealed) == GUARD_FINAL


def test_final_class_refuses_subclass_declarations():
    with pytest.raises(FinalClassError, match="Cannot extend final class Sealed"):

        class Sneaky(Sealed):
            pass

    with pytest.raises(FinalClassError):
        type("Sneaky", (Sealed,), {})


def test_final_class_refuses_construction_of_descendants():
    # Shield stops the __init_subclass__ chain, and type.__new__ skips the
    # metaclass __new__, so only construction can catch this one.
    bypass = type.__new__(type(Sealed), "Bypass", (Shield, Sealed), {})

    with pytest.raises(FinalClassError, match="descendant of a final class"):
        bypass()
    assert issubclass(FinalClassError, ConstructionPolicyError)


def test_final_class_forwards_attribute_writes():
    @final
    class Settings:
        pass

    Settings.flag = 1
    assert vars(Settings.__wrapped__)["flag"] == 1
    assert Settings.flag == 1

    del Settings.flag
    assert not hasattr(Settings.__wrapped__, "flag")


def test_final_wrapper_keeps_its_own_metadata():
    @final
    class Notes:
        """Original text."""

    Notes.__doc__ = "Updated text."
    Notes.__qualname__ = "Renamed"

    assert Notes.__doc__ == "Updated text."
    assert Notes.__qualname__ == "Renamed"
    assert Notes.__wrapped__.__doc__ == "Original text."
    assert Notes.__wrapped__.__qualname__.endswith("Notes")


def test_final_is_idempotent_and_validates():
    assert final(Sealed) is Sealed
    with pytest.raises(TypeError, match="final parameter must be a class"):
        final("Sealed")


def test_guards_keep_custom_metaclasses():
    class Meta(type):
        pass

    class WithMeta(metaclass=Meta):
        pass

    sealed = final(WithMeta)

    assert isinstance(sealed, Meta)
    assert isinstance(sealed(), WithMeta)


def test_static_sharing_through_a_wrapper():
    class Config:
        pass

    first = share(Config, {"mode": "fast"})
    sealed = final(Config)
    second = share(sealed, {"level": 2})

    assert get_record(sealed, sealed) is get_record(Config, Config)
    assert second.mode == "fast"
    assert second.level == 2
    assert first.mode == "fast"
