"""Shared constant values for the heirloom runtime."""

LOGGER_NAME = "heirloom"

# Name under which a facade exposes its ancestor view; members may not use it.
SUPER_ATTRIBUTE = "super"

# Side table attached to every owner's ``__dict__``.
RECORDS_ATTRIBUTE = "__heirloom_records__"

# Marks a guard wrapper class with the guard kind that produced it.
GUARD_ATTRIBUTE = "__heirloom_guard__"

GUARD_ABSTRACT = "abstract"
GUARD_FINAL = "final"
GUARD_KINDS = [GUARD_ABSTRACT, GUARD_FINAL]

# Attribute installed on a class by ``save_self`` pointing back at that class.
CLASS_OF_ATTRIBUTE = "klass"

DEFINE_DEFAULTS = {
    "enumerable": True,
    "configurable": True,
    "writable": True,
}

GUARD_COLORS = {
    None: "#B0BEC5",
    GUARD_ABSTRACT: "#FFEB3B",
    GUARD_FINAL: "#FF7043",
}

DOT_GRAPH_NAME = "heirloom_layers"

__all__ = [
    "LOGGER_NAME",
    "SUPER_ATTRIBUTE",
    "RECORDS_ATTRIBUTE",
    "GUARD_ATTRIBUTE",
    "GUARD_ABSTRACT",
    "GUARD_FINAL",
    "GUARD_KINDS",
    "CLASS_OF_ATTRIBUTE",
    "DEFINE_DEFAULTS",
    "GUARD_COLORS",
    "DOT_GRAPH_NAME",
]
