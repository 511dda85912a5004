"""Inspection and graph export for shared member layers."""
from __future__ import annotations

from pathlib import Path

try:
    import networkx as nx
except ModuleNotFoundError:  # pragma: no cover
    nx = None

try:
    import pydot
except ModuleNotFoundError:  # pragma: no cover
    pydot = None

from ..constants import DOT_GRAPH_NAME, GUARD_COLORS
from .facade import facade_info
from .guards import guard_kind
from .registry import aliases_of, get_participants, iter_records, nearest_participant


def _label(identity) -> str:
    return getattr(identity, "__qualname__", None) or repr(identity)


def _key_label(key) -> str:
    return key if isinstance(key, str) else repr(key)


def describe_facade(facade):
    """Return one entry per layer, from ``facade`` up to the root layer."""

    layers = []
    node = facade
    while node is not None:
        info = facade_info(node)
        layers.append(
            {
                "identity": _label(info.identity),
                "members": [_key_label(k) for k in info.members],
                "accessors": [_key_label(k) for k in info.accessors],
                "super": [_key_label(k) for k in info.super_keys],
            }
        )
        node = info.parent
    return layers


def _require_networkx():
    if nx is None:
        raise RuntimeError("Layer graphs require networkx to be installed")


def layer_graph(owner):
    """Build a graph of the owner's records, each pointing at its seed."""

    _require_networkx()
    graph = nx.DiGraph()
    for record in iter_records(owner):
        info = facade_info(record.facade)
        name = _label(record.identity)
        graph.add_node(
            name,
            label=name,
            members=[_key_label(k) for k in info.members],
            accessors=[_key_label(k) for k in info.accessors],
            color=GUARD_COLORS[None],
            kind="record",
        )
        if record.seed is not None and record.seed is not record:
            seed_name = _label(record.seed.identity)
            if seed_name not in graph:
                graph.add_node(seed_name, label=seed_name, kind="seed", color=GUARD_COLORS[None])
            graph.add_edge(name, seed_name, relation="seeded-from")
    return graph


def participant_graph():
    """Graph of every participating class linked to its nearest participating ancestor."""

    _require_networkx()
    graph = nx.DiGraph()
    for identity in get_participants():
        name = _label(identity)
        kinds = [guard_kind(wrapper) for wrapper in aliases_of(identity)]
        kind = kinds[0] if kinds else None
        graph.add_node(name, label=name, guard=kind, color=GUARD_COLORS.get(kind, GUARD_COLORS[None]))
        ancestor = nearest_participant(identity)
        if ancestor is not None:
            graph.add_edge(name, _label(ancestor), relation="inherits")
    return graph


def print_layers(facade, indent=0):
    pad = "  " * indent
    for depth, layer in enumerate(describe_facade(facade)):
        print(f"{pad}{'  ' * depth}{layer['identity']}")
        if layer["members"]:
            print(f"{pad}{'  ' * depth}  members: {', '.join(layer['members'])}")
        if layer["accessors"]:
            print(f"{pad}{'  ' * depth}  accessors: {', '.join(layer['accessors'])}")
        if layer["super"]:
            print(f"{pad}{'  ' * depth}  super: {', '.join(layer['super'])}")


def export_layer_dot(owner, output_path):
    """Write the owner's layer graph as a Graphviz DOT file."""

    if pydot is None:
        raise RuntimeError("DOT export requires the optional pydot dependency")
    graph = layer_graph(owner)

    dot = pydot.Dot(DOT_GRAPH_NAME, graph_type="digraph", rankdir="BT", fontname="Helvetica")
    for name, attrs in graph.nodes(data=True):
        label = name
        if attrs.get("members") or attrs.get("accessors"):
            keys = list(attrs.get("members", [])) + [f"{k} (accessor)" for k in attrs.get("accessors", [])]
            label = f"{name}\\n" + "\\n".join(keys)
        dot.add_node(
            pydot.Node(
                f'"{name}"',
                label=f'"{label}"',
                shape="box",
                style="filled",
                fillcolor=attrs.get("color", GUARD_COLORS[None]),
                fontname="Helvetica",
            )
        )
    for src, dst in graph.edges():
        dot.add_edge(pydot.Edge(f'"{src}"', f'"{dst}"', style="dashed", color="#7f8c8d"))

    output_path = Path(output_path)
    if output_path.parent and not output_path.parent.exists():
        output_path.parent.mkdir(parents=True, exist_ok=True)
    dot.write_raw(str(output_path))
    return output_path


__all__ = [
    "describe_facade",
    "export_layer_dot",
    "layer_graph",
    "participant_graph",
    "print_layers",
]
