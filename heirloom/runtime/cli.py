"""Command-line interface for inspecting shared member layers."""
from __future__ import annotations

import argparse
import importlib
import json
import logging
import sys

from ..constants import LOGGER_NAME
from .analysis import describe_facade, export_layer_dot, participant_graph, print_layers
from .registry import get_record

logger = logging.getLogger(f"{LOGGER_NAME}.cli")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="heirloom",
        description="Show the static shared member layers registered on a class.",
    )
    parser.add_argument("target", help="Class to inspect, as package.module:Class")
    parser.add_argument("--json", action="store_true", help="Print the layers as JSON")
    parser.add_argument("--dot", metavar="PATH", help="Write the layer graph as Graphviz DOT")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def load_target(target):
    """Import ``package.module:Class`` and return the class."""

    module_name, sep, attr_path = target.partition(":")
    if not sep or not module_name or not attr_path:
        raise ValueError(f"Target must look like package.module:Class, got {target!r}")
    obj = importlib.import_module(module_name)
    for part in attr_path.split("."):
        obj = getattr(obj, part)
    if not isinstance(obj, type):
        raise ValueError(f"{target} is not a class")
    return obj


def main(argv=None):
    params = parse_args(argv)
    if params.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s %(levelname)s %(message)s")

    try:
        target = load_target(params.target)
    except (ImportError, AttributeError, ValueError) as exc:
        print(f"  ✗ {exc}", file=sys.stderr)
        return 1

    record = get_record(target, target)
    if record is None:
        print(f"  ✗ {target.__qualname__} has no static shared members", file=sys.stderr)
        return 1

    if params.json:
        print(json.dumps(describe_facade(record.facade), indent=2))
    else:
        print(f"Static layers of {target.__qualname__}:")
        print_layers(record.facade, indent=1)
        graph = participant_graph()
        print("\nParticipants:")
        for name in sorted(graph.nodes):
            parents = sorted(graph.successors(name))
            suffix = f" -> {', '.join(parents)}" if parents else ""
            guard = graph.nodes[name].get("guard")
            marker = f" [{guard}]" if guard else ""
            print(f"  {name}{marker}{suffix}")

    if params.dot:
        path = export_layer_dot(target, params.dot)
        logger.debug("wrote layer graph to %s", path)
        print(f"  ✓ Layer graph exported → {path}")
    return 0


__all__ = [
    "load_target",
    "main",
    "parse_args",
]


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main(sys.argv[1:]))
