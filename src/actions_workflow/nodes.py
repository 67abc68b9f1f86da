"""Helpers for building the generic YAML node tree.

Builders append ``yaml.nodes`` objects to ordered ``MappingNode.value``
lists, so key order in the output is exactly the order in which sections
were added. Plain values are converted with ``scalar_node``:

- ``bool``  -> plain ``true`` / ``false``
- ``int`` / ``float`` -> plain number
- ``str``   -> string; literal block (``|``) when it spans several lines
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from yaml.nodes import MappingNode, Node, ScalarNode, SequenceNode

from actions_workflow.types import SequenceStyle

__all__ = [
    "BOOL_TAG",
    "FLOAT_TAG",
    "INT_TAG",
    "MAP_TAG",
    "SEQ_TAG",
    "STR_TAG",
    "add_concurrency",
    "add_mapping",
    "add_node",
    "add_sequence",
    "mapping_node",
    "scalar_node",
    "sequence_node",
    "to_node",
]

STR_TAG = "tag:yaml.org,2002:str"
BOOL_TAG = "tag:yaml.org,2002:bool"
INT_TAG = "tag:yaml.org,2002:int"
FLOAT_TAG = "tag:yaml.org,2002:float"
SEQ_TAG = "tag:yaml.org,2002:seq"
MAP_TAG = "tag:yaml.org,2002:map"


def mapping_node() -> MappingNode:
    """Create an empty block mapping node."""
    return MappingNode(MAP_TAG, [])


def scalar_node(value: Any) -> ScalarNode:
    """Create a typed scalar node for a plain Python value.

    Args:
        value: bool, int, float or anything with a useful ``str()``.

    Returns:
        ScalarNode tagged so the emitter renders it with the matching type.
    """
    # bool first: it is a subclass of int
    if isinstance(value, bool):
        return ScalarNode(BOOL_TAG, "true" if value else "false")
    if isinstance(value, int):
        return ScalarNode(INT_TAG, str(value))
    if isinstance(value, float):
        return ScalarNode(FLOAT_TAG, repr(value))
    text = str(value)
    style = "|" if "\n" in text else None
    return ScalarNode(STR_TAG, text, style=style)


def sequence_node(items: Iterable[Any], sequence_style: SequenceStyle) -> SequenceNode:
    """Create a sequence node rendered in the requested style.

    FLOW applies only to lists of single-line scalars. Lists holding
    mappings, nested lists or literal blocks stay in block style so the
    style never changes how their items render.

    Args:
        items: Values or nodes; plain values are converted with ``to_node``.
        sequence_style: BLOCK for one item per line, FLOW for ``[a, b]``.

    Returns:
        SequenceNode holding the converted items.
    """
    nodes = [to_node(item, sequence_style) for item in items]
    flow = sequence_style is SequenceStyle.FLOW and all(
        isinstance(node, ScalarNode) and node.style is None for node in nodes
    )
    return SequenceNode(SEQ_TAG, nodes, flow_style=flow)


def to_node(value: Any, sequence_style: SequenceStyle = SequenceStyle.BLOCK) -> Node:
    """Convert a value (or nested mapping/list of values) to a node."""
    if isinstance(value, Node):
        return value
    if isinstance(value, Mapping):
        node = mapping_node()
        for key, item in value.items():
            add_node(node, key, to_node(item, sequence_style))
        return node
    if isinstance(value, (list, tuple)):
        return sequence_node(value, sequence_style)
    return scalar_node(value)


def add_node(parent: MappingNode, key: str, value: Any) -> Node:
    """Append ``key: value`` to ``parent`` and return the value node.

    Args:
        parent: Mapping node receiving the entry.
        key: Entry key.
        value: Node or plain value.

    Returns:
        The node stored under ``key``.
    """
    node = value if isinstance(value, Node) else scalar_node(value)
    parent.value.append((scalar_node(key), node))
    return node


def add_mapping(
    parent: MappingNode,
    key: str,
    values: Mapping[str, Any],
    sequence_style: SequenceStyle = SequenceStyle.BLOCK,
) -> MappingNode | None:
    """Append ``values`` under ``key`` when the mapping is non-empty."""
    if not values:
        return None
    node = to_node(values, sequence_style)
    add_node(parent, key, node)
    return node  # type: ignore[return-value]


def add_sequence(
    parent: MappingNode,
    key: str,
    items: Iterable[Any],
    sequence_style: SequenceStyle,
) -> SequenceNode | None:
    """Append ``items`` under ``key`` when there is at least one item."""
    items = list(items)
    if not items:
        return None
    node = sequence_node(items, sequence_style)
    add_node(parent, key, node)
    return node


def add_concurrency(
    parent: MappingNode, group: str | None, cancel_in_progress: bool
) -> None:
    """Append a ``concurrency`` section when ``group`` is not blank."""
    if not group or not group.strip():
        return
    node = mapping_node()
    add_node(node, "group", group)
    add_node(node, "cancel-in-progress", cancel_in_progress)
    add_node(parent, "concurrency", node)
