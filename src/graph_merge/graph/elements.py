"""Property helpers for vertices and edges held in a graph store."""

import logging
from typing import Any

from graph_merge.graph.store import EdgeId, GraphStore, VertexId

logger = logging.getLogger(__name__)


def freeze_value(value: Any) -> Any:
    """Hashable form of a property value, compared by structure.

    Lists and tuples become tuples, dicts become tuples of key/value pairs
    sorted by key, sets become frozensets. Nested values are frozen too.
    """
    if isinstance(value, (list, tuple)):
        return tuple(freeze_value(v) for v in value)
    if isinstance(value, dict):
        items = ((k, freeze_value(v)) for k, v in value.items())
        return tuple(sorted(items, key=lambda item: repr(item[0])))
    if isinstance(value, (set, frozenset)):
        return frozenset(freeze_value(v) for v in value)
    return value


def collapse_values(values: list[Any]) -> Any:
    """Reduce a multi-value list to a single hashable value.

    Returns None for no values, the value itself when every stored value is
    equal (``["Martha", "Martha"]`` reads as ``"Martha"``), otherwise a tuple
    of all values in insertion order, repeats included.
    """
    frozen = [freeze_value(value) for value in values]
    if not frozen:
        return None
    if all(value == frozen[0] for value in frozen):
        return frozen[0]
    return tuple(frozen)


def get_property(store: GraphStore, vertex_id: VertexId, key: str) -> Any:
    """Read a vertex property, collapsing repeated values (None if absent)."""
    values = store.vertex_properties(vertex_id).get(key)
    if values is None:
        return None
    return collapse_values(values)


def get_edge_property(store: GraphStore, edge_id: EdgeId, key: str) -> Any:
    """Read an edge property, collapsing repeated values (None if absent)."""
    values = store.edge_properties(edge_id).get(key)
    if values is None:
        return None
    return collapse_values(values)


def copy_vertex_properties(store: GraphStore, source: VertexId, target: VertexId) -> int:
    """Append every property value of ``source`` onto ``target``.

    Existing values on the target are kept, so repeated copies accumulate
    into multi-valued properties. Returns the number of values copied.
    """
    copied = 0
    for key, values in store.vertex_properties(source).items():
        for value in values:
            store.set_vertex_property(target, key, value, accumulate=True)
            copied += 1
    return copied


def copy_edge_properties(store: GraphStore, source: EdgeId, target: EdgeId) -> int:
    """Append every property value of edge ``source`` onto edge ``target``."""
    copied = 0
    for key, values in store.edge_properties(source).items():
        for value in values:
            store.set_edge_property(target, key, value, accumulate=True)
            copied += 1
    return copied
