"""Graph store protocol and the element types shared by store backends.

The merge engine never talks to a concrete database. It consumes the
capabilities below: filter vertices by label and property presence, read
multi-valued properties, create vertices and edges, set properties with
accumulate-or-set semantics, drop vertices together with their edges, commit.
"""

from collections.abc import Hashable, Iterable
from dataclasses import dataclass
from typing import Any, Protocol

VertexId = Hashable
EdgeId = Hashable


class GraphStoreError(RuntimeError):
    """Base class for graph store failures."""


class ElementNotFoundError(GraphStoreError, KeyError):
    """A vertex or edge identity is not present in the store."""


class StoreClosedError(GraphStoreError):
    """Operation attempted on a closed store."""


class GraphOpenError(GraphStoreError):
    """The store could not be opened from its connection configuration."""


@dataclass(frozen=True)
class Edge:
    """A directed, labelled edge between two vertices."""

    id: EdgeId
    label: str
    source: VertexId
    target: VertexId


class GraphStore(Protocol):
    """Protocol for graph storage backends.

    Properties are multi-valued: every key maps to a list of values. Setting a
    property with ``accumulate=True`` appends to that list, otherwise the list
    is replaced by the single value.
    """

    def vertices(self, label: str | None = None, has: Iterable[str] = ()) -> list[VertexId]: ...

    def has_vertex(self, vertex_id: VertexId) -> bool: ...

    def vertex_label(self, vertex_id: VertexId) -> str: ...

    def vertex_properties(self, vertex_id: VertexId) -> dict[str, list[Any]]: ...

    def add_vertex(self, label: str, **properties: Any) -> VertexId: ...

    def add_edge(self, label: str, source: VertexId, target: VertexId, **properties: Any) -> EdgeId: ...

    def in_edges(self, vertex_id: VertexId) -> list[Edge]: ...

    def out_edges(self, vertex_id: VertexId) -> list[Edge]: ...

    def edges(self, label: str | None = None) -> list[Edge]: ...

    def edge_properties(self, edge_id: EdgeId) -> dict[str, list[Any]]: ...

    def set_vertex_property(
        self, vertex_id: VertexId, key: str, value: Any, accumulate: bool = True
    ) -> None: ...

    def set_edge_property(
        self, edge_id: EdgeId, key: str, value: Any, accumulate: bool = True
    ) -> None: ...

    def drop_vertices(self, vertex_ids: Iterable[VertexId]) -> int: ...

    def commit(self) -> None: ...

    def close(self) -> None: ...

    @property
    def vertex_count(self) -> int: ...

    @property
    def edge_count(self) -> int: ...
