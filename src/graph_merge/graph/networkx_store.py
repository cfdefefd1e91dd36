"""Graph store backed by a NetworkX MultiDiGraph."""

import json
import logging
import os
from collections.abc import Iterable
from datetime import datetime
from importlib.metadata import version as _get_version
from pathlib import Path
from typing import Any

try:
    __version__ = _get_version("graph-merge")
except Exception:
    __version__ = "unknown"

import networkx as nx

from graph_merge.graph.store import (
    Edge,
    EdgeId,
    ElementNotFoundError,
    StoreClosedError,
    VertexId,
)

logger = logging.getLogger(__name__)


def _as_values(value: Any) -> list[Any]:
    """Normalize a property value into the stored multi-value list."""
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _records(data: dict[str, Any], key: str, path: str | Path) -> list[dict[str, Any]]:
    """Node or link records of a node-link document, checked for shape."""
    records = data.get(key) or []
    if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
        raise ValueError(f"'{key}' in {path} must be a list of objects")
    return records


def _properties(record: dict[str, Any], path: str | Path) -> dict[str, Any]:
    properties = record.get("properties") or {}
    if not isinstance(properties, dict):
        raise ValueError(f"Properties of {record.get('id')!r} in {path} must be an object")
    return properties


class NetworkXGraphStore:
    """In-process graph store using NetworkX.

    Vertices are graph nodes carrying ``label`` and ``properties`` attributes.
    Edges are keyed by a store-wide integer identity so that a single edge can
    be addressed without its endpoints. When the store is file-backed, every
    ``commit()`` writes the graph to disk as node-link JSON.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self.graph = nx.MultiDiGraph()
        self.path = Path(path) if path is not None else None
        self.created_at = datetime.now()
        self.updated_at = datetime.now()
        self.commit_count = 0
        self.closed = False
        self._next_vertex_id = 0
        self._next_edge_id = 0
        self._edge_index: dict[EdgeId, tuple[VertexId, VertexId]] = {}

    @classmethod
    def load(cls, path: str | Path) -> "NetworkXGraphStore":
        """Load a store from a node-link JSON file and keep it file-backed."""
        data = json.loads(Path(path).read_text())
        if not isinstance(data, dict):
            raise ValueError(f"Expected a node-link object at the top of {path}")
        store = cls(path)

        metadata = data.get("metadata") or {}
        created_at = metadata.get("created_at") if isinstance(metadata, dict) else None
        if isinstance(created_at, str):
            try:
                store.created_at = datetime.fromisoformat(created_at)
            except ValueError:
                pass

        for node in _records(data, "nodes", path):
            vertex_id = node.get("id")
            if vertex_id is None:
                continue
            properties = {
                key: _as_values(value) for key, value in _properties(node, path).items()
            }
            store.graph.add_node(vertex_id, label=node.get("label", ""), properties=properties)
            if isinstance(vertex_id, int):
                store._next_vertex_id = max(store._next_vertex_id, vertex_id + 1)

        for link in _records(data, "links" if "links" in data else "edges", path):
            source = link.get("source")
            target = link.get("target")
            if source is None or target is None:
                continue
            if not store.graph.has_node(source) or not store.graph.has_node(target):
                logger.debug(f"Edge {source} -> {target} references a missing vertex, skipping")
                continue
            edge_id = link.get("id")
            if edge_id is None or edge_id in store._edge_index:
                edge_id = store._allocate_edge_id()
            elif isinstance(edge_id, int):
                store._next_edge_id = max(store._next_edge_id, edge_id + 1)
            properties = {
                key: _as_values(value) for key, value in _properties(link, path).items()
            }
            store.graph.add_edge(
                source, target, key=edge_id, label=link.get("label", ""), properties=properties
            )
            store._edge_index[edge_id] = (source, target)

        logger.info(
            f"Graph loaded: {store.vertex_count} vertices, {store.edge_count} edges from {path}"
        )
        return store

    # ------------------------------------------------------------------
    # Vertices
    # ------------------------------------------------------------------

    def vertices(self, label: str | None = None, has: Iterable[str] = ()) -> list[VertexId]:
        """Vertex identities with ``label`` that carry every key in ``has``."""
        self._check_open()
        required = list(has)
        result = []
        for vertex_id, data in self.graph.nodes(data=True):
            if label is not None and data["label"] != label:
                continue
            if any(key not in data["properties"] for key in required):
                continue
            result.append(vertex_id)
        return result

    def has_vertex(self, vertex_id: VertexId) -> bool:
        self._check_open()
        return self.graph.has_node(vertex_id)

    def vertex_label(self, vertex_id: VertexId) -> str:
        return self._vertex_data(vertex_id)["label"]

    def vertex_properties(self, vertex_id: VertexId) -> dict[str, list[Any]]:
        """Copy of the vertex's properties, key -> list of values."""
        properties = self._vertex_data(vertex_id)["properties"]
        return {key: list(values) for key, values in properties.items()}

    def add_vertex(self, label: str, **properties: Any) -> VertexId:
        self._check_open()
        vertex_id = self._next_vertex_id
        self._next_vertex_id += 1
        self.graph.add_node(
            vertex_id,
            label=label,
            properties={key: _as_values(value) for key, value in properties.items()},
        )
        self.updated_at = datetime.now()
        return vertex_id

    def set_vertex_property(
        self, vertex_id: VertexId, key: str, value: Any, accumulate: bool = True
    ) -> None:
        properties = self._vertex_data(vertex_id)["properties"]
        self._set_property(properties, key, value, accumulate)

    def drop_vertices(self, vertex_ids: Iterable[VertexId]) -> int:
        """Remove vertices and every edge incident to them. Returns count removed."""
        self._check_open()
        removed = 0
        for vertex_id in list(vertex_ids):
            if not self.graph.has_node(vertex_id):
                logger.debug(f"Vertex {vertex_id} not in graph, nothing to drop")
                continue
            incident = list(self.graph.in_edges(vertex_id, keys=True)) + list(
                self.graph.out_edges(vertex_id, keys=True)
            )
            for _source, _target, edge_id in incident:
                self._edge_index.pop(edge_id, None)
            self.graph.remove_node(vertex_id)
            removed += 1
        if removed:
            self.updated_at = datetime.now()
        return removed

    # ------------------------------------------------------------------
    # Edges
    # ------------------------------------------------------------------

    def add_edge(self, label: str, source: VertexId, target: VertexId, **properties: Any) -> EdgeId:
        self._check_open()
        for vertex_id in (source, target):
            if not self.graph.has_node(vertex_id):
                raise ElementNotFoundError(f"Vertex {vertex_id!r} not found")
        edge_id = self._allocate_edge_id()
        self.graph.add_edge(
            source,
            target,
            key=edge_id,
            label=label,
            properties={key: _as_values(value) for key, value in properties.items()},
        )
        self._edge_index[edge_id] = (source, target)
        self.updated_at = datetime.now()
        return edge_id

    def in_edges(self, vertex_id: VertexId) -> list[Edge]:
        self._vertex_data(vertex_id)
        return [
            Edge(key, data["label"], source, target)
            for source, target, key, data in self.graph.in_edges(vertex_id, keys=True, data=True)
        ]

    def out_edges(self, vertex_id: VertexId) -> list[Edge]:
        self._vertex_data(vertex_id)
        return [
            Edge(key, data["label"], source, target)
            for source, target, key, data in self.graph.out_edges(vertex_id, keys=True, data=True)
        ]

    def edges(self, label: str | None = None) -> list[Edge]:
        self._check_open()
        return [
            Edge(key, data["label"], source, target)
            for source, target, key, data in self.graph.edges(keys=True, data=True)
            if label is None or data["label"] == label
        ]

    def edge_properties(self, edge_id: EdgeId) -> dict[str, list[Any]]:
        properties = self._edge_data(edge_id)["properties"]
        return {key: list(values) for key, values in properties.items()}

    def set_edge_property(
        self, edge_id: EdgeId, key: str, value: Any, accumulate: bool = True
    ) -> None:
        properties = self._edge_data(edge_id)["properties"]
        self._set_property(properties, key, value, accumulate)

    # ------------------------------------------------------------------
    # Transactions and persistence
    # ------------------------------------------------------------------

    def commit(self) -> None:
        """Make pending changes durable. Writes the JSON file when file-backed."""
        self._check_open()
        if self.path is not None:
            self.save(self.path)
        self.commit_count += 1
        logger.debug(f"Commit {self.commit_count} complete")

    def close(self) -> None:
        self.closed = True

    def export(self) -> dict[str, Any]:
        """Export graph as JSON-serializable dict."""
        nodes = [
            {"id": vertex_id, "label": data["label"], "properties": data["properties"]}
            for vertex_id, data in self.graph.nodes(data=True)
        ]
        links = [
            {
                "id": key,
                "source": source,
                "target": target,
                "label": data["label"],
                "properties": data["properties"],
            }
            for source, target, key, data in self.graph.edges(keys=True, data=True)
        ]
        metadata = {
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "vertex_count": self.graph.number_of_nodes(),
            "edge_count": self.graph.number_of_edges(),
            "graph_merge_version": __version__,
        }
        return {"metadata": metadata, "nodes": nodes, "links": links}

    def save(self, path: str | Path) -> None:
        """Save graph to a JSON file, replacing it atomically."""
        out = Path(path)
        out.parent.mkdir(parents=True, exist_ok=True)
        tmp = out.with_name(out.name + ".tmp")
        tmp.write_text(json.dumps(self.export(), indent=2, default=str))
        os.replace(tmp, out)
        logger.info(
            f"Graph saved: {self.vertex_count} vertices, {self.edge_count} edges → {out}"
        )

    @property
    def vertex_count(self) -> int:
        return self.graph.number_of_nodes()

    @property
    def edge_count(self) -> int:
        return self.graph.number_of_edges()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _check_open(self) -> None:
        if self.closed:
            raise StoreClosedError("Graph store is closed")

    def _allocate_edge_id(self) -> int:
        while self._next_edge_id in self._edge_index:
            self._next_edge_id += 1
        edge_id = self._next_edge_id
        self._next_edge_id += 1
        return edge_id

    def _vertex_data(self, vertex_id: VertexId) -> dict[str, Any]:
        self._check_open()
        if not self.graph.has_node(vertex_id):
            raise ElementNotFoundError(f"Vertex {vertex_id!r} not found")
        return self.graph.nodes[vertex_id]

    def _edge_data(self, edge_id: EdgeId) -> dict[str, Any]:
        self._check_open()
        endpoints = self._edge_index.get(edge_id)
        if endpoints is None:
            raise ElementNotFoundError(f"Edge {edge_id!r} not found")
        source, target = endpoints
        return self.graph.edges[source, target, edge_id]

    def _set_property(
        self, properties: dict[str, list[Any]], key: str, value: Any, accumulate: bool
    ) -> None:
        if accumulate:
            properties.setdefault(key, []).append(value)
        else:
            properties[key] = [value]
        self.updated_at = datetime.now()
