"""Partition a rule's vertices into merge sets."""

import logging
import threading
from collections import defaultdict
from concurrent import futures
from typing import Any

from graph_merge.graph.store import GraphStore, VertexId
from graph_merge.rules.base import PropertiesMergeRule

logger = logging.getLogger(__name__)

MergeSets = dict[tuple[Any, ...], list[VertexId]]


def candidate_vertices(store: GraphStore, rule: PropertiesMergeRule) -> list[VertexId]:
    """Vertices with the rule's label (and, by default, every key property)."""
    required = rule.properties if rule.require_all_properties else ()
    return store.vertices(rule.label, has=required)


def group_vertices(
    store: GraphStore,
    rule: PropertiesMergeRule,
    vertices: list[VertexId],
    workers: int = 1,
) -> MergeSets:
    """Group vertices by structural equality of their key tuples.

    Every vertex lands in exactly one group. With ``workers > 1`` the key
    computation is spread over a thread pool; members of each group keep the
    scan order whatever order the workers finish in.
    """
    indexed: dict[tuple[Any, ...], list[tuple[int, VertexId]]] = defaultdict(list)
    lock = threading.Lock()

    def _group_chunk(chunk: list[tuple[int, VertexId]]) -> None:
        local: dict[tuple[Any, ...], list[tuple[int, VertexId]]] = defaultdict(list)
        for index, vertex_id in chunk:
            local[rule.property_values(store, vertex_id)].append((index, vertex_id))
        with lock:
            for key, members in local.items():
                indexed[key].extend(members)

    numbered = list(enumerate(vertices))
    if workers <= 1 or len(numbered) < 2:
        _group_chunk(numbered)
    else:
        chunk_size = -(-len(numbered) // workers)
        chunks = [numbered[i:i + chunk_size] for i in range(0, len(numbered), chunk_size)]
        with futures.ThreadPoolExecutor(max_workers=workers) as executor:
            for future in [executor.submit(_group_chunk, chunk) for chunk in chunks]:
                future.result()

    return {
        key: [vertex_id for _index, vertex_id in sorted(members, key=lambda m: m[0])]
        for key, members in indexed.items()
    }


def filter_merge_sets(groups: MergeSets) -> MergeSets:
    """Drop groups with an entirely absent key or fewer than two members."""
    return {
        key: members
        for key, members in groups.items()
        if any(value is not None for value in key) and len(members) >= 2
    }


def find_merge_sets(
    store: GraphStore,
    rule: PropertiesMergeRule,
    workers: int = 1,
    vertices: list[VertexId] | None = None,
) -> MergeSets:
    """Compute the merge sets a rule produces on the current graph.

    Args:
        store: Graph to scan
        rule: Property rule supplying the label and key
        workers: Threads used to compute keys
        vertices: Pre-fetched candidate vertices (scanned from the store if None)

    Returns:
        Mapping of key tuple to the vertices sharing it, only for keys that
        are not entirely absent and hold two or more vertices
    """
    if vertices is None:
        vertices = candidate_vertices(store, rule)
    groups = group_vertices(store, rule, vertices, workers=workers)
    logger.debug(f"{len(vertices)} vertices fell into {len(groups)} groups")
    return filter_merge_sets(groups)
