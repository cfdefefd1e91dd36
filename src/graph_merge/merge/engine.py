"""Vertex fusion: collapse one merge set into a single new vertex."""

import logging
from collections.abc import Iterable

from graph_merge.graph.elements import copy_edge_properties, copy_vertex_properties
from graph_merge.graph.store import EdgeId, GraphStore, VertexId
from graph_merge.merge.redirect import IdentityRedirect

logger = logging.getLogger(__name__)


def fuse_vertices(
    store: GraphStore,
    group: Iterable[VertexId],
    label: str,
    redirect: IdentityRedirect,
) -> VertexId | None:
    """Fuse a group of vertices into one new vertex.

    For each member, in group order:
    1. Append its properties onto the new vertex
    2. Copy its inbound and outbound edges onto the new vertex, resolving the
       far endpoint through ``redirect`` (members of the group resolve to the
       new vertex, so edges between members become self-loops)
    3. Record the member as redirected to the new vertex

    Each original edge is copied once even when it is reachable from both of
    its endpoints. The members are dropped together after copying, then the
    store is committed.

    Args:
        store: Graph store to modify
        group: Vertices to fuse
        label: Label for the new vertex
        redirect: Redirect map shared by the current merge call

    Returns:
        Identity of the new vertex, or None if the group is empty
    """
    members = list(dict.fromkeys(group))
    logger.debug(f"Merging group of {len(members)} vertices")
    if not members:
        return None

    member_set = set(members)
    fused = store.add_vertex(label)

    def _resolve(vertex_id: VertexId) -> VertexId:
        if vertex_id in member_set:
            return fused
        return redirect.resolve(vertex_id)

    copied: set[EdgeId] = set()
    for original in members:
        logger.debug(f"Copying properties from vertex {original} onto new vertex")
        copy_vertex_properties(store, original, fused)

        edge_count = 0
        for edge in store.in_edges(original):
            if edge.id in copied:
                continue
            source = _resolve(edge.source)
            logger.debug(f"Copying IN edge {edge.id}, from {edge.source} (now {source})")
            new_edge = store.add_edge(edge.label, source, fused)
            copy_edge_properties(store, edge.id, new_edge)
            copied.add(edge.id)
            edge_count += 1

        for edge in store.out_edges(original):
            if edge.id in copied:
                continue
            target = _resolve(edge.target)
            logger.debug(f"Copying OUT edge {edge.id}, to {edge.target} (now {target})")
            new_edge = store.add_edge(edge.label, fused, target)
            copy_edge_properties(store, edge.id, new_edge)
            copied.add(edge.id)
            edge_count += 1

        logger.debug(f"{edge_count} edges copied from vertex {original}")
        redirect.record(original, fused)

    logger.debug("Removing original vertices")
    store.drop_vertices(members)
    store.commit()

    return fused
