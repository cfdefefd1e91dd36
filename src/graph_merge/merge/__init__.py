"""Vertex merging: grouping, fusion and identity redirection."""

from graph_merge.merge.engine import fuse_vertices
from graph_merge.merge.grouper import find_merge_sets
from graph_merge.merge.merger import merge_graph
from graph_merge.merge.redirect import IdentityRedirect, RedirectConflictError

__all__ = [
    "IdentityRedirect",
    "RedirectConflictError",
    "find_merge_sets",
    "fuse_vertices",
    "merge_graph",
]
