"""graph-merge: Deduplicate entities in a property graph.

Vertices that match on a rule's properties are fused into one vertex.
Incident edges are redirected onto it and property values accumulate.
Rules run in order and later rules see the merges of earlier ones.
"""

__version__ = "0.1.0"

from graph_merge.graph.factory import close_graph, open_graph
from graph_merge.graph.networkx_store import NetworkXGraphStore
from graph_merge.merge.engine import fuse_vertices
from graph_merge.merge.merger import merge_graph
from graph_merge.merge.redirect import IdentityRedirect
from graph_merge.rules.base import MergeRule, PropertiesMergeRule
from graph_merge.rules.registry import discover_rules, register_rule

__all__ = [
    "__version__",
    "IdentityRedirect",
    "MergeRule",
    "NetworkXGraphStore",
    "PropertiesMergeRule",
    "close_graph",
    "discover_rules",
    "fuse_vertices",
    "merge_graph",
    "open_graph",
    "register_rule",
]
