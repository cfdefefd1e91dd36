"""Graph store access.

A storage protocol, an in-process NetworkX implementation, property
helpers, and a factory that opens a store from a connection file.
"""

from graph_merge.graph.factory import close_graph, open_graph
from graph_merge.graph.networkx_store import NetworkXGraphStore
from graph_merge.graph.store import Edge, GraphStore

__all__ = ["Edge", "GraphStore", "NetworkXGraphStore", "close_graph", "open_graph"]
