"""Shared test fixtures for graph-merge."""

import tempfile
from pathlib import Path

import pytest

from graph_merge.graph.networkx_store import NetworkXGraphStore


@pytest.fixture
def store() -> NetworkXGraphStore:
    """Empty in-memory graph store."""
    return NetworkXGraphStore()


@pytest.fixture
def scenario_graph() -> tuple[NetworkXGraphStore, dict]:
    """People with email addresses and IP addresses, some of them duplicated.

    Topology:
        James --email--> james@example.com    James --uses--> 127.0.0.1
        Simon --email--> simon@example.com    Simon --uses--> 127.0.0.2
        Jim   --email--> james@example.com    Jim   --uses--> 127.0.0.1
        Si    --email--> simon@foo.com
    Simon and Si share a sameAs reference.
    """
    graph = NetworkXGraphStore()
    ids = {}
    ids["p1"] = graph.add_vertex("Person", name="James")
    ids["e1"] = graph.add_vertex("Email", identifier="james@example.com")
    graph.add_edge("email", ids["p1"], ids["e1"])

    ids["p2"] = graph.add_vertex("Person", name="Simon", sameAs="http://www.example.com/simon")
    ids["e2"] = graph.add_vertex("Email", identifier="simon@example.com")
    graph.add_edge("email", ids["p2"], ids["e2"])

    ids["p3"] = graph.add_vertex("Person", name="Jim")
    ids["e3"] = graph.add_vertex("Email", identifier="james@example.com")
    graph.add_edge("email", ids["p3"], ids["e3"])

    ids["p4"] = graph.add_vertex("Person", name="Si", sameAs="http://www.example.com/simon")
    ids["e4"] = graph.add_vertex("Email", identifier="simon@foo.com")
    graph.add_edge("email", ids["p4"], ids["e4"])

    ids["i1"] = graph.add_vertex("IPAddress", identifier="127.0.0.1")
    ids["i2"] = graph.add_vertex("IPAddress", identifier="127.0.0.2")
    ids["i3"] = graph.add_vertex("IPAddress", identifier="127.0.0.1")

    graph.add_edge("uses", ids["p1"], ids["i1"])
    graph.add_edge("uses", ids["p2"], ids["i2"])
    graph.add_edge("uses", ids["p3"], ids["i3"])
    return graph, ids


@pytest.fixture
def family_graph() -> tuple[NetworkXGraphStore, dict]:
    """People of one label where two rules must chain to find every duplicate.

    Two Martha vertices share a sameAs reference; a third Martha has none.
    """
    graph = NetworkXGraphStore()
    ids = {}
    ids["peter"] = graph.add_vertex("Person", name="Peter")
    ids["martha1"] = graph.add_vertex(
        "Person", name="Martha", sameAs="http://www.example.com/Martha"
    )
    ids["sally"] = graph.add_vertex("Person", name="Sally")
    ids["martha2"] = graph.add_vertex(
        "Person", name="Martha", sameAs="http://www.example.com/Martha"
    )
    ids["martha3"] = graph.add_vertex("Person", name="Martha")

    graph.add_edge("married", ids["peter"], ids["martha1"])
    graph.add_edge("fatherOf", ids["peter"], ids["sally"])
    graph.add_edge("married", ids["martha2"], ids["peter"])
    graph.add_edge("motherOf", ids["martha3"], ids["sally"])
    return graph, ids


@pytest.fixture
def tmp_dir():
    """Temporary directory that cleans up after test."""
    with tempfile.TemporaryDirectory() as d:
        yield Path(d)
