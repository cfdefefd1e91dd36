"""Tests for graph_merge.merge.merger (rule orchestration)."""

import pytest

from graph_merge.graph.elements import get_property
from graph_merge.graph.networkx_store import NetworkXGraphStore
from graph_merge.graph.store import GraphStoreError
from graph_merge.merge.grouper import find_merge_sets
from graph_merge.merge.merger import merge_graph
from graph_merge.rules.base import MergeRule, PropertiesMergeRule
from graph_merge.rules.builtin import (
    MergeEmailOnIdentifier,
    MergeIPAddressOnIdentifier,
    MergePersonOnSameAs,
)


class PersonOnName(PropertiesMergeRule):
    @property
    def label(self) -> str:
        return "Person"

    @property
    def properties(self) -> list[str]:
        return ["name"]


class LabelOnlyRule(MergeRule):
    @property
    def label(self) -> str:
        return "Person"


class FailingStore(NetworkXGraphStore):
    """Store whose add_edge fails for one edge label."""

    fail_label = "uses"

    def add_edge(self, label, source, target, **properties):
        if label == self.fail_label:
            raise GraphStoreError(f"cannot write {label} edge")
        return super().add_edge(label, source, target, **properties)


def _vertices_by_name(store, label):
    return {
        get_property(store, v, "name") if get_property(store, v, "name") is not None
        else get_property(store, v, "identifier"): v
        for v in store.vertices(label)
    }


def _edge_descriptions(store, label, target_key):
    return sorted(
        (
            str(get_property(store, e.source, "name")),
            e.label,
            str(get_property(store, e.target, target_key)),
        )
        for e in store.edges(label)
    )


class TestScenario:
    """People, emails and IP addresses merged with the built-in rules."""

    def test_discovered_rules(self, scenario_graph):
        """Built-in rules dedupe Person on sameAs and Email/IP on identifier."""
        graph, _ids = scenario_graph
        stats = merge_graph(graph)

        people = _vertices_by_name(graph, "Person")
        assert len(people) == 3
        assert "James" in people
        assert "Jim" in people
        fused_names = [name for name in people if isinstance(name, tuple)]
        assert len(fused_names) == 1
        assert sorted(fused_names[0]) == ["Si", "Simon"]

        ips = sorted(get_property(graph, v, "identifier") for v in graph.vertices("IPAddress"))
        assert ips == ["127.0.0.1", "127.0.0.2"]

        emails = sorted(get_property(graph, v, "identifier") for v in graph.vertices("Email"))
        assert emails == ["james@example.com", "simon@example.com", "simon@foo.com"]

        fused = str(fused_names[0])
        assert _edge_descriptions(graph, "uses", "identifier") == sorted([
            ("James", "uses", "127.0.0.1"),
            ("Jim", "uses", "127.0.0.1"),
            (fused, "uses", "127.0.0.2"),
        ])
        assert _edge_descriptions(graph, "email", "identifier") == sorted([
            ("James", "email", "james@example.com"),
            ("Jim", "email", "james@example.com"),
            (fused, "email", "simon@example.com"),
            (fused, "email", "simon@foo.com"),
        ])

        assert stats["rules_applied"] == 3
        assert stats["merge_sets"] == 3
        assert stats["vertices_merged"] == 6
        assert stats["vertices_created"] == 3

    def test_commit_after_each_group_and_at_end(self, scenario_graph):
        """One commit per fused group plus a final commit."""
        graph, _ids = scenario_graph
        merge_graph(graph)
        assert graph.commit_count == 4

    def test_idempotent(self, scenario_graph):
        """Re-running the rules on their own output merges nothing."""
        graph, _ids = scenario_graph
        rules = [MergePersonOnSameAs(), MergeEmailOnIdentifier(), MergeIPAddressOnIdentifier()]
        merge_graph(graph, rules)
        vertices, edges = graph.vertex_count, graph.edge_count

        for rule in rules:
            assert find_merge_sets(graph, rule) == {}
        stats = merge_graph(graph, rules)
        assert stats["merge_sets"] == 0
        assert stats["rules_skipped"] == 3
        assert (graph.vertex_count, graph.edge_count) == (vertices, edges)

    def test_workers(self, scenario_graph):
        """Threaded grouping gives the same result."""
        graph, _ids = scenario_graph
        merge_graph(graph, workers=4)
        assert graph.vertex_count == 8
        assert graph.edge_count == 7


class TestChainedRules:
    """Later rules see the merges made by earlier ones."""

    def test_same_label_rules_chain(self, family_graph):
        """sameAs then name merges all three Marthas into one vertex."""
        graph, _ids = family_graph
        merge_graph(graph, [MergePersonOnSameAs(), PersonOnName()])

        assert graph.vertex_count == 3
        assert graph.edge_count == 4
        names = sorted(get_property(graph, v, "name") for v in graph.vertices("Person"))
        assert names == ["Martha", "Peter", "Sally"]

    def test_chained_topology(self, family_graph):
        """Edges of every Martha end up on the final survivor."""
        graph, _ids = family_graph
        merge_graph(graph, [MergePersonOnSameAs(), PersonOnName()])

        people = {get_property(graph, v, "name"): v for v in graph.vertices("Person")}
        martha, peter, sally = people["Martha"], people["Peter"], people["Sally"]
        assert graph.vertex_properties(martha)["name"] == ["Martha", "Martha", "Martha"]
        assert sorted((e.source, e.label, e.target) for e in graph.edges()) == sorted([
            (peter, "married", martha),
            (martha, "married", peter),
            (peter, "fatherOf", sally),
            (martha, "motherOf", sally),
        ])

    def test_name_rule_alone(self, family_graph):
        """On name alone all three Marthas share a key and merge in one pass."""
        graph, _ids = family_graph
        merge_graph(graph, [PersonOnName()])
        assert graph.vertex_count == 3

    def test_married_couple_becomes_self_loop(self, store):
        """Merging two vertices joined by an edge leaves a self-loop."""
        a = store.add_vertex("Person", name="Martha")
        b = store.add_vertex("Person", name="Martha")
        store.add_edge("married", a, b)
        merge_graph(store, [PersonOnName()])
        [edge] = store.edges()
        assert edge.source == edge.target


class TestOrchestration:
    """Test rule filtering, skipping and failure behaviour."""

    def test_non_property_rules_filtered(self, scenario_graph, caplog):
        """Rules that aren't property rules are ignored."""
        graph, _ids = scenario_graph
        with caplog.at_level("INFO"):
            stats = merge_graph(graph, [LabelOnlyRule()])
        assert stats["rules_applied"] == 0
        assert "0 PropertiesMergeRules found" in caplog.text
        assert graph.vertex_count == 11

    def test_missing_label_skipped(self, store, caplog):
        """A rule whose label has no vertices is skipped and logged."""
        store.add_vertex("Email", identifier="a@example.com")
        with caplog.at_level("INFO"):
            stats = merge_graph(store, [PersonOnName()])
        assert stats["rules_skipped"] == 1
        assert "No vertices with label Person" in caplog.text
        assert store.commit_count == 1

    def test_unequal_keys_never_fused(self, store):
        """Vertices with different keys stay separate."""
        store.add_vertex("Person", name="Alice")
        store.add_vertex("Person", name="Bob")
        store.add_vertex("Person", name="alice")
        merge_graph(store, [PersonOnName()])
        assert store.vertex_count == 3

    def test_empty_rule_list(self, scenario_graph):
        """No rules still commits once."""
        graph, _ids = scenario_graph
        stats = merge_graph(graph, [])
        assert stats["rules_applied"] == 0
        assert graph.commit_count == 1

    def test_store_failure_propagates_and_keeps_committed_groups(self, tmp_dir):
        """A failing store aborts the call; groups committed before stay merged."""
        path = tmp_dir / "graph.json"
        graph = FailingStore(path)
        e1 = graph.add_vertex("Email", identifier="a@example.com")
        e2 = graph.add_vertex("Email", identifier="a@example.com")
        i1 = graph.add_vertex("IPAddress", identifier="127.0.0.1")
        i2 = graph.add_vertex("IPAddress", identifier="127.0.0.1")
        p = graph.add_vertex("Person", name="Alice")
        graph.add_edge("email", p, e1)
        graph.fail_label = None
        graph.add_edge("uses", p, i1)
        graph.fail_label = "uses"
        graph.commit()

        with pytest.raises(GraphStoreError):
            merge_graph(graph, [MergeEmailOnIdentifier(), MergeIPAddressOnIdentifier()])

        durable = NetworkXGraphStore.load(path)
        assert len(durable.vertices("Email")) == 1
        assert e1 not in durable.vertices("Email")
        assert e2 not in durable.vertices("Email")
        assert sorted(durable.vertices("IPAddress")) == [i1, i2]
