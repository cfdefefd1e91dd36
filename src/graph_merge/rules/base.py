"""Merge rule contracts.

A rule names the vertex label it applies to. Property rules additionally
name an ordered list of property keys; vertices whose values for those keys
are equal are merged into one.
"""

from abc import ABC, abstractmethod
from typing import Any

from graph_merge.graph.elements import get_property
from graph_merge.graph.store import GraphStore, VertexId


def default_rule_name(label: str, properties: list[str] | None = None) -> str:
    """Human readable name for a rule that does not supply its own."""
    if properties is None:
        return f"MergeRule[label={label}]"
    return f"PropertiesMergeRule[label={label},properties={list(properties)}]"


class MergeRule(ABC):
    """A merge rule to be run across a graph."""

    @property
    @abstractmethod
    def label(self) -> str:
        """The label to which this rule applies."""

    @property
    def rule_name(self) -> str:
        return default_rule_name(self.label)

    def __repr__(self) -> str:
        return self.rule_name


class PropertiesMergeRule(MergeRule):
    """Merge vertices whose values match on a list of properties."""

    # Only consider vertices that carry every property in the key
    require_all_properties: bool = True

    @property
    @abstractmethod
    def properties(self) -> list[str]:
        """Properties on which to merge, in key order."""

    def property_values(self, store: GraphStore, vertex_id: VertexId) -> tuple[Any, ...]:
        """Values of this rule's properties on a vertex, in key order.

        Absent properties are reported as None.
        """
        return tuple(get_property(store, vertex_id, key) for key in self.properties)

    @property
    def rule_name(self) -> str:
        return default_rule_name(self.label, self.properties)
