"""Built-in property merge rules."""

from graph_merge.rules.base import PropertiesMergeRule
from graph_merge.rules.registry import register_rule


@register_rule
class MergePersonOnSameAs(PropertiesMergeRule):
    """People sharing a sameAs reference are the same person."""

    @property
    def label(self) -> str:
        return "Person"

    @property
    def properties(self) -> list[str]:
        return ["sameAs"]


@register_rule
class MergeEmailOnIdentifier(PropertiesMergeRule):
    """Email vertices with the same address."""

    @property
    def label(self) -> str:
        return "Email"

    @property
    def properties(self) -> list[str]:
        return ["identifier"]


@register_rule
class MergeIPAddressOnIdentifier(PropertiesMergeRule):
    @property
    def label(self) -> str:
        return "IPAddress"

    @property
    def properties(self) -> list[str]:
        return ["identifier"]
