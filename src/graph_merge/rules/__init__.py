"""Merge rules: contracts, registry, built-in and YAML-configured rules."""

from graph_merge.rules.base import MergeRule, PropertiesMergeRule, default_rule_name
from graph_merge.rules.loader import ConfiguredPropertiesMergeRule, load_rules
from graph_merge.rules.registry import RULE_REGISTRY, discover_rules, register_rule

__all__ = [
    "ConfiguredPropertiesMergeRule",
    "MergeRule",
    "PropertiesMergeRule",
    "RULE_REGISTRY",
    "default_rule_name",
    "discover_rules",
    "load_rules",
    "register_rule",
]
