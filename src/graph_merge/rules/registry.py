"""Explicit registry of merge rule classes.

Rule classes register themselves with the ``register_rule`` decorator when
their module is imported. ``discover_rules`` turns the registry into rule
instances, in registration order.
"""

import inspect
import logging

from graph_merge.rules.base import MergeRule

logger = logging.getLogger(__name__)

RULE_REGISTRY: list[type] = []


def register_rule(cls: type) -> type:
    """Class decorator adding a rule class to the registry."""
    if cls not in RULE_REGISTRY:
        RULE_REGISTRY.append(cls)
    return cls


def discover_rules(registry: list[type] | None = None) -> list[MergeRule]:
    """Instantiate every concrete rule class in the registry.

    Abstract classes are skipped. A class whose constructor raises is logged
    and dropped; the remaining rules are still returned.

    Args:
        registry: Rule classes to instantiate (defaults to RULE_REGISTRY
            with the built-in rules loaded)

    Returns:
        Rule instances in registry order
    """
    if registry is None:
        # Importing the module registers the built-in rules
        import graph_merge.rules.builtin  # noqa: F401

        registry = RULE_REGISTRY

    logger.info("Instantiating merge rules")
    rules: list[MergeRule] = []
    for cls in registry:
        if not inspect.isclass(cls) or inspect.isabstract(cls):
            continue

        name = f"{cls.__module__}.{cls.__qualname__}"
        logger.info(f"Instantiating rule {name}")
        try:
            rules.append(cls())
        except Exception:
            logger.error(f"Couldn't instantiate rule {name}", exc_info=True)

    return rules
