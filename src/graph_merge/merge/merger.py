"""Apply merge rules to a graph.

Rules run strictly one after another, so every rule sees the vertices and
properties produced by the rules before it. A single IdentityRedirect is
shared across all rules of one call.
"""

import logging
from collections.abc import Iterable

from graph_merge.graph.store import GraphStore
from graph_merge.merge.engine import fuse_vertices
from graph_merge.merge.grouper import candidate_vertices, find_merge_sets
from graph_merge.merge.redirect import IdentityRedirect
from graph_merge.rules.base import MergeRule, PropertiesMergeRule
from graph_merge.rules.registry import discover_rules

logger = logging.getLogger(__name__)


def merge_graph(
    store: GraphStore,
    rules: Iterable[MergeRule] | None = None,
    workers: int = 1,
) -> dict[str, int]:
    """Merge duplicate vertices in a graph.

    Args:
        store: Graph store to modify in place (committed after every merged
            group and once more at the end)
        rules: Rules to apply, in order. Registered rules are discovered
            and used when None.
        workers: Threads used to compute grouping keys

    Returns:
        Stats dict with counts
    """
    if rules is None:
        rules = discover_rules()

    # For now, only handle PropertiesMergeRule
    logger.info("Filtering out rules that don't implement PropertiesMergeRule")
    property_rules = [r for r in rules if isinstance(r, PropertiesMergeRule)]
    logger.info(f"{len(property_rules)} PropertiesMergeRules found to apply to graph")

    stats = {
        "rules_applied": 0,
        "rules_skipped": 0,
        "merge_sets": 0,
        "vertices_merged": 0,
        "vertices_created": 0,
    }
    redirect = IdentityRedirect()

    for rule in property_rules:
        logger.info(f"Applying rule {rule.rule_name} to graph")
        logger.info(
            f"Traversing graph to find vertices with label {rule.label} "
            f"and properties {rule.properties}"
        )
        vertices = candidate_vertices(store, rule)
        if not vertices:
            logger.info(f"No vertices with label {rule.label}, skipping rule {rule.rule_name}")
            stats["rules_skipped"] += 1
            continue

        logger.info(f"Generating merge sets for rule {rule.rule_name}")
        merge_sets = find_merge_sets(store, rule, workers=workers, vertices=vertices)
        logger.info(f"Number of valid merge sets found: {len(merge_sets)}")
        if not merge_sets:
            logger.info(f"No vertices to merge, skipping rule {rule.rule_name}")
            stats["rules_skipped"] += 1
            continue

        logger.info(f"Performing merges for vertices for rule {rule.rule_name}")
        for members in merge_sets.values():
            if fuse_vertices(store, members, rule.label, redirect) is not None:
                stats["vertices_created"] += 1
                stats["vertices_merged"] += len(members)
        stats["merge_sets"] += len(merge_sets)
        stats["rules_applied"] += 1

    logger.info("Committing changes to graph")
    store.commit()

    logger.info(
        f"Merged {stats['vertices_merged']} vertices into {stats['vertices_created']} "
        f"across {stats['rules_applied']} rules"
    )
    return stats
