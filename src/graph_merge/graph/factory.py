"""Open graph stores from a connection configuration file.

A connection file is YAML, for example::

    store: networkx
    path: graph.json
    create_if_missing: false

Relative paths are resolved against the directory holding the connection file.
"""

import logging
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ValidationError

from graph_merge.graph.networkx_store import NetworkXGraphStore
from graph_merge.graph.store import GraphOpenError, GraphStore

logger = logging.getLogger(__name__)


class GraphConnectionConfig(BaseModel):
    """Connection settings for a graph store."""

    store: Literal["networkx"] = "networkx"
    path: Path | None = None
    create_if_missing: bool = False


def load_connection_config(config_path: str | Path) -> GraphConnectionConfig:
    """Read and validate a connection file.

    Raises:
        GraphOpenError: If the file is missing, unparsable or invalid
    """
    config_path = Path(config_path)
    if not config_path.is_file():
        raise GraphOpenError(f"Graph configuration not found: {config_path}")

    try:
        raw = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise GraphOpenError(f"Could not parse graph configuration {config_path}: {e}") from e

    # Support both top-level and nested 'graph:' key
    if isinstance(raw, dict) and isinstance(raw.get("graph"), dict):
        raw = raw["graph"]

    try:
        config = GraphConnectionConfig.model_validate(raw)
    except ValidationError as e:
        raise GraphOpenError(f"Invalid graph configuration {config_path}: {e}") from e

    if config.path is not None and not config.path.is_absolute():
        config.path = (config_path.parent / config.path).resolve()
    return config


def open_graph(config_path: str | Path) -> GraphStore:
    """Open the graph store described by a connection file."""
    config = load_connection_config(config_path)
    logger.info(f"Opening {config.store} graph store")

    if config.path is None:
        return NetworkXGraphStore()

    if not config.path.exists():
        if not config.create_if_missing:
            raise GraphOpenError(f"Graph data file not found: {config.path}")
        logger.info(f"Creating empty graph at {config.path}")
        return NetworkXGraphStore(config.path)

    try:
        return NetworkXGraphStore.load(config.path)
    except (OSError, TypeError, ValueError) as e:
        raise GraphOpenError(f"Could not load graph from {config.path}: {e}") from e


def close_graph(store: GraphStore) -> None:
    """Close a graph store."""
    logger.info("Closing graph store")
    store.close()
