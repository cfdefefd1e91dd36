"""Entry point for python -m graph_merge execution.

This module enables running graph-merge as a module:
    python -m graph_merge --help
    python -m graph_merge merge -g graph.yaml
"""

from graph_merge.cli import app

if __name__ == "__main__":
    app()
