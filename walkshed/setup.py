from __future__ import annotations

import os
from pathlib import Path

from .graph.io import load_graph
from .graph.model import Graph

PROJECT_ROOT = Path(__file__).resolve().parents[1]
ASSETS_DIR = PROJECT_ROOT / "assets"
DEFAULT_GRAPH_FILE = ASSETS_DIR / "walk_graph.json"
GRAPH_ENV_VAR = "WALKSHED_GRAPH"


def default_graph_path() -> Path:
    """Return the graph file named by `WALKSHED_GRAPH`, or the bundled default."""
    override = os.environ.get(GRAPH_ENV_VAR)
    return Path(override) if override else DEFAULT_GRAPH_FILE


def setup_graph(graph_path: str | Path | None = None) -> Graph:
    """Load the walking graph used to answer queries.

    Parameters
    ----------
    graph_path:
        Optional custom path to the node-link JSON file. When omitted, the
        `WALKSHED_GRAPH` environment variable is consulted, then
        `assets/walk_graph.json`.

    Returns
    -------
    Graph
        A read-only graph with its spatial index built.

    """
    path = Path(graph_path) if graph_path is not None else default_graph_path()
    return load_graph(path)
