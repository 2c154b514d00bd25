"""High-level entrypoint that wires graph setup and the per-person searches."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from .logger import Logger, LoggingMode
from .search.aggregate import aggregate_pois
from .setup import setup_graph

if TYPE_CHECKING:
    from .graph.model import Graph
    from .poi import POI
    from .request import Request


def find_pois(
    request: Request,
    graph: Graph | None = None,
    graph_path: str | Path | None = None,
    workers: int | None = None,
    logging_mode: LoggingMode | str = LoggingMode.NONE,
) -> list[POI]:
    """Find the amenities each person of `request` can walk to.

    Parameters
    ----------
    request:
        Ordered people with their homes and time budgets.
    graph:
        Already loaded graph. When omitted the graph is loaded from
        `graph_path` (or the configured default).
    graph_path:
        Node-link JSON graph file used when `graph` is not given.
    workers:
        Thread pool size for the per-person searches.
    logging_mode:
        Controls log verbosity for the pipeline. Accepts `LoggingMode`
        values or their lowercase string names.

    """
    mode = LoggingMode.from_value(logging_mode)
    logger = Logger(mode)

    if graph is None:
        with logger.phase("graph.setup"):
            graph = setup_graph(graph_path)
    logger.graph_stats(graph)

    return aggregate_pois(graph, request, workers=workers, logger=logger)
