"""Helpers for snapping geographic coordinates onto walking-graph intersections."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Sequence

from walkshed.geo import geodesic_meters

if TYPE_CHECKING:
    from walkshed.geo import Coordinate

    from .model import Graph, IntersectionID


@dataclass(slots=True)
class SnapResult:
    """Describes how an arbitrary coordinate was snapped onto the graph."""

    original: Coordinate
    node_id: IntersectionID
    snapped: Coordinate
    distance_m: float


def snap_coords(
    graph: Graph,
    coords: Sequence[Coordinate],
) -> list[SnapResult]:
    """Snap `(lon, lat)` coordinates onto their nearest graph intersections.

    Parameters
    ----------
    graph:
        The static walking graph.
    coords:
        Sequence of `(lon, lat)` coordinate pairs to snap.

    Returns
    -------
    list[SnapResult]
        One entry per input coordinate, in input order.

    Raises
    ------
    EmptyGraphError
        When the graph has no intersections to snap onto.

    """
    if not coords:
        return []

    # Project and query in a single batch.
    xs, ys = graph.mercator.to_planar_many(coords)
    node_ids, _ = graph.nearest_intersections(xs, ys)

    snapped: list[SnapResult] = []
    for (lon, lat), node_id in zip(coords, node_ids):
        node = graph.intersections[node_id]
        snapped_coord = graph.mercator.to_geographic((node.x, node.y))
        snapped.append(
            SnapResult(
                original=(lon, lat),
                node_id=node_id,
                snapped=snapped_coord,
                distance_m=geodesic_meters((lon, lat), snapped_coord),
            ),
        )
    return snapped


def snap_coord(graph: Graph, coord: Coordinate) -> IntersectionID:
    """Return the id of the intersection closest to a single coordinate."""
    return snap_coords(graph, [coord])[0].node_id
