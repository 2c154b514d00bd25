"""Limit-bounded walking cost search from a single intersection."""

from __future__ import annotations

from datetime import timedelta
from heapq import heappop, heappush
from typing import TYPE_CHECKING

from walkshed.logger import Logger

if TYPE_CHECKING:
    from walkshed.graph.model import AmenityID, Graph, IntersectionID

# 3 mph in meters/second.
DEFAULT_WALKING_SPEED_MPS = 1.34112

ZERO = timedelta(0)


def get_costs(
    graph: Graph,
    origin: IntersectionID,
    limit: timedelta,
    walking_speed_mps: float = DEFAULT_WALKING_SPEED_MPS,
    logger: Logger = Logger(),  # noqa: B008
) -> dict[AmenityID, timedelta]:
    """Return the cheapest walking duration to every amenity within `limit`.

    Parameters
    ----------
    graph:
        Static walking graph; only read.
    origin:
        Intersection the walk starts from.
    limit:
        Time budget. Intersections reached later than this are settled but
        never expanded, and amenities past it are not recorded.
    walking_speed_mps:
        Constant walking speed used to turn road lengths into durations.
    logger:
        Logger receiving debug counters. Defaults to a silent logger.

    Returns
    -------
    dict[AmenityID, timedelta]
        Amenities in the order they were first reached.

    Notes
    -----
    Dijkstra with lazy deletion: neighbours are pushed unconditionally and
    stale heap entries are dropped when popped for an already settled node.
    An amenity on a road is priced from each endpoint that settles within the
    limit, so the minimum is kept rather than the last write.

    """
    if walking_speed_mps <= 0:
        msg = f"Walking speed must be positive, got {walking_speed_mps!r}."
        raise ValueError(msg)

    settled: set[IntersectionID] = set()
    cost_per_amenity: dict[AmenityID, timedelta] = {}
    frontier: list[tuple[timedelta, IntersectionID]] = [(ZERO, origin)]
    pushes = 1

    while frontier:
        cost, node = heappop(frontier)
        if node in settled:
            continue
        settled.add(node)
        if cost > limit:
            continue

        for road in graph.roads_per_intersection(node):
            step = walking_duration(graph.road_length(road), walking_speed_mps)
            reached = cost + step
            if reached <= limit:
                for amenity in road.amenities:
                    best = cost_per_amenity.get(amenity)
                    if best is None or reached < best:
                        cost_per_amenity[amenity] = reached
            heappush(frontier, (reached, road.other_side(node)))
            pushes += 1

    logger.debug(
        "search.stats",
        origin=origin,
        settled=len(settled),
        pushes=pushes,
        amenities=len(cost_per_amenity),
    )
    return cost_per_amenity


def walking_duration(length_m: float, walking_speed_mps: float) -> timedelta:
    """Return the time needed to walk `length_m` meters."""
    return timedelta(seconds=length_m / walking_speed_mps)


def whole_seconds(duration: timedelta) -> int:
    """Truncate a duration to whole seconds."""
    return duration // timedelta(seconds=1)
