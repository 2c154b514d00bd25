"""Per-person cost searches merged into one record per amenity."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Sequence

from walkshed.graph.snap import snap_coords
from walkshed.logger import Logger
from walkshed.poi import POI, materialize_poi

from .cost import get_costs, whole_seconds

if TYPE_CHECKING:
    from datetime import timedelta

    from walkshed.graph.model import AmenityID, Graph, IntersectionID
    from walkshed.request import Person, Request


def aggregate_pois(
    graph: Graph,
    request: Request,
    workers: int | None = None,
    logger: Logger = Logger(),  # noqa: B008
) -> list[POI]:
    """Return every amenity reachable by at least one person of `request`.

    Parameters
    ----------
    graph:
        Static walking graph shared by all searches.
    request:
        Ordered people to search for.
    workers:
        When greater than one, run the per-person searches on a thread pool of
        this size. Results are merged in request order either way.
    logger:
        Logger controlling status/timing output. Defaults to a silent logger.

    Returns
    -------
    list[POI]
        One POI per reached amenity, in order of first discovery. Each POI
        lists `(name, seconds)` for every person who reached it, in request
        order.

    """
    people = list(request.people)
    if not people:
        return []

    with logger.phase("snap.homes", people=len(people)):
        snapped = snap_coords(graph, [person.home for person in people])
    for person, snap in zip(people, snapped):
        logger.debug(
            "snap.home",
            person=person.name,
            node=snap.node_id,
            distance_m=f"{snap.distance_m:.1f}",
        )

    jobs = [
        (person, snap.node_id, request.speed_for(person))
        for person, snap in zip(people, snapped)
    ]

    def search(job: tuple[Person, IntersectionID, float]) -> dict[AmenityID, timedelta]:
        person, origin, speed = job
        with logger.phase(
            "search.person",
            person=person.name,
            max_time_minutes=person.max_time_minutes,
        ):
            return get_costs(graph, origin, person.limit, speed, logger=logger)

    if workers is not None and workers > 1 and len(jobs) > 1:
        with ThreadPoolExecutor(max_workers=min(workers, len(jobs))) as pool:
            results = list(pool.map(search, jobs))
    else:
        results = [search(job) for job in jobs]

    with logger.phase("aggregate.merge", people=len(people)):
        pois = merge_costs(graph, people, results)
    logger.info("pois.ready", pois=len(pois))
    return pois


def merge_costs(
    graph: Graph,
    people: Sequence[Person],
    costs_per_person: Sequence[dict[AmenityID, timedelta]],
) -> list[POI]:
    """Fold per-person cost maps into POIs keyed by amenity."""
    pois: dict[AmenityID, POI] = {}
    for person, costs in zip(people, costs_per_person):
        for amenity_id, cost in costs.items():
            poi = pois.get(amenity_id)
            if poi is None:
                poi = pois[amenity_id] = materialize_poi(graph, amenity_id)
            poi.times_per_person.append((person.name, whole_seconds(cost)))
    return list(pois.values())
