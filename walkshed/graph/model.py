"""Static walking network: intersections, roads and the amenities along them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator

import networkx as nx
import numpy as np
import shapely
from shapely.geometry import LineString, Point
from shapely.strtree import STRtree

from walkshed.geo import DEFAULT_CRS, Mercator

IntersectionID = int
AmenityID = int
RoadID = int


class EmptyGraphError(RuntimeError):
    """Raised when a graph without intersections is asked to snap a point."""


@dataclass(frozen=True, slots=True)
class Intersection:
    """A node of the walking network, positioned in the planar frame."""

    id: IntersectionID
    x: float
    y: float


@dataclass(frozen=True, slots=True)
class Road:
    """Undirected walkable segment joining exactly two intersections."""

    id: RoadID
    endpoints: tuple[IntersectionID, IntersectionID]
    geometry: LineString
    amenities: tuple[AmenityID, ...] = ()

    @property
    def length(self) -> float:
        """Length of the geometry in planar CRS units, not ground meters."""
        return float(self.geometry.length)

    def other_side(self, intersection: IntersectionID) -> IntersectionID:
        """Return the endpoint opposite to `intersection`."""
        u, v = self.endpoints
        if intersection == u:
            return v
        if intersection == v:
            return u
        msg = f"Intersection {intersection!r} is not an endpoint of road {self.id!r}."
        raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class Amenity:
    """A point of interest attached to one or more roads."""

    id: AmenityID
    osm_id: str
    point: Point
    kind: str
    name: str | None = None


@dataclass(frozen=True, slots=True)
class Graph:
    """Read-only walking network shared by every query.

    Roads live as keyed edges of a `networkx.MultiGraph` so parallel roads and
    self-loops between intersections are preserved. Nearest-intersection
    lookups go through a `shapely` STRtree built once at construction time.
    Walking lengths are geodesic meters, measured once per road at build time.
    """

    intersections: dict[IntersectionID, Intersection]
    roads: dict[RoadID, Road]
    amenities: dict[AmenityID, Amenity]
    road_lengths: dict[RoadID, float]
    mercator: Mercator
    network: nx.MultiGraph = field(repr=False)
    _index: STRtree = field(repr=False)
    _index_ids: list[IntersectionID] = field(repr=False)

    @classmethod
    def build(
        cls,
        intersections: Iterable[Intersection],
        roads: Iterable[Road],
        amenities: Iterable[Amenity] = (),
        crs: str = DEFAULT_CRS,
    ) -> Graph:
        """Validate the raw records and assemble an immutable graph."""
        intersection_map = {node.id: node for node in intersections}
        amenity_map = {amenity.id: amenity for amenity in amenities}
        road_map: dict[RoadID, Road] = {}
        road_lengths: dict[RoadID, float] = {}
        mercator = Mercator(crs)

        network = nx.MultiGraph()
        for node in intersection_map.values():
            network.add_node(node.id, x=node.x, y=node.y)

        for road in roads:
            if road.id in road_map:
                msg = f"Duplicate road id {road.id!r}."
                raise ValueError(msg)
            missing = [n for n in road.endpoints if n not in intersection_map]
            if missing:
                msg = f"Road {road.id!r} references unknown intersections {missing}."
                raise ValueError(msg)
            unknown = [a for a in road.amenities if a not in amenity_map]
            if unknown:
                msg = f"Road {road.id!r} references unknown amenities {unknown}."
                raise ValueError(msg)
            road_map[road.id] = road
            road_lengths[road.id] = mercator.geodesic_length(road.geometry.coords)
            u, v = road.endpoints
            network.add_edge(
                u,
                v,
                key=road.id,
                road=road,
                length_m=road_lengths[road.id],
            )

        index_ids = list(intersection_map)
        index = STRtree(
            [Point(node.x, node.y) for node in intersection_map.values()],
        )
        return cls(
            intersections=intersection_map,
            roads=road_map,
            amenities=amenity_map,
            road_lengths=road_lengths,
            mercator=mercator,
            network=network,
            _index=index,
            _index_ids=index_ids,
        )

    def roads_per_intersection(self, intersection: IntersectionID) -> Iterator[Road]:
        """Yield every road incident to `intersection` in insertion order."""
        for _, _, road in self.network.edges(intersection, data="road"):
            yield road

    def road_length(self, road: Road) -> float:
        """Ground length of `road` in meters."""
        return self.road_lengths[road.id]

    def nearest_intersections(
        self,
        xs: np.ndarray,
        ys: np.ndarray,
    ) -> tuple[list[IntersectionID], np.ndarray]:
        """Return the closest intersection ids and distances for planar points."""
        if not self._index_ids:
            msg = "Cannot snap coordinates: the graph has no intersections."
            raise EmptyGraphError(msg)

        points = shapely.points(np.column_stack([xs, ys]))
        positions = np.atleast_1d(self._index.nearest(points))
        node_ids = [self._index_ids[int(pos)] for pos in positions]
        node_xy = np.array(
            [(self.intersections[n].x, self.intersections[n].y) for n in node_ids],
            dtype=float,
        )
        distances = np.hypot(node_xy[:, 0] - xs, node_xy[:, 1] - ys)
        return node_ids, distances
