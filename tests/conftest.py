from __future__ import annotations

import pytest
from pyproj import Geod
from shapely.geometry import LineString, Point

from walkshed.geo import Mercator
from walkshed.graph.model import Amenity, Graph, Intersection, Road


def road(road_id, u, v, coords, amenities=()):
    return Road(
        id=road_id,
        endpoints=(u.id, v.id),
        geometry=LineString(coords),
        amenities=tuple(amenities),
    )


def straight(road_id, u, v, amenities=()):
    return road(road_id, u, v, [(u.x, u.y), (v.x, v.y)], amenities)


def amenity(amenity_id, x, y, kind="cafe", name=None):
    return Amenity(
        id=amenity_id,
        osm_id=f"https://www.openstreetmap.org/node/{amenity_id}",
        point=Point(x, y),
        kind=kind,
        name=name,
    )


def home_at(graph, x, y):
    """Return the (lon, lat) that projects onto planar (x, y)."""
    return graph.mercator.to_geographic((x, y))


@pytest.fixture
def line_graph():
    # I1 --(134.112 m, A1)-- I2      I3 --(100 m, A3)-- I4 far away
    i1 = Intersection(1, 0.0, 0.0)
    i2 = Intersection(2, 134.112, 0.0)
    i3 = Intersection(3, 5000.0, 5000.0)
    i4 = Intersection(4, 5100.0, 5000.0)
    return Graph.build(
        [i1, i2, i3, i4],
        [straight(10, i1, i2, [1]), straight(11, i3, i4, [3])],
        [
            amenity(1, 67.056, 0.0, kind="pharmacy", name="Corner Pharmacy"),
            amenity(3, 5050.0, 5000.0, kind="library"),
        ],
    )


@pytest.fixture
def chain_graph():
    """Six intersections 60 m apart, one amenity per road."""
    nodes = [Intersection(n, 60.0 * n, 0.0) for n in range(6)]
    roads = [
        straight(100 + n, nodes[n], nodes[n + 1], [n]) for n in range(5)
    ]
    amenities = [amenity(n, 60.0 * n + 30.0, 0.0) for n in range(5)]
    return Graph.build(nodes, roads, amenities)


@pytest.fixture
def detour_graph():
    """A long winding road between two nodes that are close via a shortcut.

    I1 (0, 0) and I2 (10, 0) are joined directly by a 210 m road carrying A7
    that doubles back along the equator, and indirectly through I3 (5, 0) with
    two 5 m roads.
    """
    i1 = Intersection(1, 0.0, 0.0)
    i2 = Intersection(2, 10.0, 0.0)
    i3 = Intersection(3, 5.0, 0.0)
    winding = road(20, i1, i2, [(0, 0), (-100, 0), (10, 0)], [7])
    return Graph.build(
        [i1, i2, i3],
        [winding, straight(21, i1, i3), straight(22, i3, i2)],
        [amenity(7, -50.0, 0.0, kind="park")],
    )


def graph_at_latitude(latitude, meters=134.112):
    """Two intersections `meters` apart on the ground, due east of (0, latitude)."""
    east_lon, east_lat, _ = Geod(ellps="WGS84").fwd(0.0, latitude, 90.0, meters)
    mercator = Mercator()
    west = Intersection(1, *mercator.to_planar((0.0, latitude)))
    east = Intersection(2, *mercator.to_planar((east_lon, east_lat)))
    return Graph.build(
        [west, east],
        [straight(1, west, east, [5])],
        [amenity(5, (west.x + east.x) / 2, west.y, kind="bakery")],
    )
