"""Node-link JSON persistence for walking graphs."""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Any

import networkx as nx
import orjson
from networkx.readwrite import json_graph
from shapely.geometry import LineString, Point

from walkshed.geo import DEFAULT_CRS

from .model import Amenity, Graph, Intersection, Road

LOGGER = logging.getLogger(__name__)

# region API


def serialize_graph(graph: Graph) -> dict:
    """Convert a graph into a node-link mapping ready for JSON encoding."""
    export = nx.MultiGraph(
        crs=graph.mercator.crs,
        amenities=[_amenity_record(a) for a in graph.amenities.values()],
    )
    for node in graph.intersections.values():
        export.add_node(node.id, x=node.x, y=node.y)
    for road in graph.roads.values():
        u, v = road.endpoints
        export.add_edge(
            u,
            v,
            key=road.id,
            coordinates=[list(coord) for coord in road.geometry.coords],
            amenities=list(road.amenities),
        )
    return json_graph.node_link_data(export, edges="edges")


def deserialize_graph(data: dict) -> Graph:
    """Rebuild a `Graph` from its node-link mapping."""
    network = json_graph.node_link_graph(data, multigraph=True, edges="edges")
    attrs = network.graph

    intersections = [
        Intersection(id=node, x=float(values["x"]), y=float(values["y"]))
        for node, values in network.nodes(data=True)
    ]
    roads = [
        Road(
            id=key,
            endpoints=(u, v),
            geometry=_road_geometry(network, u, v, values),
            amenities=tuple(values.get("amenities") or ()),
        )
        for u, v, key, values in network.edges(keys=True, data=True)
    ]
    amenities = [_amenity_from_record(r) for r in attrs.get("amenities", [])]

    return Graph.build(
        intersections,
        roads,
        amenities,
        crs=attrs.get("crs", DEFAULT_CRS),
    )


def load_graph(path: str | Path) -> Graph:
    """Read a node-link JSON graph file from disk."""
    path = Path(path)
    if not path.exists():
        msg = f"Graph file not found: {path}"
        raise FileNotFoundError(msg)

    try:
        data = orjson.loads(path.read_bytes())
    except orjson.JSONDecodeError as exc:
        msg = f"Unable to parse graph file {path}: {exc}"
        raise ValueError(msg) from exc

    graph = deserialize_graph(data)
    LOGGER.info(
        "Loaded graph from %s (%d intersections / %d roads / %d amenities)",
        path,
        len(graph.intersections),
        len(graph.roads),
        len(graph.amenities),
    )
    return graph


def write_graph(graph: Graph, output_path: str | Path) -> None:
    """Persist the node-link graph representation to disk."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(
        orjson.dumps(serialize_graph(graph), option=orjson.OPT_INDENT_2),
    )
    LOGGER.info(
        "Serialized graph to %s (%d bytes)",
        output_path,
        output_path.stat().st_size,
    )


# endregion API


# region Record helpers


def _amenity_record(amenity: Amenity) -> dict[str, Any]:
    return {
        "id": amenity.id,
        "osm_id": amenity.osm_id,
        "x": amenity.point.x,
        "y": amenity.point.y,
        "kind": amenity.kind,
        "name": amenity.name,
    }


def _amenity_from_record(record: dict[str, Any]) -> Amenity:
    return Amenity(
        id=record["id"],
        osm_id=str(record["osm_id"]),
        point=Point(float(record["x"]), float(record["y"])),
        kind=record["kind"],
        name=_clean_value(record.get("name")),
    )


def _road_geometry(
    network: nx.MultiGraph,
    u: int,
    v: int,
    values: dict,
) -> LineString:
    """Return the stored polyline, or a straight segment between endpoints."""
    coords = values.get("coordinates")
    if coords and len(coords) >= 2:  # noqa: PLR2004
        return LineString([tuple(map(float, c)) for c in coords])
    start = (network.nodes[u]["x"], network.nodes[u]["y"])
    end = (network.nodes[v]["x"], network.nodes[v]["y"])
    return LineString([start, end])


def _clean_value(value):  # noqa: ANN001, ANN202
    """Normalize missing or nan values to None."""
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    return value


# endregion Record helpers
