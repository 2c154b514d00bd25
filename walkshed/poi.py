"""Public point-of-interest records built from static graph data."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterable

if TYPE_CHECKING:
    from walkshed.geo import Coordinate
    from walkshed.graph.model import AmenityID, Graph

FEATURE_COLLECTION_TYPE = "FeatureCollection"
POINT_TYPE = "Point"


@dataclass(slots=True)
class POI:
    """An amenity reached by at least one person."""

    osm_url: str
    point: Coordinate  # (lon, lat)
    kind: str
    name: str | None
    # (person name, cost in whole seconds)
    times_per_person: list[tuple[str, int]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable mapping."""
        return {
            "osm_url": self.osm_url,
            "point": [self.point[0], self.point[1]],
            "kind": self.kind,
            "name": self.name,
            "times_per_person": [[name, cost] for name, cost in self.times_per_person],
        }


def materialize_poi(graph: Graph, amenity_id: AmenityID) -> POI:
    """Create an empty POI record for an amenity of `graph`."""
    amenity = graph.amenities[amenity_id]
    return POI(
        osm_url=amenity.osm_id,
        point=graph.mercator.to_geographic((amenity.point.x, amenity.point.y)),
        kind=amenity.kind,
        name=amenity.name,
    )


def pois_to_feature_collection(pois: Iterable[POI]) -> dict:
    """Create a GeoJSON feature collection with one Point per POI."""
    features = [
        {
            "type": "Feature",
            "properties": {
                "osm_url": poi.osm_url,
                "kind": poi.kind,
                "name": poi.name,
                "times_per_person": [list(entry) for entry in poi.times_per_person],
            },
            "geometry": {"type": POINT_TYPE, "coordinates": list(poi.point)},
        }
        for poi in pois
    ]
    return {"type": FEATURE_COLLECTION_TYPE, "features": features}
