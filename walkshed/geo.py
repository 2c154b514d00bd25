"""Coordinate helpers shared across the graph and search modules."""

from __future__ import annotations

from itertools import pairwise
from typing import Sequence

import numpy as np
from pyproj import Geod, Transformer

Coordinate = tuple[float, float]  # (lon, lat) or planar (x, y)

GEOGRAPHIC_CRS = "EPSG:4326"
# Web Mercator. Planar lengths grow by 1/cos(lat), so walking lengths are
# measured on the WGS84 ellipsoid instead.
DEFAULT_CRS = "EPSG:3857"

_GEOD = Geod(ellps="WGS84")


def geodesic_meters(a: Coordinate, b: Coordinate) -> float:
    """Return the ellipsoidal distance between two `(lon, lat)` points in meters."""
    _, _, distance = _GEOD.inv(a[0], a[1], b[0], b[1])
    return float(distance)


class Mercator:
    """Two-way transform between WGS84 `(lon, lat)` and a planar frame."""

    def __init__(self, crs: str = DEFAULT_CRS) -> None:
        self.crs = crs
        self._to_planar = Transformer.from_crs(GEOGRAPHIC_CRS, crs, always_xy=True)
        self._to_geographic = Transformer.from_crs(
            crs,
            GEOGRAPHIC_CRS,
            always_xy=True,
        )

    def to_planar(self, coord: Coordinate) -> Coordinate:
        """Project a `(lon, lat)` pair into the planar frame."""
        x, y = self._to_planar.transform(coord[0], coord[1])
        return (float(x), float(y))

    def to_geographic(self, coord: Coordinate) -> Coordinate:
        """Return the `(lon, lat)` pair for a planar `(x, y)` position."""
        lon, lat = self._to_geographic.transform(coord[0], coord[1])
        return (float(lon), float(lat))

    def to_planar_many(
        self,
        coords: Sequence[Coordinate],
    ) -> tuple[np.ndarray, np.ndarray]:
        """Project many `(lon, lat)` pairs in a single vectorized call."""
        lons, lats = zip(*coords)
        xs, ys = self._to_planar.transform(
            np.asarray(lons, dtype=float),
            np.asarray(lats, dtype=float),
        )
        return np.atleast_1d(xs), np.atleast_1d(ys)

    def geodesic_length(self, coords: Sequence[Coordinate]) -> float:
        """Return the on-the-ground length in meters of a planar polyline."""
        geographic = [self.to_geographic(coord) for coord in coords]
        return float(sum(geodesic_meters(a, b) for a, b in pairwise(geographic)))

    def __repr__(self) -> str:
        return f"Mercator(crs={self.crs!r})"
