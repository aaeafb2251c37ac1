"""Per-cell area grids in square kilometres."""

from __future__ import annotations

import numpy as np
from pyproj import CRS, Geod

from eezsuit.layers.crs import linear_unit_factor
from eezsuit.layers.models import Raster

DEFAULT_GEOD = Geod(ellps="WGS84")


def geod_for(crs: CRS) -> Geod:
    """Return the ellipsoid of a geographic CRS, defaulting to WGS84."""
    return crs.get_geod() or DEFAULT_GEOD


def _band_area_per_radian(latitudes: np.ndarray, geod: Geod) -> np.ndarray:
    """Area (m²) between the equator and each latitude per radian of longitude."""
    a = geod.a
    b = geod.b
    sin_lat = np.sin(np.radians(np.clip(latitudes, -90.0, 90.0)))
    e2 = 1.0 - (b * b) / (a * a)
    if e2 < 1e-15:
        return a * a * sin_lat
    e = np.sqrt(e2)
    return (b * b / 2.0) * (
        sin_lat / (1.0 - e2 * sin_lat**2)
        + np.log((1.0 + e * sin_lat) / (1.0 - e * sin_lat)) / (2.0 * e)
    )


def _geographic_cell_areas(raster: Raster) -> np.ndarray:
    """Return cell areas (km²) for a grid in degrees."""
    height, width = raster.shape
    transform = raster.transform
    geod = geod_for(raster.crs)
    if transform.b == 0 and transform.d == 0:
        # Cells bounded by parallels: exact ellipsoidal band areas.
        edges = transform.f + transform.e * np.arange(height + 1)
        bands = np.abs(np.diff(_band_area_per_radian(edges, geod)))
        row_areas = bands * np.radians(abs(transform.a))
        return np.repeat(row_areas[:, np.newaxis], width, axis=1) / 1e6
    areas = np.empty((height, width), dtype=np.float64)
    for row in range(height):
        for col in range(width):
            corners = [
                transform * (col, row),
                transform * (col + 1, row),
                transform * (col + 1, row + 1),
                transform * (col, row + 1),
            ]
            area, _ = geod.polygon_area_perimeter(
                [corner[0] for corner in corners],
                [corner[1] for corner in corners],
            )
            areas[row, col] = abs(area)
    return areas / 1e6


def cell_area_km2(raster: Raster) -> np.ndarray:
    """Return the area of each raster cell in km²."""
    if raster.crs.is_geographic:
        return _geographic_cell_areas(raster)
    factor = linear_unit_factor(raster.crs)
    transform = raster.transform
    cell = abs(transform.a * transform.e - transform.b * transform.d) * factor * factor / 1e6
    return np.full(raster.shape, cell, dtype=np.float64)
