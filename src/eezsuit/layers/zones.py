"""Zone polygon loading and reference area helpers."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import geopandas as gpd
import pandas as pd
from pyogrio.errors import DataSourceError

from eezsuit.errors import LayerError
from eezsuit.layers.area import geod_for
from eezsuit.layers.crs import linear_unit_factor, normalize_crs
from eezsuit.layers.models import ZoneLayer

LOGGER = logging.getLogger("eezsuit.layers.zones")

GEOGRAPHIC_SEGMENT_DEGREES = 0.05


def geometry_area_km2(geometry: Any, crs: Any) -> float:
    """Return the area of a geometry in km², geodesic for geographic CRSs."""
    if geometry is None or geometry.is_empty:
        return 0.0
    crs_obj = normalize_crs(crs)
    if crs_obj.is_geographic:
        # Densify so long edges follow parallels rather than geodesics.
        densified = geometry.segmentize(GEOGRAPHIC_SEGMENT_DEGREES)
        area, _ = geod_for(crs_obj).geometry_area_perimeter(densified)
        return abs(area) / 1e6
    factor = linear_unit_factor(crs_obj)
    return geometry.area * factor * factor / 1e6


def zone_layer_from_frame(
    frame: gpd.GeoDataFrame,
    *,
    id_field: str = "rgn",
    name_field: str | None = None,
    area_field: str = "area_km2",
) -> ZoneLayer:
    """Validate a GeoDataFrame and wrap it as a ZoneLayer."""
    if frame.empty:
        raise LayerError("Zone layer contains no features.")
    if frame.crs is None:
        raise LayerError("Zone layer is missing a CRS.")
    if id_field not in frame.columns:
        raise LayerError(f"Zone layer has no '{id_field}' field.")
    if frame[id_field].isna().any():
        raise LayerError(f"Zone layer has features without a '{id_field}' value.")
    if frame[id_field].duplicated().any():
        duplicates = sorted({str(value) for value in frame[id_field][frame[id_field].duplicated()]})
        raise LayerError(f"Duplicate zone identifiers: {', '.join(duplicates)}")
    if name_field is not None and name_field not in frame.columns:
        raise LayerError(f"Zone layer has no '{name_field}' field.")

    zones = frame.reset_index(drop=True).copy()
    if area_field not in zones.columns:
        LOGGER.info("Zone layer has no '%s' field; computing areas from geometry.", area_field)
        zones[area_field] = [geometry_area_km2(geom, zones.crs) for geom in zones.geometry]
    areas = pd.to_numeric(zones[area_field], errors="coerce")
    if areas.isna().any():
        raise LayerError(f"Zone layer has missing or non-numeric '{area_field}' values.")
    if (areas < 0).any():
        raise LayerError(f"Zone layer has negative '{area_field}' values.")
    zones[area_field] = areas.astype(float)
    return ZoneLayer(frame=zones, id_field=id_field, name_field=name_field, area_field=area_field)


def load_zones(
    path: Path,
    *,
    id_field: str = "rgn",
    name_field: str | None = None,
    area_field: str = "area_km2",
) -> ZoneLayer:
    """Load zone polygons from any vector format geopandas can read."""
    if not Path(path).exists():
        raise LayerError(f"Zone layer not found: {path}")
    try:
        frame = gpd.read_file(path)
    except (DataSourceError, OSError) as exc:
        raise LayerError(f"Unable to read zone layer {path}: {exc}") from exc
    zones = zone_layer_from_frame(
        frame,
        id_field=id_field,
        name_field=name_field,
        area_field=area_field,
    )
    LOGGER.debug("Loaded %s zone(s) from %s", len(zones), path)
    return zones
