from __future__ import annotations

from pathlib import Path
from typing import Sequence, Tuple

import geopandas as gpd
import numpy as np
import rasterio
from pyproj import CRS
from rasterio.transform import from_bounds
from shapely.geometry import box

from eezsuit.layers.models import Raster, ZoneLayer
from eezsuit.layers.zones import zone_layer_from_frame

Bounds = Tuple[float, float, float, float]


def write_raster(
    path: Path,
    data: np.ndarray,
    *,
    bounds: Bounds,
    crs: str | None = "EPSG:4326",
    nodata: float | None = None,
) -> None:
    height, width = data.shape
    transform = from_bounds(*bounds, width=width, height=height)
    path.parent.mkdir(parents=True, exist_ok=True)
    with rasterio.open(
        path,
        "w",
        driver="GTiff",
        height=height,
        width=width,
        count=1,
        dtype=data.dtype,
        crs=crs,
        transform=transform,
        nodata=nodata,
    ) as dataset:
        dataset.write(data, 1)


def make_raster(data: Sequence[Sequence[float]], *, bounds: Bounds, crs: str = "EPSG:4326") -> Raster:
    array = np.asarray(data, dtype=np.float64)
    height, width = array.shape
    return Raster(
        data=array,
        transform=from_bounds(*bounds, width=width, height=height),
        crs=CRS.from_user_input(crs),
    )


def column_zones(
    boxes: Sequence[Bounds],
    *,
    names: Sequence[str] | None = None,
    crs: str = "EPSG:4326",
    area_km2: Sequence[float] | None = None,
) -> gpd.GeoDataFrame:
    """Return a zone frame with one box polygon per zone and rgn ids 1..n."""
    data: dict[str, object] = {
        "rgn": list(range(1, len(boxes) + 1)),
        "name": list(names) if names else [f"Zone {index}" for index in range(1, len(boxes) + 1)],
    }
    if area_km2 is not None:
        data["area_km2"] = list(area_km2)
    return gpd.GeoDataFrame(data, geometry=[box(*bounds) for bounds in boxes], crs=crs)


def zone_layer(
    boxes: Sequence[Bounds],
    *,
    names: Sequence[str] | None = None,
    crs: str = "EPSG:4326",
) -> ZoneLayer:
    return zone_layer_from_frame(column_zones(boxes, names=names, crs=crs), name_field="name")


def zone_layer_with_cell_totals(
    boxes: Sequence[Bounds],
    reference: Raster,
    *,
    names: Sequence[str] | None = None,
) -> ZoneLayer:
    """Return zones whose reference area equals the area of their grid cells."""
    from eezsuit.layers.area import cell_area_km2
    from eezsuit.suitability import rasterize_zones

    draft = zone_layer(boxes, names=names, crs=reference.crs.to_string())
    codes = rasterize_zones(draft, reference)
    areas = cell_area_km2(reference)
    totals = [float(areas[codes == index + 1].sum()) for index in range(len(boxes))]
    frame = column_zones(boxes, names=names, crs=reference.crs.to_string(), area_km2=totals)
    return zone_layer_from_frame(frame, name_field="name")
