"""Data models for rasters and zone layers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import geopandas as gpd
import numpy as np
from pyproj import CRS
from rasterio.transform import Affine

Bounds = Tuple[float, float, float, float]
Resolution = Tuple[float, float]


@dataclass(frozen=True)
class Raster:
    """Single-band raster held in memory with NaN as nodata."""

    data: np.ndarray
    transform: Affine
    crs: CRS

    @property
    def shape(self) -> tuple[int, int]:
        return (int(self.data.shape[0]), int(self.data.shape[1]))

    @property
    def bounds(self) -> Bounds:
        height, width = self.shape
        left, top = self.transform * (0, 0)
        right, bottom = self.transform * (width, height)
        return (min(left, right), min(top, bottom), max(left, right), max(top, bottom))

    def valid_mask(self) -> np.ndarray:
        """Return a boolean mask of cells holding data."""
        return ~np.isnan(self.data)

    def with_data(self, data: np.ndarray) -> Raster:
        """Return a raster on the same grid with new cell values."""
        if data.shape != self.data.shape:
            raise ValueError("Replacement data must match the raster shape.")
        return Raster(data=data, transform=self.transform, crs=self.crs)


@dataclass(frozen=True)
class RasterInfo:
    """Metadata extracted from a raster file."""

    path: str
    crs: str | None
    bounds: Bounds
    width: int
    height: int
    nodata: float | None
    resolution: Resolution
    dtype: str
    min_value: float | None = None
    max_value: float | None = None


@dataclass(frozen=True)
class ZoneLayer:
    """Zone polygons with an identifier and a reference total area per zone."""

    frame: gpd.GeoDataFrame
    id_field: str = "rgn"
    name_field: str | None = None
    area_field: str = "area_km2"

    @property
    def crs(self) -> CRS | None:
        return self.frame.crs

    @property
    def zone_ids(self) -> list[object]:
        """Return zone identifiers in layer order."""
        return list(self.frame[self.id_field])

    def zone_names(self) -> list[str]:
        """Return display names, falling back to the zone identifier."""
        if self.name_field and self.name_field in self.frame.columns:
            return [str(value) for value in self.frame[self.name_field]]
        return [str(value) for value in self.frame[self.id_field]]

    def total_areas(self) -> list[float]:
        """Return the reference total area of each zone in km²."""
        return [float(value) for value in self.frame[self.area_field]]

    def __len__(self) -> int:
        return len(self.frame)
