"""Raster and zone layer helpers and exports."""

from eezsuit.layers.align import check_alignment, check_rasters_aligned, resample_to
from eezsuit.layers.area import cell_area_km2
from eezsuit.layers.crs import crs_equal, normalize_crs
from eezsuit.layers.info import inspect_raster
from eezsuit.layers.io import read_raster, write_raster
from eezsuit.layers.models import Raster, RasterInfo, ZoneLayer
from eezsuit.layers.zones import geometry_area_km2, load_zones, zone_layer_from_frame

__all__ = [
    "Raster",
    "RasterInfo",
    "ZoneLayer",
    "cell_area_km2",
    "check_alignment",
    "check_rasters_aligned",
    "crs_equal",
    "geometry_area_km2",
    "inspect_raster",
    "load_zones",
    "normalize_crs",
    "read_raster",
    "resample_to",
    "write_raster",
    "zone_layer_from_frame",
]
