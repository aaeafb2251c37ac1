"""Grid alignment checks and nearest-neighbour resampling."""

from __future__ import annotations

import logging

import numpy as np
from rasterio.enums import Resampling
from rasterio.warp import reproject

from eezsuit.errors import AlignmentError
from eezsuit.layers.crs import crs_equal
from eezsuit.layers.models import Raster, ZoneLayer

LOGGER = logging.getLogger("eezsuit.layers.align")

RESAMPLING_CHOICES = ("nearest", "bilinear", "cubic", "average")


def _resampling(method: str) -> Resampling:
    """Map a resampling name to the rasterio enum."""
    if method not in RESAMPLING_CHOICES:
        raise ValueError(f"Unknown resampling method: {method}")
    return Resampling[method]


def _transforms_close(left: Raster, right: Raster) -> bool:
    """Return True when two grids share a transform within tolerance."""
    return left.transform.almost_equals(right.transform, precision=1e-9)


def check_rasters_aligned(reference: Raster, other: Raster, *, label: str = "raster") -> None:
    """Raise AlignmentError unless both rasters share CRS, shape and transform."""
    if not crs_equal(reference.crs, other.crs):
        raise AlignmentError(
            f"CRS mismatch: {label} uses {other.crs.to_string()}, "
            f"expected {reference.crs.to_string()}."
        )
    if reference.shape != other.shape:
        raise AlignmentError(
            f"Shape mismatch: {label} is {other.shape}, expected {reference.shape}."
        )
    if not _transforms_close(reference, other):
        raise AlignmentError(f"Grid mismatch: {label} extent or resolution differs.")


def check_zones_aligned(reference: Raster, zones: ZoneLayer) -> None:
    """Raise AlignmentError unless the zone layer shares the raster CRS."""
    if not crs_equal(reference.crs, zones.crs):
        zone_crs = zones.crs.to_string() if zones.crs is not None else "no CRS"
        raise AlignmentError(
            f"CRS mismatch: zones use {zone_crs}, expected {reference.crs.to_string()}."
        )


def check_alignment(sst: Raster, depth: Raster, zones: ZoneLayer) -> None:
    """Validate that the SST raster, depth raster and zones can be combined."""
    check_rasters_aligned(sst, depth, label="depth raster")
    check_zones_aligned(sst, zones)


def resample_to(raster: Raster, reference: Raster, *, resampling: str = "nearest") -> Raster:
    """Resample a raster onto the grid of a reference raster in the same CRS."""
    if not crs_equal(raster.crs, reference.crs):
        raise AlignmentError(
            f"Cannot resample across CRSs: {raster.crs.to_string()} "
            f"vs {reference.crs.to_string()}."
        )
    destination = np.full(reference.shape, np.nan, dtype=np.float64)
    reproject(
        source=raster.data.astype(np.float64),
        destination=destination,
        src_transform=raster.transform,
        src_crs=raster.crs.to_wkt(),
        dst_transform=reference.transform,
        dst_crs=reference.crs.to_wkt(),
        resampling=_resampling(resampling),
        src_nodata=np.nan,
        dst_nodata=np.nan,
    )
    LOGGER.debug(
        "Resampled raster from %s to %s using %s", raster.shape, reference.shape, resampling
    )
    return Raster(data=destination, transform=reference.transform, crs=reference.crs)
