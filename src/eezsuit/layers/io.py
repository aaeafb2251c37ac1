"""Raster read/write helpers."""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import rasterio
from rasterio.errors import RasterioIOError

from eezsuit.errors import LayerError
from eezsuit.layers.crs import normalize_crs
from eezsuit.layers.models import Raster

LOGGER = logging.getLogger("eezsuit.layers.io")


def read_raster(path: Path, *, band: int = 1) -> Raster:
    """Read one raster band into memory, converting nodata cells to NaN."""
    try:
        with rasterio.open(path) as dataset:
            if dataset.crs is None:
                raise LayerError(f"Raster is missing a CRS: {path}")
            if band < 1 or band > dataset.count:
                raise LayerError(f"Raster {path} has no band {band}.")
            masked = dataset.read(band, masked=True)
            data = np.ma.filled(masked.astype(np.float64), np.nan)
            raster = Raster(
                data=data,
                transform=dataset.transform,
                crs=normalize_crs(dataset.crs),
            )
    except RasterioIOError as exc:
        raise LayerError(f"Unable to read raster {path}: {exc}") from exc
    LOGGER.debug("Read raster %s with shape %s", path, raster.shape)
    return raster


def write_raster(path: Path, raster: Raster) -> Path:
    """Write a raster to GeoTIFF as float32 with NaN nodata."""
    height, width = raster.shape
    path.parent.mkdir(parents=True, exist_ok=True)
    with rasterio.open(
        path,
        "w",
        driver="GTiff",
        height=height,
        width=width,
        count=1,
        dtype="float32",
        crs=raster.crs.to_wkt(),
        transform=raster.transform,
        nodata=np.nan,
    ) as dataset:
        dataset.write(raster.data.astype(np.float32), 1)
    return path
