"""Raster inspection helpers."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import numpy as np
import rasterio
from rasterio.errors import RasterioIOError

from eezsuit.errors import LayerError
from eezsuit.layers.models import RasterInfo


def _sample_range(dataset: Any) -> tuple[float | None, float | None]:
    """Return min/max from a decimated read of band 1."""
    max_dim = 512
    scale = min(1.0, max_dim / max(dataset.width, dataset.height))
    height = max(1, int(dataset.height * scale))
    width = max(1, int(dataset.width * scale))
    data = dataset.read(1, out_shape=(height, width), masked=True)
    if np.issubdtype(data.dtype, np.floating):
        nan_mask = np.isnan(np.ma.getdata(data))
        if nan_mask.any():
            data = np.ma.array(np.ma.getdata(data), mask=np.ma.getmaskarray(data) | nan_mask)
    if not data.count():
        return None, None
    return float(data.min()), float(data.max())


def inspect_raster(path: Path, *, sample: bool = False) -> RasterInfo:
    """Collect metadata about a raster on disk."""
    try:
        dataset = rasterio.open(path)
    except RasterioIOError as exc:
        raise LayerError(f"Unable to read raster {path}: {exc}") from exc
    with dataset:
        crs = dataset.crs.to_string() if dataset.crs else None
        bounds = dataset.bounds
        min_value = max_value = None
        if sample:
            min_value, max_value = _sample_range(dataset)
        return RasterInfo(
            path=str(path),
            crs=crs,
            bounds=(bounds.left, bounds.bottom, bounds.right, bounds.top),
            width=dataset.width,
            height=dataset.height,
            nodata=dataset.nodata,
            resolution=(abs(dataset.res[0]), abs(dataset.res[1])),
            dtype=dataset.dtypes[0],
            min_value=min_value,
            max_value=max_value,
        )
