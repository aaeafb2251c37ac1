"""Choropleth map of suitable area per zone."""

from __future__ import annotations

import logging
import math
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402

from eezsuit.layers.crs import linear_unit_factor  # noqa: E402
from eezsuit.layers.models import Raster, ZoneLayer  # noqa: E402
from eezsuit.suitability import SUITABLE_AREA_COLUMN, SuitabilityResult  # noqa: E402

LOGGER = logging.getLogger("eezsuit.mapping")

DPI = 150


def _nice_length(target_km: float) -> float:
    """Round a length down to 1, 2 or 5 times a power of ten."""
    if target_km <= 0:
        return 0.0
    exponent = math.floor(math.log10(target_km))
    base = 10**exponent
    for step in (5, 2, 1):
        if step * base <= target_km:
            return float(step * base)
    return float(base)


def _km_per_x_unit(raster: Raster, latitude: float) -> float:
    """Return kilometres per x unit at a latitude."""
    if raster.crs.is_geographic:
        return 111.32 * math.cos(math.radians(latitude))
    return linear_unit_factor(raster.crs) / 1000.0


def _draw_scale_bar(ax: plt.Axes, raster: Raster) -> None:
    """Draw a scale bar in the lower left corner."""
    left, bottom, right, top = raster.bounds
    km_per_unit = _km_per_x_unit(raster, (bottom + top) / 2)
    if km_per_unit <= 0:
        return
    length_km = _nice_length((right - left) * km_per_unit / 4)
    if length_km <= 0:
        return
    length_units = length_km / km_per_unit
    x0 = left + (right - left) * 0.05
    y0 = bottom + (top - bottom) * 0.05
    ax.plot([x0, x0 + length_units], [y0, y0], color="black", linewidth=3, zorder=6)
    ax.text(
        x0 + length_units / 2,
        y0 + (top - bottom) * 0.015,
        f"{length_km:g} km",
        ha="center",
        va="bottom",
        fontsize=8,
        zorder=6,
    )


def _draw_north_arrow(ax: plt.Axes) -> None:
    """Draw a north arrow in the upper right corner."""
    ax.annotate(
        "N",
        xy=(0.95, 0.95),
        xytext=(0.95, 0.85),
        xycoords="axes fraction",
        ha="center",
        va="center",
        fontsize=12,
        fontweight="bold",
        arrowprops={"facecolor": "black", "width": 4, "headwidth": 10},
        zorder=6,
    )


def render_suitability_map(
    result: SuitabilityResult,
    sst: Raster,
    zones: ZoneLayer,
    output_path: Path,
) -> Path:
    """Draw mean SST, zones colored by suitable area, labels and a title."""
    frame = zones.frame.copy()
    frame[SUITABLE_AREA_COLUMN] = [row.suitable_area_km2 for row in result.zones]
    labels = [row.label for row in result.zones]

    fig, ax = plt.subplots(1, 1, figsize=(8, 10), facecolor="white")
    left, bottom, right, top = sst.bounds
    image = ax.imshow(
        np.ma.masked_invalid(sst.data),
        extent=[left, right, bottom, top],
        origin="upper",
        cmap="RdYlBu_r",
        zorder=1,
    )
    fig.colorbar(image, ax=ax, shrink=0.5, pad=0.02, label="Mean SST (°C)")
    frame.plot(
        ax=ax,
        column=SUITABLE_AREA_COLUMN,
        cmap="Greens",
        edgecolor="#333333",
        linewidth=0.8,
        alpha=0.75,
        legend=True,
        legend_kwds={"label": "Suitable area (km²)", "shrink": 0.5},
        zorder=2,
    )
    for geometry, label in zip(frame.geometry, labels):
        if geometry is None or geometry.is_empty:
            continue
        point = geometry.representative_point()
        ax.text(point.x, point.y, label, ha="center", va="center", fontsize=7, zorder=5)

    _draw_north_arrow(ax)
    _draw_scale_bar(ax, sst)
    ax.set_title(f"Suitable area for {result.species_name} by EEZ", fontsize=14, fontweight="bold")
    ax.set_xlim(left, right)
    ax.set_ylim(bottom, top)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=DPI, facecolor="white", bbox_inches="tight")
    plt.close(fig)
    LOGGER.info("Map written to %s", output_path, extra={"species": result.species_name})
    return output_path
