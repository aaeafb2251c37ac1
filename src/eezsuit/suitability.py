"""Suitable-area evaluation of species bounds over EEZ zones."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import numpy as np
import pandas as pd
from rasterio.features import rasterize

from eezsuit.layers.align import check_alignment
from eezsuit.layers.area import cell_area_km2
from eezsuit.layers.models import Raster, ZoneLayer
from eezsuit.species import Species, SpeciesBounds

LOGGER = logging.getLogger("eezsuit.suitability")

SUITABLE_AREA_COLUMN = "suitable_area_km2"


@dataclass(frozen=True)
class ZoneAreaResult:
    """Suitable area summary for a single zone."""

    zone_id: object
    zone_name: str
    suitable_area_km2: float
    total_area_km2: float
    percent_suitable: float

    @property
    def label(self) -> str:
        """Display label with the area rounded to whole km²."""
        return f"{self.zone_name}: {int(round(self.suitable_area_km2))} km²"

    def as_dict(self) -> dict[str, object]:
        return {
            "zone_id": self.zone_id,
            "zone_name": self.zone_name,
            "suitable_area_km2": self.suitable_area_km2,
            "total_area_km2": self.total_area_km2,
            "percent_suitable": self.percent_suitable,
            "label": self.label,
        }


@dataclass(frozen=True)
class SuitabilityResult:
    """Per-zone table and suitability raster for one species."""

    species_name: str
    bounds: SpeciesBounds
    zones: tuple[ZoneAreaResult, ...]
    raster: Raster

    @property
    def suitable_cells(self) -> int:
        """Number of cells flagged suitable."""
        return int(np.count_nonzero(self.raster.valid_mask()))

    @property
    def total_suitable_area_km2(self) -> float:
        """Suitable area summed over all zones."""
        return float(sum(zone.suitable_area_km2 for zone in self.zones))

    def zone(self, zone_id: object) -> ZoneAreaResult:
        """Return the row for a zone identifier."""
        for zone in self.zones:
            if zone.zone_id == zone_id:
                return zone
        raise KeyError(zone_id)


def reclassify_range(data: np.ndarray, lower: float, upper: float) -> np.ndarray:
    """Return 1 where lower < value <= upper, 0 elsewhere and NaN for nodata."""
    nodata = np.isnan(data)
    values = np.where(nodata, lower, data)
    reclassified = np.where((values > lower) & (values <= upper), 1.0, 0.0)
    reclassified[nodata] = np.nan
    return reclassified


def reclassify_temperature(sst: Raster, bounds: SpeciesBounds) -> Raster:
    """Flag cells whose temperature falls in (min_temp, max_temp]."""
    return sst.with_data(reclassify_range(sst.data, bounds.min_temp, bounds.max_temp))


def reclassify_depth(depth: Raster, bounds: SpeciesBounds) -> Raster:
    """Flag cells whose elevation falls in (-max_depth, -min_depth].

    Depth rasters store elevation, so cells below sea level are negative.
    """
    return depth.with_data(reclassify_range(depth.data, -bounds.max_depth, -bounds.min_depth))


def combine_suitability(temperature: Raster, depth: Raster) -> Raster:
    """Multiply two 0/1 rasters and convert zero cells to nodata."""
    combined = temperature.data * depth.data
    return temperature.with_data(np.where(combined == 1.0, 1.0, np.nan))


def rasterize_zones(zones: ZoneLayer, reference: Raster) -> np.ndarray:
    """Burn zone positions (1-based) into the reference grid; 0 marks no zone."""
    shapes = [
        (geometry, index + 1)
        for index, geometry in enumerate(zones.frame.geometry)
        if geometry is not None and not geometry.is_empty
    ]
    if not shapes:
        return np.zeros(reference.shape, dtype=np.int32)
    return rasterize(
        shapes,
        out_shape=reference.shape,
        transform=reference.transform,
        fill=0,
        dtype="int32",
    )


def mask_to_zones(raster: Raster, zone_codes: np.ndarray) -> Raster:
    """Set cells outside every zone to nodata."""
    return raster.with_data(np.where(zone_codes > 0, raster.data, np.nan))


def zonal_area(
    suitability: Raster,
    zone_codes: np.ndarray,
    cell_areas: np.ndarray,
    zone_count: int,
) -> dict[int, float]:
    """Sum cell area over suitable cells for each zone position present."""
    suitable = suitability.valid_mask() & (zone_codes > 0)
    if not suitable.any():
        return {}
    sums = np.bincount(
        zone_codes[suitable],
        weights=cell_areas[suitable],
        minlength=zone_count + 1,
    )
    present = np.unique(zone_codes[suitable])
    return {int(code) - 1: float(sums[code]) for code in present}


def percent_of(area: float, total: float) -> float:
    """Return area as a percentage of total, rounded to two decimals."""
    if total <= 0:
        return 0.0
    return round(area / total * 100, 2)


def _scalar(value: object) -> object:
    """Convert numpy scalars to native Python values."""
    item = getattr(value, "item", None)
    return item() if callable(item) else value


def join_zone_areas(zones: ZoneLayer, areas: dict[int, float]) -> tuple[ZoneAreaResult, ...]:
    """Left-join zonal sums onto the zone table; zones without cells get 0.

    Suitable area is capped at the zone's reference total, so percent
    suitable never exceeds 100.
    """
    table = pd.DataFrame(
        {
            "position": range(len(zones)),
            "zone_id": zones.zone_ids,
            "zone_name": zones.zone_names(),
            "total_area_km2": zones.total_areas(),
        }
    )
    aggregated = pd.DataFrame(
        {
            "position": pd.Series(list(areas.keys()), dtype="int64"),
            SUITABLE_AREA_COLUMN: pd.Series(list(areas.values()), dtype="float64"),
        }
    )
    joined = table.merge(aggregated, on="position", how="left")
    suitable = joined[SUITABLE_AREA_COLUMN].fillna(0.0).astype(float)
    # Cell-center rasterization can give a zone more cell area than its reference total.
    overflow = suitable > joined["total_area_km2"]
    if overflow.any():
        LOGGER.debug(
            "Clamping suitable area to the zone total for %s zone(s)", int(overflow.sum())
        )
    joined[SUITABLE_AREA_COLUMN] = suitable.clip(lower=0.0, upper=joined["total_area_km2"])
    return tuple(
        ZoneAreaResult(
            zone_id=_scalar(row.zone_id),
            zone_name=str(row.zone_name),
            suitable_area_km2=float(row.suitable_area_km2),
            total_area_km2=float(row.total_area_km2),
            percent_suitable=percent_of(float(row.suitable_area_km2), float(row.total_area_km2)),
        )
        for row in joined.itertuples(index=False)
    )


class SuitabilityEvaluator:
    """Evaluate species bounds against fixed SST, depth and zone layers.

    The layers are treated as read-only. Zone codes and the cell area grid
    are derived once at construction and shared by every evaluation.
    """

    def __init__(
        self,
        sst: Raster,
        depth: Raster,
        zones: ZoneLayer,
        *,
        check: bool = True,
    ) -> None:
        if check:
            check_alignment(sst, depth, zones)
        self._sst = sst
        self._depth = depth
        self._zones = zones
        self._zone_codes = rasterize_zones(zones, sst)
        self._zone_codes.setflags(write=False)
        self._cell_areas = cell_area_km2(sst)
        self._cell_areas.setflags(write=False)

    @property
    def sst(self) -> Raster:
        return self._sst

    @property
    def depth(self) -> Raster:
        return self._depth

    @property
    def zones(self) -> ZoneLayer:
        return self._zones

    def evaluate(
        self,
        species_name: str,
        min_temp: float,
        max_temp: float,
        min_depth: float,
        max_depth: float,
    ) -> SuitabilityResult:
        """Compute suitable area per zone for one set of species bounds."""
        bounds = SpeciesBounds(
            min_temp=float(min_temp),
            max_temp=float(max_temp),
            min_depth=float(min_depth),
            max_depth=float(max_depth),
        )
        extra = {"species": species_name}
        LOGGER.debug("Reclassifying layers for bounds %s", bounds.as_dict(), extra=extra)
        temperature = reclassify_temperature(self._sst, bounds)
        depth = reclassify_depth(self._depth, bounds)
        combined = combine_suitability(temperature, depth)
        masked = mask_to_zones(combined, self._zone_codes)
        areas = zonal_area(masked, self._zone_codes, self._cell_areas, len(self._zones))
        rows = join_zone_areas(self._zones, areas)
        result = SuitabilityResult(
            species_name=species_name,
            bounds=bounds,
            zones=rows,
            raster=masked,
        )
        LOGGER.info(
            "%s suitable cells, %.1f km² across %s zone(s)",
            result.suitable_cells,
            result.total_suitable_area_km2,
            len(rows),
            extra=extra,
        )
        return result

    def evaluate_species(self, species: Species) -> SuitabilityResult:
        """Evaluate a species preset."""
        bounds = species.bounds
        return self.evaluate(
            species.common_name,
            bounds.min_temp,
            bounds.max_temp,
            bounds.min_depth,
            bounds.max_depth,
        )

    def render_map(self, result: SuitabilityResult, output_path: Path) -> Path:
        """Render a choropleth of suitable area per zone and return its path."""
        from eezsuit.mapping import render_suitability_map

        return render_suitability_map(result, self._sst, self._zones, output_path)


def suitability(
    species_name: str,
    min_temp: float,
    max_temp: float,
    min_depth: float,
    max_depth: float,
    *,
    sst: Raster,
    depth: Raster,
    zones: ZoneLayer,
) -> SuitabilityResult:
    """Evaluate one species against explicitly supplied layers."""
    evaluator = SuitabilityEvaluator(sst, depth, zones)
    return evaluator.evaluate(species_name, min_temp, max_temp, min_depth, max_depth)
