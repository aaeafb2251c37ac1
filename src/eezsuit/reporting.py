"""Result tables and report artifacts."""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

import pandas as pd

from eezsuit.contracts import SCHEMA_VERSION, validate_report
from eezsuit.suitability import SuitabilityResult

LOGGER = logging.getLogger("eezsuit.reporting")

RESULT_COLUMNS = (
    "zone_id",
    "zone_name",
    "suitable_area_km2",
    "total_area_km2",
    "percent_suitable",
    "label",
)


def _utc_now() -> str:
    """Return the current UTC time as ISO 8601."""
    return datetime.now(timezone.utc).isoformat()


def species_slug(name: str) -> str:
    """Return a filesystem-friendly slug for a species name."""
    slug = re.sub(r"[^a-z0-9]+", "_", name.strip().lower()).strip("_")
    return slug or "species"


def result_frame(result: SuitabilityResult) -> pd.DataFrame:
    """Return the per-zone table as a DataFrame."""
    return pd.DataFrame([zone.as_dict() for zone in result.zones], columns=list(RESULT_COLUMNS))


def format_table(result: SuitabilityResult) -> str:
    """Format the per-zone table for terminal output."""
    frame = result_frame(result)[["zone_name", "suitable_area_km2", "percent_suitable"]]
    frame = frame.assign(suitable_area_km2=frame["suitable_area_km2"].round(0).astype(int))
    return frame.to_string(index=False)


def build_report(
    result: SuitabilityResult,
    *,
    artifacts: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Create a suitability report dictionary."""
    return {
        "schema_version": SCHEMA_VERSION,
        "created_at": _utc_now(),
        "species": result.species_name,
        "bounds": result.bounds.as_dict(),
        "zones": [zone.as_dict() for zone in result.zones],
        "totals": {
            "suitable_cells": result.suitable_cells,
            "suitable_area_km2": result.total_suitable_area_km2,
        },
        "artifacts": dict(artifacts or {}),
    }


def write_result_artifacts(
    result: SuitabilityResult,
    output_dir: Path,
    *,
    extra_artifacts: Mapping[str, Any] | None = None,
) -> dict[str, str]:
    """Write the zone table as CSV and the report as JSON; return their paths."""
    output_dir.mkdir(parents=True, exist_ok=True)
    slug = species_slug(result.species_name)
    table_path = output_dir / f"{slug}_zones.csv"
    report_path = output_dir / f"{slug}_report.json"

    result_frame(result).to_csv(table_path, index=False)
    artifacts: dict[str, str] = {"table": str(table_path)}
    artifacts.update({key: str(value) for key, value in (extra_artifacts or {}).items()})
    report = build_report(result, artifacts=artifacts)
    validate_report(report)
    report_path.write_text(json.dumps(report, indent=2), encoding="utf-8")
    artifacts["report"] = str(report_path)
    LOGGER.info("Report written to %s", report_path, extra={"species": result.species_name})
    return artifacts
