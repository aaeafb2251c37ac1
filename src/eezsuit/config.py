"""Run config loading and normalization helpers."""

from __future__ import annotations

import json
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping

import jsonschema

from eezsuit.contracts import validate_run_config
from eezsuit.errors import ConfigError


@dataclass(frozen=True)
class RunConfig:
    """Normalized inputs and options for an evaluation run."""

    sst: Path | None = None
    depth: Path | None = None
    zones: Path | None = None
    zone_id_field: str = "rgn"
    zone_name_field: str | None = None
    zone_area_field: str = "area_km2"
    resample_depth: bool = False
    resampling: str = "nearest"
    write_map: bool = False
    write_raster: bool = False
    output_dir: Path | None = None

    def missing_inputs(self) -> list[str]:
        """Return the names of required inputs that are not set."""
        return [name for name in ("sst", "depth", "zones") if getattr(self, name) is None]

    def require_inputs(self) -> None:
        """Raise ConfigError when any input layer path is missing."""
        missing = self.missing_inputs()
        if missing:
            raise ConfigError(f"Missing required input(s): {', '.join(missing)}")

    def with_overrides(self, **overrides: Any) -> RunConfig:
        """Return a copy with non-None overrides applied."""
        values = {key: value for key, value in overrides.items() if value is not None}
        for key in ("sst", "depth", "zones", "output_dir"):
            if key in values:
                values[key] = Path(values[key])
        return replace(self, **values)

    def as_dict(self) -> dict[str, Any]:
        """Return the config in run-config JSON layout."""
        return {
            "inputs": {
                key: str(value)
                for key, value in (("sst", self.sst), ("depth", self.depth), ("zones", self.zones))
                if value is not None
            },
            "zones": {
                "id_field": self.zone_id_field,
                "name_field": self.zone_name_field,
                "area_field": self.zone_area_field,
            },
            "options": {
                "resample_depth": self.resample_depth,
                "resampling": self.resampling,
                "write_map": self.write_map,
                "write_raster": self.write_raster,
            },
            "output_dir": str(self.output_dir) if self.output_dir else None,
        }


def _resolve_path(value: str | None, base_dir: Path | None) -> Path | None:
    """Resolve a config path relative to the config file directory."""
    if not value:
        return None
    path = Path(value).expanduser()
    if base_dir is not None and not path.is_absolute():
        return base_dir / path
    return path


def normalize_run_config(payload: Mapping[str, Any], *, base_dir: Path | None = None) -> RunConfig:
    """Validate a raw config payload and normalize it into a RunConfig."""
    try:
        validate_run_config(payload)
    except jsonschema.ValidationError as exc:
        raise ConfigError(f"Invalid run config: {exc.message}") from exc

    inputs = payload.get("inputs") or {}
    zones = payload.get("zones") or {}
    options = payload.get("options") or {}
    defaults = RunConfig()
    return RunConfig(
        sst=_resolve_path(inputs.get("sst"), base_dir),
        depth=_resolve_path(inputs.get("depth"), base_dir),
        zones=_resolve_path(inputs.get("zones"), base_dir),
        zone_id_field=zones.get("id_field", defaults.zone_id_field),
        zone_name_field=zones.get("name_field", defaults.zone_name_field),
        zone_area_field=zones.get("area_field", defaults.zone_area_field),
        resample_depth=bool(options.get("resample_depth", defaults.resample_depth)),
        resampling=options.get("resampling", defaults.resampling),
        write_map=bool(options.get("write_map", defaults.write_map)),
        write_raster=bool(options.get("write_raster", defaults.write_raster)),
        output_dir=_resolve_path(payload.get("output_dir"), base_dir),
    )


def load_run_config(path: Path) -> RunConfig:
    """Load a run config file; relative paths resolve against its directory."""
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Unable to read run config {path}: {exc}") from exc
    if not isinstance(payload, Mapping):
        raise ConfigError("Run config must be a JSON object.")
    return normalize_run_config(payload, base_dir=path.resolve().parent)
