"""Schema validation helpers for run configs and suitability reports."""

from __future__ import annotations

import json
from importlib import resources
from typing import Any, Mapping

import jsonschema

SCHEMA_VERSION = "1.0"


def _load_schema(name: str) -> dict[str, Any]:
    """Load a JSON schema bundled in the package."""
    with resources.files("eezsuit.schemas").joinpath(name).open("r", encoding="utf-8") as handle:
        return json.load(handle)


def validate_run_config(config: Mapping[str, Any]) -> None:
    """Validate a run config payload against the schema."""
    jsonschema.validate(config, _load_schema("run_config.schema.json"))


def validate_report(report: Mapping[str, Any]) -> None:
    """Validate a suitability report against the schema."""
    jsonschema.validate(report, _load_schema("suitability_report.schema.json"))
