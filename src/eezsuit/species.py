"""Species tolerance bounds and the preset library."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping


@dataclass(frozen=True)
class SpeciesBounds:
    """Preferred temperature (°C) and depth (m below sea level) ranges.

    Depths are positive magnitudes. Inverted ranges are allowed and select
    no cells.
    """

    min_temp: float
    max_temp: float
    min_depth: float
    max_depth: float

    @property
    def is_empty(self) -> bool:
        """Return True when either range is inverted."""
        return self.min_temp >= self.max_temp or self.min_depth >= self.max_depth

    def as_dict(self) -> dict[str, float]:
        """Return the bounds as a plain dictionary."""
        return {
            "min_temp": self.min_temp,
            "max_temp": self.max_temp,
            "min_depth": self.min_depth,
            "max_depth": self.max_depth,
        }


@dataclass(frozen=True)
class Species:
    """Named species preset."""

    name: str
    common_name: str
    bounds: SpeciesBounds
    notes: tuple[str, ...] = ()


ENV_SPECIES_PATH = "EEZSUIT_SPECIES_PATH"

_SPECIES: dict[str, Species] = {
    "oyster": Species(
        name="oyster",
        common_name="Oyster",
        bounds=SpeciesBounds(min_temp=11.0, max_temp=30.0, min_depth=0.0, max_depth=70.0),
        notes=("Shellfish culture in shallow coastal waters.",),
    ),
    "abalone": Species(
        name="abalone",
        common_name="Abalone",
        bounds=SpeciesBounds(min_temp=8.0, max_temp=18.0, min_depth=0.0, max_depth=24.0),
        notes=("Cool-water grazer on nearshore rocky reefs.",),
    ),
}


def default_user_species_path() -> Path:
    """Return the default user species file path."""
    return Path.home() / ".eezsuit" / "species.json"


def _candidate_species_paths(explicit_path: Path | None) -> list[Path]:
    """Return species file paths in lookup order."""
    if explicit_path is not None:
        return [explicit_path]
    candidates: list[Path] = []
    env_path = os.environ.get(ENV_SPECIES_PATH)
    if env_path:
        candidates.append(Path(env_path))
    candidates.append(default_user_species_path())
    return candidates


def _coerce_str_list(value: Any) -> tuple[str, ...]:
    """Normalize a string or list of strings into a tuple."""
    if isinstance(value, str):
        return (value,)
    if isinstance(value, (list, tuple)):
        return tuple(str(item) for item in value if item)
    return ()


def _species_from_mapping(data: Mapping[str, Any]) -> Species | None:
    """Build a Species from a mapping, returning None for invalid entries."""
    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        return None
    raw_bounds = data.get("bounds")
    if not isinstance(raw_bounds, Mapping):
        return None
    try:
        bounds = SpeciesBounds(
            min_temp=float(raw_bounds["min_temp"]),
            max_temp=float(raw_bounds["max_temp"]),
            min_depth=float(raw_bounds["min_depth"]),
            max_depth=float(raw_bounds["max_depth"]),
        )
    except (KeyError, TypeError, ValueError):
        return None
    common_name = data.get("common_name")
    return Species(
        name=name.strip().lower(),
        common_name=common_name.strip() if isinstance(common_name, str) else name.strip(),
        bounds=bounds,
        notes=_coerce_str_list(data.get("notes")),
    )


def _species_from_payload(payload: Any) -> dict[str, Species]:
    """Parse the species mapping from a species file payload."""
    items: list[Mapping[str, Any]]
    if isinstance(payload, dict) and isinstance(payload.get("species"), list):
        items = [item for item in payload["species"] if isinstance(item, Mapping)]
    elif isinstance(payload, list):
        items = [item for item in payload if isinstance(item, Mapping)]
    else:
        return {}
    parsed: dict[str, Species] = {}
    for item in items:
        species = _species_from_mapping(item)
        if species:
            parsed[species.name] = species
    return parsed


def load_species_file(path: Path) -> dict[str, Species]:
    """Load species presets from an explicit JSON file."""
    payload = json.loads(path.read_text(encoding="utf-8"))
    return _species_from_payload(payload)


def load_user_species(path: Path | None = None) -> dict[str, Species]:
    """Load user-defined species from disk, if available."""
    for candidate in _candidate_species_paths(path):
        if not candidate.exists():
            continue
        try:
            return load_species_file(candidate)
        except (OSError, json.JSONDecodeError):
            continue
    return {}


def list_species(*, include_user: bool = True, user_path: Path | None = None) -> tuple[Species, ...]:
    """Return all species presets in sorted order."""
    merged = dict(_SPECIES)
    if include_user:
        merged.update(load_user_species(user_path))
    return tuple(merged[name] for name in sorted(merged))


def get_species(
    name: str, *, include_user: bool = True, user_path: Path | None = None
) -> Species | None:
    """Return a species preset by name, case-insensitive."""
    key = name.strip().lower()
    if include_user:
        user_species = load_user_species(user_path)
        if key in user_species:
            return user_species[key]
    return _SPECIES.get(key)


def species_as_dict(species: Species) -> dict[str, Any]:
    """Return a JSON-serializable representation of a species preset."""
    return {
        "name": species.name,
        "common_name": species.common_name,
        "bounds": species.bounds.as_dict(),
        "notes": list(species.notes),
    }


def format_species(species: Species) -> str:
    """Format a species preset as a human-readable string."""
    bounds = species.bounds
    lines = [
        f"Species: {species.name} ({species.common_name})",
        f"Temperature: {bounds.min_temp:g} to {bounds.max_temp:g} °C",
        f"Depth: {bounds.min_depth:g} to {bounds.max_depth:g} m",
    ]
    if species.notes:
        lines.append("Notes:")
        lines.extend([f"- {note}" for note in species.notes])
    return "\n".join(lines)
