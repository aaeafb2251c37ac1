from __future__ import annotations

import json
from pathlib import Path

from eezsuit import species


def test_list_species_sorted() -> None:
    names = [item.name for item in species.list_species()]
    assert names == sorted(names)
    assert {"abalone", "oyster"} <= set(names)


def test_get_species_case_insensitive() -> None:
    oyster = species.get_species("OYSTER")
    assert oyster is not None
    assert oyster.common_name == "Oyster"
    assert oyster.bounds == species.SpeciesBounds(11.0, 30.0, 0.0, 70.0)


def test_abalone_bounds() -> None:
    abalone = species.get_species("abalone")
    assert abalone is not None
    assert abalone.bounds.as_dict() == {
        "min_temp": 8.0,
        "max_temp": 18.0,
        "min_depth": 0.0,
        "max_depth": 24.0,
    }


def test_unknown_species() -> None:
    assert species.get_species("kraken") is None


def test_bounds_is_empty() -> None:
    assert species.SpeciesBounds(18.0, 8.0, 0.0, 24.0).is_empty
    assert species.SpeciesBounds(8.0, 18.0, 24.0, 0.0).is_empty
    assert not species.SpeciesBounds(8.0, 18.0, 0.0, 24.0).is_empty


def test_format_species() -> None:
    abalone = species.get_species("abalone")
    assert abalone is not None
    formatted = species.format_species(abalone)
    assert "Species: abalone (Abalone)" in formatted
    assert "Temperature: 8 to 18 °C" in formatted
    assert "Depth: 0 to 24 m" in formatted


def test_load_user_species_from_file(tmp_path: Path) -> None:
    payload = {
        "version": 1,
        "species": [
            {
                "name": "Mussel",
                "common_name": "Blue mussel",
                "bounds": {"min_temp": 5, "max_temp": 20, "min_depth": 0, "max_depth": 30},
                "notes": "Rope culture.",
            },
            {"name": "broken", "bounds": {"min_temp": 1}},
        ],
    }
    path = tmp_path / "species.json"
    path.write_text(json.dumps(payload), encoding="utf-8")

    loaded = species.load_user_species(path)
    assert list(loaded) == ["mussel"]
    assert loaded["mussel"].common_name == "Blue mussel"
    assert loaded["mussel"].notes == ("Rope culture.",)


def test_user_species_override_builtin(monkeypatch, tmp_path: Path) -> None:
    payload = [
        {
            "name": "oyster",
            "bounds": {"min_temp": 12, "max_temp": 28, "min_depth": 1, "max_depth": 50},
        }
    ]
    path = tmp_path / "override.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    monkeypatch.setenv(species.ENV_SPECIES_PATH, str(path))

    oyster = species.get_species("oyster")
    assert oyster is not None
    assert oyster.bounds.max_depth == 50.0
    assert species.get_species("oyster", include_user=False).bounds.max_depth == 70.0


def test_invalid_user_file_is_ignored(monkeypatch, tmp_path: Path) -> None:
    path = tmp_path / "bad.json"
    path.write_text("{not json", encoding="utf-8")
    monkeypatch.setenv(species.ENV_SPECIES_PATH, str(path))
    assert species.load_user_species() == {}


def test_species_as_dict() -> None:
    oyster = species.get_species("oyster")
    assert oyster is not None
    payload = species.species_as_dict(oyster)
    assert payload["name"] == "oyster"
    assert payload["bounds"]["max_depth"] == 70.0
