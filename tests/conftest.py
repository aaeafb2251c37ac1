from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = ROOT / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

import pytest  # noqa: E402

from eezsuit import species as species_module  # noqa: E402


@pytest.fixture(autouse=True)
def _isolate_user_species(monkeypatch, tmp_path) -> None:
    """Prevent local species files from bleeding into tests."""
    monkeypatch.setenv(species_module.ENV_SPECIES_PATH, str(tmp_path / "missing_species.json"))
    monkeypatch.setattr(
        species_module,
        "default_user_species_path",
        lambda: tmp_path / "missing_home_species.json",
    )
