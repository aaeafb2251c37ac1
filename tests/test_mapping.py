from __future__ import annotations

from pathlib import Path

from eezsuit.mapping import _nice_length
from eezsuit.suitability import SuitabilityEvaluator
from tests.utils import make_raster, zone_layer

BOUNDS = (-125.0, 32.0, -117.0, 48.0)


def test_render_map_writes_png(tmp_path: Path) -> None:
    sst = make_raster([[10.0, 12.0], [14.0, 16.0]], bounds=BOUNDS)
    depth = make_raster([[-5.0, -10.0], [-50.0, -80.0]], bounds=BOUNDS)
    zones = zone_layer(
        [(-125.0, 40.0, -117.0, 48.0), (-125.0, 32.0, -117.0, 40.0)],
        names=["North", "South"],
    )
    evaluator = SuitabilityEvaluator(sst, depth, zones)
    result = evaluator.evaluate("Oyster", 11, 30, 0, 70)

    path = evaluator.render_map(result, tmp_path / "maps" / "oyster.png")
    assert path.exists()
    assert path.read_bytes()[:8] == b"\x89PNG\r\n\x1a\n"


def test_nice_length() -> None:
    assert _nice_length(180.0) == 100.0
    assert _nice_length(230.0) == 200.0
    assert _nice_length(7.5) == 5.0
    assert _nice_length(0.0) == 0.0
