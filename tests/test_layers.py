from __future__ import annotations

import json
from pathlib import Path

import geopandas as gpd
import numpy as np
import pytest
import rasterio
from shapely.geometry import box

from eezsuit.errors import LayerError
from eezsuit.layers import inspect_raster, load_zones, read_raster, write_raster
from eezsuit.layers.zones import zone_layer_from_frame
from tests.utils import column_zones, make_raster
from tests.utils import write_raster as write_test_raster


def test_read_raster_converts_nodata(tmp_path: Path) -> None:
    path = tmp_path / "sst.tif"
    data = np.array([[10.0, -9999.0], [12.0, 14.0]], dtype=np.float32)
    write_test_raster(path, data, bounds=(0.0, 0.0, 2.0, 2.0), nodata=-9999.0)

    raster = read_raster(path)
    assert raster.shape == (2, 2)
    assert np.isnan(raster.data[0, 1])
    assert raster.data[1, 1] == pytest.approx(14.0)
    assert raster.crs.to_epsg() == 4326
    assert raster.bounds == pytest.approx((0.0, 0.0, 2.0, 2.0))


def test_read_raster_requires_crs(tmp_path: Path) -> None:
    path = tmp_path / "nocrs.tif"
    write_test_raster(path, np.zeros((2, 2), dtype=np.float32), bounds=(0.0, 0.0, 2.0, 2.0), crs=None)
    with pytest.raises(LayerError, match="CRS"):
        read_raster(path)


def test_read_raster_missing_file(tmp_path: Path) -> None:
    with pytest.raises(LayerError):
        read_raster(tmp_path / "missing.tif")


def test_write_raster_keeps_nan(tmp_path: Path) -> None:
    raster = make_raster([[1.0, np.nan]], bounds=(0.0, 0.0, 2.0, 1.0))
    path = write_raster(tmp_path / "out" / "suit.tif", raster)
    with rasterio.open(path) as dataset:
        band = dataset.read(1)
        assert dataset.crs.to_epsg() == 4326
    assert band[0, 0] == 1.0
    assert np.isnan(band[0, 1])


def test_inspect_raster(tmp_path: Path) -> None:
    path = tmp_path / "depth.tif"
    data = np.array([[-5.0, -80.0]], dtype=np.float32)
    write_test_raster(path, data, bounds=(0.0, 0.0, 2.0, 1.0))
    info = inspect_raster(path, sample=True)
    assert info.width == 2
    assert info.height == 1
    assert info.min_value == pytest.approx(-80.0)
    assert info.max_value == pytest.approx(-5.0)


def test_load_zones_from_geojson(tmp_path: Path) -> None:
    path = tmp_path / "zones.geojson"
    column_zones([(0.0, 0.0, 1.0, 1.0), (1.0, 0.0, 2.0, 1.0)], area_km2=[100.0, 200.0]).to_file(
        path, driver="GeoJSON"
    )
    zones = load_zones(path, name_field="name")
    assert len(zones) == 2
    assert zones.zone_ids == [1, 2]
    assert zones.total_areas() == [100.0, 200.0]
    assert zones.zone_names() == ["Zone 1", "Zone 2"]


def test_load_zones_missing_file(tmp_path: Path) -> None:
    with pytest.raises(LayerError, match="not found"):
        load_zones(tmp_path / "missing.geojson")


def test_zone_layer_computes_missing_areas() -> None:
    zones = zone_layer_from_frame(column_zones([(0.0, 0.0, 1.0, 1.0)]))
    assert zones.total_areas()[0] == pytest.approx(12308.8, rel=1e-3)


def test_zone_layer_requires_id_field() -> None:
    frame = column_zones([(0.0, 0.0, 1.0, 1.0)]).rename(columns={"rgn": "id"})
    with pytest.raises(LayerError, match="rgn"):
        zone_layer_from_frame(frame)


def test_zone_layer_rejects_duplicate_ids() -> None:
    frame = column_zones([(0.0, 0.0, 1.0, 1.0), (1.0, 0.0, 2.0, 1.0)])
    frame["rgn"] = [7, 7]
    with pytest.raises(LayerError, match="Duplicate"):
        zone_layer_from_frame(frame)


def test_zone_layer_requires_crs() -> None:
    frame = gpd.GeoDataFrame({"rgn": [1]}, geometry=[box(0.0, 0.0, 1.0, 1.0)])
    with pytest.raises(LayerError, match="CRS"):
        zone_layer_from_frame(frame)


def test_zone_names_fall_back_to_ids() -> None:
    zones = zone_layer_from_frame(column_zones([(0.0, 0.0, 1.0, 1.0)]))
    assert zones.zone_names() == ["1"]


def test_zones_geojson_written_by_hand(tmp_path: Path) -> None:
    path = tmp_path / "zones.geojson"
    path.write_text(
        json.dumps(
            {
                "type": "FeatureCollection",
                "features": [
                    {
                        "type": "Feature",
                        "properties": {"rgn": "Central California", "area_km2": 202738.0},
                        "geometry": {
                            "type": "Polygon",
                            "coordinates": [[[0, 0], [1, 0], [1, 1], [0, 1], [0, 0]]],
                        },
                    }
                ],
            }
        ),
        encoding="utf-8",
    )
    zones = load_zones(path)
    assert zones.zone_ids == ["Central California"]
    assert zones.zone_names() == ["Central California"]


def test_load_zones_unreadable_file(tmp_path: Path) -> None:
    path = tmp_path / "zones.geojson"
    path.write_text("not json at all", encoding="utf-8")
    with pytest.raises(LayerError, match="Unable to read zone layer"):
        load_zones(path)


@pytest.mark.parametrize("areas", [[100.0, -5.0], [100.0, None], ["100", "unknown"]])
def test_zone_layer_rejects_invalid_areas(areas) -> None:
    frame = column_zones([(0.0, 0.0, 1.0, 1.0), (1.0, 0.0, 2.0, 1.0)], area_km2=areas)
    with pytest.raises(LayerError, match="area_km2"):
        zone_layer_from_frame(frame)


def test_zone_layer_coerces_numeric_area_strings() -> None:
    frame = column_zones([(0.0, 0.0, 1.0, 1.0)], area_km2=["125.5"])
    zones = zone_layer_from_frame(frame)
    assert zones.total_areas() == [125.5]
