"""CRS normalization and comparison helpers."""

from __future__ import annotations

from pyproj import CRS


def normalize_crs(value: str | CRS | object) -> CRS:
    """Normalize CRS input (string, pyproj or rasterio CRS) into a pyproj CRS."""
    if isinstance(value, CRS):
        return value
    to_wkt = getattr(value, "to_wkt", None)
    if callable(to_wkt):
        return CRS.from_wkt(to_wkt())
    return CRS.from_user_input(value)


def crs_equal(left: object | None, right: object | None) -> bool:
    """Return True when both CRS values describe the same reference system."""
    if left is None or right is None:
        return left is None and right is None
    left_crs = normalize_crs(left)
    right_crs = normalize_crs(right)
    if left_crs == right_crs:
        return True
    return left_crs.equals(right_crs, ignore_axis_order=True)


def linear_unit_factor(crs: CRS) -> float:
    """Return metres per CRS unit for a projected CRS."""
    if crs.is_geographic:
        raise ValueError("Geographic CRS has no linear unit.")
    axis = crs.axis_info[0] if crs.axis_info else None
    factor = getattr(axis, "unit_conversion_factor", None)
    return float(factor) if factor else 1.0
