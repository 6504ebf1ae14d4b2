"""
Optional spatial helpers: bounding boxes in, point GeoDataFrames out.

GeoPandas and shapely are only needed for :func:`to_geodataframe`; install
them with ``pip install nwps[spatial]``.
"""

import logging
import math
from numbers import Real
from typing import Any, Optional, Tuple

import pandas as pd

from .exceptions import NWPSValidationError

logger = logging.getLogger(__name__)

BBox = Tuple[float, float, float, float]

# EPSG code -> NWPS srid parameter
EPSG_TO_SRID = {
    4326: "EPSG_4326",
    3857: "EPSG_3857",
}


def extract_bbox(bbox: Any) -> Optional[BBox]:
    """
    Extract ``(xmin, ymin, xmax, ymax)`` from a bbox-like object.

    Args:
        bbox: ``None``, a sequence of four numbers, a GeoDataFrame/GeoSeries
            (``total_bounds``) or a shapely geometry (``bounds``)

    Returns:
        Tuple of four floats, or ``None`` when ``bbox`` is ``None``

    Raises:
        NWPSValidationError: If the input cannot be read as four finite numbers
    """
    if bbox is None:
        return None

    if hasattr(bbox, "total_bounds"):
        values = list(bbox.total_bounds)
    elif hasattr(bbox, "geom_type") and hasattr(bbox, "bounds"):
        values = list(bbox.bounds)
    elif isinstance(bbox, (str, bytes, dict)):
        values = []
    else:
        try:
            values = list(bbox)
        except TypeError:
            values = []

    if len(values) != 4 or not all(
        isinstance(v, Real) and not isinstance(v, bool) for v in values
    ):
        raise NWPSValidationError(
            "bbox must be a sequence of four numbers (xmin, ymin, xmax, ymax), "
            "a GeoDataFrame/GeoSeries, or a shapely geometry.",
            "bbox",
        )

    result = tuple(float(v) for v in values)
    if not all(math.isfinite(v) for v in result):
        raise NWPSValidationError("bbox coordinates must be finite numbers.", "bbox")
    return result  # type: ignore[return-value]


def srid_from_crs(obj: Any) -> Optional[str]:
    """
    NWPS ``srid`` value for a GeoPandas object's CRS, or ``None`` when the
    object carries no CRS the API understands.
    """
    crs = getattr(obj, "crs", None)
    if crs is None:
        return None
    try:
        epsg = crs.to_epsg()
    except AttributeError:
        return None
    srid = EPSG_TO_SRID.get(epsg)
    if srid is None:
        logger.debug(f"CRS EPSG:{epsg} has no NWPS srid equivalent")
    return srid


def to_geodataframe(
    df: pd.DataFrame,
    lon_col: str = "longitude",
    lat_col: str = "latitude",
    crs: str = "EPSG:4326",
) -> Any:
    """
    Convert a table with coordinate columns to a point GeoDataFrame.

    Rows with a missing coordinate get a missing geometry; a zero-row table
    gives an empty GeoDataFrame with the same columns. The coordinate
    columns are kept.
    """
    try:
        import geopandas as gpd
        from shapely.geometry import Point
    except ImportError:
        raise ImportError(
            "geopandas and shapely are required for GeoDataFrame conversion. "
            "Install with: pip install nwps[spatial]"
        ) from None

    for col in (lon_col, lat_col):
        if col not in df.columns:
            raise ValueError(f"Coordinate column {col!r} not found")

    points = [
        Point(float(x), float(y)) if not (pd.isna(x) or pd.isna(y)) else None
        for x, y in zip(df[lon_col], df[lat_col])
    ]
    if points and all(p is None for p in points):
        logger.debug("No valid coordinates, returning point-less GeoDataFrame")

    geometry = gpd.GeoSeries(points, index=df.index, crs=crs)
    return gpd.GeoDataFrame(df.copy(), geometry=geometry, crs=crs)


def with_return_type(df: pd.DataFrame, return_type: str) -> Any:
    """Return ``df`` unchanged for ``"pandas"``, as points for ``"geopandas"``."""
    if return_type == "geopandas":
        return to_geodataframe(df)
    return df
