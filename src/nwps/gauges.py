"""
Gauge queries: gauge search, gauge detail, rating curves and stage/flow series.
"""

import logging
from typing import Any, List, Literal, Mapping, Optional, Union

import pandas as pd

from .client import NWPSClient, fetch_json, path_segment
from .models import GaugeDetail, GaugeImages
from .parsers import array_records, parse_array, parse_branches, parse_fixed_map
from .parsing import STRING, Row, build_frame, coerce, get_field, is_missing
from .schemas import (
    DATUMS,
    FLOOD_CATEGORY,
    FLOOD_CATEGORY_NAMES,
    FLOOD_CREST,
    FLOOD_IMPACT,
    GAUGE_METADATA,
    GAUGE_SUMMARY,
    LOW_WATER,
    ORGANIZATIONS,
    PEDTS,
    PRODUCT_STAGEFLOW,
    RATING,
    STAGEFLOW,
    STAGEFLOW_HEADER,
    STAGEFLOW_PRODUCTS,
    STATUS,
)
from .spatial import extract_bbox, srid_from_crs, with_return_type
from .validation import (
    check_bbox_order,
    optional_bool,
    optional_choice,
    require_bool,
    require_choice,
    require_identifier,
    require_positive_int,
    require_return_type,
)

logger = logging.getLogger(__name__)

SRID_CHOICES = ("EPSG_4326", "EPSG_3857", "SRID_UNSPECIFIED")
SORT_CHOICES = ("ASC", "DESC")

ReturnType = Literal["pandas", "geopandas"]


# ============================================================================
# Gauge search
# ============================================================================


def parse_gauges(response: Any) -> pd.DataFrame:
    """Flatten a ``/gauges`` response into one row per gauge."""
    return parse_array(get_field(response, "gauges"), GAUGE_SUMMARY)


def list_gauges(
    bbox: Any = None,
    srid: str = "EPSG_4326",
    catfim: Optional[bool] = None,
    return_type: ReturnType = "pandas",
    client: Optional[NWPSClient] = None,
) -> Any:
    """
    List NWPS gauges, optionally filtered by bounding box and CatFIM configuration.

    Args:
        bbox: ``(xmin, ymin, xmax, ymax)`` in the ``srid`` reference system, or
            a GeoPandas object / shapely geometry whose bounds are used. A
            GeoPandas object in EPSG:4326 or EPSG:3857 sets ``srid`` itself.
        srid: ``"EPSG_4326"`` (default), ``"EPSG_3857"`` or ``"SRID_UNSPECIFIED"``;
            only sent together with ``bbox``
        catfim: ``True``/``False`` to filter on CatFIM configuration, ``None`` for no filter
        return_type: ``"pandas"`` or ``"geopandas"`` (point geometry)
        client: Client to use; a temporary one is created when omitted

    Returns:
        One row per gauge (lid, name, coordinates, organizations, PEDTS codes
        and the latest observed/forecast status). Zero matches give a
        zero-row table with the same columns.

    Examples:
        >>> gauges = list_gauges(bbox=(-77.5, 38.5, -76.5, 39.5))
        >>> catfim = list_gauges(catfim=True, return_type="geopandas")
    """
    srid = require_choice(srid, SRID_CHOICES, "srid")
    catfim = optional_bool(catfim, "catfim")
    return_type = require_return_type(return_type)

    bbox_vec = extract_bbox(bbox)
    if bbox_vec is not None:
        check_bbox_order(bbox_vec)
        srid = srid_from_crs(bbox) or srid

    query = {
        "bbox.xmin": bbox_vec[0] if bbox_vec else None,
        "bbox.ymin": bbox_vec[1] if bbox_vec else None,
        "bbox.xmax": bbox_vec[2] if bbox_vec else None,
        "bbox.ymax": bbox_vec[3] if bbox_vec else None,
        "srid": srid if bbox_vec else None,
        "catfim": catfim,
    }

    response = fetch_json("/gauges", query, client=client)
    gauges = parse_gauges(response)

    if gauges.empty:
        logger.info("No gauges found matching the specified criteria.")

    return with_return_type(gauges, return_type)


# ============================================================================
# Gauge detail
# ============================================================================


def parse_gauge_status(response: Any) -> pd.DataFrame:
    """Exactly two rows, observed then forecast, whatever the response holds."""
    rows = [
        STATUS.flatten(get_field(response, ("status", kind)), {"type": kind})
        for kind in STAGEFLOW_PRODUCTS
    ]
    return build_frame(rows, STATUS)


def parse_flood_categories(response: Any) -> pd.DataFrame:
    flood = get_field(response, "flood")
    context = {
        "stage_units": get_field(flood, "stageUnits"),
        "flow_units": get_field(flood, "flowUnits"),
    }
    return parse_fixed_map(
        get_field(flood, "categories"),
        FLOOD_CATEGORY_NAMES,
        FLOOD_CATEGORY,
        "category",
        context,
    )


def parse_flood_crests(response: Any) -> pd.DataFrame:
    """Historic crests followed by recent crests, tagged in ``type``."""
    crests = get_field(response, "flood.crests")
    return parse_branches(
        [
            ("historic", get_field(crests, "historic")),
            ("recent", get_field(crests, "recent")),
        ],
        FLOOD_CREST,
        "type",
        lambda items, context: array_records(items, FLOOD_CREST, context),
    )


def parse_flood_impacts(response: Any) -> pd.DataFrame:
    return parse_array(get_field(response, "flood.impacts"), FLOOD_IMPACT)


def parse_low_waters(response: Any) -> pd.DataFrame:
    return parse_array(get_field(response, "flood.lowWaters"), LOW_WATER)


def parse_datums(response: Any) -> Optional[pd.DataFrame]:
    datums = get_field(response, "datums")
    if datums is None:
        return None
    return build_frame([DATUMS.flatten(datums)], DATUMS)


def _optional_string(value: Any) -> Optional[str]:
    text = coerce(value, STRING)
    return None if is_missing(text) else text


def parse_images(response: Any) -> GaugeImages:
    images = get_field(response, "images")
    if images is None:
        return GaugeImages()
    photos = get_field(images, "photos", [])
    return GaugeImages(
        probability=_optional_string(get_field(images, "probability")),
        hydrograph_default=_optional_string(get_field(images, "hydrograph.default")),
        hydrograph_floodcat=_optional_string(get_field(images, "hydrograph.floodcat")),
        photos=list(photos) if isinstance(photos, list) else [],
    )


def parse_gauge_detail(response: Any, return_type: ReturnType = "pandas") -> GaugeDetail:
    """Split a ``/gauges/{identifier}`` response into its component tables."""
    metadata = build_frame([GAUGE_METADATA.flatten(response)], GAUGE_METADATA)
    return GaugeDetail(
        metadata=with_return_type(metadata, return_type),
        organizations=build_frame([ORGANIZATIONS.flatten(response)], ORGANIZATIONS),
        pedts=build_frame([PEDTS.flatten(response)], PEDTS),
        status=parse_gauge_status(response),
        flood_categories=parse_flood_categories(response),
        flood_crests=parse_flood_crests(response),
        flood_impacts=parse_flood_impacts(response),
        low_waters=parse_low_waters(response),
        datums=parse_datums(response),
        images=parse_images(response),
    )


def get_gauge(
    identifier: Union[str, int],
    return_type: ReturnType = "pandas",
    client: Optional[NWPSClient] = None,
) -> GaugeDetail:
    """
    Get detailed metadata for a single gauge.

    Args:
        identifier: Gauge LID (e.g. ``"ANAD2"``) or USGS id (e.g. ``"01651750"``)
        return_type: ``"geopandas"`` gives ``metadata`` point geometry
        client: Client to use; a temporary one is created when omitted

    Returns:
        GaugeDetail with metadata, organizations, pedts, status,
        flood_categories, flood_crests, flood_impacts, low_waters, datums
        and images
    """
    identifier = require_identifier(identifier)
    return_type = require_return_type(return_type)

    response = fetch_json(f"/gauges/{path_segment(identifier)}", client=client)
    return parse_gauge_detail(response, return_type)


# ============================================================================
# Ratings
# ============================================================================


def parse_ratings(response: Any) -> pd.DataFrame:
    context = {
        "stage_units": get_field(response, "stageUnits"),
        "flow_units": get_field(response, "flowUnits"),
    }
    return parse_array(get_field(response, "data"), RATING, context)


def get_gauge_ratings(
    identifier: Union[str, int],
    limit: int = 10000,
    sort: str = "ASC",
    only_tenths: bool = False,
    client: Optional[NWPSClient] = None,
) -> pd.DataFrame:
    """
    Get the stage-to-flow rating curve for a gauge.

    Args:
        identifier: Gauge LID (e.g. ``"PTTP1"``) or USGS id
        limit: Maximum number of rating points, at least 1
        sort: ``"ASC"`` or ``"DESC"`` by stage
        only_tenths: Only return stages at tenth-of-a-foot increments
        client: Client to use; a temporary one is created when omitted

    Returns:
        Table with stage, stage_units, flow, flow_units in the requested order
    """
    identifier = require_identifier(identifier)
    limit = require_positive_int(limit, "limit")
    sort = require_choice(sort, SORT_CHOICES, "sort")
    only_tenths = require_bool(only_tenths, "only_tenths")

    query = {"limit": limit, "sort": sort, "onlyTenths": only_tenths}
    response = fetch_json(
        f"/gauges/{path_segment(identifier)}/ratings", query, client=client
    )
    return parse_ratings(response)


# ============================================================================
# Stage/flow
# ============================================================================


def stageflow_records(product_data: Any, context: Mapping[str, Any]) -> List[Row]:
    """Sample rows for one product, each carrying the product's header fields."""
    header = STAGEFLOW_HEADER.flatten(product_data)
    header.update(context)
    return array_records(get_field(product_data, "data"), STAGEFLOW, header)


def parse_stageflow(response: Any, product: Optional[str] = None) -> pd.DataFrame:
    """
    Parse a stage/flow response.

    With ``product`` the response is that single product; without it the
    response holds ``observed`` and ``forecast`` sub-objects, whose rows are
    concatenated observed first.
    """
    if product is not None:
        return build_frame(stageflow_records(response, {"product": product}), STAGEFLOW)
    return parse_branches(
        [(name, get_field(response, name)) for name in STAGEFLOW_PRODUCTS],
        STAGEFLOW,
        "product",
        stageflow_records,
    )


def get_gauge_stageflow(
    identifier: Union[str, int],
    product: Optional[str] = None,
    client: Optional[NWPSClient] = None,
) -> pd.DataFrame:
    """
    Get observed and/or forecast stage and flow time series for a gauge.

    Args:
        identifier: Gauge LID (e.g. ``"PTTP1"``) or USGS id
        product: ``"observed"``, ``"forecast"`` or ``None`` for both
        client: Client to use; a temporary one is created when omitted

    Returns:
        Table with product, pedts, issued_time, wfo, time_zone, valid_time,
        generated_time, primary, primary_name, primary_units, secondary,
        secondary_name and secondary_units
    """
    identifier = require_identifier(identifier)
    product = optional_choice(product, STAGEFLOW_PRODUCTS, "product")

    endpoint = f"/gauges/{path_segment(identifier)}/stageflow"
    if product is not None:
        endpoint = f"{endpoint}/{product}"

    response = fetch_json(endpoint, client=client)
    return parse_stageflow(response, product)


def parse_product_stageflow(response: Any, pedts: str) -> pd.DataFrame:
    """Parse a ``/products/stageflow`` response; ``pedts`` fills a missing code."""
    header = STAGEFLOW_HEADER.flatten(response)
    if is_missing(header["pedts"]):
        header["pedts"] = pedts
    rows = array_records(get_field(response, "data"), PRODUCT_STAGEFLOW, header)
    return build_frame(rows, PRODUCT_STAGEFLOW)


def get_product_stageflow(
    identifier: Union[str, int],
    pedts: str,
    client: Optional[NWPSClient] = None,
) -> pd.DataFrame:
    """
    Get stage/flow time series for one SHEF PEDTS product.

    Args:
        identifier: Gauge LID (e.g. ``"PTTP1"``) or USGS id
        pedts: PEDTS code, e.g. ``"HGIRG"`` (observed stage) or ``"HGIFF"``
            (forecast stage)
        client: Client to use; a temporary one is created when omitted

    Returns:
        The stage/flow table of :func:`get_gauge_stageflow` without ``product``
    """
    identifier = require_identifier(identifier)
    pedts = require_identifier(pedts, "pedts")

    endpoint = f"/products/stageflow/{path_segment(identifier)}/{path_segment(pedts)}"
    response = fetch_json(endpoint, client=client)
    return parse_product_stageflow(response, pedts)
