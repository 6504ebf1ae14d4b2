"""
National Water Model reach queries: reach metadata and streamflow forecasts.
"""

import logging
from typing import Any, List, Literal, Mapping, Optional, Union

import pandas as pd

from .client import NWPSClient, fetch_json, path_segment
from .models import ReachDetail
from .parsers import array_records, keyed_records, parse_array
from .parsing import STRING, Row, build_frame, coerce, get_field, is_missing
from .schemas import REACH_METADATA, ROUTE_REACH, STREAMFLOW, STREAMFLOW_SERIES_KEYS
from .spatial import with_return_type
from .validation import require_choice, require_identifier, require_return_type

logger = logging.getLogger(__name__)

SERIES_CHOICES = tuple(STREAMFLOW_SERIES_KEYS)


def series_to_key(series: str) -> str:
    """Response key holding the data for a ``series`` request value."""
    return STREAMFLOW_SERIES_KEYS[require_choice(series, SERIES_CHOICES, "series")]


def parse_streamflow_products(response: Any) -> List[str]:
    products = get_field(response, "streamflow", [])
    if isinstance(products, str):
        products = [products]
    if not isinstance(products, list):
        return []
    names = (coerce(p, STRING) for p in products)
    return [name for name in names if not is_missing(name)]


def parse_reach(
    response: Any, return_type: Literal["pandas", "geopandas"] = "pandas"
) -> ReachDetail:
    """Split a ``/reaches/{reach_id}`` response into metadata and route tables."""
    metadata = build_frame([REACH_METADATA.flatten(response)], REACH_METADATA)
    return ReachDetail(
        metadata=with_return_type(metadata, return_type),
        streamflow_products=parse_streamflow_products(response),
        upstream=parse_array(get_field(response, "route.upstream"), ROUTE_REACH),
        downstream=parse_array(get_field(response, "route.downstream"), ROUTE_REACH),
    )


def get_reach(
    reach_id: Union[str, int],
    return_type: Literal["pandas", "geopandas"] = "pandas",
    client: Optional[NWPSClient] = None,
) -> ReachDetail:
    """
    Get metadata for a National Water Model reach.

    Args:
        reach_id: NWM reach identifier, e.g. ``"22338099"``
        return_type: ``"geopandas"`` gives ``metadata`` point geometry
        client: Client to use; a temporary one is created when omitted

    Returns:
        ReachDetail with metadata (reach_id, name, latitude, longitude), the
        names of available streamflow products, and upstream/downstream
        neighbours (reach_id, stream_order). Neighbour tables are empty, not
        ``None``, at the ends of the network.
    """
    reach_id = require_identifier(reach_id, "reach_id")
    return_type = require_return_type(return_type)

    response = fetch_json(f"/reaches/{path_segment(reach_id)}", client=client)
    return parse_reach(response, return_type)


def member_records(member_data: Any, context: Mapping[str, Any]) -> List[Row]:
    """Sample rows for one ensemble member (or the single ``series`` member)."""
    member_context = dict(context)
    member_context["reference_time"] = get_field(member_data, "referenceTime")
    member_context["units"] = get_field(member_data, "units")
    return array_records(get_field(member_data, "data"), STREAMFLOW, member_context)


def parse_streamflow(response: Any, reach_id: str, series: str) -> pd.DataFrame:
    """
    Parse a ``/reaches/{reach_id}/streamflow`` response for one series.

    Deterministic series hold a single member named ``series``; ensemble
    series hold ``mean`` and ``memberN`` entries. Every key present becomes
    a member, in response order.
    """
    resp_reach_id = coerce(get_field(response, "reach.reachId"), STRING)
    if is_missing(resp_reach_id):
        logger.debug(f"Response has no reach id, using requested reach {reach_id}")
        resp_reach_id = reach_id

    series_data = get_field(response, series_to_key(series))
    rows = keyed_records(
        series_data,
        STREAMFLOW,
        "member",
        {"reach_id": resp_reach_id, "series": series},
        expand=member_records,
    )
    if isinstance(series_data, Mapping):
        logger.debug(
            f"{series} streamflow for reach {resp_reach_id}: {len(series_data)} member(s)"
        )
    return build_frame(rows, STREAMFLOW)


def get_reach_streamflow(
    reach_id: Union[str, int],
    series: str = "short_range",
    client: Optional[NWPSClient] = None,
) -> pd.DataFrame:
    """
    Get National Water Model streamflow forecasts for a reach.

    Args:
        reach_id: NWM reach identifier
        series: One of ``"short_range"`` (default, 0-18 h),
            ``"analysis_assimilation"`` (recent past), ``"medium_range"``
            (ensemble, 0-10 days), ``"medium_range_blend"`` or
            ``"long_range"`` (ensemble, 0-30 days)
        client: Client to use; a temporary one is created when omitted

    Returns:
        Table with reach_id, series, member, reference_time, valid_time,
        flow, units

    Examples:
        >>> short = get_reach_streamflow("22338099")
        >>> medium = get_reach_streamflow("22338099", series="medium_range")
        >>> medium.groupby("member")["flow"].max()
    """
    reach_id = require_identifier(reach_id, "reach_id")
    series = require_choice(series, SERIES_CHOICES, "series")

    response = fetch_json(
        f"/reaches/{path_segment(reach_id)}/streamflow",
        {"series": series},
        client=client,
    )
    return parse_streamflow(response, reach_id, series)
