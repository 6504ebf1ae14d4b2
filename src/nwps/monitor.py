"""
NWPS system monitoring status.
"""

import logging
from typing import Any, Optional

import pandas as pd

from .client import NWPSClient, fetch_json
from .models import MonitorStatus
from .parsers import keyed_records, parse_keyed
from .parsing import INT, build_frame, coerce, get_field, is_missing, parse_timestamp
from .schemas import ANY_WFO, GAUGE_COUNT, LAST_RECEIVED, LRO, PRODUCT_COUNT

logger = logging.getLogger(__name__)


def parse_gauge_counts(counts: Any, kind: str) -> pd.DataFrame:
    """One row per flood category key; missing counts are 0."""
    return parse_keyed(counts, GAUGE_COUNT, "category", {"type": kind})


def parse_product_counts(product_counts: Any) -> pd.DataFrame:
    return parse_keyed(product_counts, PRODUCT_COUNT, "time_period")


def parse_last_received(last_received: Any) -> pd.DataFrame:
    """
    Last HML receipt per WFO, preceded by an ``_any`` row for the most
    recent receipt from any WFO when that time is known.
    """
    rows = keyed_records(get_field(last_received, "wfo"), LAST_RECEIVED, "wfo")
    from_any = parse_timestamp(get_field(last_received, "fromAny"))
    if is_missing(from_any):
        logger.debug("No fromAny HML receipt time, omitting the _any row")
    else:
        rows.insert(0, LAST_RECEIVED.flatten(from_any, {"wfo": ANY_WFO}))
    return build_frame(rows, LAST_RECEIVED)


def parse_monitor(response: Any) -> MonitorStatus:
    hml = get_field(response, "hml")
    job_queue = coerce(get_field(hml, "jobQueue"), INT)
    return MonitorStatus(
        gauge_observed=parse_gauge_counts(get_field(response, "gauge.observed"), "observed"),
        gauge_forecast=parse_gauge_counts(get_field(response, "gauge.forecast"), "forecast"),
        hml_job_queue=None if is_missing(job_queue) else int(job_queue),
        hml_product_counts=parse_product_counts(get_field(hml, "productCounts")),
        hml_last_received=parse_last_received(get_field(hml, "lastHMLReceived")),
        lro=build_frame([LRO.flatten(get_field(response, "lro"))], LRO),
    )


def get_monitor(client: Optional[NWPSClient] = None) -> MonitorStatus:
    """
    Get NWPS system health and data status.

    Returns:
        MonitorStatus with gauge counts by observed/forecast flood category,
        the HML job queue length, HML product counts by time period, the last
        HML receipt per WFO and the current LRO count and interval
    """
    response = fetch_json("/monitor", client=client)
    return parse_monitor(response)
