"""
Python client for the NOAA National Water Prediction Service (NWPS) API.

Query river gauges, rating curves, stage/flow series, National Water Model
streamflow forecasts and system status, and get typed pandas DataFrames back.

API Documentation:
- https://api.water.noaa.gov/nwps/v1/docs/
"""

try:
    from importlib import metadata

    __version__ = metadata.version(__name__)
except Exception:
    __version__ = "unknown"

from .client import NWPSClient, fetch_json
from .config import DEFAULT_BASE_URL, ClientConfig
from .exceptions import (
    NWPSBadRequestError,
    NWPSConnectionError,
    NWPSError,
    NWPSNotFoundError,
    NWPSQueryError,
    NWPSServerError,
    NWPSValidationError,
)
from .gauges import (
    get_gauge,
    get_gauge_ratings,
    get_gauge_stageflow,
    get_product_stageflow,
    list_gauges,
)
from .models import GaugeDetail, GaugeImages, MonitorStatus, ReachDetail
from .monitor import get_monitor
from .parsing import Field, RecordSpec, flatten_record, get_field, parse_timestamp
from .reaches import get_reach, get_reach_streamflow
from .spatial import extract_bbox, to_geodataframe

__all__ = [
    # Client and configuration
    "NWPSClient",
    "ClientConfig",
    "DEFAULT_BASE_URL",
    "fetch_json",
    # Queries
    "list_gauges",
    "get_gauge",
    "get_gauge_ratings",
    "get_gauge_stageflow",
    "get_product_stageflow",
    "get_reach",
    "get_reach_streamflow",
    "get_monitor",
    # Result bundles
    "GaugeDetail",
    "GaugeImages",
    "ReachDetail",
    "MonitorStatus",
    # Parsing primitives
    "Field",
    "RecordSpec",
    "flatten_record",
    "get_field",
    "parse_timestamp",
    # Spatial helpers
    "extract_bbox",
    "to_geodataframe",
    # Exceptions
    "NWPSError",
    "NWPSValidationError",
    "NWPSConnectionError",
    "NWPSServerError",
    "NWPSQueryError",
    "NWPSNotFoundError",
    "NWPSBadRequestError",
]
