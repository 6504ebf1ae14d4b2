"""
Row shapes for every NWPS record kind.

Each :class:`~nwps.parsing.RecordSpec` fixes the column set, order and type
of one table. Paths follow the camelCase keys of the NWPS JSON payloads;
fields without a path are filled from the surrounding context (header
values, discriminators, map keys).
"""

from .parsing import BOOL, DATETIME, FLOAT, INT, STRING, Field, RecordSpec

FLOOD_CATEGORY_NAMES = ("action", "minor", "moderate", "major")

STAGEFLOW_PRODUCTS = ("observed", "forecast")

# Request parameter -> response key
STREAMFLOW_SERIES_KEYS = {
    "analysis_assimilation": "analysisAssimilation",
    "short_range": "shortRange",
    "medium_range": "mediumRange",
    "medium_range_blend": "mediumRangeBlend",
    "long_range": "longRange",
}

ANY_WFO = "_any"


def _status_fields(prefix: str, path: str):
    return (
        Field(f"{prefix}_primary", f"{path}.primary", FLOAT),
        Field(f"{prefix}_primary_unit", f"{path}.primaryUnit"),
        Field(f"{prefix}_secondary", f"{path}.secondary", FLOAT),
        Field(f"{prefix}_secondary_unit", f"{path}.secondaryUnit"),
        Field(f"{prefix}_flood_category", f"{path}.floodCategory"),
        Field(f"{prefix}_valid_time", f"{path}.validTime", DATETIME),
    )


GAUGE_SUMMARY = RecordSpec(
    "gauges",
    (
        Field("lid", "lid"),
        Field("name", "name"),
        Field("latitude", "latitude", FLOAT),
        Field("longitude", "longitude", FLOAT),
        Field("state_abbreviation", "state.abbreviation"),
        Field("state_name", "state.name"),
        Field("rfc_abbreviation", "rfc.abbreviation"),
        Field("rfc_name", "rfc.name"),
        Field("wfo_abbreviation", "wfo.abbreviation"),
        Field("wfo_name", "wfo.name"),
        Field("pedts_observed", "pedts.observed"),
        Field("pedts_forecast", "pedts.forecast"),
    )
    + _status_fields("status_observed", "status.observed")
    + _status_fields("status_forecast", "status.forecast"),
)

GAUGE_METADATA = RecordSpec(
    "gauge_metadata",
    (
        Field("lid", "lid"),
        Field("usgs_id", "usgsId"),
        Field("reach_id", "reachId"),
        Field("name", "name"),
        Field("description", "description"),
        Field("latitude", "latitude", FLOAT),
        Field("longitude", "longitude", FLOAT),
        Field("time_zone", "timeZone"),
        Field("county", "county"),
        Field("in_service", "inService.enabled", BOOL),
        Field("in_service_message", "inService.message"),
        Field("forecast_reliability", "forecastReliability"),
    ),
)

ORGANIZATIONS = RecordSpec(
    "organizations",
    (
        Field("rfc_abbreviation", "rfc.abbreviation"),
        Field("rfc_name", "rfc.name"),
        Field("wfo_abbreviation", "wfo.abbreviation"),
        Field("wfo_name", "wfo.name"),
        Field("state_abbreviation", "state.abbreviation"),
        Field("state_name", "state.name"),
    ),
)

PEDTS = RecordSpec(
    "pedts",
    (
        Field("observed", "pedts.observed"),
        Field("forecast", "pedts.forecast"),
    ),
)

STATUS = RecordSpec(
    "status",
    (
        Field("type"),
        Field("primary", "primary", FLOAT),
        Field("primary_unit", "primaryUnit"),
        Field("secondary", "secondary", FLOAT),
        Field("secondary_unit", "secondaryUnit"),
        Field("flood_category", "floodCategory"),
        Field("valid_time", "validTime", DATETIME),
    ),
)

FLOOD_CATEGORY = RecordSpec(
    "flood_categories",
    (
        Field("category"),
        Field("stage", "stage", FLOAT),
        Field("stage_units"),
        Field("flow", "flow", FLOAT),
        Field("flow_units"),
    ),
)

FLOOD_CREST = RecordSpec(
    "flood_crests",
    (
        Field("type"),
        Field("occurred_time", "occurredTime", DATETIME),
        Field("stage", "stage", FLOAT),
        Field("flow", "flow", FLOAT),
        Field("preliminary", "preliminary", BOOL),
        Field("old_datum", "olddatum", BOOL),
    ),
)

FLOOD_IMPACT = RecordSpec(
    "flood_impacts",
    (
        Field("stage", "stage", FLOAT),
        Field("statement", "statement"),
    ),
)

LOW_WATER = RecordSpec(
    "low_waters",
    (
        Field("occurred_time", "occurredTime", DATETIME),
        Field("stage", "stage", FLOAT),
        Field("flow", "flow", FLOAT),
        Field("statement", "statement"),
    ),
)

DATUMS = RecordSpec(
    "datums",
    (
        Field("vertical", "vertical"),
        Field("horizontal", "horizontal"),
        Field("notes", "notes"),
    ),
)

RATING = RecordSpec(
    "ratings",
    (
        Field("stage", "stage", FLOAT),
        Field("stage_units"),
        Field("flow", "flow", FLOAT),
        Field("flow_units"),
    ),
)

# Per-product header, repeated on every sample row
STAGEFLOW_HEADER = RecordSpec(
    "stageflow_header",
    (
        Field("pedts", "pedts"),
        Field("issued_time", "issuedTime", DATETIME),
        Field("wfo", "wfo"),
        Field("time_zone", "timeZone"),
        Field("primary_name", "primaryName"),
        Field("primary_units", "primaryUnits"),
        Field("secondary_name", "secondaryName"),
        Field("secondary_units", "secondaryUnits"),
    ),
)

STAGEFLOW = RecordSpec(
    "stageflow",
    (
        Field("product"),
        Field("pedts"),
        Field("issued_time", kind=DATETIME),
        Field("wfo"),
        Field("time_zone"),
        Field("valid_time", "validTime", DATETIME),
        Field("generated_time", "generatedTime", DATETIME),
        Field("primary", "primary", FLOAT),
        Field("primary_name"),
        Field("primary_units"),
        Field("secondary", "secondary", FLOAT),
        Field("secondary_name"),
        Field("secondary_units"),
    ),
)

PRODUCT_STAGEFLOW = STAGEFLOW.drop("product", name="product_stageflow")

REACH_METADATA = RecordSpec(
    "reach_metadata",
    (
        Field("reach_id", "reachId"),
        Field("name", "name"),
        Field("latitude", "latitude", FLOAT),
        Field("longitude", "longitude", FLOAT),
    ),
)

ROUTE_REACH = RecordSpec(
    "route",
    (
        Field("reach_id", "reachId"),
        Field("stream_order", "streamOrder", INT),
    ),
)

STREAMFLOW = RecordSpec(
    "streamflow",
    (
        Field("reach_id"),
        Field("series"),
        Field("member"),
        Field("reference_time", kind=DATETIME),
        Field("valid_time", "validTime", DATETIME),
        Field("flow", "flow", FLOAT),
        Field("units"),
    ),
)

GAUGE_COUNT = RecordSpec(
    "gauge_counts",
    (
        Field("type"),
        Field("category"),
        Field("count", "", INT, default=0),
    ),
)

PRODUCT_COUNT = RecordSpec(
    "hml_product_counts",
    (
        Field("time_period"),
        Field("count", "", INT, default=0),
    ),
)

LAST_RECEIVED = RecordSpec(
    "hml_last_received",
    (
        Field("wfo"),
        Field("last_received", "", DATETIME),
    ),
)

LRO = RecordSpec(
    "lro",
    (
        Field("current_lros", "currentLros", INT),
        Field("current_interval", "currentInterval"),
    ),
)
