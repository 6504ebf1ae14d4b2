"""
Field extraction and record flattening for NWPS JSON payloads.

NWPS responses are deeply nested and unevenly populated: keys go missing,
sub-objects come back as ``null`` and arrays vary in length. Every record
kind is therefore described by a :class:`RecordSpec`, an ordered list of
:class:`Field` entries (output column, access path, kind, default). One
generic routine walks a spec against a JSON object so that every row of a
kind has the same columns in the same order, whatever the source held.

Missing values are typed per column kind:

    string    -> pd.NA   (pandas "string")
    float     -> NaN     ("float64")
    int       -> pd.NA   (nullable "Int64")
    bool      -> pd.NA   (nullable "boolean")
    datetime  -> pd.NaT  ("datetime64[ns, UTC]")

Field access never raises. Absent data is a typed default, not an error.
"""

import logging
import math
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

import pandas as pd

logger = logging.getLogger(__name__)

STRING = "string"
FLOAT = "float"
INT = "int"
BOOL = "bool"
DATETIME = "datetime"

DTYPES = {
    STRING: "string",
    FLOAT: "float64",
    INT: "Int64",
    BOOL: "boolean",
    DATETIME: "datetime64[ns, UTC]",
}

MISSING = {
    STRING: pd.NA,
    FLOAT: math.nan,
    INT: pd.NA,
    BOOL: pd.NA,
    DATETIME: pd.NaT,
}

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"
_TIMESTAMP_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z", re.ASCII)

# Instants representable in a datetime64[ns] column
_EARLIEST = datetime(1677, 9, 22)
_LATEST = datetime(2262, 4, 11)

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

Row = Dict[str, Any]
PathLike = Union[str, Sequence[str], None]


def parse_timestamp(value: Any) -> Any:
    """
    Parse an NWPS timestamp (``YYYY-MM-DDTHH:MM:SSZ``) as a UTC instant.

    ``None``, empty strings, non-strings and strings in any other layout
    (offsets, fractional seconds, date-only) yield ``pd.NaT``, as do instants
    outside the range a nanosecond datetime column can hold (e.g. the
    ``0001-01-01T00:00:00Z`` "unknown date" placeholder).

    Args:
        value: Raw JSON value

    Returns:
        Timezone-aware ``pd.Timestamp`` in UTC, or ``pd.NaT``
    """
    if not isinstance(value, str) or not _TIMESTAMP_PATTERN.fullmatch(value):
        return pd.NaT
    try:
        parsed = datetime.strptime(value, TIMESTAMP_FORMAT)
    except ValueError:
        # Well-formed but impossible, e.g. month 13
        return pd.NaT
    if not _EARLIEST <= parsed <= _LATEST:
        return pd.NaT
    return pd.Timestamp(parsed.replace(tzinfo=timezone.utc))


def format_timestamp(value: Any) -> Optional[str]:
    """Render a UTC instant back to the NWPS wire format."""
    if is_missing(value):
        return None
    return pd.Timestamp(value).tz_convert("UTC").strftime(TIMESTAMP_FORMAT)


def is_missing(value: Any) -> bool:
    """True for ``None`` and for any of the per-kind missing sentinels."""
    if value is None:
        return True
    if isinstance(value, (list, tuple, dict)):
        return False
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _split_path(path: PathLike) -> Optional[Tuple[str, ...]]:
    if path is None:
        return None
    if isinstance(path, str):
        return tuple(part for part in path.split(".") if part)
    return tuple(path)


def get_field(obj: Any, path: PathLike, default: Any = None) -> Any:
    """
    Fetch a value from nested JSON objects without raising.

    Args:
        obj: Decoded JSON (usually a dict), possibly ``None``
        path: Dotted string (``"status.observed.primary"``) or key sequence;
            an empty path returns ``obj`` itself
        default: Returned when any step is absent, not an object, or null

    Returns:
        The value at ``path`` or ``default``
    """
    keys = _split_path(path) or ()
    current = obj
    for key in keys:
        if not isinstance(current, Mapping):
            return default
        current = current.get(key)
        if current is None:
            return default
    if current is None:
        return default
    return current


def _to_string(value: Any) -> Any:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            return pd.NA
        return str(int(value)) if value.is_integer() else str(value)
    return pd.NA


def _to_float(value: Any) -> Any:
    if isinstance(value, bool):
        return math.nan
    if isinstance(value, (int, float)):
        try:
            return float(value)
        except OverflowError:
            return math.nan
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return math.nan
    return math.nan


def _int64(value: int) -> Any:
    return value if _INT64_MIN <= value <= _INT64_MAX else pd.NA


def _to_int(value: Any) -> Any:
    if isinstance(value, bool):
        return pd.NA
    if isinstance(value, int):
        return _int64(value)
    if isinstance(value, float):
        return _int64(int(value)) if value.is_integer() else pd.NA
    if isinstance(value, str):
        try:
            return _int64(int(value))
        except ValueError:
            pass
        try:
            number = float(value)
        except ValueError:
            return pd.NA
        return _int64(int(number)) if number.is_integer() else pd.NA
    return pd.NA


def _to_bool(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
    return pd.NA


def _to_datetime(value: Any) -> Any:
    if isinstance(value, (pd.Timestamp, datetime)) and not is_missing(value):
        stamp = pd.Timestamp(value)
        if stamp.tzinfo is not None:
            stamp = stamp.tz_convert("UTC").tz_localize(None)
        if not _EARLIEST <= stamp <= _LATEST:
            return pd.NaT
        return stamp.tz_localize("UTC")
    return parse_timestamp(value)


_CONVERTERS = {
    STRING: _to_string,
    FLOAT: _to_float,
    INT: _to_int,
    BOOL: _to_bool,
    DATETIME: _to_datetime,
}


def coerce(value: Any, kind: str) -> Any:
    """Convert a raw JSON scalar to ``kind``, or that kind's missing sentinel."""
    if is_missing(value):
        return MISSING[kind]
    result = _CONVERTERS[kind](value)
    return MISSING[kind] if is_missing(result) else result


@dataclass(frozen=True)
class Field:
    """
    One output column of a record kind.

    Attributes:
        name: Output column name
        path: Location in the source object. ``None`` marks a context column,
            filled from the ``context`` passed to :meth:`RecordSpec.flatten`
            (header values repeated on every row, discriminators, map keys).
        kind: One of ``string``, ``float``, ``int``, ``bool``, ``datetime``
        default: Value used when the source value is absent or unusable;
            ``None`` means the kind's missing sentinel
    """

    name: str
    path: PathLike = None
    kind: str = STRING
    default: Any = None

    def __post_init__(self) -> None:
        if self.kind not in DTYPES:
            raise ValueError(f"Unknown field kind: {self.kind!r}")
        object.__setattr__(self, "path", _split_path(self.path))

    @property
    def dtype(self) -> str:
        return DTYPES[self.kind]

    @property
    def is_context(self) -> bool:
        return self.path is None

    def extract(self, record: Any, context: Optional[Mapping[str, Any]] = None) -> Any:
        if self.is_context:
            raw = (context or {}).get(self.name)
        else:
            raw = get_field(record, self.path)
        value = coerce(raw, self.kind)
        if is_missing(value) and self.default is not None:
            return coerce(self.default, self.kind)
        return value


@dataclass(frozen=True)
class RecordSpec:
    """Ordered field list describing one flat row shape."""

    name: str
    fields: Tuple[Field, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", tuple(self.fields))
        names = [f.name for f in self.fields]
        if len(names) != len(set(names)):
            raise ValueError(f"Duplicate column in record spec {self.name!r}")

    @property
    def columns(self) -> List[str]:
        return [f.name for f in self.fields]

    @property
    def dtypes(self) -> Dict[str, str]:
        return {f.name: f.dtype for f in self.fields}

    def drop(self, *names: str, name: Optional[str] = None) -> "RecordSpec":
        """Return a spec without the named columns."""
        kept = tuple(f for f in self.fields if f.name not in names)
        return RecordSpec(name or self.name, kept)

    def flatten(self, record: Any, context: Optional[Mapping[str, Any]] = None) -> Row:
        """Flatten one JSON object into a row with exactly this spec's columns."""
        return flatten_record(record, self, context)

    def empty(self) -> pd.DataFrame:
        """Zero-row table with the full typed column set."""
        return build_frame([], self)


def flatten_record(
    record: Any, spec: RecordSpec, context: Optional[Mapping[str, Any]] = None
) -> Row:
    """
    Produce one flat row for ``record`` following ``spec``.

    Args:
        record: One JSON object (absent or non-object input gives an all-default row)
        spec: Record kind description
        context: Values for the spec's context columns

    Returns:
        Ordered dict of column -> typed value
    """
    return {f.name: f.extract(record, context) for f in spec.fields}


def build_frame(rows: Iterable[Row], spec: RecordSpec) -> pd.DataFrame:
    """
    Assemble flattened rows into a DataFrame with the spec's columns and dtypes.
    """
    rows = list(rows)
    data = {
        f.name: pd.Series(
            [row.get(f.name, MISSING[f.kind]) for row in rows], dtype=f.dtype
        )
        for f in spec.fields
    }
    frame = pd.DataFrame(data, columns=spec.columns)
    logger.debug(f"Built {spec.name} table: {len(frame)} rows")
    return frame
