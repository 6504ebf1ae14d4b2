"""
Collection parsers: apply a record spec across the nested collections of a response.

Four collection shapes occur in NWPS payloads:

- homogeneous arrays (ratings, crests, impacts, route neighbours, samples)
- maps with a fixed set of known keys (flood categories)
- maps with dynamic keys (ensemble members, period counts, per-WFO times)
- two-branch splits (historic/recent crests, observed/forecast products)

The ``*_records`` functions return lists of flat rows so that callers can
combine several collections before building a single typed table; the
``parse_*`` functions return the table directly. An absent or empty
collection always gives zero rows, never ``None``.
"""

import logging
from typing import Any, Callable, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from .parsing import RecordSpec, Row, build_frame

logger = logging.getLogger(__name__)

Context = Optional[Mapping[str, Any]]
Expander = Callable[[Any, Mapping[str, Any]], List[Row]]


def _merge(context: Context, **extra: Any) -> dict:
    merged = dict(context or {})
    merged.update(extra)
    return merged


def array_records(items: Any, spec: RecordSpec, context: Context = None) -> List[Row]:
    """One row per array element, in source order."""
    if not isinstance(items, list):
        return []
    return [spec.flatten(item, context) for item in items]


def fixed_map_records(
    mapping: Any,
    names: Sequence[str],
    spec: RecordSpec,
    key_column: str,
    context: Context = None,
) -> List[Row]:
    """
    One row per known name present in ``mapping``, in the order of ``names``.

    Keys outside ``names`` are ignored; known names that are absent or null
    produce no row.
    """
    if not isinstance(mapping, Mapping):
        return []
    rows = []
    for name in names:
        entry = mapping.get(name)
        if entry is None:
            continue
        rows.append(spec.flatten(entry, _merge(context, **{key_column: name})))

    ignored = [key for key in mapping if key not in names]
    if ignored:
        logger.debug(f"Ignoring unknown {spec.name} keys: {ignored}")
    return rows


def keyed_records(
    mapping: Any,
    spec: RecordSpec,
    key_column: str,
    context: Context = None,
    expand: Optional[Expander] = None,
) -> List[Row]:
    """
    Rows for a map whose keys are data (member names, periods, WFOs).

    By default each value yields one row, flattened with ``spec`` and tagged
    with its key in ``key_column``. ``expand`` replaces that step for values
    that fan out into several rows; it receives the value and the context
    including the key.
    """
    if not isinstance(mapping, Mapping):
        return []
    rows: List[Row] = []
    for key, value in mapping.items():
        keyed = _merge(context, **{key_column: str(key)})
        if expand is None:
            rows.append(spec.flatten(value, keyed))
        else:
            rows.extend(expand(value, keyed))
    return rows


def branch_records(
    branches: Sequence[Tuple[str, Any]],
    key_column: str,
    parse_branch: Expander,
    context: Context = None,
) -> List[Row]:
    """
    Parse each named branch independently and tag rows with the branch name.

    A branch whose data is ``None`` contributes zero rows.
    """
    rows: List[Row] = []
    for name, data in branches:
        if data is None:
            continue
        rows.extend(parse_branch(data, _merge(context, **{key_column: name})))
    return rows


def parse_array(items: Any, spec: RecordSpec, context: Context = None) -> pd.DataFrame:
    """Table for a homogeneous array."""
    return build_frame(array_records(items, spec, context), spec)


def parse_fixed_map(
    mapping: Any,
    names: Sequence[str],
    spec: RecordSpec,
    key_column: str,
    context: Context = None,
) -> pd.DataFrame:
    """Table for a map restricted to ``names``."""
    return build_frame(fixed_map_records(mapping, names, spec, key_column, context), spec)


def parse_keyed(
    mapping: Any,
    spec: RecordSpec,
    key_column: str,
    context: Context = None,
    expand: Optional[Expander] = None,
) -> pd.DataFrame:
    """Table for a dynamic-key map."""
    return build_frame(keyed_records(mapping, spec, key_column, context, expand), spec)


def parse_branches(
    branches: Sequence[Tuple[str, Any]],
    spec: RecordSpec,
    key_column: str,
    parse_branch: Expander,
    context: Context = None,
) -> pd.DataFrame:
    """Table for a two-branch split, branches concatenated in the given order."""
    return build_frame(branch_records(branches, key_column, parse_branch, context), spec)
