"""
Local parameter validation, performed before any request is made.
"""

import math
from numbers import Integral, Real
from typing import Any, Optional, Sequence, Tuple

from .exceptions import NWPSValidationError

RETURN_TYPES = ("pandas", "geopandas")


def require_identifier(value: Any, name: str = "identifier") -> str:
    """
    Normalize a gauge LID, USGS id, reach id or PEDTS code to a non-empty string.

    Integers are accepted (reach ids are often numeric); note that a USGS id
    with leading zeros must be passed as a string to keep them.
    """
    if isinstance(value, bool) or value is None:
        raise NWPSValidationError(f"{name} must be a non-empty string.", name)
    if isinstance(value, Integral):
        return str(int(value))
    if isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            raise NWPSValidationError(f"{name} must be a non-empty string.", name)
        return str(int(value))
    if not isinstance(value, str) or not value.strip():
        raise NWPSValidationError(f"{name} must be a non-empty string.", name)
    return value.strip()


def require_choice(value: Any, choices: Sequence[str], name: str) -> str:
    """Ensure ``value`` is one of the literal ``choices``."""
    if not isinstance(value, str) or value not in choices:
        allowed = ", ".join(repr(c) for c in choices)
        raise NWPSValidationError(
            f"Invalid {name}: {value!r}. Must be one of: {allowed}", name
        )
    return value


def optional_choice(value: Any, choices: Sequence[str], name: str) -> Optional[str]:
    if value is None:
        return None
    return require_choice(value, choices, name)


def require_bool(value: Any, name: str) -> bool:
    if not isinstance(value, bool):
        raise NWPSValidationError(f"{name} must be True or False.", name)
    return value


def optional_bool(value: Any, name: str) -> Optional[bool]:
    if value is None:
        return None
    if not isinstance(value, bool):
        raise NWPSValidationError(f"{name} must be True, False, or None.", name)
    return value


def require_positive_int(value: Any, name: str) -> int:
    """Accept integral numbers >= 1 (``10000.0`` is fine, ``0.5`` is not)."""
    if isinstance(value, bool) or not isinstance(value, Real):
        raise NWPSValidationError(f"{name} must be a positive integer.", name)
    if not math.isfinite(value) or value < 1 or int(value) != value:
        raise NWPSValidationError(f"{name} must be a positive integer.", name)
    return int(value)


def check_bbox_order(bbox: Tuple[float, float, float, float]) -> None:
    xmin, ymin, xmax, ymax = bbox
    if xmin >= xmax:
        raise NWPSValidationError("bbox xmin must be less than xmax.", "bbox")
    if ymin >= ymax:
        raise NWPSValidationError("bbox ymin must be less than ymax.", "bbox")


def require_return_type(value: Any) -> str:
    return require_choice(value, RETURN_TYPES, "return_type")
