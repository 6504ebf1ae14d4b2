"""
Bundle types returned by NWPS queries that produce more than one table.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional

import pandas as pd


@dataclass
class GaugeImages:
    """Image URLs published for a gauge."""

    probability: Optional[str] = None
    hydrograph_default: Optional[str] = None
    hydrograph_floodcat: Optional[str] = None
    photos: List[Any] = field(default_factory=list)

    def is_empty(self) -> bool:
        return (
            self.probability is None
            and self.hydrograph_default is None
            and self.hydrograph_floodcat is None
            and not self.photos
        )


@dataclass
class GaugeDetail:
    """
    Full detail for one gauge.

    ``status`` always has one ``observed`` and one ``forecast`` row.
    ``flood_categories`` holds at most one row per category, in the order
    action, minor, moderate, major. ``datums`` is ``None`` when the gauge
    publishes no datum information.
    """

    metadata: Any
    organizations: pd.DataFrame
    pedts: pd.DataFrame
    status: pd.DataFrame
    flood_categories: pd.DataFrame
    flood_crests: pd.DataFrame
    flood_impacts: pd.DataFrame
    low_waters: pd.DataFrame
    datums: Optional[pd.DataFrame]
    images: GaugeImages

    @property
    def lid(self) -> Optional[str]:
        if len(self.metadata) == 0 or pd.isna(self.metadata["lid"].iloc[0]):
            return None
        return str(self.metadata["lid"].iloc[0])

    def to_dict(self) -> Dict[str, Any]:
        """Components keyed by name (shallow, tables are not copied)."""
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class ReachDetail:
    """NWM reach metadata with its routing neighbours."""

    metadata: Any
    streamflow_products: List[str]
    upstream: pd.DataFrame
    downstream: pd.DataFrame

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class MonitorStatus:
    """NWPS system health snapshot."""

    gauge_observed: pd.DataFrame
    gauge_forecast: pd.DataFrame
    hml_job_queue: Optional[int]
    hml_product_counts: pd.DataFrame
    hml_last_received: pd.DataFrame
    lro: pd.DataFrame

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}
