"""Value types shared by the numeric helpers and the chart strategies."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional, Union

Number = Union[Decimal, float, int]


class TickInterval(Enum):
    MONTH = "month"
    WEEK = "week"
    DAY = "day"
    HOUR = "hour"


class NormalizationMode(Enum):
    ZERO_TO_ONE = "zero_to_one"
    PERCENTAGE_OF_MAX = "percentage_of_max"
    RELATIVE_TO_MAX = "relative_to_max"


class RecordToDayRatio(Enum):
    SECOND = "second"
    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


@dataclass(frozen=True, slots=True)
class MetricSample:
    """One canonical observation; ``value`` is ``None`` when nothing was recorded."""

    timestamp: datetime
    value: Optional[Number] = None


@dataclass(frozen=True, slots=True)
class MetricData:
    """Legacy point as delivered by the data-access layer."""

    normalized_timestamp: datetime
    value: Optional[Number] = None
    unit: Optional[str] = None
    provider: Optional[str] = None

    @property
    def has_value(self) -> bool:
        return self.value is not None

    def as_float(self) -> float:
        if self.value is None:
            return float("nan")
        return float(self.value)


@dataclass(frozen=True, slots=True)
class Provenance:
    source_provider: Optional[str] = None
    ingested_at: Optional[datetime] = None


@dataclass(frozen=True, slots=True)
class CanonicalSeries:
    """Provider-agnostic series adapter: samples plus unit and provenance."""

    metric_id: str
    samples: List[MetricSample] = field(default_factory=list)
    unit: Optional[str] = None
    provenance: Provenance = field(default_factory=Provenance)
    metadata: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class SmoothedDataPoint:
    timestamp: datetime
    value: float


__all__ = [
    "Number",
    "TickInterval",
    "NormalizationMode",
    "RecordToDayRatio",
    "MetricSample",
    "MetricData",
    "Provenance",
    "CanonicalSeries",
    "SmoothedDataPoint",
]
