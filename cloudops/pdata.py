"""A small in-memory model of OpenTelemetry metric data."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class MetricType(Enum):
    """The kind of data a metric carries."""

    EMPTY = "Empty"
    GAUGE = "Gauge"
    SUM = "Sum"
    HISTOGRAM = "Histogram"
    EXPONENTIAL_HISTOGRAM = "ExponentialHistogram"
    SUMMARY = "Summary"


@dataclass
class DataPoint:
    """One data point; timestamps are nanoseconds since the epoch, 0 when unset."""

    attributes: dict[str, Any] = field(default_factory=dict)
    timestamp: int = 0
    start_timestamp: int = 0
    value: int | float = 0
    count: int = 0
    sum: float = 0.0


@dataclass
class Metric:
    """A named metric with its data points."""

    name: str = ""
    type: MetricType = MetricType.EMPTY
    data_points: list[DataPoint] = field(default_factory=list)
    unit: str = ""
    description: str = ""
    # Only meaningful for sums.
    is_monotonic: bool = False

    def latest_timestamp(self) -> int:
        """Return the most recent timestamp among the data points, or 0."""
        return max((point.timestamp for point in self.data_points), default=0)


@dataclass
class InstrumentationScope:
    """The library that produced a group of metrics."""

    name: str = ""
    version: str = ""
    attributes: dict[str, Any] = field(default_factory=dict)


@dataclass
class ScopeMetrics:
    """Metrics produced by one instrumentation scope."""

    scope: InstrumentationScope = field(default_factory=InstrumentationScope)
    metrics: list[Metric] = field(default_factory=list)


@dataclass
class Resource:
    """The entity that produced telemetry, described by attributes."""

    attributes: dict[str, Any] = field(default_factory=dict)


@dataclass
class ResourceMetrics:
    """Metrics belonging to one resource."""

    resource: Resource = field(default_factory=Resource)
    scope_metrics: list[ScopeMetrics] = field(default_factory=list)


@dataclass
class Metrics:
    """A batch of metrics grouped by resource."""

    resource_metrics: list[ResourceMetrics] = field(default_factory=list)