"""Adds the target_info and otel_scope_info metrics used by managed Prometheus."""

from __future__ import annotations

import base64
import json
import math
from decimal import Decimal
from typing import Any

from cloudops.monitored_resource import is_special_attribute
from cloudops.pdata import DataPoint, Metric, Metrics, MetricType, ScopeMetrics

_SCOPE_NAME_KEY = "otel_scope_name"
_SCOPE_VERSION_KEY = "otel_scope_version"


def _as_string(value: Any) -> str:
    """Render an attribute value as a string."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "+Inf" if value > 0 else "-Inf"
        return f"{Decimal(repr(value)).normalize():f}"
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, separators=(",", ":"), default=str)
    return str(value)


def _gauge_of_one(name: str) -> tuple[Metric, DataPoint]:
    point = DataPoint(value=1)
    return Metric(name=name, type=MetricType.GAUGE, data_points=[point]), point


def add_target_info_metric(metrics: Metrics) -> None:
    """Append a target_info gauge, in a new scope, to every resource."""
    for resource_metrics in metrics.resource_metrics:
        latest = max(
            (
                metric.latest_timestamp()
                for scope_metrics in resource_metrics.scope_metrics
                for metric in scope_metrics.metrics
            ),
            default=0,
        )
        target_info, point = _gauge_of_one("target_info")
        point.timestamp = latest
        # Attributes already in the monitored resource labels are left out.
        point.attributes.update(
            (key, _as_string(value))
            for key, value in resource_metrics.resource.attributes.items()
            if not is_special_attribute(key)
        )
        resource_metrics.scope_metrics.append(ScopeMetrics(metrics=[target_info]))


def add_scope_info_metric(metrics: Metrics) -> None:
    """Append otel_scope_info to every named scope and tag its points with the scope."""
    for resource_metrics in metrics.resource_metrics:
        for scope_metrics in resource_metrics.scope_metrics:
            scope = scope_metrics.scope
            if not scope.name and not scope.version:
                continue

            scope_info, info_point = _gauge_of_one("otel_scope_info")
            info_point.attributes.update(
                (key, _as_string(value)) for key, value in scope.attributes.items()
            )
            scope_metrics.metrics.append(scope_info)

            latest = 0
            for metric in scope_metrics.metrics:
                for point in metric.data_points:
                    point.attributes[_SCOPE_NAME_KEY] = scope.name
                    point.attributes[_SCOPE_VERSION_KEY] = scope.version
                    latest = max(latest, point.timestamp)
            info_point.timestamp = latest