"""Metric naming for Google Managed Prometheus."""

from __future__ import annotations

import re

from cloudops.pdata import Metric, MetricType

_WORD_PATTERN = re.compile(r"[^\W_]+")

_UNIT_MAP = {
    # Time
    "d": "days",
    "h": "hours",
    "min": "minutes",
    "s": "seconds",
    "ms": "milliseconds",
    "us": "microseconds",
    "ns": "nanoseconds",
    # Bytes
    "By": "bytes",
    "KiBy": "kibibytes",
    "MiBy": "mebibytes",
    "GiBy": "gibibytes",
    "TiBy": "tibibytes",
    "KBy": "kilobytes",
    "MBy": "megabytes",
    "GBy": "gigabytes",
    "TBy": "terabytes",
    "B": "bytes",
    "KB": "kilobytes",
    "MB": "megabytes",
    "GB": "gigabytes",
    "TB": "terabytes",
    # SI
    "m": "meters",
    "V": "volts",
    "A": "amperes",
    "J": "joules",
    "W": "watts",
    "g": "grams",
    # Misc
    "Cel": "celsius",
    "Hz": "hertz",
    "1": "",
    "%": "percent",
    "$": "dollars",
}

_PER_UNIT_MAP = {
    "s": "second",
    "m": "minute",
    "h": "hour",
    "d": "day",
    "w": "week",
    "mo": "month",
    "y": "year",
}


class UnsupportedMetricTypeError(ValueError):
    """Raised for a metric type that has no managed Prometheus name."""


def _words(text: str) -> list[str]:
    return _WORD_PATTERN.findall(text)


def _clean_up(text: str) -> str:
    return "_".join(_words(text))


def _usable_unit(unit: str) -> bool:
    return bool(unit) and "{" not in unit and "}" not in unit


def build_prom_compliant_name(metric: Metric, namespace: str = "") -> str:
    """Build a name following Prometheus conventions, with unit and type suffixes."""
    words = _words(metric.name)

    main_unit, sep, per_unit = metric.unit.partition("/")
    main_unit = main_unit.strip()
    if _usable_unit(main_unit):
        main_prom = _clean_up(_UNIT_MAP.get(main_unit, main_unit))
        if main_prom and main_prom not in words:
            words.append(main_prom)
    per_unit = per_unit.strip() if sep else ""
    if _usable_unit(per_unit):
        per_prom = _clean_up(_PER_UNIT_MAP.get(per_unit, per_unit))
        if per_prom and per_prom not in words:
            words.extend(["per", per_prom])

    if metric.type is MetricType.SUM and metric.is_monotonic:
        words = [w for w in words if w != "total"] + ["total"]

    # Unit "1" marks a ratio, but only gauges are trusted to use it properly.
    if metric.unit == "1" and metric.type is MetricType.GAUGE:
        words = [w for w in words if w != "ratio"] + ["ratio"]

    if namespace:
        words.insert(0, namespace)

    name = "_".join(words)
    if name and name[0].isdecimal():
        name = "_" + name
    return name


def get_metric_name(base_name: str, metric: Metric) -> str:
    """Return the managed Prometheus metric name, with its type suffix."""
    compliant = build_prom_compliant_name(metric, "")
    if metric.type is MetricType.SUM:
        return compliant + "/counter"
    if metric.type is MetricType.GAUGE:
        return compliant + "/gauge"
    if metric.type is MetricType.SUMMARY:
        # Summaries are sent as a sum counter, a count and the quantiles.
        if base_name.endswith("_sum"):
            return compliant + "_sum/summary:counter"
        if base_name.endswith("_count"):
            return compliant + "_count/summary"
        return compliant + "/summary"
    if metric.type is MetricType.HISTOGRAM:
        return compliant + "/histogram"
    raise UnsupportedMetricTypeError(f"unsupported metric datatype: {metric.type.value}")