import pytest

from cloudops.naming import (
    UnsupportedMetricTypeError,
    build_prom_compliant_name,
    get_metric_name,
)
from cloudops.pdata import Metric, MetricType


@pytest.mark.parametrize(
    "base_name, metric, expected",
    [
        pytest.param(
            "foo",
            Metric(name="foo", type=MetricType.SUM, is_monotonic=True),
            "foo_total/counter",
            id="sum without total",
        ),
        pytest.param(
            "foo_total",
            Metric(name="foo_total", type=MetricType.SUM, is_monotonic=True),
            "foo_total/counter",
            id="sum with total",
        ),
        pytest.param(
            "foo",
            Metric(name="foo_total", unit="s", type=MetricType.SUM, is_monotonic=True),
            "foo_seconds_total/counter",
            id="sum with unit",
        ),
        pytest.param("bar", Metric(name="bar", type=MetricType.GAUGE), "bar/gauge", id="gauge"),
        pytest.param(
            "baz_sum",
            Metric(name="baz", type=MetricType.SUMMARY),
            "baz_sum/summary:counter",
            id="summary sum",
        ),
        pytest.param(
            "baz_count",
            Metric(name="baz", type=MetricType.SUMMARY),
            "baz_count/summary",
            id="summary count",
        ),
        pytest.param(
            "baz", Metric(name="baz", type=MetricType.SUMMARY), "baz/summary", id="summary quantile"
        ),
        pytest.param(
            "hello",
            Metric(name="hello", type=MetricType.HISTOGRAM),
            "hello/histogram",
            id="histogram",
        ),
    ],
)
def test_get_metric_name(base_name, metric, expected):
    assert get_metric_name(base_name, metric) == expected


def test_get_metric_name_rejects_exponential_histogram():
    metric = Metric(name="other", type=MetricType.EXPONENTIAL_HISTOGRAM)
    with pytest.raises(UnsupportedMetricTypeError, match="ExponentialHistogram"):
        get_metric_name("other", metric)


def test_build_name_with_namespace_and_leading_digit():
    metric = Metric(name="1st.metric", type=MetricType.GAUGE)
    assert build_prom_compliant_name(metric, "") == "_1st_metric"
    assert build_prom_compliant_name(metric, "ns") == "ns_1st_metric"


def test_build_name_with_per_unit():
    metric = Metric(name="requests", unit="By/s", type=MetricType.GAUGE)
    assert build_prom_compliant_name(metric, "") == "requests_bytes_per_second"


def test_build_name_ratio_for_gauges_only():
    gauge = Metric(name="usage", unit="1", type=MetricType.GAUGE)
    counter = Metric(name="usage", unit="1", type=MetricType.SUM)
    assert build_prom_compliant_name(gauge, "") == "usage_ratio"
    assert build_prom_compliant_name(counter, "") == "usage"


def test_build_name_ignores_braced_units():
    metric = Metric(name="items", unit="{packets}", type=MetricType.GAUGE)
    assert build_prom_compliant_name(metric, "") == "items"