from cloudops.pdata import (
    DataPoint,
    InstrumentationScope,
    Metric,
    Metrics,
    MetricType,
    ResourceMetrics,
    ScopeMetrics,
)


def test_latest_timestamp_picks_maximum():
    metric = Metric(
        name="m",
        type=MetricType.GAUGE,
        data_points=[DataPoint(timestamp=30), DataPoint(timestamp=70), DataPoint(timestamp=50)],
    )
    assert metric.latest_timestamp() == 70


def test_latest_timestamp_without_points_is_zero():
    assert Metric(name="m").latest_timestamp() == 0


def test_latest_timestamp_is_not_below_any_point():
    stamps = [5, 1, 9, 3]
    metric = Metric(type=MetricType.SUM, data_points=[DataPoint(timestamp=t) for t in stamps])
    latest = metric.latest_timestamp()
    assert all(latest >= t for t in stamps)
    assert latest in stamps


def test_default_collections_are_independent():
    first = ScopeMetrics()
    second = ScopeMetrics()
    first.metrics.append(Metric(name="a"))
    assert second.metrics == []
    assert first.scope == InstrumentationScope()


def test_metrics_equality_is_structural():
    def build():
        return Metrics(
            resource_metrics=[
                ResourceMetrics(
                    scope_metrics=[ScopeMetrics(metrics=[Metric(name="x", type=MetricType.HISTOGRAM)])]
                )
            ]
        )

    assert build() == build()
    other = build()
    other.resource_metrics[0].scope_metrics[0].metrics[0].name = "y"
    assert other != build()


def test_metric_type_names_follow_data_model():
    assert MetricType.EXPONENTIAL_HISTOGRAM.value == "ExponentialHistogram"
    assert Metric().type is MetricType.EMPTY