# cloudops

Building blocks for telemetry from cloud workloads:

- **Platform detection** (`cloudops.detector`): works out whether a program is
  running on GKE, Compute Engine, Cloud Run, Cloud Functions or App Engine
  (standard or flexible). It reads the environment and the instance metadata
  server, then reports the project, zone, region, host and service details.
- **Exporter configuration** (`cloudops.config`): dataclasses for trace, metric
  and log exporter settings. `default_config()` gives the defaults and
  `validate_config()` rejects inconsistent settings.
- **Prometheus-style metric helpers** (`cloudops.pdata`,
  `cloudops.monitored_resource`, `cloudops.extra_metrics`, `cloudops.naming`):
  a small in-memory metrics model, mapping of resources onto the
  `prometheus_target` monitored resource, insertion of `target_info` and
  `otel_scope_info` metrics, and Prometheus-compliant metric naming.

The package has no third-party runtime dependencies.

## Installation

```
pip install .
```

To run the test suite:

```
pip install .[test]
pytest
```

## Detecting the platform

```python
from cloudops.detector import Platform, new_detector

detector = new_detector()
platform = detector.cloud_platform()
if platform is Platform.GKE:
    location, kind = detector.gke_availability_zone_or_region()
    print(detector.gke_cluster_name(), location, kind)
elif platform is Platform.GCE:
    zone, region = detector.gce_availability_zone_and_region()
    print(detector.gce_host_name(), zone, region)
```

`cloud_platform()` checks, in this order: `KUBERNETES_SERVICE_HOST` (GKE),
`FUNCTION_TARGET` (Cloud Functions), `K_CONFIGURATION` (Cloud Run),
`GAE_ENV=standard` (App Engine standard), `GAE_SERVICE` (App Engine flexible),
and finally whether the metadata server answers for the machine type (Compute
Engine). Otherwise it returns `Platform.UNKNOWN`.

A lookup that cannot be answered raises an exception instead of returning an
empty value:

- a missing environment variable raises `EnvVarNotFoundError`;
- a metadata server request that fails raises `MetadataError`;
- a zone or cluster location in an unexpected format raises `DetectorError`.

`EnvVarNotFoundError` and `MetadataError` both derive from `DetectorError`.

`MetadataClient(host=None, timeout=5.0)` talks to the metadata server at
`host`, or at `GCE_METADATA_HOST` when that is set, or at `169.254.169.254`.
For tests, or for environments without a metadata server, pass your own
providers to `Detector(metadata, env)`. `metadata` needs the methods of
`MetadataClient` (`get`, `project_id`, `instance_id`, `instance_name`, `zone`,
`instance_attribute_value`). For `env`, `EnvironmentProvider(environ={...})`
reads from the given mapping instead of `os.environ`.

## Validating exporter configuration

```python
from cloudops.config import AttributeMapping, ConfigError, default_config, validate_config

cfg = default_config()
cfg.trace_config.attribute_mappings = [
    AttributeMapping(key="foo", replacement="bar"),
    AttributeMapping(key="foo", replacement="baz"),
]
try:
    validate_config(cfg)
except ConfigError as err:
    print(err)  # duplicate key in traces.attribute_mappings: "foo"
```

`validate_config` returns the configuration unchanged when it is valid. It
raises `ConfigError` for duplicate attribute-mapping keys or replacements, for
a resource filter regex that does not compile, for a log or metric compression
other than `""` or `"gzip"`, and for any trace compression.
`set_version_in_user_agent(cfg, version)` fills in the `{{version}}`
placeholder of the user agent.

## Prometheus helpers

```python
from cloudops.extra_metrics import add_scope_info_metric, add_target_info_metric
from cloudops.monitored_resource import map_to_prometheus_target
from cloudops.naming import get_metric_name
from cloudops.pdata import (
    DataPoint, InstrumentationScope, Metric, Metrics, MetricType,
    Resource, ResourceMetrics, ScopeMetrics,
)

metrics = Metrics(resource_metrics=[
    ResourceMetrics(
        resource=Resource(attributes={"service.name": "checkout", "region": "eu"}),
        scope_metrics=[ScopeMetrics(
            scope=InstrumentationScope(name="myscope", version="v0.0.1"),
            metrics=[Metric(
                name="requests", unit="s", type=MetricType.SUM, is_monotonic=True,
                data_points=[DataPoint(value=3, timestamp=1_700_000_000_000_000_000)],
            )],
        )],
    ),
])

add_target_info_metric(metrics)
add_scope_info_metric(metrics)
for rm in metrics.resource_metrics:
    resource = map_to_prometheus_target(rm.resource)
    for sm in rm.scope_metrics:
        for metric in sm.metrics:
            print(resource.labels["job"], get_metric_name(metric.name, metric))
```

- `add_target_info_metric` appends, for every resource, a new scope holding a
  `target_info` gauge of value 1. Its attributes are the resource attributes,
  except those that already feed `prometheus_target` labels, and its timestamp
  is the latest one among that resource's points.
- `add_scope_info_metric` appends an `otel_scope_info` gauge to every scope that
  has a name or a version, and adds `otel_scope_name` and `otel_scope_version`
  to every point in that scope.
- `map_to_prometheus_target` fills the `location`, `cluster`, `namespace`, `job`
  and `instance` labels. Plain `location`, `cluster` and `namespace` attributes
  take precedence over the cloud and Kubernetes ones, and `service.namespace`
  is prefixed to the job as `namespace/job`.
- `get_metric_name` builds a Prometheus-compliant name with
  `build_prom_compliant_name` (unit suffixes, `_total` for monotonic sums,
  `_ratio` for gauges with unit `1`). It then adds `/counter`, `/gauge`,
  `/histogram` or one of the `/summary` forms. Any other metric type raises
  `UnsupportedMetricTypeError`.

## What this package does not do

It does not send telemetry anywhere. There are no exporters, no Cloud
Monitoring, Trace or Logging clients and no credential handling. The
configuration classes only hold and check settings. The metrics model is a
plain in-memory structure with no wire format. The package has no command-line
program and no server.