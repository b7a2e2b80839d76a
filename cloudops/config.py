"""Configuration of the Google Cloud exporter, with defaults and validation."""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

# Consistent with Cloud Monitoring's timeout, in seconds.
DEFAULT_TIMEOUT = 12.0

_GZIP = "gzip"
_VERSION_PLACEHOLDER = "{{version}}"

# Known metric domains; configurable for advanced usages.
_DOMAINS = ("googleapis.com", "kubernetes.io", "istio.io", "knative.dev")


class ConfigError(ValueError):
    """Raised when a configuration is invalid."""


@dataclass
class ImpersonateConfig:
    """Service account impersonation settings."""

    target_principal: str = ""
    subject: str = ""
    delegates: list[str] = field(default_factory=list)


@dataclass
class ResourceFilter:
    """Selects resource attributes by key prefix or by regular expression."""

    prefix: str = ""
    regex: str = ""


@dataclass
class AttributeMapping:
    """Maps an OpenTelemetry attribute key to a Google Cloud Trace key."""

    key: str = ""
    replacement: str = ""


@dataclass
class ClientConfig:
    """Settings of the client that talks to a Google Cloud API."""

    # Extra client options, set programmatically only. When it returns any
    # options, default credentials are not added.
    get_client_options: Callable[[], Sequence[Any]] | None = None
    endpoint: str = ""
    # Compression for metric and log requests; only "gzip" is supported.
    compression: str = ""
    # Only has effect when endpoint is set.
    use_insecure: bool = False
    grpc_pool_size: int = 0


@dataclass
class TraceConfig:
    """Trace exporter settings."""

    attribute_mappings: list[AttributeMapping] = field(default_factory=list)
    client_config: ClientConfig = field(default_factory=ClientConfig)


@dataclass
class MetricConfig:
    """Metric exporter settings."""

    # Extension points for exporters built on top of this one.
    get_metric_name: Callable[[str, Any], str] | None = None
    map_monitored_resource: Callable[[Any], Any] | None = None
    extra_metrics: Callable[[Any], Any] | None = None
    prefix: str = ""
    # If a metric already has one of these prefixes, the prefix is not added.
    known_domains: list[str] = field(default_factory=list)
    # Resource attributes matching any filter are included in metric labels.
    resource_filters: list[ResourceFilter] = field(default_factory=list)
    client_config: ClientConfig = field(default_factory=ClientConfig)
    create_metric_descriptor_buffer_size: int = 0
    skip_create_metric_descriptor: bool = False
    create_service_time_series: bool = False
    instrumentation_library_labels: bool = False
    service_resource_labels: bool = False
    cumulative_normalization: bool = False
    enable_sum_of_squared_deviation: bool = False


@dataclass
class LogConfig:
    """Log exporter settings."""

    # Fallback log name for entries that have none.
    default_log_name: str = ""
    resource_filters: list[ResourceFilter] = field(default_factory=list)
    client_config: ClientConfig = field(default_factory=ClientConfig)
    service_resource_labels: bool = False


@dataclass
class Config:
    """Configuration of the Google Cloud exporter."""

    # Project telemetry is sent to when gcp.project.id is not set.
    project_id: str = ""
    user_agent: str = ""
    impersonate_config: ImpersonateConfig = field(default_factory=ImpersonateConfig)
    log_config: LogConfig = field(default_factory=LogConfig)
    trace_config: TraceConfig = field(default_factory=TraceConfig)
    metric_config: MetricConfig = field(default_factory=MetricConfig)
    destination_project_quota: bool = False


def default_config() -> Config:
    """Return the default exporter configuration."""
    return Config(
        user_agent=f"opentelemetry-collector-contrib {_VERSION_PLACEHOLDER}",
        log_config=LogConfig(service_resource_labels=True),
        metric_config=MetricConfig(
            known_domains=list(_DOMAINS),
            prefix="workload.googleapis.com",
            create_metric_descriptor_buffer_size=10,
            instrumentation_library_labels=True,
            service_resource_labels=True,
            cumulative_normalization=True,
        ),
    )


def _check_compression(compression: str) -> None:
    if compression and compression != _GZIP:
        raise ConfigError(
            f"unknown compression option '{compression}', allowed values: '', 'gzip'"
        )


def validate_config(cfg: Config) -> Config:
    """Return cfg unchanged, or raise ConfigError if it is invalid."""
    seen_keys: set[str] = set()
    seen_replacements: set[str] = set()
    for mapping in cfg.trace_config.attribute_mappings:
        if mapping.key in seen_keys:
            raise ConfigError(f'duplicate key in traces.attribute_mappings: "{mapping.key}"')
        seen_keys.add(mapping.key)
        if mapping.replacement in seen_replacements:
            raise ConfigError(
                f'duplicate replacement in traces.attribute_mappings: "{mapping.replacement}"'
            )
        seen_replacements.add(mapping.replacement)

    for resource_filter in cfg.metric_config.resource_filters:
        if not resource_filter.regex:
            continue
        try:
            re.compile(resource_filter.regex)
        except re.error as exc:
            raise ConfigError(f"unable to parse resource filter regex: {exc}") from exc

    _check_compression(cfg.log_config.client_config.compression)
    _check_compression(cfg.metric_config.client_config.compression)
    if cfg.trace_config.client_config.compression:
        raise ConfigError(
            "traces.compression invalid: compression is only available for logs and metrics"
        )
    return cfg


def set_version_in_user_agent(cfg: Config, version: str) -> None:
    """Replace the version placeholder in cfg's user agent with version."""
    cfg.user_agent = cfg.user_agent.replace(_VERSION_PLACEHOLDER, version)