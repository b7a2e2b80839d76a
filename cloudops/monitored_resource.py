"""Mapping of resources to the prometheus_target monitored resource."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from cloudops.pdata import Resource

# These labels may be set by users to override the corresponding fields of
# the monitored resource; they are expected to arrive as resource attributes.
_LOCATION_LABEL = "location"
_CLUSTER_LABEL = "cluster"
_NAMESPACE_LABEL = "namespace"
_JOB_LABEL = "job"
_SERVICE_NAMESPACE_LABEL = "service_namespace"
_INSTANCE_LABEL = "instance"

# Attribute keys used by the prometheus_target monitored resource, in order of
# preference. They are also left out of the target_info metric.
PROM_TARGET_KEYS: dict[str, tuple[str, ...]] = {
    _LOCATION_LABEL: (_LOCATION_LABEL, "cloud.availability_zone", "cloud.region"),
    _CLUSTER_LABEL: (_CLUSTER_LABEL, "k8s.cluster.name"),
    _NAMESPACE_LABEL: (_NAMESPACE_LABEL, "k8s.namespace.name"),
    _JOB_LABEL: ("service.name",),
    _SERVICE_NAMESPACE_LABEL: ("service.namespace",),
    _INSTANCE_LABEL: ("service.instance.id",),
}


@dataclass
class MonitoredResource:
    """A monitored resource: a type and its labels."""

    type: str = ""
    labels: dict[str, str] = field(default_factory=dict)


def _first_string(attributes: Mapping[str, Any], keys: tuple[str, ...]) -> str:
    """Return the value of the first key present, or "" if none is a string."""
    for key in keys:
        if key in attributes:
            value = attributes[key]
            return value if isinstance(value, str) else ""
    return ""


def map_to_prometheus_target(resource: Resource) -> MonitoredResource:
    """Build the prometheus_target monitored resource for a resource."""
    attrs = resource.attributes
    job = _first_string(attrs, PROM_TARGET_KEYS[_JOB_LABEL])
    service_namespace = _first_string(attrs, PROM_TARGET_KEYS[_SERVICE_NAMESPACE_LABEL])
    if service_namespace:
        job = f"{service_namespace}/{job}"
    return MonitoredResource(
        type="prometheus_target",
        labels={
            _LOCATION_LABEL: _first_string(attrs, PROM_TARGET_KEYS[_LOCATION_LABEL]),
            _CLUSTER_LABEL: _first_string(attrs, PROM_TARGET_KEYS[_CLUSTER_LABEL]),
            _NAMESPACE_LABEL: _first_string(attrs, PROM_TARGET_KEYS[_NAMESPACE_LABEL]),
            _JOB_LABEL: job,
            _INSTANCE_LABEL: _first_string(attrs, PROM_TARGET_KEYS[_INSTANCE_LABEL]),
        },
    )


def is_special_attribute(key: str) -> bool:
    """Return whether key already feeds a prometheus_target label."""
    return any(key in keys for keys in PROM_TARGET_KEYS.values())