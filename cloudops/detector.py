"""Detection of the Google Cloud platform a program runs on, and of its attributes."""

from __future__ import annotations

import os
import urllib.error
import urllib.request
from collections.abc import Mapping
from dataclasses import dataclass
from enum import IntEnum
from typing import Protocol

_METADATA_HOST_ENV = "GCE_METADATA_HOST"
_DEFAULT_METADATA_HOST = "169.254.169.254"
_DEFAULT_TIMEOUT = 5.0

# App Engine environment variables.
_GAE_SERVICE_ENV = "GAE_SERVICE"
_GAE_VERSION_ENV = "GAE_VERSION"
_GAE_INSTANCE_ENV = "GAE_INSTANCE"
_GAE_ENV = "GAE_ENV"
_GAE_STANDARD = "standard"

# Cloud Run and Cloud Functions environment variables.
_CLOUD_RUN_CONFIG_ENV = "K_CONFIGURATION"
_CLOUD_FUNCTION_TARGET_ENV = "FUNCTION_TARGET"
_FAAS_SERVICE_ENV = "K_SERVICE"
_FAAS_REVISION_ENV = "K_REVISION"
_REGION_METADATA_ATTR = "instance/region"

# Compute Engine metadata.
_MACHINE_TYPE_METADATA_ATTR = "instance/machine-type"

# Kubernetes Engine.
_K8S_SERVICE_HOST_ENV = "KUBERNETES_SERVICE_HOST"
_CLUSTER_NAME_METADATA_ATTR = "cluster-name"
_CLUSTER_LOCATION_METADATA_ATTR = "cluster-location"


class DetectorError(Exception):
    """Raised when an attribute of the platform cannot be determined."""


class EnvVarNotFoundError(DetectorError):
    """Raised when a required environment variable is not set."""

    def __init__(self, name: str) -> None:
        super().__init__(f"environment variable not found: {name}")
        self.name = name


class MetadataError(DetectorError):
    """Raised when the metadata server cannot answer a query."""


class Platform(IntEnum):
    """The platform a program runs on."""

    UNKNOWN = 0
    GKE = 1
    GCE = 2
    CLOUD_RUN = 3
    CLOUD_FUNCTIONS = 4
    APP_ENGINE_STANDARD = 5
    APP_ENGINE_FLEX = 6


class LocationType(IntEnum):
    """Whether a location is a zone or a region."""

    UNDEFINED = 0
    ZONE = 1
    REGION = 2


class MetadataProvider(Protocol):
    """The metadata queries a Detector relies on."""

    def project_id(self) -> str: ...

    def instance_id(self) -> str: ...

    def get(self, suffix: str) -> str: ...

    def instance_name(self) -> str: ...

    def zone(self) -> str: ...

    def instance_attribute_value(self, attr: str) -> str: ...


class MetadataClient:
    """Client for the Compute Engine metadata server."""

    def __init__(self, host: str | None = None, timeout: float = _DEFAULT_TIMEOUT) -> None:
        self.host = host or os.environ.get(_METADATA_HOST_ENV) or _DEFAULT_METADATA_HOST
        self.timeout = timeout

    def get(self, suffix: str) -> str:
        """Return the raw value stored under the given metadata path."""
        url = f"http://{self.host}/computeMetadata/v1/{suffix.lstrip('/')}"
        request = urllib.request.Request(url, headers={"Metadata-Flavor": "Google"})
        try:
            with urllib.request.urlopen(request, timeout=self.timeout) as response:
                return response.read().decode("utf-8")
        except urllib.error.HTTPError as exc:
            if exc.code == 404:
                raise MetadataError(f"metadata {suffix!r} not defined") from exc
            raise MetadataError(f"metadata {suffix!r}: status {exc.code}") from exc
        except (urllib.error.URLError, OSError) as exc:
            raise MetadataError(f"metadata {suffix!r}: {exc}") from exc

    def _get_trimmed(self, suffix: str) -> str:
        return self.get(suffix).strip()

    def project_id(self) -> str:
        return self._get_trimmed("project/project-id")

    def instance_id(self) -> str:
        return self._get_trimmed("instance/id")

    def instance_name(self) -> str:
        return self._get_trimmed("instance/name")

    def zone(self) -> str:
        """Return the zone, the last segment of projects/<n>/zones/<zone>."""
        return self._get_trimmed("instance/zone").rpartition("/")[2]

    def instance_attribute_value(self, attr: str) -> str:
        return self.get(f"instance/attributes/{attr}")


@dataclass
class EnvironmentProvider:
    """Looks up environment variables, from os.environ unless given a mapping."""

    environ: Mapping[str, str] | None = None

    def lookup_env(self, name: str) -> str | None:
        """Return the variable's value, or None when it is not set."""
        source = os.environ if self.environ is None else self.environ
        return source.get(name)


class Detector:
    """Detects the platform and fetches its attributes."""

    def __init__(self, metadata: MetadataProvider, env: EnvironmentProvider) -> None:
        self.metadata = metadata
        self.env = env

    def _require_env(self, name: str) -> str:
        value = self.env.lookup_env(name)
        if value is None:
            raise EnvVarNotFoundError(name)
        return value

    def _has_env(self, name: str) -> bool:
        return self.env.lookup_env(name) is not None

    # Platform detection.

    def _on_gke(self) -> bool:
        return self._has_env(_K8S_SERVICE_HOST_ENV)

    def _on_cloud_functions(self) -> bool:
        return self._has_env(_CLOUD_FUNCTION_TARGET_ENV)

    def _on_cloud_run(self) -> bool:
        return self._has_env(_CLOUD_RUN_CONFIG_ENV)

    def _on_app_engine_standard(self) -> bool:
        return self.env.lookup_env(_GAE_ENV) == _GAE_STANDARD

    def _on_app_engine(self) -> bool:
        return self._has_env(_GAE_SERVICE_ENV)

    def _on_gce(self) -> bool:
        try:
            self.metadata.get(_MACHINE_TYPE_METADATA_ATTR)
        except (DetectorError, OSError):
            return False
        return True

    def cloud_platform(self) -> Platform:
        """Return the platform on which this program is running."""
        if self._on_gke():
            return Platform.GKE
        if self._on_cloud_functions():
            return Platform.CLOUD_FUNCTIONS
        if self._on_cloud_run():
            return Platform.CLOUD_RUN
        if self._on_app_engine_standard():
            return Platform.APP_ENGINE_STANDARD
        if self._on_app_engine():
            return Platform.APP_ENGINE_FLEX
        if self._on_gce():
            return Platform.GCE
        return Platform.UNKNOWN

    def project_id(self) -> str:
        return self.metadata.project_id()

    # App Engine.

    def app_engine_service_name(self) -> str:
        return self._require_env(_GAE_SERVICE_ENV)

    def app_engine_service_version(self) -> str:
        return self._require_env(_GAE_VERSION_ENV)

    def app_engine_service_instance(self) -> str:
        return self._require_env(_GAE_INSTANCE_ENV)

    def app_engine_flex_availability_zone_and_region(self) -> tuple[str, str]:
        # The GCE metadata server is available on App Engine Flex.
        return self.gce_availability_zone_and_region()

    def app_engine_standard_availability_zone(self) -> str:
        return self.metadata.zone()

    def app_engine_standard_cloud_region(self) -> str:
        return self.faas_cloud_region()

    # Cloud Run and Cloud Functions.

    def faas_name(self) -> str:
        return self._require_env(_FAAS_SERVICE_ENV)

    def faas_version(self) -> str:
        return self._require_env(_FAAS_REVISION_ENV)

    def faas_id(self) -> str:
        return self.metadata.instance_id()

    def faas_cloud_region(self) -> str:
        """Return the region from projects/<project_number>/regions/<region>."""
        return self.metadata.get(_REGION_METADATA_ATTR).rpartition("/")[2]

    # Compute Engine.

    def gce_host_type(self) -> str:
        return self.metadata.get(_MACHINE_TYPE_METADATA_ATTR)

    def gce_host_id(self) -> str:
        return self.metadata.instance_id()

    def gce_host_name(self) -> str:
        return self.metadata.instance_name()

    def gce_availability_zone_and_region(self) -> tuple[str, str]:
        """Return the zone and the region derived from it."""
        zone = self.metadata.zone()
        if not zone:
            raise DetectorError("no zone detected from GCE metadata server")
        parts = zone.split("-", 2)
        if len(parts) != 3:
            raise DetectorError(
                f"zone was not in the expected format: country-region-zone.  Got {zone}"
            )
        return zone, "-".join(parts[:2])

    # Kubernetes Engine.

    def gke_host_id(self) -> str:
        return self.gce_host_id()

    def gke_cluster_name(self) -> str:
        return self.metadata.instance_attribute_value(_CLUSTER_NAME_METADATA_ATTR)

    def gke_availability_zone_or_region(self) -> tuple[str, LocationType]:
        """Return the cluster location and whether it is a zone or a region."""
        location = self.metadata.instance_attribute_value(_CLUSTER_LOCATION_METADATA_ATTR)
        dashes = location.count("-")
        if dashes == 1:
            return location, LocationType.REGION
        if dashes == 2:
            return location, LocationType.ZONE
        raise DetectorError(f"unrecognized format for cluster location: {location}")


def new_detector() -> Detector:
    """Return a Detector backed by the metadata server and the process environment."""
    return Detector(MetadataClient(), EnvironmentProvider())