"""Cloud platform detection, exporter configuration and Prometheus-style metric helpers."""

__version__ = "0.1.0"

__all__ = [
    "config",
    "detector",
    "extra_metrics",
    "monitored_resource",
    "naming",
    "pdata",
]