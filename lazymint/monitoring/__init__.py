from .metrics_exporter import MetricsRegistry, get_registry, snapshot_metrics

__all__ = ["MetricsRegistry", "get_registry", "snapshot_metrics"]
