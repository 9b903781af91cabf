"""Prometheus metrics for redemption and escrow activity.

Counters are registered once per process on the default Prometheus registry.
A plain in-process snapshot of the same counts is kept for tests and status
endpoints that do not scrape Prometheus.
"""
from __future__ import annotations

import threading
from typing import Dict, Optional

from prometheus_client import Counter


class MetricsRegistry:
    def __init__(self):
        self._lock = threading.Lock()
        self._counts: Dict[str, int] = {}
        self.redemptions = Counter("lazymint_redemptions_total", "Successful voucher redemptions")
        self.redemption_failures = Counter(
            "lazymint_redemption_failures_total", "Rejected or rolled back redemptions", ["reason"]
        )
        self.escrow_credited = Counter("lazymint_escrow_credited_total", "Payment amount credited to escrow")
        self.withdrawals = Counter("lazymint_withdrawals_total", "Successful escrow withdrawals")

    def _bump(self, key: str, amount: int = 1) -> None:
        with self._lock:
            self._counts[key] = self._counts.get(key, 0) + amount

    def observe_redemption(self, payment: int) -> None:
        self.redemptions.inc()
        if payment:
            self.escrow_credited.inc(payment)
        self._bump("redemptions_total")
        self._bump("escrow_credited_total", payment)

    def observe_failure(self, reason: str) -> None:
        self.redemption_failures.labels(reason=reason).inc()
        self._bump(f"redemption_failures_total:{reason}")

    def observe_withdrawal(self, amount: int) -> None:
        self.withdrawals.inc()
        self._bump("withdrawals_total")
        self._bump("withdrawn_total", amount)

    def snapshot(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._counts)


_registry: Optional[MetricsRegistry] = None
_registry_lock = threading.Lock()


def get_registry() -> MetricsRegistry:
    global _registry
    with _registry_lock:
        if _registry is None:
            _registry = MetricsRegistry()
        return _registry


def snapshot_metrics() -> Dict[str, int]:
    """Return current in-process counters."""
    return get_registry().snapshot()


__all__ = ["get_registry", "snapshot_metrics", "MetricsRegistry"]
