"""
Ownership-change notifications.

The ledger publishes notifications only after a redemption commits, so
subscribers never observe events from a rolled-back call.
"""

import logging
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OwnershipChanged:
    """Asset ownership moved from one address to another (zero address on creation)."""
    from_address: str
    to_address: str
    asset_id: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


Listener = Callable[[OwnershipChanged], None]


class EventLog:
    """Append-only log of committed notifications with synchronous subscribers."""

    def __init__(self):
        self._events: List[OwnershipChanged] = []
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def publish(self, events: Iterable[OwnershipChanged]) -> None:
        """Record a committed batch, then notify listeners.

        A failing listener is logged and skipped; the batch is already
        committed and stays recorded in full.
        """
        batch = list(events)
        self._events.extend(batch)
        for event in batch:
            logger.debug(
                "OwnershipChanged %s -> %s asset=%s at %s",
                event.from_address,
                event.to_address,
                event.asset_id,
                datetime.now(timezone.utc).isoformat(),
            )
            for listener in list(self._listeners):
                try:
                    listener(event)
                except Exception:
                    logger.exception("Listener %r failed on asset %s", listener, event.asset_id)

    def history(self) -> List[OwnershipChanged]:
        return list(self._events)

    def for_asset(self, asset_id: int) -> List[OwnershipChanged]:
        return [e for e in self._events if e.asset_id == asset_id]

    def __len__(self) -> int:
        return len(self._events)


__all__ = ["OwnershipChanged", "Listener", "EventLog"]
