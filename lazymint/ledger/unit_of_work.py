"""Compensating unit of work for redemption and withdrawal.

Each applied effect registers its inverse. On failure the inverses run in
reverse order and staged notifications are dropped; on success the staged
notifications are released in the order they were produced.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, List

from ..events import OwnershipChanged

logger = logging.getLogger(__name__)

Compensation = Callable[[], Awaitable[None]]


class UnitOfWork:
    def __init__(self, label: str = ""):
        self.label = label
        self._compensations: List[tuple[str, Compensation]] = []
        self._staged: List[OwnershipChanged] = []
        self._closed = False

    def on_rollback(self, description: str, compensation: Compensation) -> None:
        self._compensations.append((description, compensation))

    @property
    def pending(self) -> int:
        """Number of applied effects that a rollback would undo."""
        return len(self._compensations)

    def stage(self, event: OwnershipChanged) -> None:
        self._staged.append(event)

    async def rollback(self) -> None:
        """Undo every applied effect, newest first.

        A failing compensation is logged and the remaining ones still run;
        the caller re-raises the error that triggered the rollback.
        """
        if self._closed:
            return
        self._closed = True
        self._staged.clear()
        for description, compensation in reversed(self._compensations):
            try:
                await compensation()
            except Exception:
                logger.exception("Rollback step failed (%s): %s", self.label, description)
        self._compensations.clear()

    def commit(self) -> List[OwnershipChanged]:
        if self._closed:
            raise RuntimeError("unit of work already closed")
        self._closed = True
        self._compensations.clear()
        events, self._staged = self._staged, []
        return events


__all__ = ["UnitOfWork", "Compensation"]
