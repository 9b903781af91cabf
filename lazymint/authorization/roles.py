"""
Minting authority.

The ledger asks an AuthorizationOracle at redemption time whether the
recovered signer may mint. Revoking a minter therefore takes effect
immediately for every voucher it has already signed.
"""

from __future__ import annotations

import logging
import threading
from typing import Iterable, List, Protocol, Set

from ..voucher.types import to_address

logger = logging.getLogger(__name__)

MINTER_ROLE = "MINTER_ROLE"


class AuthorizationOracle(Protocol):
    """Interface for minting-authority backends (role registry, on-chain ACL, ...)."""

    def is_authorized_minter(self, address: str) -> bool:
        ...  # pragma: no cover - interface placeholder


class InMemoryRoleRegistry:
    """Thread-safe role registry holding the set of addresses with MINTER_ROLE.
    It is suitable for tests or single-process deployments. For distributed use, replace with a shared store.
    """

    def __init__(self, minters: Iterable[str] = ()):
        self._lock = threading.Lock()
        self._minters: Set[str] = {to_address(m) for m in minters}

    def grant_minter(self, address: str) -> None:
        """Give an address minting authority."""
        addr = to_address(address)
        with self._lock:
            self._minters.add(addr)
        logger.info("Granted %s to %s", MINTER_ROLE, addr)

    def revoke_minter(self, address: str) -> None:
        """Remove minting authority. Unknown addresses are ignored."""
        addr = to_address(address)
        with self._lock:
            self._minters.discard(addr)
        logger.info("Revoked %s from %s", MINTER_ROLE, addr)

    def is_authorized_minter(self, address: str) -> bool:
        try:
            addr = to_address(address)
        except ValueError:
            return False
        with self._lock:
            return addr in self._minters

    def minters(self) -> List[str]:
        with self._lock:
            return sorted(self._minters)


__all__ = [
    "MINTER_ROLE",
    "AuthorizationOracle",
    "InMemoryRoleRegistry",
]
