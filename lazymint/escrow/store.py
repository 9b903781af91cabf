"""
Escrow balance storage.

Balances are created lazily (implicit zero), credited by redemption and
drained by withdrawal. Every mutation for a given address is atomic with
respect to other mutations of that address.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Dict

from ..voucher.types import to_address

logger = logging.getLogger(__name__)


class EscrowStore(ABC):
    """Abstract base class for escrow balance storage."""

    @abstractmethod
    async def balance(self, address: str) -> int:
        """Return the current balance (0 if never credited)."""
        pass

    @abstractmethod
    async def credit(self, address: str, amount: int) -> int:
        """Add amount and return the new balance."""
        pass

    @abstractmethod
    async def debit(self, address: str, amount: int) -> int:
        """Subtract amount and return the new balance. Never goes below zero."""
        pass

    @abstractmethod
    async def drain(self, address: str) -> int:
        """Atomically read the balance, reset it to zero and return the old value."""
        pass

    @abstractmethod
    async def total(self) -> int:
        """Sum of all balances."""
        pass


def _check_amount(amount: int) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise TypeError("amount must be an integer")
    if amount < 0:
        raise ValueError("amount must be non-negative")


class MemoryEscrowStore(EscrowStore):
    """In-memory escrow balances guarded by an asyncio lock."""

    def __init__(self):
        self._lock = asyncio.Lock()
        self._balances: Dict[str, int] = {}

    async def balance(self, address: str) -> int:
        addr = to_address(address)
        async with self._lock:
            return self._balances.get(addr, 0)

    async def credit(self, address: str, amount: int) -> int:
        _check_amount(amount)
        addr = to_address(address)
        async with self._lock:
            new_balance = self._balances.get(addr, 0) + amount
            self._balances[addr] = new_balance
        return new_balance

    async def debit(self, address: str, amount: int) -> int:
        _check_amount(amount)
        addr = to_address(address)
        async with self._lock:
            current = self._balances.get(addr, 0)
            if amount > current:
                raise ValueError(f"debit of {amount} exceeds escrow balance {current}")
            self._balances[addr] = current - amount
            return current - amount

    async def drain(self, address: str) -> int:
        addr = to_address(address)
        async with self._lock:
            amount = self._balances.get(addr, 0)
            self._balances[addr] = 0
        return amount

    async def total(self) -> int:
        async with self._lock:
            return sum(self._balances.values())


def create_memory_store() -> MemoryEscrowStore:
    return MemoryEscrowStore()
