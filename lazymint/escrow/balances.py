"""
External account balances.

Stands in for the platform's native value transfer: redeemers attach payment
from their account to the ledger's account, and withdrawals pay from the
ledger's account back out. Value is only ever moved, never created, except by
an explicit deposit().
"""

import asyncio
import logging
from typing import Dict

from ..errors import InsufficientFunds
from ..voucher.types import to_address
from .store import _check_amount

logger = logging.getLogger(__name__)


class BalanceBook:
    """In-memory account balances with atomic transfers."""

    def __init__(self):
        self._lock = asyncio.Lock()
        self._balances: Dict[str, int] = {}

    async def deposit(self, address: str, amount: int) -> int:
        """Fund an account from outside the system (faucet / test setup)."""
        _check_amount(amount)
        addr = to_address(address)
        async with self._lock:
            self._balances[addr] = self._balances.get(addr, 0) + amount
            return self._balances[addr]

    async def balance_of(self, address: str) -> int:
        addr = to_address(address)
        async with self._lock:
            return self._balances.get(addr, 0)

    async def transfer(self, from_address: str, to_address_: str, amount: int) -> None:
        _check_amount(amount)
        src = to_address(from_address)
        dst = to_address(to_address_)
        if amount == 0:
            return
        async with self._lock:
            available = self._balances.get(src, 0)
            if available < amount:
                raise InsufficientFunds(
                    f"{src} has {available}, needs {amount}",
                    {"address": src, "available": available, "required": amount},
                )
            self._balances[src] = available - amount
            self._balances[dst] = self._balances.get(dst, 0) + amount

    async def total_supply(self) -> int:
        async with self._lock:
            return sum(self._balances.values())
