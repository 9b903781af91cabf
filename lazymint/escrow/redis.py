"""Redis-backed escrow store.

Each issuer balance is an integer string at key ``{prefix}:balance:{address}``.
Mutations use single atomic Redis commands or a Lua script, so credits and
withdrawals for the same address cannot lose updates even when several ledger
processes share one Redis.

Design Notes:
- Redis integers are signed 64-bit; amounts above that range are rejected.
- Draining uses GETDEL (Redis >= 6.2).
- total() walks keys with SCAN and is bounded by max_scan.
"""

from __future__ import annotations

import logging
from typing import Optional

import redis.asyncio as redis

from ..voucher.types import to_address
from .store import EscrowStore, _check_amount

logger = logging.getLogger(__name__)

REDIS_INT_MAX = 2 ** 63 - 1


class RedisEscrowStore(EscrowStore):

    # Refuses to go negative; returns -1 when the balance is too small.
    _LUA_DEBIT = """
    local current = tonumber(redis.call('GET', KEYS[1]) or '0')
    local amount = tonumber(ARGV[1])
    if amount > current then
        return -1
    end
    return redis.call('DECRBY', KEYS[1], amount)
    """

    def __init__(
        self,
        url: str = "redis://localhost:6379/0",
        prefix: str = "lazymint:escrow",
        scan_page_size: int = 500,
        max_scan: int = 5000,
    ):
        self.url = url
        self.prefix = prefix.rstrip(":")
        self.scan_page_size = scan_page_size
        self.max_scan = max_scan
        self._client: Optional[redis.Redis] = None
        self._debit_script = None

    async def _get_client(self) -> redis.Redis:
        if self._client is None:
            self._client = redis.from_url(self.url, decode_responses=True)
        return self._client

    def _balance_key(self, address: str) -> str:
        return f"{self.prefix}:balance:{to_address(address)}"

    async def balance(self, address: str) -> int:
        client = await self._get_client()
        raw = await client.get(self._balance_key(address))
        return int(raw) if raw else 0

    async def credit(self, address: str, amount: int) -> int:
        _check_amount(amount)
        if amount > REDIS_INT_MAX:
            raise ValueError("amount exceeds redis integer range")
        client = await self._get_client()
        new_balance = await client.incrby(self._balance_key(address), amount)
        logger.debug("Credited %s to %s (balance %s)", amount, address, new_balance)
        return int(new_balance)

    async def debit(self, address: str, amount: int) -> int:
        _check_amount(amount)
        client = await self._get_client()
        if self._debit_script is None:
            self._debit_script = client.register_script(self._LUA_DEBIT)
        result = int(await self._debit_script(keys=[self._balance_key(address)], args=[amount]))
        if result < 0:
            raise ValueError(f"debit of {amount} exceeds escrow balance for {address}")
        return result

    async def drain(self, address: str) -> int:
        client = await self._get_client()
        raw = await client.getdel(self._balance_key(address))
        return int(raw) if raw else 0

    async def total(self) -> int:
        client = await self._get_client()
        pattern = f"{self.prefix}:balance:*"
        cursor = 0
        seen = 0
        total = 0
        while True:
            cursor, keys = await client.scan(cursor=cursor, match=pattern, count=self.scan_page_size)
            if keys:
                values = await client.mget(keys)
                total += sum(int(v) for v in values if v)
                seen += len(keys)
            if cursor == 0 or seen >= self.max_scan:
                break
        return total

    async def clear(self) -> int:
        client = await self._get_client()
        # Only keys under our prefix
        pattern = f"{self.prefix}:balance:*"
        cursor = 0
        deleted = 0
        while True:
            cursor, keys = await client.scan(cursor=cursor, match=pattern, count=self.scan_page_size)
            if keys:
                deleted += await client.delete(*keys)
            if cursor == 0:
                break
        return deleted

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            self._debit_script = None
