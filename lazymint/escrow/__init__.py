"""
Escrow package for lazymint.

Provides per-issuer escrow balance storage (in-memory and Redis-backed) and
the external account book that payments move through.
"""

from .store import EscrowStore, MemoryEscrowStore, create_memory_store
from .balances import BalanceBook

# Optional Redis-backed store
try:  # pragma: no cover
    from .redis import RedisEscrowStore  # type: ignore
except ImportError:  # pragma: no cover
    RedisEscrowStore = None  # type: ignore

__all__ = [
    "EscrowStore",
    "MemoryEscrowStore",
    "create_memory_store",
    "BalanceBook",
    "RedisEscrowStore",
]
