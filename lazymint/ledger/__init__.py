"""
Ledger module initialization
"""

from .service import LedgerConfig, RedemptionLedger, create_ledger
from .unit_of_work import UnitOfWork

__all__ = [
    "LedgerConfig",
    "RedemptionLedger",
    "create_ledger",
    "UnitOfWork",
]
