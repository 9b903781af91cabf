"""
lazymint Python Package

Signed-voucher lazy minting: issuers sign vouchers off-ledger, redeemers turn
them into owned assets on a shared ledger that escrows payment for the issuer.
"""

__version__ = "0.1.0"

from .errors import (
    LazyMintError,
    InvalidVoucher,
    InvalidSignature,
    MalformedSignature,
    UnauthorizedSigner,
    InsufficientPayment,
    AlreadyRedeemed,
    NothingToWithdraw,
)
from .voucher import (
    Voucher,
    VoucherDomain,
    SignedVoucher,
    IssuerKey,
    LazyMinter,
    new_issuer_key,
)
from .authorization import AuthorizationOracle, InMemoryRoleRegistry
from .events import OwnershipChanged, EventLog
from .ledger import LedgerConfig, RedemptionLedger, create_ledger
from .monitoring import snapshot_metrics

__all__ = [
    "LazyMintError",
    "InvalidVoucher",
    "InvalidSignature",
    "MalformedSignature",
    "UnauthorizedSigner",
    "InsufficientPayment",
    "AlreadyRedeemed",
    "NothingToWithdraw",
    "Voucher",
    "VoucherDomain",
    "SignedVoucher",
    "IssuerKey",
    "LazyMinter",
    "new_issuer_key",
    "AuthorizationOracle",
    "InMemoryRoleRegistry",
    "OwnershipChanged",
    "EventLog",
    "LedgerConfig",
    "RedemptionLedger",
    "create_ledger",
    "snapshot_metrics",
]
