"""
Error types for lazymint.

Every caller-facing failure carries a stable ``reason`` string that is exposed
verbatim, so clients can match on it (``exc.reason == "AlreadyRedeemed"``)
instead of parsing messages.
"""

from typing import Any, Dict, Optional


class LazyMintError(Exception):
    """Base class for all lazymint errors."""

    reason: str = "LazyMintError"

    def __init__(self, message: str = "", details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        text = f"{self.reason}: {message}" if message else self.reason
        super().__init__(text)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "reason": self.reason,
            "message": self.message,
            "details": self.details,
        }


class InvalidVoucher(LazyMintError, ValueError):
    """Voucher fields failed input validation (negative price, bad id, ...)."""
    reason = "InvalidVoucher"


class InvalidSignature(LazyMintError):
    reason = "InvalidSignature"


class MalformedSignature(InvalidSignature):
    """Signature bytes are not a structurally valid recoverable signature."""


class UnauthorizedSigner(LazyMintError):
    reason = "UnauthorizedSigner"


class InsufficientPayment(LazyMintError):
    reason = "InsufficientPayment"


class AlreadyRedeemed(LazyMintError):
    reason = "AlreadyRedeemed"


class NothingToWithdraw(LazyMintError):
    reason = "NothingToWithdraw"


# Collaborator errors (asset registry / funds). These propagate unchanged
# except AssetAlreadyExists, which redemption reports as AlreadyRedeemed.

class RegistryError(LazyMintError):
    reason = "RegistryError"


class AssetAlreadyExists(RegistryError):
    reason = "AssetAlreadyExists"


class UnknownAsset(RegistryError):
    reason = "UnknownAsset"


class NotAssetOwner(RegistryError):
    reason = "NotAssetOwner"


class InsufficientFunds(LazyMintError):
    reason = "InsufficientFunds"


__all__ = [
    "LazyMintError",
    "InvalidVoucher",
    "InvalidSignature",
    "MalformedSignature",
    "UnauthorizedSigner",
    "InsufficientPayment",
    "AlreadyRedeemed",
    "NothingToWithdraw",
    "RegistryError",
    "AssetAlreadyExists",
    "UnknownAsset",
    "NotAssetOwner",
    "InsufficientFunds",
]
