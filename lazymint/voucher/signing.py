"""
Voucher signing and signer recovery.

Recovery is deliberately policy-free: any well-formed signature recovers to
some address. Whether that address may mint is answered separately by an
AuthorizationOracle at redemption time.
"""

import logging
from dataclasses import dataclass
from typing import Union

from eth_account import Account
from eth_account.messages import SignableMessage

from ..errors import MalformedSignature
from .codec import encode
from .types import SignedVoucher, Voucher, VoucherDomain, signature_bytes, to_address

logger = logging.getLogger(__name__)

SIGNATURE_LENGTH = 65


@dataclass(frozen=True)
class IssuerKey:
    """An issuer's secp256k1 signing key and the address it controls."""
    address: str
    private_key: bytes

    @classmethod
    def from_private_key(cls, private_key: Union[str, bytes]) -> "IssuerKey":
        account = Account.from_key(private_key)
        return cls(address=account.address, private_key=bytes(account.key))

    def __repr__(self) -> str:
        return f"IssuerKey(address={self.address!r})"


def new_issuer_key() -> IssuerKey:
    """Generate a fresh random issuer key."""
    account = Account.create()
    return IssuerKey(address=account.address, private_key=bytes(account.key))


def sign(message: SignableMessage, private_key: Union[str, bytes]) -> bytes:
    """Sign an encoded voucher message. Off-ledger use only."""
    signed = Account.sign_message(message, private_key=private_key)
    return bytes(signed.signature)


def recover_signer(message: SignableMessage, signature: Union[bytes, str]) -> str:
    """Return the checksummed address that produced ``signature`` over ``message``.

    Raises:
        MalformedSignature: signature is not 65 bytes or cannot be recovered
    """
    try:
        raw = signature_bytes(signature)
    except ValueError as e:
        raise MalformedSignature(str(e)) from e
    if len(raw) != SIGNATURE_LENGTH:
        raise MalformedSignature(
            f"expected {SIGNATURE_LENGTH} bytes, got {len(raw)}",
            {"length": len(raw)},
        )
    try:
        return to_address(Account.recover_message(message, signature=raw))
    except Exception as e:
        raise MalformedSignature(f"signature recovery failed: {e}") from e


def sign_voucher(voucher: Voucher, domain: VoucherDomain, private_key: Union[str, bytes]) -> SignedVoucher:
    return SignedVoucher(voucher=voucher, signature=sign(encode(voucher, domain), private_key))


def recover_voucher_signer(signed: SignedVoucher, domain: VoucherDomain) -> str:
    return recover_signer(encode(signed.voucher, domain), signed.signature)


class LazyMinter:
    """
    Issuer-side helper that produces signed vouchers for one ledger.

    Usage:
        minter = LazyMinter(ledger.domain, issuer_key)
        signed = minter.create_voucher(1, "ipfs://...", min_price=10**18)
        payload = signed.to_dict()  # hand to the redeemer out-of-band
    """

    def __init__(self, domain: VoucherDomain, key: IssuerKey):
        if key is None:
            raise ValueError("nil issuer key")
        self.domain = domain
        self.key = key

    @property
    def address(self) -> str:
        return self.key.address

    def create_voucher(self, asset_id: int, metadata_uri: str, min_price: int = 0) -> SignedVoucher:
        voucher = Voucher(asset_id=asset_id, min_price=min_price, metadata_uri=metadata_uri)
        signed = sign_voucher(voucher, self.domain, self.key.private_key)
        logger.debug("Signed voucher for asset %s by %s", asset_id, self.key.address)
        return signed


__all__ = [
    "SIGNATURE_LENGTH",
    "IssuerKey",
    "new_issuer_key",
    "sign",
    "recover_signer",
    "sign_voucher",
    "recover_voucher_signer",
    "LazyMinter",
]
