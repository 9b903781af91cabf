"""
Package voucher provides the off-ledger half of lazy minting: the voucher
types, their canonical EIP-712 encoding, and secp256k1 signing with signer
recovery.
"""

from .types import (
    UINT256_MAX,
    ZERO_ADDRESS,
    DEFAULT_DOMAIN_NAME,
    DEFAULT_DOMAIN_VERSION,
    Voucher,
    VoucherDomain,
    SignedVoucher,
    signature_bytes,
    to_address,
)

from .codec import (
    typed_data,
    encode,
    message_digest,
    digest,
)

from .signing import (
    SIGNATURE_LENGTH,
    IssuerKey,
    new_issuer_key,
    sign,
    recover_signer,
    sign_voucher,
    recover_voucher_signer,
    LazyMinter,
)

__all__ = [
    'UINT256_MAX',
    'ZERO_ADDRESS',
    'DEFAULT_DOMAIN_NAME',
    'DEFAULT_DOMAIN_VERSION',
    'Voucher',
    'VoucherDomain',
    'SignedVoucher',
    'signature_bytes',
    'to_address',
    'typed_data',
    'encode',
    'message_digest',
    'digest',
    'SIGNATURE_LENGTH',
    'IssuerKey',
    'new_issuer_key',
    'sign',
    'recover_signer',
    'sign_voucher',
    'recover_voucher_signer',
    'LazyMinter',
]
