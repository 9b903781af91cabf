"""
Canonical voucher encoding.

Vouchers are encoded as EIP-712 typed data. The domain (name, version,
chain id, verifying contract) is hashed into every digest, so a voucher signed
for one ledger instance or schema version never verifies on another.
"""

from typing import Any, Dict

from eth_account.messages import SignableMessage, encode_typed_data
from web3 import Web3

from .types import Voucher, VoucherDomain

PRIMARY_TYPE = "NFTVoucher"

VOUCHER_TYPES = {
    "EIP712Domain": [
        {"name": "name", "type": "string"},
        {"name": "version", "type": "string"},
        {"name": "chainId", "type": "uint256"},
        {"name": "verifyingContract", "type": "address"},
    ],
    PRIMARY_TYPE: [
        {"name": "tokenId", "type": "uint256"},
        {"name": "minPrice", "type": "uint256"},
        {"name": "uri", "type": "string"},
    ],
}


def typed_data(voucher: Voucher, domain: VoucherDomain) -> Dict[str, Any]:
    """Return the full EIP-712 payload for a voucher."""
    return {
        "types": VOUCHER_TYPES,
        "primaryType": PRIMARY_TYPE,
        "domain": domain.to_dict(),
        "message": {
            "tokenId": voucher.asset_id,
            "minPrice": voucher.min_price,
            "uri": voucher.metadata_uri,
        },
    }


def encode(voucher: Voucher, domain: VoucherDomain) -> SignableMessage:
    """Encode a voucher into the structured message that issuers sign."""
    return encode_typed_data(full_message=typed_data(voucher, domain))


def message_digest(message: SignableMessage) -> bytes:
    """keccak256(0x19 || version || domainSeparator || hashStruct)."""
    return bytes(Web3.keccak(b"\x19" + message.version + message.header + message.body))


def digest(voucher: Voucher, domain: VoucherDomain) -> bytes:
    """Return the 32-byte digest of a voucher under the given domain."""
    return message_digest(encode(voucher, domain))


__all__ = [
    "PRIMARY_TYPE",
    "VOUCHER_TYPES",
    "typed_data",
    "encode",
    "message_digest",
    "digest",
]
