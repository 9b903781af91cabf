"""
Core voucher types.

A voucher is the issuer's off-ledger commitment to mint one asset at a floor
price. It is immutable once signed; the signature travels next to it in a
SignedVoucher and is verified fresh on every redemption attempt.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, Union

from web3 import Web3

from ..errors import InvalidVoucher

UINT256_MAX = 2 ** 256 - 1
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

# EIP-712 schema tag. Changing either value invalidates every outstanding voucher.
DEFAULT_DOMAIN_NAME = "LazyNFT-Voucher"
DEFAULT_DOMAIN_VERSION = "1"


def to_address(value: str) -> str:
    """Normalize an address to its checksummed form."""
    try:
        return Web3.to_checksum_address(value)
    except (ValueError, TypeError) as e:
        raise ValueError(f"invalid address {value!r}: {e}") from e


def _check_uint256(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidVoucher(f"{name} must be an integer", {"field": name})
    if value < 0 or value > UINT256_MAX:
        raise InvalidVoucher(f"{name} out of uint256 range", {"field": name, "value": value})


@dataclass(frozen=True)
class Voucher:
    """Unsigned voucher content.

    asset_id identifies the asset to mint, min_price is the smallest accepted
    payment, metadata_uri becomes the asset's permanent metadata pointer.
    """
    asset_id: int
    min_price: int = 0
    metadata_uri: str = ""

    def __post_init__(self):
        _check_uint256("asset_id", self.asset_id)
        _check_uint256("min_price", self.min_price)
        if not isinstance(self.metadata_uri, str):
            raise InvalidVoucher("metadata_uri must be a string", {"field": "metadata_uri"})


@dataclass(frozen=True)
class VoucherDomain:
    """EIP-712 domain binding a voucher to one ledger instance and schema version."""
    chain_id: int
    verifying_contract: str
    name: str = DEFAULT_DOMAIN_NAME
    version: str = DEFAULT_DOMAIN_VERSION

    def __post_init__(self):
        object.__setattr__(self, "verifying_contract", to_address(self.verifying_contract))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "chainId": self.chain_id,
            "verifyingContract": self.verifying_contract,
        }


@dataclass(frozen=True)
class SignedVoucher:
    """A voucher plus the issuer's 65-byte signature (r || s || v)."""
    voucher: Voucher
    signature: bytes

    @property
    def asset_id(self) -> int:
        return self.voucher.asset_id

    def to_dict(self) -> Dict[str, Any]:
        """Wire representation handed to redeemers out-of-band."""
        return {
            "assetId": self.voucher.asset_id,
            "minPrice": self.voucher.min_price,
            "metadataURI": self.voucher.metadata_uri,
            "signature": "0x" + bytes(self.signature).hex(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SignedVoucher":
        try:
            voucher = Voucher(
                asset_id=data["assetId"],
                min_price=data.get("minPrice", 0),
                metadata_uri=data.get("metadataURI", ""),
            )
            signature = data["signature"]
        except KeyError as e:
            raise InvalidVoucher(f"missing field {e.args[0]}") from e
        return cls(voucher=voucher, signature=signature_bytes(signature))

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), sort_keys=True)

    @classmethod
    def from_json(cls, json_str: str) -> "SignedVoucher":
        return cls.from_dict(json.loads(json_str))


def signature_bytes(signature: Union[bytes, bytearray, str]) -> bytes:
    """Accept raw bytes or a hex string (with or without 0x) and return bytes.

    Length is not checked here; recovery rejects anything that is not 65 bytes.
    """
    if isinstance(signature, (bytes, bytearray)):
        return bytes(signature)
    if isinstance(signature, str):
        text = signature[2:] if signature.startswith(("0x", "0X")) else signature
        try:
            return bytes.fromhex(text)
        except ValueError as e:
            raise InvalidVoucher(f"signature is not valid hex: {e}") from e
    raise InvalidVoucher(f"unsupported signature type {type(signature).__name__}")
