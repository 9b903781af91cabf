import pytest

from lazymint.errors import InvalidVoucher
from lazymint.voucher import (
    UINT256_MAX,
    Voucher,
    VoucherDomain,
    digest,
    encode,
    message_digest,
    typed_data,
)

CONTRACT = "0x5FbDB2315678afecb367f032d93F642f64180aa3"


def make_domain(**overrides):
    base = dict(chain_id=31337, verifying_contract=CONTRACT)
    base.update(overrides)
    return VoucherDomain(**base)


class TestDigest:

    def test_determinism(self):
        voucher = Voucher(asset_id=1, min_price=5, metadata_uri="ipfs://a")
        domain = make_domain()
        d1 = digest(voucher, domain)
        d2 = digest(Voucher(asset_id=1, min_price=5, metadata_uri="ipfs://a"), make_domain())
        assert d1 == d2
        assert len(d1) == 32

    def test_matches_message_digest(self):
        voucher = Voucher(asset_id=7, metadata_uri="ipfs://x")
        domain = make_domain()
        assert digest(voucher, domain) == message_digest(encode(voucher, domain))

    @pytest.mark.parametrize("other", [
        Voucher(asset_id=2, min_price=5, metadata_uri="ipfs://a"),
        Voucher(asset_id=1, min_price=6, metadata_uri="ipfs://a"),
        Voucher(asset_id=1, min_price=5, metadata_uri="ipfs://b"),
    ])
    def test_field_changes_change_digest(self, other):
        base = Voucher(asset_id=1, min_price=5, metadata_uri="ipfs://a")
        assert digest(base, make_domain()) != digest(other, make_domain())

    @pytest.mark.parametrize("overrides", [
        {"chain_id": 1},
        {"verifying_contract": "0x0000000000000000000000000000000000000001"},
        {"version": "2"},
        {"name": "OtherVoucher"},
    ])
    def test_domain_separation(self, overrides):
        voucher = Voucher(asset_id=1, metadata_uri="ipfs://a")
        assert digest(voucher, make_domain()) != digest(voucher, make_domain(**overrides))


class TestTypedData:

    def test_structure(self):
        data = typed_data(Voucher(asset_id=3, min_price=9, metadata_uri="u"), make_domain())
        assert data["primaryType"] == "NFTVoucher"
        assert data["message"] == {"tokenId": 3, "minPrice": 9, "uri": "u"}
        assert data["domain"]["name"] == "LazyNFT-Voucher"
        assert data["domain"]["version"] == "1"
        assert data["domain"]["chainId"] == 31337
        assert data["domain"]["verifyingContract"] == CONTRACT

    def test_domain_address_is_checksummed(self):
        domain = make_domain(verifying_contract=CONTRACT.lower())
        assert domain.verifying_contract == CONTRACT


class TestVoucherValidation:

    def test_default_price_is_zero(self):
        assert Voucher(asset_id=1).min_price == 0

    @pytest.mark.parametrize("kwargs", [
        {"asset_id": -1},
        {"asset_id": UINT256_MAX + 1},
        {"asset_id": 1, "min_price": -1},
        {"asset_id": True},
        {"asset_id": "1"},
        {"asset_id": 1, "metadata_uri": None},
    ])
    def test_rejects_malformed(self, kwargs):
        with pytest.raises(InvalidVoucher):
            Voucher(**kwargs)

    def test_invalid_voucher_is_value_error(self):
        with pytest.raises(ValueError):
            Voucher(asset_id=1, min_price=-5)

    def test_invalid_domain_address(self):
        with pytest.raises(ValueError):
            make_domain(verifying_contract="not-an-address")
