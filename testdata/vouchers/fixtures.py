"""
Cross-implementation test fixtures for voucher signing.

This script generates the typed-data payload, digest and signature for a
fixed voucher, domain and key, so other EIP-712 implementations can check
they produce the same bytes.
"""

import json
import os
import sys
import time

# Add parent directories to path so we can import lazymint
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from lazymint.voucher import IssuerKey, Voucher, VoucherDomain, codec, sign_voucher

# Well-known local development key, never holds value
FIXTURE_PRIVATE_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
FIXTURE_CONTRACT = "0x5FbDB2315678afecb367f032d93F642f64180aa3"


def fixture_voucher() -> Voucher:
    """Return a deterministic Voucher for fixture generation."""
    return Voucher(
        asset_id=1,
        min_price=10 ** 18,
        metadata_uri="ipfs://bafybeigdyrzt5sfp7udm7hu76uh7y26nf3efuylqabf3oclgtqy55fbzdi",
    )


def fixture_domain() -> VoucherDomain:
    return VoucherDomain(chain_id=31337, verifying_contract=FIXTURE_CONTRACT)


def main():
    """Generate JSON artifacts for cross-implementation testing."""
    voucher = fixture_voucher()
    domain = fixture_domain()
    key = IssuerKey.from_private_key(FIXTURE_PRIVATE_KEY)

    voucher_digest = "0x" + codec.digest(voucher, domain).hex()
    signed = sign_voucher(voucher, domain, key.private_key)

    out_dir = os.path.dirname(os.path.abspath(__file__))

    typed_data_file = os.path.join(out_dir, "typed_data.json")
    with open(typed_data_file, 'w') as f:
        json.dump(codec.typed_data(voucher, domain), f, indent=2, sort_keys=True)

    digest_file = os.path.join(out_dir, "digest.txt")
    with open(digest_file, 'w') as f:
        f.write(voucher_digest)

    summary = {
        "signer": key.address,
        "domain": domain.to_dict(),
        "signed_voucher": signed.to_dict(),
        "digest": voucher_digest,
        "generated_at": int(time.time()),
        "python_version": sys.version.split()[0],
    }

    summary_file = os.path.join(out_dir, "summary.json")
    with open(summary_file, 'w') as f:
        json.dump(summary, f, indent=2, sort_keys=True)

    print(f"✅ Generated voucher fixtures:")
    print(f"   📄 Typed data: {typed_data_file}")
    print(f"   🔍 Digest: {digest_file}")
    print(f"   📊 Summary: {summary_file}")
    print(f"   🎯 Digest: {voucher_digest}")
    print(f"   ✍️  Signer: {key.address}")


if __name__ == "__main__":
    main()
