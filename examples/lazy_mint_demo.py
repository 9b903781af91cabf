"""
Example: Lazy Minting with Signed Vouchers

This example walks through a full redemption cycle:
- Granting an issuer minting authority
- Signing vouchers off-ledger and shipping them as JSON
- Redeeming a voucher with payment
- Rejections for replay, underpayment and forged vouchers
- Withdrawing escrowed payments
"""

import asyncio
import logging
import os
import sys

# Add parent directory to path so we can import lazymint
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from lazymint import (
    LazyMinter,
    LazyMintError,
    LedgerConfig,
    SignedVoucher,
    create_ledger,
    new_issuer_key,
    snapshot_metrics,
)

ETH = 10 ** 18


async def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    print("🎨 Lazy Minting Demo")
    print("=" * 50)

    print("\n1. Creating ledger and issuer...")
    artist = new_issuer_key()
    collector = new_issuer_key().address
    ledger = create_ledger(minter=artist.address, config=LedgerConfig(chain_id=31337))
    await ledger.funds.deposit(collector, 5 * ETH)
    print(f"   Ledger: {ledger.address} (chain {ledger.chain_id})")
    print(f"   Artist: {artist.address}")
    print(f"   Collector: {collector}")

    print("\n2. Signing vouchers off-ledger...")
    minter = LazyMinter(ledger.domain, artist)
    wire = minter.create_voucher(1, "ipfs://bafy-demo-1", min_price=ETH).to_json()
    print(f"   ✓ Voucher 1 JSON: {wire[:72]}...")
    cheap = minter.create_voucher(2, "ipfs://bafy-demo-2", min_price=2 * ETH)

    print("\n3. Redeeming voucher 1...")
    ledger.subscribe(lambda e: print(f"   → OwnershipChanged {e.from_address[:10]}.. → {e.to_address[:10]}.. asset {e.asset_id}"))
    await ledger.redeem(collector, SignedVoucher.from_json(wire), payment=ETH)
    print(f"   ✓ Owner of asset 1: {await ledger.owner_of(1)}")

    print("\n4. Trying invalid redemptions...")
    forger = LazyMinter(ledger.domain, new_issuer_key())
    attempts = [
        ("replay voucher 1", ledger.redeem(collector, SignedVoucher.from_json(wire), payment=ETH)),
        ("underpay voucher 2", ledger.redeem(collector, cheap, payment=ETH)),
        ("forged voucher 3", ledger.redeem(collector, forger.create_voucher(3, "ipfs://fake"))),
    ]
    for label, attempt in attempts:
        try:
            await attempt
            print(f"   ❌ {label} should have failed")
        except LazyMintError as e:
            print(f"   ✅ {label} rejected: {e}")

    print("\n5. Withdrawing escrow...")
    print(f"   Available: {await ledger.available_to_withdraw(artist.address)}")
    paid = await ledger.withdraw(artist.address)
    print(f"   ✓ Paid {paid} to artist, balance now {await ledger.funds.balance_of(artist.address)}")

    print("\n6. Ledger stats:")
    for name, value in (await ledger.get_ledger_stats()).items():
        print(f"   {name}: {value}")

    print("\n7. Metrics:")
    for name, value in snapshot_metrics().items():
        print(f"   {name}: {value}")

    print("\n🎉 Lazy minting demo completed successfully!")


if __name__ == "__main__":
    asyncio.run(main())
