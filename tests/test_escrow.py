import pytest

from lazymint.errors import InsufficientFunds, NothingToWithdraw
from lazymint.escrow import BalanceBook, MemoryEscrowStore
from lazymint.voucher import LazyMinter, new_issuer_key

from .helpers import ETH, METADATA_URI

pytestmark = pytest.mark.asyncio


async def test_payment_moves_to_ledger_and_is_withdrawable(ledger, lazy_minter, minter_key, funded_redeemer):
    signed = lazy_minter.create_voucher(1, METADATA_URI, min_price=ETH)

    await ledger.redeem(funded_redeemer, signed, payment=ETH)

    assert await ledger.funds.balance_of(funded_redeemer) == 9 * ETH
    assert await ledger.funds.balance_of(ledger.address) == ETH
    assert await ledger.available_to_withdraw(minter_key.address) == ETH

    paid = await ledger.withdraw(minter_key.address)
    assert paid == ETH
    assert await ledger.funds.balance_of(minter_key.address) == ETH
    assert await ledger.funds.balance_of(ledger.address) == 0
    assert await ledger.available_to_withdraw(minter_key.address) == 0


async def test_escrow_accumulates_across_redemptions(ledger, lazy_minter, minter_key, funded_redeemer):
    payments = [ETH, 2 * ETH, 12345, 0]
    for asset_id, payment in enumerate(payments, start=1):
        await ledger.redeem(funded_redeemer, lazy_minter.create_voucher(asset_id, METADATA_URI), payment=payment)

    assert await ledger.available_to_withdraw(minter_key.address) == sum(payments)
    assert await ledger.withdraw(minter_key.address) == sum(payments)
    assert await ledger.available_to_withdraw(minter_key.address) == 0


async def test_nothing_to_withdraw(ledger, minter_key):
    with pytest.raises(NothingToWithdraw) as exc:
        await ledger.withdraw(minter_key.address)
    assert exc.value.reason == "NothingToWithdraw"


async def test_second_withdraw_fails(ledger, lazy_minter, minter_key, funded_redeemer):
    await ledger.redeem(funded_redeemer, lazy_minter.create_voucher(1, METADATA_URI), payment=ETH)
    await ledger.withdraw(minter_key.address)
    with pytest.raises(NothingToWithdraw):
        await ledger.withdraw(minter_key.address)
    assert await ledger.funds.balance_of(minter_key.address) == ETH


async def test_only_owner_balance_is_paid(ledger, lazy_minter, minter_key, funded_redeemer):
    await ledger.redeem(funded_redeemer, lazy_minter.create_voucher(1, METADATA_URI), payment=ETH)
    with pytest.raises(NothingToWithdraw):
        await ledger.withdraw(funded_redeemer)
    assert await ledger.available_to_withdraw(minter_key.address) == ETH


async def test_escrow_is_per_issuer(ledger, lazy_minter, minter_key, funded_redeemer):
    second_key = new_issuer_key()
    ledger.oracle.grant_minter(second_key.address)
    second = LazyMinter(ledger.domain, second_key)

    await ledger.redeem(funded_redeemer, lazy_minter.create_voucher(1, METADATA_URI), payment=ETH)
    await ledger.redeem(funded_redeemer, second.create_voucher(2, METADATA_URI), payment=2 * ETH)

    assert await ledger.available_to_withdraw(minter_key.address) == ETH
    assert await ledger.available_to_withdraw(second_key.address) == 2 * ETH
    assert await ledger.escrow.total() == 3 * ETH


async def test_value_is_conserved(ledger, lazy_minter, minter_key, funded_redeemer):
    supply = await ledger.funds.total_supply()
    await ledger.redeem(funded_redeemer, lazy_minter.create_voucher(1, METADATA_URI), payment=ETH)
    await ledger.redeem(funded_redeemer, lazy_minter.create_voucher(2, METADATA_URI), payment=ETH)
    assert await ledger.escrow.total() <= await ledger.funds.balance_of(ledger.address)
    await ledger.withdraw(minter_key.address)
    assert await ledger.funds.total_supply() == supply


class TestMemoryEscrowStore:

    async def test_implicit_zero(self):
        store = MemoryEscrowStore()
        assert await store.balance(new_issuer_key().address) == 0

    async def test_credit_debit_drain(self):
        store = MemoryEscrowStore()
        addr = new_issuer_key().address
        assert await store.credit(addr, 10) == 10
        assert await store.credit(addr.lower(), 5) == 15
        assert await store.debit(addr, 3) == 12
        assert await store.drain(addr) == 12
        assert await store.balance(addr) == 0

    async def test_debit_cannot_go_negative(self):
        store = MemoryEscrowStore()
        addr = new_issuer_key().address
        await store.credit(addr, 1)
        with pytest.raises(ValueError):
            await store.debit(addr, 2)
        assert await store.balance(addr) == 1

    async def test_rejects_negative_amounts(self):
        store = MemoryEscrowStore()
        with pytest.raises(ValueError):
            await store.credit(new_issuer_key().address, -1)


class TestBalanceBook:

    async def test_transfer(self):
        book = BalanceBook()
        a, b = new_issuer_key().address, new_issuer_key().address
        await book.deposit(a, 100)
        await book.transfer(a, b, 40)
        assert await book.balance_of(a) == 60
        assert await book.balance_of(b) == 40

    async def test_insufficient_funds(self):
        book = BalanceBook()
        a, b = new_issuer_key().address, new_issuer_key().address
        await book.deposit(a, 10)
        with pytest.raises(InsufficientFunds):
            await book.transfer(a, b, 11)
        assert await book.balance_of(a) == 10
        assert await book.balance_of(b) == 0
