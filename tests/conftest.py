import pytest

from lazymint.ledger import LedgerConfig, create_ledger
from lazymint.voucher import LazyMinter, new_issuer_key

from .helpers import ETH


@pytest.fixture
def minter_key():
    return new_issuer_key()


@pytest.fixture
def redeemer():
    return new_issuer_key().address


@pytest.fixture
def ledger(minter_key):
    return create_ledger(minter=minter_key.address, config=LedgerConfig(chain_id=31337))


@pytest.fixture
def lazy_minter(ledger, minter_key):
    return LazyMinter(ledger.domain, minter_key)


@pytest.fixture
async def funded_redeemer(ledger, redeemer):
    await ledger.funds.deposit(redeemer, 10 * ETH)
    return redeemer
