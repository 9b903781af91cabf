"""
Redemption ledger for lazymint.

This module provides the ledger that turns signed vouchers into owned assets.
It coordinates the codec, signer recovery, the authorization oracle, the
asset registry, the account book and escrow storage, and runs every
redemption and withdrawal as one serialized, all-or-nothing unit of work.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from eth_account import Account

from ..authorization.roles import AuthorizationOracle, InMemoryRoleRegistry
from ..errors import (
    AlreadyRedeemed,
    AssetAlreadyExists,
    InsufficientPayment,
    InvalidSignature,
    LazyMintError,
    MalformedSignature,
    NothingToWithdraw,
    UnauthorizedSigner,
)
from ..escrow.balances import BalanceBook
from ..escrow.store import EscrowStore, MemoryEscrowStore
from ..events import EventLog, OwnershipChanged
from ..monitoring.metrics_exporter import MetricsRegistry, get_registry
from ..registry.store import AssetRegistry, InMemoryAssetRegistry
from ..voucher import codec
from ..voucher.signing import recover_signer
from ..voucher.types import (
    DEFAULT_DOMAIN_NAME,
    DEFAULT_DOMAIN_VERSION,
    SignedVoucher,
    VoucherDomain,
    to_address,
)
from .unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


@dataclass
class LedgerConfig:
    """Configuration for a redemption ledger instance."""
    chain_id: int = 31337
    address: Optional[str] = None  # generated when omitted
    domain_name: str = DEFAULT_DOMAIN_NAME
    domain_version: str = DEFAULT_DOMAIN_VERSION
    enable_metrics: bool = True

    def to_domain(self, address: str) -> VoucherDomain:
        return VoucherDomain(
            chain_id=self.chain_id,
            verifying_contract=address,
            name=self.domain_name,
            version=self.domain_version,
        )


class RedemptionLedger:
    """
    Shared ledger that honors each voucher at most once and escrows payments.

    State per asset id is Unminted (no registry record) or Minted (terminal).
    All calls that mutate state hold one asyncio lock for their whole
    duration, so no two redemptions or withdrawals interleave.
    """

    def __init__(
        self,
        config: Optional[LedgerConfig] = None,
        *,
        registry: Optional[AssetRegistry] = None,
        oracle: Optional[AuthorizationOracle] = None,
        escrow: Optional[EscrowStore] = None,
        funds: Optional[BalanceBook] = None,
        events: Optional[EventLog] = None,
    ):
        self.config = config or LedgerConfig()
        self.address = to_address(self.config.address or Account.create().address)
        self.domain = self.config.to_domain(self.address)
        self.registry = registry or InMemoryAssetRegistry()
        self.oracle = oracle if oracle is not None else InMemoryRoleRegistry()
        self.escrow = escrow or MemoryEscrowStore()
        self.funds = funds or BalanceBook()
        self.events = events or EventLog()
        self._metrics: Optional[MetricsRegistry] = get_registry() if self.config.enable_metrics else None
        self._lock = asyncio.Lock()
        self._redeemed = 0

    @property
    def chain_id(self) -> int:
        return self.domain.chain_id

    def subscribe(self, listener: Callable[[OwnershipChanged], None]) -> None:
        """Receive ownership-change notifications of committed redemptions."""
        self.events.subscribe(listener)

    async def redeem(self, caller: str, signed: SignedVoucher, payment: int = 0) -> int:
        """
        Redeem a signed voucher, minting its asset to the caller.

        Args:
            caller: Redeemer address; receives the asset and pays ``payment``
            signed: Voucher plus issuer signature
            payment: Value attached to the call, fully escrowed for the signer

        Returns:
            The minted asset id

        Raises:
            InvalidSignature: signature is malformed
            UnauthorizedSigner: recovered signer lacks minting authority
            InsufficientPayment: payment below the voucher's min_price
            AlreadyRedeemed: asset id already exists
        """
        if isinstance(payment, bool) or not isinstance(payment, int) or payment < 0:
            raise ValueError("payment must be a non-negative integer")
        caller = to_address(caller)

        async with self._lock:
            try:
                asset_id, signer = await self._redeem_locked(caller, signed, payment)
            except LazyMintError as e:
                logger.warning("Redemption of asset %s rejected: %s", signed.voucher.asset_id, e)
                if self._metrics:
                    self._metrics.observe_failure(e.reason)
                raise
            self._redeemed += 1

        logger.info(
            "Redeemed asset %s: issuer=%s redeemer=%s payment=%s",
            asset_id, signer, caller, payment,
        )
        if self._metrics:
            self._metrics.observe_redemption(payment)
        return asset_id

    async def _redeem_locked(self, caller: str, signed: SignedVoucher, payment: int) -> Tuple[int, str]:
        voucher = signed.voucher
        message = codec.encode(voucher, self.domain)
        voucher_digest = codec.message_digest(message)

        try:
            signer = recover_signer(message, signed.signature)
        except MalformedSignature as e:
            raise InvalidSignature(e.message, {"digest": "0x" + voucher_digest.hex()}) from e

        if not self.oracle.is_authorized_minter(signer):
            raise UnauthorizedSigner(
                f"signature recovers to {signer}, which is not an authorized minter",
                {"signer": signer},
            )

        if payment < voucher.min_price:
            raise InsufficientPayment(
                "Insufficient funds to redeem",
                {"min_price": voucher.min_price, "payment": payment},
            )

        uow = UnitOfWork(label=f"redeem:{voucher.asset_id}")
        try:
            try:
                created = await self.registry.create(voucher.asset_id, signer, voucher.metadata_uri)
            except AssetAlreadyExists as e:
                raise AlreadyRedeemed(
                    f"asset {voucher.asset_id} already minted", {"asset_id": voucher.asset_id}
                ) from e
            uow.on_rollback("burn", lambda: self.registry.burn(voucher.asset_id))
            uow.stage(created)

            moved = await self.registry.transfer(voucher.asset_id, signer, caller)
            uow.on_rollback("transfer back", lambda: self._transfer_back(voucher.asset_id, caller, signer))
            uow.stage(moved)

            await self.funds.transfer(caller, self.address, payment)
            uow.on_rollback("refund", lambda: self.funds.transfer(self.address, caller, payment))

            await self.escrow.credit(signer, payment)
            uow.on_rollback("escrow debit", lambda: self._debit(signer, payment))
        except BaseException:
            if uow.pending:
                logger.error("Rolling back redemption of asset %s", voucher.asset_id)
            await uow.rollback()
            raise

        self.events.publish(uow.commit())
        return voucher.asset_id, signer

    async def _transfer_back(self, asset_id: int, holder: str, signer: str) -> None:
        await self.registry.transfer(asset_id, holder, signer)

    async def _debit(self, address: str, amount: int) -> None:
        await self.escrow.debit(address, amount)

    async def available_to_withdraw(self, address: str) -> int:
        """Escrowed amount the given issuer can withdraw."""
        return await self.escrow.balance(address)

    async def withdraw(self, caller: str) -> int:
        """
        Pay the caller their entire escrow balance.

        Returns:
            The amount paid

        Raises:
            NothingToWithdraw: caller's balance is zero
        """
        caller = to_address(caller)
        async with self._lock:
            amount = await self.escrow.drain(caller)
            if amount == 0:
                raise NothingToWithdraw(f"no escrow balance for {caller}", {"address": caller})
            try:
                await self.funds.transfer(self.address, caller, amount)
            except BaseException:
                logger.error("Withdrawal payout to %s failed, restoring escrow balance", caller)
                try:
                    await self.escrow.credit(caller, amount)
                except Exception:
                    logger.exception("Could not restore escrow balance of %s for %s", amount, caller)
                    raise
                raise

        logger.info("Withdrew %s from escrow to %s", amount, caller)
        if self._metrics:
            self._metrics.observe_withdrawal(amount)
        return amount

    async def owner_of(self, asset_id: int) -> str:
        return await self.registry.owner_of(asset_id)

    async def token_uri(self, asset_id: int) -> str:
        return await self.registry.token_uri(asset_id)

    async def is_redeemed(self, asset_id: int) -> bool:
        return await self.registry.exists(asset_id)

    def history(self) -> List[OwnershipChanged]:
        return self.events.history()

    async def get_ledger_stats(self) -> Dict[str, Any]:
        """Get ledger statistics."""
        return {
            "address": self.address,
            "chain_id": self.chain_id,
            "domain_name": self.domain.name,
            "domain_version": self.domain.version,
            "redeemed": self._redeemed,
            "escrow_total": await self.escrow.total(),
            "held_funds": await self.funds.balance_of(self.address),
        }


def create_ledger(minter: Optional[str] = None, config: Optional[LedgerConfig] = None, **kwargs) -> RedemptionLedger:
    """
    Factory function to create a ledger with in-memory collaborators.

    Args:
        minter: Address granted minting authority on the default role registry
        config: Ledger configuration
        **kwargs: Collaborator overrides (registry, oracle, escrow, funds, events)

    Returns:
        Configured redemption ledger
    """
    ledger = RedemptionLedger(config, **kwargs)
    if minter is not None:
        if not isinstance(ledger.oracle, InMemoryRoleRegistry):
            raise ValueError("minter can only be granted on an InMemoryRoleRegistry oracle")
        ledger.oracle.grant_minter(minter)
    return ledger
