"""
Asset registry interface and in-memory implementation.

The registry owns asset records. Its uniqueness check on create() is the
authoritative replay guard for redemption: an asset id can be created once.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Optional

from ..errors import AssetAlreadyExists, NotAssetOwner, UnknownAsset
from ..events import OwnershipChanged
from ..voucher.types import ZERO_ADDRESS, to_address

logger = logging.getLogger(__name__)


@dataclass
class AssetRecord:
    asset_id: int
    owner: str
    metadata_uri: str = ""


class AssetRegistry(ABC):
    """Abstract asset registry.

    create() and transfer() return the ownership-change notification they
    produced; the caller decides when it becomes visible.
    """

    @abstractmethod
    async def exists(self, asset_id: int) -> bool:
        """Check whether an asset record exists."""
        pass

    @abstractmethod
    async def create(self, asset_id: int, initial_owner: str, metadata_uri: str) -> OwnershipChanged:
        """Create an asset record. Raises AssetAlreadyExists if present."""
        pass

    @abstractmethod
    async def transfer(self, asset_id: int, from_address: str, to_address: str) -> OwnershipChanged:
        """Move ownership. Raises UnknownAsset or NotAssetOwner."""
        pass

    @abstractmethod
    async def burn(self, asset_id: int) -> None:
        """Delete an asset record; used to compensate an aborted create."""
        pass

    @abstractmethod
    async def owner_of(self, asset_id: int) -> str:
        pass

    @abstractmethod
    async def token_uri(self, asset_id: int) -> str:
        pass


class InMemoryAssetRegistry(AssetRegistry):
    """Dictionary-backed registry guarded by an asyncio lock."""

    def __init__(self):
        self._lock = asyncio.Lock()
        self._assets: Dict[int, AssetRecord] = {}

    async def exists(self, asset_id: int) -> bool:
        async with self._lock:
            return asset_id in self._assets

    async def create(self, asset_id: int, initial_owner: str, metadata_uri: str) -> OwnershipChanged:
        owner = to_address(initial_owner)
        async with self._lock:
            if asset_id in self._assets:
                raise AssetAlreadyExists(f"asset {asset_id} already minted", {"asset_id": asset_id})
            self._assets[asset_id] = AssetRecord(asset_id=asset_id, owner=owner, metadata_uri=metadata_uri)
        logger.debug("Created asset %s for %s", asset_id, owner)
        return OwnershipChanged(from_address=ZERO_ADDRESS, to_address=owner, asset_id=asset_id)

    async def transfer(self, asset_id: int, from_address: str, to_address_: str) -> OwnershipChanged:
        src = to_address(from_address)
        dst = to_address(to_address_)
        async with self._lock:
            record = self._assets.get(asset_id)
            if record is None:
                raise UnknownAsset(f"asset {asset_id} does not exist", {"asset_id": asset_id})
            if record.owner != src:
                raise NotAssetOwner(
                    f"{src} does not own asset {asset_id}",
                    {"asset_id": asset_id, "owner": record.owner},
                )
            record.owner = dst
        return OwnershipChanged(from_address=src, to_address=dst, asset_id=asset_id)

    async def burn(self, asset_id: int) -> None:
        async with self._lock:
            if self._assets.pop(asset_id, None) is None:
                raise UnknownAsset(f"asset {asset_id} does not exist", {"asset_id": asset_id})

    async def owner_of(self, asset_id: int) -> str:
        record = await self._get(asset_id)
        return record.owner

    async def token_uri(self, asset_id: int) -> str:
        record = await self._get(asset_id)
        return record.metadata_uri

    async def count(self) -> int:
        async with self._lock:
            return len(self._assets)

    async def _get(self, asset_id: int) -> AssetRecord:
        async with self._lock:
            record: Optional[AssetRecord] = self._assets.get(asset_id)
        if record is None:
            raise UnknownAsset(f"asset {asset_id} does not exist", {"asset_id": asset_id})
        return record
