"""
Asset registry package.

Only the uniqueness and ownership semantics redemption depends on are
modelled here; naming, enumeration and metadata resolution live elsewhere.
"""

from .store import AssetRecord, AssetRegistry, InMemoryAssetRegistry

__all__ = [
    "AssetRecord",
    "AssetRegistry",
    "InMemoryAssetRegistry",
]
