"""Wallet asset caching."""

from .store import CacheEntry, CacheStore
from .wallet_cache import WalletAssetCache

__all__ = ["CacheEntry", "CacheStore", "WalletAssetCache"]
