"""Wallet asset fetching, grouping and caching."""

from .aggregator import aggregate
from .app import AssetService, create_asset_service
from .cache import CacheEntry, CacheStore, WalletAssetCache
from .clients import FetchError, GraphQLAssetClient
from .config import AppConfig, CacheConfig, GraphQLConfig, get_config
from .models import Asset, AssetKind, Collection
from .normalizer import normalize_asset
from .notifier import AssetUpdateEvent, UpdateNotifier
from .wallet import normalize_wallet_id

__all__ = [
    "AppConfig",
    "Asset",
    "AssetKind",
    "AssetService",
    "AssetUpdateEvent",
    "CacheConfig",
    "CacheEntry",
    "CacheStore",
    "Collection",
    "FetchError",
    "GraphQLAssetClient",
    "GraphQLConfig",
    "UpdateNotifier",
    "WalletAssetCache",
    "aggregate",
    "create_asset_service",
    "get_config",
    "normalize_asset",
    "normalize_wallet_id",
]
