"""Application wiring: one client and notifier shared by a cache per asset kind."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from .cache import WalletAssetCache
from .clients import GraphQLAssetClient
from .config import AppConfig, get_config
from .models import AssetKind
from .notifier import UpdateNotifier
from .wallet import normalize_wallet_id

logger = logging.getLogger(__name__)


class AssetService:
    """Entry point for UI code: NFT and UNIQ caches over one GraphQL client."""

    def __init__(
        self,
        config: AppConfig,
        client: GraphQLAssetClient | None = None,
        notifier: UpdateNotifier | None = None,
    ):
        """Initialize the service; client and notifier may be injected."""
        self.config = config
        self.client = client or GraphQLAssetClient(config.graphql)
        self.notifier = notifier or UpdateNotifier()
        self.caches = {
            kind: WalletAssetCache(self.client, kind=kind, config=config.cache, notifier=self.notifier)
            for kind in AssetKind
        }

    @property
    def nfts(self) -> WalletAssetCache:
        return self.caches[AssetKind.NFT]

    @property
    def uniqs(self) -> WalletAssetCache:
        return self.caches[AssetKind.UNIQ]

    def cache_for(self, kind: AssetKind) -> WalletAssetCache:
        return self.caches[kind]

    def disconnect_wallet(self, wallet_id: str) -> None:
        """Forget everything cached for a wallet, in every asset kind."""
        for cache in self.caches.values():
            cache.invalidate(wallet_id)
        logger.info(f"👋 Wallet {normalize_wallet_id(wallet_id)} disconnected, caches cleared")

    def get_stats(self) -> dict[str, Any]:
        return {
            "client": self.client.get_stats(),
            **{f"{kind.value}_cache": cache.get_stats() for kind, cache in self.caches.items()},
        }

    async def close(self) -> None:
        """Close the caches, then the client session."""
        for cache in self.caches.values():
            await cache.close()
        await self.client.close()


@asynccontextmanager
async def create_asset_service(config: AppConfig | None = None) -> AsyncIterator[AssetService]:
    """Create an ``AssetService`` that is closed when the block exits."""
    service = AssetService(config or get_config())
    try:
        yield service
    finally:
        await service.close()
