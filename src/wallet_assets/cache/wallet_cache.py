"""Wallet asset cache with background page completion.

``get_assets`` returns as soon as the first page of a wallet's assets is in
the cache. When the wallet owns more assets than one page holds, a detached
task keeps fetching the following pages one at a time, re-aggregating the
collections and publishing an update event after each one.

Load cycle of a wallet entry::

    empty -> loading first page -> partial -> background filling -> complete

A forced refresh (or an expired TTL) resets the entry, which supersedes any
background task still filling the previous entry: that task notices the
entry it was filling is no longer current and stops.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, Protocol

from ..aggregator import aggregate
from ..clients import InvalidWalletIdError
from ..config import CacheConfig
from ..models import Asset, AssetKind, AssetPage, Collection
from ..normalizer import normalize_page
from ..notifier import UpdateNotifier
from ..wallet import normalize_wallet_id
from .store import CacheEntry, CacheStore

logger = logging.getLogger(__name__)


class PageFetcher(Protocol):
    async def fetch_page(self, wallet_id: str, limit: int, skip: int) -> AssetPage: ...


@dataclass
class _FillTask:
    entry: CacheEntry
    task: asyncio.Task


def _utc_now() -> datetime:
    return datetime.now(UTC)


class WalletAssetCache:
    """In-memory asset cache for one asset kind, keyed by canonical wallet id."""

    def __init__(
        self,
        client: PageFetcher,
        kind: AssetKind = AssetKind.UNIQ,
        config: CacheConfig | None = None,
        store: CacheStore | None = None,
        notifier: UpdateNotifier | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        """Initialize the cache; store, notifier and clock may be injected."""
        self.client = client
        self.kind = kind
        self.config = config or CacheConfig()
        self.store = store if store is not None else CacheStore()
        self.notifier = notifier if notifier is not None else UpdateNotifier()
        self._clock = clock or _utc_now
        self.ttl = timedelta(seconds=self.config.ttl_seconds)

        self._initial_loads: dict[str, asyncio.Task] = {}
        self._fill_tasks: dict[str, _FillTask] = {}

        self._stats = {
            "hits": 0,
            "misses": 0,
            "joined_loads": 0,
            "load_errors": 0,
            "background_pages": 0,
            "background_errors": 0,
        }

    async def get_assets(
        self,
        wallet_id: str,
        limit: int | None = None,
        force_refresh: bool = False,
    ) -> list[Asset]:
        """Get the assets of a wallet, loading the first page if needed.

        Args:
            wallet_id: Wallet id, any ``@`` suffix is ignored
            limit: Page size, defaults to the configured page size
            force_refresh: Ignore a fresh cache entry and start a new load cycle

        Returns:
            The assets cached for the wallet once the first page is in. Remaining
            pages keep loading in the background.

        Raises:
            InvalidWalletIdError: If the wallet id is empty
            ValueError: If ``limit`` is not positive
            FetchError: If the first page cannot be fetched
        """
        wallet = normalize_wallet_id(wallet_id)
        if not wallet:
            raise InvalidWalletIdError(f"Invalid wallet id: {wallet_id!r}")
        if limit is None:
            limit = self.config.page_size
        if limit <= 0:
            raise ValueError("limit must be positive")

        if not force_refresh:
            pending = self._initial_loads.get(wallet)
            if pending is not None:
                self._stats["joined_loads"] += 1
                logger.debug(f"⏳ Joining first-page load in flight for {wallet}")
                return list(await asyncio.shield(pending))

            entry = self.store.get(wallet)
            if entry is not None and entry.is_fresh(self._clock(), self.ttl):
                self._stats["hits"] += 1
                logger.debug(f"💾 Cache hit for {self.kind.value} assets of {wallet}")
                return list(entry.assets)

        self._stats["misses"] += 1
        entry = self.store.reset(wallet)
        task = asyncio.create_task(self._load_first_page(wallet, entry, limit))
        self._initial_loads[wallet] = task
        task.add_done_callback(lambda _: self._forget_initial_load(wallet, task))
        # The load belongs to the cache: cancelling this caller must not fail joined callers
        return list(await asyncio.shield(task))

    def _forget_initial_load(self, wallet: str, task: asyncio.Task) -> None:
        if self._initial_loads.get(wallet) is task:
            del self._initial_loads[wallet]
        if not task.cancelled():
            # Mark a failure as retrieved even when every caller was cancelled; it is logged in _load_first_page
            task.exception()

    def get_cached_assets(self, wallet_id: str) -> list[Asset]:
        """Currently cached assets of a wallet, without any network activity."""
        entry = self.store.get(normalize_wallet_id(wallet_id))
        return list(entry.assets) if entry else []

    def get_cached_collections(self, wallet_id: str) -> list[Collection]:
        """Current collection grouping of a wallet's cached assets."""
        entry = self.store.get(normalize_wallet_id(wallet_id))
        return list(entry.collections) if entry else []

    def is_loading_complete(self, wallet_id: str) -> bool:
        """Whether every asset the server reported for the wallet is cached."""
        entry = self.store.get(normalize_wallet_id(wallet_id))
        return bool(entry and entry.is_complete)

    def is_background_loading(self, wallet_id: str) -> bool:
        """Whether a background task is still fetching pages for the wallet."""
        fill = self._fill_tasks.get(normalize_wallet_id(wallet_id))
        return fill is not None and not fill.task.done()

    def get_total_count(self, wallet_id: str) -> int | None:
        """Last server-reported asset total for a wallet, if any page arrived."""
        entry = self.store.get(normalize_wallet_id(wallet_id))
        return entry.total_count if entry else None

    def find_asset(self, wallet_id: str, asset_id: str) -> Asset | None:
        """Look up a cached asset by id."""
        for asset in self.get_cached_assets(wallet_id):
            if asset.id == asset_id:
                return asset
        return None

    def invalidate(self, wallet_id: str) -> bool:
        """Drop a wallet's entry, e.g. when the wallet disconnects.

        A background task filling that entry stops at its next check.
        """
        wallet = normalize_wallet_id(wallet_id)
        self._initial_loads.pop(wallet, None)
        removed = self.store.delete(wallet)
        if removed:
            logger.info(f"🗑️ Invalidated {self.kind.value} asset cache for {wallet}")
        return removed

    def clear(self) -> None:
        """Drop every wallet entry."""
        self._initial_loads.clear()
        self.store.clear()

    async def wait_for_background(self, wallet_id: str) -> None:
        """Wait until the wallet's background task, if any, has finished."""
        fill = self._fill_tasks.get(normalize_wallet_id(wallet_id))
        if fill is not None:
            await asyncio.gather(fill.task, return_exceptions=True)

    async def _load_first_page(self, wallet: str, entry: CacheEntry, limit: int) -> list[Asset]:
        logger.info(f"🔍 Loading {self.kind.value} assets for {wallet}")
        try:
            page = await self.client.fetch_page(wallet, limit, 0)
        except Exception as e:
            self._stats["load_errors"] += 1
            logger.error(f"❌ Failed to load first page of {self.kind.value} assets for {wallet}: {e}")
            raise

        assets = normalize_page(page.assets)
        if not self.store.is_current(wallet, entry):
            logger.debug(f"🔄 First page for {wallet} arrived after its entry was replaced")
            return assets

        self._apply_page(entry, assets, page.total_count)
        entry.is_complete = page.total_count <= limit
        logger.info(f"✅ Loaded {len(assets)}/{page.total_count} {self.kind.value} assets for {wallet}")

        if not entry.is_complete:
            self._start_background_fill(wallet, entry, limit)
        return entry.assets

    def _start_background_fill(self, wallet: str, entry: CacheEntry, limit: int) -> None:
        running = self._fill_tasks.get(wallet)
        if running is not None and running.entry is entry and not running.task.done():
            logger.debug(f"⏭️ Background loading already running for {wallet}")
            return

        task = asyncio.create_task(self._fill_remaining(wallet, entry, limit))
        fill = _FillTask(entry=entry, task=task)
        self._fill_tasks[wallet] = fill
        task.add_done_callback(lambda _: self._forget_fill(wallet, fill))

    def _forget_fill(self, wallet: str, fill: _FillTask) -> None:
        if self._fill_tasks.get(wallet) is fill:
            del self._fill_tasks[wallet]

    async def _fill_remaining(self, wallet: str, entry: CacheEntry, limit: int) -> None:
        """Fetch the pages after the first one, strictly one at a time."""
        while self.store.is_current(wallet, entry):
            total = entry.total_count or 0
            loaded = len(entry.assets)
            if loaded >= total:
                entry.is_complete = True
                logger.info(f"🏁 All {loaded} {self.kind.value} assets loaded for {wallet}")
                self.notifier.publish(self.kind.event_name, wallet)
                return

            try:
                page = await self.client.fetch_page(wallet, limit, loaded)
            except Exception as e:
                self._stats["background_errors"] += 1
                logger.warning(f"⚠️ Background loading for {wallet} stopped at {loaded}/{total} assets: {e}")
                return

            if not self.store.is_current(wallet, entry):
                break

            if not page.assets:
                logger.warning(f"⚠️ Empty page at skip={loaded} for {wallet} (reported total {page.total_count})")
                return

            self._apply_page(entry, entry.assets + normalize_page(page.assets), page.total_count)
            self._stats["background_pages"] += 1
            self.notifier.publish(self.kind.event_name, wallet)

        logger.info(f"🛑 Cache entry for {wallet} was replaced or removed, background loading stopped")

    def _apply_page(self, entry: CacheEntry, assets: list[Asset], total_count: int) -> None:
        # No await in here: synchronous readers never see a half-applied page
        entry.assets = assets
        entry.collections = aggregate(assets, self.kind)
        entry.total_count = total_count
        entry.last_updated = self._clock()

    def get_stats(self) -> dict[str, Any]:
        """Get cache statistics."""
        lookups = self._stats["hits"] + self._stats["misses"]
        hit_rate = self._stats["hits"] / lookups * 100 if lookups else 0.0
        return {
            **self._stats,
            "kind": self.kind.value,
            "wallets": len(self.store),
            "background_tasks": len(self._fill_tasks),
            "hit_rate_percent": round(hit_rate, 2),
        }

    async def close(self) -> None:
        """Cancel loads still in flight and wait for them to finish."""
        tasks = [fill.task for fill in self._fill_tasks.values()]
        tasks.extend(self._initial_loads.values())
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._fill_tasks.clear()
        self._initial_loads.clear()
