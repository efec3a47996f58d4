"""Basic usage of the wallet asset cache.

This file demonstrates:
- Loading the first page of a wallet's UNIQs
- Following background loading through update events
- Reading cached collections without network activity
- Handling a failed first page
"""

import asyncio
import logging
import sys

from wallet_assets import AssetUpdateEvent, FetchError, create_asset_service, normalize_wallet_id
from wallet_assets.search import filter_collections, paginate

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


async def show_wallet(wallet_id: str) -> None:
    async with create_asset_service() as service:
        cache = service.uniqs

        def on_update(event: AssetUpdateEvent) -> None:
            if event.wallet_id != normalize_wallet_id(wallet_id):
                return
            loaded = len(cache.get_cached_assets(wallet_id))
            total = cache.get_total_count(wallet_id)
            print(f"   ... {loaded}/{total} UNIQs loaded")

        service.notifier.subscribe(on_update, event_name=cache.kind.event_name)

        try:
            first_page = await cache.get_assets(wallet_id)
        except FetchError as e:
            print(f"❌ Could not load UNIQs for {wallet_id}: {e}")
            return

        print(f"🏦 First page: {len(first_page)} UNIQs")
        page = paginate(first_page, page=1, per_page=12, complete=cache.is_loading_complete(wallet_id))
        print(f"   Page {page.label}")

        await cache.wait_for_background(wallet_id)

        print("📚 Collections:")
        for collection in filter_collections(cache.get_cached_collections(wallet_id)):
            print(f"   {collection.name}: {collection.total_items}")

        if not cache.is_loading_complete(wallet_id):
            print("⚠️ The list may be partial, background loading stopped early")


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("usage: python examples/basic_usage.py <wallet-id>")
        sys.exit(1)
    asyncio.run(show_wallet(sys.argv[1]))
