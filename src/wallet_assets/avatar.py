"""Resolve a profile avatar image from a wallet's assets."""

import logging
from dataclasses import dataclass

from .cache import WalletAssetCache
from .clients import AssetClientError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AvatarInfo:
    """Avatar selection of a user: the chosen asset id and its image, when known."""

    asset_id: str | None
    image_url: str | None


async def resolve_avatar(cache: WalletAssetCache, wallet_id: str, asset_id: str | int | None) -> AvatarInfo:
    """Find the image of the asset a user picked as avatar.

    The wallet's assets are read through ``cache.get_assets``, so a fresh cache
    entry costs no network call. The asset is also searched among assets that
    background loading added after the first page. When the assets cannot be
    loaded the id is still returned, without an image.

    Looking up which asset the user selected (the profile service's
    ``/users/{id}/avatar`` endpoint, where a 404 means no avatar was chosen) is
    the caller's job: pass ``None`` when there is no selection.
    """
    if asset_id is None or str(asset_id) == "":
        return AvatarInfo(asset_id=None, image_url=None)

    asset_id = str(asset_id)
    try:
        assets = await cache.get_assets(wallet_id)
    except AssetClientError as e:
        logger.warning(f"⚠️ Could not load assets to resolve avatar {asset_id} of {wallet_id}: {e}")
        return AvatarInfo(asset_id=asset_id, image_url=None)

    asset = next((a for a in assets if a.id == asset_id), None) or cache.find_asset(wallet_id, asset_id)
    if asset is None:
        logger.info(f"🔍 Avatar asset {asset_id} not found among cached assets of {wallet_id}")
        return AvatarInfo(asset_id=asset_id, image_url=None)

    return AvatarInfo(asset_id=asset_id, image_url=asset.images.primary)
