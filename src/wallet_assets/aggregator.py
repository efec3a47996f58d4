"""Group assets into collections.

Each asset's collection is decided by its ``CollectionSource`` tag, strongest
signal first: factory, collection reference, free-text hint, and finally a
shared bucket for assets with no signal at all. The function keeps no state
between calls, so re-running it over a growing asset list always yields a
consistent grouping.
"""

from collections.abc import Iterable

from .models import (
    ORPHAN_COLLECTION_ID,
    UNKNOWN_COLLECTION_NAME,
    Asset,
    AssetKind,
    Collection,
    SourceKind,
)


def collection_for(asset: Asset, kind: AssetKind) -> Collection:
    """Build the (empty) collection an asset belongs to."""
    source = asset.source

    if source.kind is SourceKind.FACTORY:
        return Collection(
            id=source.id,
            name=source.name or asset.collection_hint or UNKNOWN_COLLECTION_NAME,
            description=source.description,
            image=source.image,
        )

    if source.kind is SourceKind.COLLECTION:
        return Collection(
            id=source.id,
            name=source.name or UNKNOWN_COLLECTION_NAME,
            description=source.description,
            image=source.image,
        )

    if source.kind is SourceKind.HINT:
        return Collection(id=source.id, name=source.id)

    return Collection(id=ORPHAN_COLLECTION_ID, name=kind.orphan_collection_name)


def aggregate(assets: Iterable[Asset], kind: AssetKind = AssetKind.UNIQ) -> list[Collection]:
    """Group assets into collections, in order of first-seen asset.

    Collection metadata comes from the first asset seen for that collection id.
    """
    collections: dict[str, Collection] = {}

    for asset in assets:
        collection = collection_for(asset, kind)
        existing = collections.get(collection.id)
        if existing is None:
            collections[collection.id] = existing = collection
        existing.assets.append(asset)

    return list(collections.values())


def collection_id_for(asset: Asset) -> str:
    """Collection id an asset is grouped under, regardless of asset kind."""
    if asset.source.kind is SourceKind.NONE:
        return ORPHAN_COLLECTION_ID
    return asset.source.id
