"""Search, filter and page helpers for displaying cached assets."""

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from .aggregator import collection_id_for
from .models import Asset, Collection

T = TypeVar("T")


def asset_matches(asset: Asset, query: str) -> bool:
    """Case-insensitive match on name, id, serial number and attributes."""
    needle = query.strip().lower()
    if not needle:
        return True

    if needle in asset.name.lower():
        return True
    if needle in asset.id.lower():
        return True
    if needle in asset.serial_number.lower():
        return True
    return any(needle in attr.key.lower() or needle in str(attr.value).lower() for attr in asset.attributes)


def search_assets(assets: Sequence[Asset], query: str) -> list[Asset]:
    """Filter assets by a free-text query, keeping their order."""
    return [asset for asset in assets if asset_matches(asset, query)]


def filter_collections(collections: Sequence[Collection], query: str = "") -> list[Collection]:
    """Collections whose name contains ``query``, sorted by name."""
    needle = query.strip().lower()
    matching = [c for c in collections if needle in c.name.lower()]
    return sorted(matching, key=lambda c: c.name.lower())


def assets_in_matching_collections(
    assets: Sequence[Asset], collections: Sequence[Collection], query: str
) -> list[Asset]:
    """Assets whose collection name contains ``query``."""
    matching_ids = {c.id for c in filter_collections(collections, query)}
    return [asset for asset in assets if collection_id_for(asset) in matching_ids]


def find_collection(collections: Sequence[Collection], collection_id: str) -> Collection | None:
    for collection in collections:
        if collection.id == collection_id:
            return collection
    return None


@dataclass
class PageSlice(Generic[T]):
    """One display page of a possibly still-growing list."""

    items: list[T]
    page: int
    total_pages: int
    total_items: int
    has_more: bool

    @property
    def label(self) -> str:
        """``"2 / 5"``, or ``"2 / 5+"`` while more items may still arrive."""
        suffix = "+" if self.has_more and self.page >= self.total_pages else ""
        return f"{self.page} / {self.total_pages}{suffix}"


def paginate(items: Sequence[T], page: int, per_page: int, complete: bool = True) -> PageSlice[T]:
    """Cut ``items`` into display pages.

    Args:
        items: Items loaded so far
        page: 1-based page number, clamped to the available range
        per_page: Items per page
        complete: Whether ``items`` is the full set. When it is not, the last
            page still reports ``has_more``.
    """
    if per_page <= 0:
        raise ValueError("per_page must be positive")

    total_pages = max(1, math.ceil(len(items) / per_page))
    page = min(max(1, page), total_pages)
    start = (page - 1) * per_page

    return PageSlice(
        items=list(items[start : start + per_page]),
        page=page,
        total_pages=total_pages,
        total_items=len(items),
        has_more=page < total_pages or not complete,
    )
