"""Data types for wallet assets and their collections."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

UNKNOWN_COLLECTION_NAME = "Collection inconnue"
ORPHAN_COLLECTION_ID = "sans-collection"


class AssetKind(Enum):
    """Kinds of wallet assets handled by the engine."""

    NFT = "nft"
    UNIQ = "uniq"

    @property
    def event_name(self) -> str:
        """Name of the update event published for this kind."""
        return f"{self.value}Update"

    @property
    def orphan_collection_name(self) -> str:
        """Display name of the bucket for assets without any collection signal."""
        return f"{self.name}s divers"


@dataclass(frozen=True)
class AssetImages:
    """Display images of an asset or a factory, by slot."""

    square: str | None = None
    product: str | None = None
    gallery: str | None = None
    hero: str | None = None

    @property
    def primary(self) -> str | None:
        """First available image in preference order."""
        return self.square or self.product or self.gallery or self.hero


@dataclass(frozen=True)
class Attribute:
    key: str
    value: str | int | float


class SourceKind(Enum):
    """Which signal decides the collection of an asset."""

    FACTORY = "factory"
    COLLECTION = "collection"
    HINT = "hint"
    NONE = "none"


@dataclass(frozen=True)
class CollectionSource:
    """Collection membership signal, resolved once during normalization."""

    kind: SourceKind
    id: str | None = None
    name: str | None = None
    description: str | None = None
    image: str | None = None


NO_SOURCE = CollectionSource(kind=SourceKind.NONE)


@dataclass(frozen=True)
class Asset:
    """One owned blockchain item."""

    id: str
    serial_number: str
    name: str
    description: str | None = None
    collection_hint: str | None = None
    images: AssetImages = field(default_factory=AssetImages)
    source: CollectionSource = NO_SOURCE
    attributes: tuple[Attribute, ...] = ()
    mint_date: str | None = None
    owner: str | None = None
    asset_type: str | None = None


@dataclass
class Collection:
    """A logical grouping of assets."""

    id: str
    name: str
    description: str | None = None
    image: str | None = None
    assets: list[Asset] = field(default_factory=list)

    @property
    def total_items(self) -> int:
        return len(self.assets)


@dataclass
class AssetPage:
    """One page of raw asset records plus the server-reported total."""

    assets: list[dict[str, Any]]
    total_count: int
