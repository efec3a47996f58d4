"""Map raw GraphQL asset records into ``Asset`` objects.

Upstream metadata is frequently partial. Every nested field is optional here:
missing values become ``None`` or empty containers, and normalization never
raises for a record that is a mapping.
"""

from typing import Any

from .models import (
    NO_SOURCE,
    Asset,
    AssetImages,
    Attribute,
    CollectionSource,
    SourceKind,
)

IMAGE_SLOTS = ("square", "product", "gallery", "hero")


def _mapping(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text if text else None


def extract_images(medias: Any) -> AssetImages:
    """Read the ``uri`` of each media slot."""
    medias = _mapping(medias)
    uris = {slot: _text(_mapping(medias.get(slot)).get("uri")) for slot in IMAGE_SLOTS}
    return AssetImages(**uris)


def extract_attributes(raw_attributes: Any) -> tuple[Attribute, ...]:
    """Extract ``{key, value}`` pairs in source order, skipping malformed items."""
    if not isinstance(raw_attributes, list):
        return ()

    attributes = []
    for item in raw_attributes:
        item = _mapping(item)
        key = item.get("key")
        if key is None:
            continue
        value = item.get("value")
        if not isinstance(value, (str, int, float)) or isinstance(value, bool):
            value = "" if value is None else str(value)
        attributes.append(Attribute(key=str(key), value=value))
    return tuple(attributes)


def resolve_source(raw: dict[str, Any], hint: str | None) -> CollectionSource:
    """Build the collection signal with factory > collection > hint precedence."""
    factory = _mapping(raw.get("factory"))
    if factory.get("id") is not None and str(factory["id"]):
        content = _mapping(_mapping(factory.get("metadata")).get("content"))
        return CollectionSource(
            kind=SourceKind.FACTORY,
            id=str(factory["id"]),
            name=_text(content.get("name")),
            description=_text(content.get("description")),
            image=extract_images(content.get("medias")).primary,
        )

    collection = _mapping(raw.get("collection"))
    if collection.get("id") is not None and str(collection["id"]):
        return CollectionSource(
            kind=SourceKind.COLLECTION,
            id=str(collection["id"]),
            name=_text(collection.get("name")),
            description=_text(collection.get("description")),
            image=_text(collection.get("image")),
        )

    if hint:
        return CollectionSource(kind=SourceKind.HINT, id=hint, name=hint)

    return NO_SOURCE


def normalize_asset(raw: dict[str, Any]) -> Asset:
    """Convert one raw record into an ``Asset``."""
    raw = _mapping(raw)
    content = _mapping(_mapping(raw.get("metadata")).get("content"))
    hint = _text(content.get("subName"))

    # Some payloads carry attributes at the top level instead of in the content
    raw_attributes = content.get("attributes")
    if raw_attributes is None:
        raw_attributes = raw.get("attributes")

    return Asset(
        id=_text(raw.get("id")) or "",
        serial_number=_text(raw.get("serialNumber")) or "",
        name=_text(content.get("name")) or "",
        description=_text(content.get("description")),
        collection_hint=hint,
        images=extract_images(content.get("medias")),
        source=resolve_source(raw, hint),
        attributes=extract_attributes(raw_attributes),
        mint_date=_text(raw.get("mintDate")),
        owner=_text(raw.get("owner")),
        asset_type=_text(raw.get("type")),
    )


def normalize_page(raw_assets: list[dict[str, Any]]) -> list[Asset]:
    return [normalize_asset(raw) for raw in raw_assets]
