"""Tests for collection aggregation."""

from conftest import make_raw_asset

from wallet_assets.aggregator import aggregate, collection_id_for
from wallet_assets.models import ORPHAN_COLLECTION_ID, UNKNOWN_COLLECTION_NAME, AssetKind
from wallet_assets.normalizer import normalize_page


def factory(factory_id: str, name: str | None = None, square: str | None = None) -> dict:
    content: dict = {"medias": {}}
    if name is not None:
        content["name"] = name
    if square is not None:
        content["medias"]["square"] = {"uri": square}
    return {"id": factory_id, "metadata": {"content": content}}


class TestResolutionOrder:
    """Test the factory > collection > hint > orphan fallback chain."""

    def test_factory_collection(self) -> None:
        """Test assets with a factory group under the factory id."""
        assets = normalize_page(
            [
                make_raw_asset("1", factory=factory("f1", name="Genesis", square="sq.png")),
                make_raw_asset("2", factory=factory("f1", name="Genesis")),
            ]
        )

        [collection] = aggregate(assets)

        assert collection.id == "f1"
        assert collection.name == "Genesis"
        assert collection.image == "sq.png"
        assert collection.total_items == 2

    def test_factory_name_falls_back_to_hint(self) -> None:
        """Test an unnamed factory uses the asset's sub-name."""
        assets = normalize_page([make_raw_asset("1", sub_name="Season 2", factory=factory("f1"))])

        assert aggregate(assets)[0].name == "Season 2"

    def test_factory_name_falls_back_to_unknown(self) -> None:
        """Test an unnamed factory without hint gets the unknown label."""
        assets = normalize_page([make_raw_asset("1", factory=factory("f1"))])

        assert aggregate(assets)[0].name == UNKNOWN_COLLECTION_NAME

    def test_collection_reference(self) -> None:
        """Test a collection reference supplies id, name, description and image."""
        ref = {"id": "c9", "name": "Legends", "description": "Rare", "image": "legends.png"}
        assets = normalize_page([make_raw_asset("1", sub_name="Ignored", collection=ref)])

        [collection] = aggregate(assets)

        assert (collection.id, collection.name, collection.description, collection.image) == (
            "c9",
            "Legends",
            "Rare",
            "legends.png",
        )

    def test_hint_doubles_as_id(self) -> None:
        """Test the sub-name is both id and name."""
        assets = normalize_page([make_raw_asset("1", sub_name="Cards"), make_raw_asset("2", sub_name="Cards")])

        [collection] = aggregate(assets)

        assert collection.id == collection.name == "Cards"
        assert collection.total_items == 2

    def test_orphans_share_one_bucket(self) -> None:
        """Test every asset without signal lands in the same sentinel bucket."""
        assets = normalize_page([make_raw_asset(str(i)) for i in range(4)] + [make_raw_asset("x", sub_name="S")])

        collections = aggregate(assets, AssetKind.UNIQ)
        orphans = [c for c in collections if c.id == ORPHAN_COLLECTION_ID]

        assert len(orphans) == 1
        assert orphans[0].name == "UNIQs divers"
        assert orphans[0].total_items == 4

    def test_orphan_name_depends_on_kind(self) -> None:
        """Test NFT orphans get the NFT label."""
        assets = normalize_page([make_raw_asset("1")])

        assert aggregate(assets, AssetKind.NFT)[0].name == "NFTs divers"


class TestAggregationProperties:
    """Test idempotence and consistency."""

    def _assets(self):
        return normalize_page(
            [
                make_raw_asset("1", factory=factory("f1", name="A")),
                make_raw_asset("2", sub_name="B"),
                make_raw_asset("3"),
                make_raw_asset("4", factory=factory("f1", name="A")),
                make_raw_asset("5", collection={"id": "c1", "name": "C"}),
            ]
        )

    def test_idempotent(self) -> None:
        """Test aggregating twice yields the same grouping."""
        assets = self._assets()

        assert aggregate(assets) == aggregate(assets)

    def test_first_seen_order(self) -> None:
        """Test collections appear in order of their first asset."""
        assert [c.id for c in aggregate(self._assets())] == ["f1", "B", ORPHAN_COLLECTION_ID, "c1"]

    def test_growing_input_keeps_assignments(self) -> None:
        """Test adding assets does not move already grouped ones."""
        assets = self._assets()
        before = {a.id: c.id for c in aggregate(assets[:3]) for a in c.assets}
        after = {a.id: c.id for c in aggregate(assets) for a in c.assets}

        assert all(after[asset_id] == collection_id for asset_id, collection_id in before.items())

    def test_totals_match_membership(self) -> None:
        """Test each asset is counted exactly once."""
        collections = aggregate(self._assets())

        assert sum(c.total_items for c in collections) == 5
        assert all(c.total_items == len(c.assets) for c in collections)

    def test_empty_input(self) -> None:
        """Test no assets means no collections."""
        assert aggregate([]) == []

    def test_collection_id_for_matches_aggregation(self) -> None:
        """Test collection_id_for agrees with aggregate."""
        for collection in aggregate(self._assets()):
            assert all(collection_id_for(asset) == collection.id for asset in collection.assets)
