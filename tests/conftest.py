"""Shared fixtures for wallet asset tests."""

import asyncio
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest

from wallet_assets.clients import FetchError
from wallet_assets.models import AssetPage


def make_raw_asset(
    asset_id: str,
    name: str | None = None,
    sub_name: str | None = None,
    factory: dict[str, Any] | None = None,
    collection: dict[str, Any] | None = None,
    attributes: list[dict[str, Any]] | None = None,
    square: str | None = None,
) -> dict[str, Any]:
    """Build a raw ``uniqsOfWallet`` record."""
    content: dict[str, Any] = {"name": name or f"Asset {asset_id}", "medias": {}}
    if sub_name is not None:
        content["subName"] = sub_name
    if attributes is not None:
        content["attributes"] = attributes
    if square is not None:
        content["medias"]["square"] = {"contentType": "image/png", "uri": square}

    raw: dict[str, Any] = {
        "id": asset_id,
        "serialNumber": int(asset_id) if asset_id.isdigit() else 1,
        "metadata": {"content": content},
        "mintDate": "2024-01-01T00:00:00Z",
        "owner": "owner1",
        "type": "UNIQ",
    }
    if factory is not None:
        raw["factory"] = factory
    if collection is not None:
        raw["collection"] = collection
    return raw


class FakeAssetClient:
    """In-memory stand-in for ``GraphQLAssetClient``.

    Serves ``total`` generated assets per wallet, counts calls, can fail at a
    given ``skip`` and can hold pages back until ``release()`` is called.
    """

    def __init__(self, total: int = 10, fail_at_skip: int | None = None, gated: bool = False):
        self.total = total
        self.fail_at_skip = fail_at_skip
        self.calls: list[tuple[str, int, int]] = []
        self._gate = asyncio.Event()
        if not gated:
            self._gate.set()

    def release(self) -> None:
        self._gate.set()

    async def fetch_page(self, wallet_id: str, limit: int, skip: int) -> AssetPage:
        self.calls.append((wallet_id, limit, skip))
        # Always suspend once, like a real network call
        await asyncio.sleep(0)
        await self._gate.wait()
        if self.fail_at_skip is not None and skip == self.fail_at_skip:
            raise FetchError("upstream unavailable", status_code=503)

        end = min(skip + limit, self.total)
        assets = [make_raw_asset(str(i), sub_name=f"Series {i % 3}") for i in range(skip, end)]
        return AssetPage(assets=assets, total_count=self.total)


class FakeClock:
    """Manually advanced clock."""

    def __init__(self) -> None:
        self.now = datetime(2024, 1, 1, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def sample_wallet_id() -> str:
    """Sample wallet id."""
    return "aa1aa2aa3ag4"


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
