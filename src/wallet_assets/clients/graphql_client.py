"""GraphQL client for paginated wallet asset queries."""

import logging
from typing import Any

import aiohttp
from asyncio_throttle import Throttler

from ..config import GraphQLConfig
from ..models import AssetPage
from ..wallet import is_valid_wallet_id

logger = logging.getLogger(__name__)

MEDIA_FIELDS = """
                  square { contentType uri }
                  gallery { contentType uri }
                  hero { contentType uri }
                  product { contentType uri }
"""

UNIQS_OF_WALLET_QUERY = f"""
query UniqsOfWallet($walletId: WalletId!, $pagination: PaginationInput) {{
  uniqsOfWallet(walletId: $walletId, pagination: $pagination) {{
    data {{
      id
      metadata {{
        content {{
          name
          description
          subName
          attributes {{ key value }}
          medias {{{MEDIA_FIELDS}}}
        }}
      }}
      factory {{
        id
        metadata {{
          content {{
            name
            description
            medias {{{MEDIA_FIELDS}}}
          }}
        }}
      }}
      mintDate
      owner
      serialNumber
      type
    }}
    pagination {{ limit skip }}
    totalCount
  }}
}}
"""


class AssetClientError(Exception):
    """Base exception for asset client errors."""

    pass


class InvalidWalletIdError(AssetClientError):
    """Empty or malformed wallet id."""

    pass


class FetchError(AssetClientError):
    """Transport or GraphQL-reported failure while fetching a page."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class AuthTokenError(FetchError):
    """The auth collaborator did not hand out an access token."""

    pass


class RateLimitError(FetchError):
    """Rate limited by the upstream API."""

    pass


class GraphQLAssetClient:
    """Issues one paginated ``uniqsOfWallet`` query per call.

    The client is stateless with respect to wallets: it does not cache tokens,
    pages or results, and it never retries. A fresh bearer token is requested
    from the auth collaborator before each page.
    """

    def __init__(
        self,
        config: GraphQLConfig,
        session: aiohttp.ClientSession | None = None,
    ):
        self.config = config
        self._session = session
        self._own_session = session is None

        self.throttler = Throttler(rate_limit=config.rate_limit, period=60)

        self._stats = {
            "page_requests": 0,
            "token_requests": 0,
            "api_errors": 0,
            "rate_limit_errors": 0,
        }

    async def __aenter__(self):
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            timeout = aiohttp.ClientTimeout(total=self.config.request_timeout)
            connector = aiohttp.TCPConnector(limit=20, ttl_dns_cache=300)
            self._session = aiohttp.ClientSession(
                timeout=timeout,
                connector=connector,
                headers={"User-Agent": "WalletAssets/0.1"},
                raise_for_status=False,
            )
        return self._session

    async def fetch_page(self, wallet_id: str, limit: int, skip: int) -> AssetPage:
        """Fetch one page of assets owned by a wallet.

        Args:
            wallet_id: Canonical wallet id
            limit: Page size, must be positive
            skip: Number of records to skip, must not be negative

        Returns:
            AssetPage with the raw records and the server-reported total

        Raises:
            InvalidWalletIdError: If the wallet id is empty
            FetchError: On any transport, HTTP or GraphQL failure
        """
        if not is_valid_wallet_id(wallet_id):
            raise InvalidWalletIdError(f"Invalid wallet id: {wallet_id!r}")
        if limit <= 0:
            raise ValueError("limit must be positive")
        if skip < 0:
            raise ValueError("skip must not be negative")

        token = await self.get_access_token()

        payload = {
            "query": UNIQS_OF_WALLET_QUERY,
            "variables": {"walletId": wallet_id, "pagination": {"limit": limit, "skip": skip}},
        }
        headers = {"Authorization": f"Bearer {token}"}

        logger.debug(f"🔍 Fetching assets for {wallet_id} (limit={limit}, skip={skip})")
        data = await self._request("POST", self.config.endpoint_url, json=payload, headers=headers)
        self._stats["page_requests"] += 1

        errors = data.get("errors")
        if errors:
            self._stats["api_errors"] += 1
            if not isinstance(errors, list):
                errors = [errors]
            messages = "; ".join(
                str(error.get("message", error) if isinstance(error, dict) else error) for error in errors
            )
            raise FetchError(f"GraphQL error: {messages}")

        result = (data.get("data") or {}).get("uniqsOfWallet")
        if not isinstance(result, dict):
            self._stats["api_errors"] += 1
            raise FetchError("GraphQL response is missing uniqsOfWallet")

        assets = result.get("data") or []
        total_count = result.get("totalCount")
        if not isinstance(total_count, int):
            total_count = len(assets)

        return AssetPage(assets=list(assets), total_count=total_count)

    async def get_access_token(self) -> str:
        """Obtain a short-lived bearer token from the auth collaborator."""
        data = await self._request("GET", self.config.auth_token_url)
        self._stats["token_requests"] += 1

        token = data.get("access_token")
        if not token:
            raise AuthTokenError("Auth endpoint returned no access_token")
        return token

    async def _request(
        self,
        method: str,
        url: str,
        json: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        session = await self._ensure_session()

        try:
            async with self.throttler:
                async with session.request(method, url, json=json, headers=headers) as response:
                    return await self._handle_response(response)
        except FetchError:
            raise
        except TimeoutError as e:
            self._stats["api_errors"] += 1
            raise FetchError(f"Request to {url} timed out") from e
        except aiohttp.ClientError as e:
            self._stats["api_errors"] += 1
            logger.error(f"❌ Request to {url} failed: {e}")
            raise FetchError(f"Request to {url} failed: {e}") from e

    async def _handle_response(self, response: aiohttp.ClientResponse) -> dict[str, Any]:
        if response.status == 200:
            try:
                data = await response.json(content_type=None)
            except ValueError as e:
                self._stats["api_errors"] += 1
                raise FetchError(f"Failed to parse JSON response: {e}", status_code=200) from e
            if not isinstance(data, dict):
                self._stats["api_errors"] += 1
                raise FetchError("Unexpected JSON payload", status_code=200)
            return data

        self._stats["api_errors"] += 1

        if response.status == 429:
            self._stats["rate_limit_errors"] += 1
            raise RateLimitError("Rate limited by asset API", status_code=429)

        if response.status == 401:
            raise FetchError("Unauthorized (401): token rejected", status_code=401)

        if response.status == 403:
            raise FetchError("Forbidden (403)", status_code=403)

        error_text = await response.text()
        raise FetchError(f"HTTP {response.status}: {error_text}", status_code=response.status)

    def get_stats(self) -> dict[str, Any]:
        """Get client statistics."""
        return {
            **self._stats,
            "rate_limit": self.config.rate_limit,
        }

    async def close(self) -> None:
        """Close HTTP session."""
        if self._session and self._own_session:
            await self._session.close()
            self._session = None
            logger.info("🔌 Asset client session closed")
