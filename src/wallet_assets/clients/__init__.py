"""API clients."""

from .graphql_client import (
    AssetClientError,
    AuthTokenError,
    FetchError,
    GraphQLAssetClient,
    InvalidWalletIdError,
    RateLimitError,
)

__all__ = [
    "AssetClientError",
    "AuthTokenError",
    "FetchError",
    "GraphQLAssetClient",
    "InvalidWalletIdError",
    "RateLimitError",
]
