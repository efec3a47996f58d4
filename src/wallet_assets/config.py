"""Configuration for the wallet asset engine.

Values come from environment variables (optionally loaded from a ``.env`` file)
and fall back to the defaults below.
"""

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

DEFAULT_GRAPHQL_URL = "https://staging.api.ultra.io/graphql"
DEFAULT_AUTH_TOKEN_URL = "http://localhost:3000/auth/ultra-token"


@dataclass
class GraphQLConfig:
    """GraphQL endpoint and auth collaborator settings."""

    endpoint_url: str = DEFAULT_GRAPHQL_URL
    auth_token_url: str = DEFAULT_AUTH_TOKEN_URL
    rate_limit: int = 120  # requests per minute
    request_timeout: float = 30.0  # seconds, per HTTP request

    def __post_init__(self) -> None:
        if not self.endpoint_url:
            raise ValueError("endpoint_url must not be empty")
        if not self.auth_token_url:
            raise ValueError("auth_token_url must not be empty")
        if self.rate_limit < 1:
            raise ValueError("rate_limit must be at least 1")
        if self.request_timeout <= 0:
            raise ValueError("request_timeout must be positive")


@dataclass
class CacheConfig:
    """In-memory wallet cache settings."""

    ttl_seconds: int = 300
    page_size: int = 25

    def __post_init__(self) -> None:
        if self.ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        if self.page_size <= 0:
            raise ValueError("page_size must be positive")


@dataclass
class AppConfig:
    """Top-level configuration."""

    graphql: GraphQLConfig = field(default_factory=GraphQLConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)


def get_config(env_file: str | None = None) -> AppConfig:
    """Build configuration from the environment.

    Args:
        env_file: Optional path to a ``.env`` file. Existing environment
            variables always win over values from the file.
    """
    load_dotenv(dotenv_path=env_file, override=False)

    return AppConfig(
        graphql=GraphQLConfig(
            endpoint_url=os.getenv("WALLET_ASSETS_GRAPHQL_URL", DEFAULT_GRAPHQL_URL),
            auth_token_url=os.getenv("WALLET_ASSETS_AUTH_TOKEN_URL", DEFAULT_AUTH_TOKEN_URL),
            rate_limit=int(os.getenv("WALLET_ASSETS_RATE_LIMIT", "120")),
            request_timeout=float(os.getenv("WALLET_ASSETS_REQUEST_TIMEOUT", "30")),
        ),
        cache=CacheConfig(
            ttl_seconds=int(os.getenv("WALLET_ASSETS_CACHE_TTL", "300")),
            page_size=int(os.getenv("WALLET_ASSETS_PAGE_SIZE", "25")),
        ),
    )
