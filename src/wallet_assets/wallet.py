"""Wallet id helpers."""


def normalize_wallet_id(wallet_id: str) -> str:
    """Return the canonical form of a wallet id used as a cache key.

    Anything after an ``@`` (account or network suffix) is dropped and
    surrounding whitespace is stripped.
    """
    return wallet_id.split("@", 1)[0].strip()


def is_valid_wallet_id(wallet_id: str) -> bool:
    """Check that a wallet id is a non-empty string once canonicalized."""
    return isinstance(wallet_id, str) and bool(normalize_wallet_id(wallet_id))
