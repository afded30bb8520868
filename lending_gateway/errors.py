"""Error taxonomy for provider lookups and backend failures."""
from __future__ import annotations


class LendingError(Exception):
    """Base class for all per-request lending errors."""


class UnknownProviderError(LendingError):
    """The caller named a provider that is not in the registry."""

    def __init__(self, provider_id: str) -> None:
        super().__init__(f"Unknown provider {provider_id}")
        self.provider_id = provider_id


class ProviderUnavailableError(LendingError):
    """A backend could not reach its upstream or got an unusable response."""

    def __init__(self, provider_id: str, reason: str = "") -> None:
        message = f"Provider {provider_id} unavailable"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.provider_id = provider_id
        self.reason = reason


class InvalidAssetError(LendingError):
    def __init__(self, symbol: str, reason: str = "") -> None:
        super().__init__(reason or f"Invalid asset {symbol!r}")
        self.symbol = symbol


class InvalidAddressError(LendingError):
    def __init__(self, address: str, reason: str = "") -> None:
        super().__init__(reason or f"Invalid address {address!r}")
        self.address = address
