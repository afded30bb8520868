"""Lending backend protocol: one adapter per lending or staking provider."""
from typing import Protocol

from ..models import (
    AccountLendingContracts,
    AccountRequest,
    LendingAssetRates,
    LendingProvider,
)


class LendingBackend(Protocol):
    """Abstract interface every provider backend implements.

    Implementations raise ``ProviderUnavailableError`` when their upstream
    cannot be reached, ``InvalidAssetError`` / ``InvalidAddressError`` for
    rejected input. How an empty asset or address list is treated is up to
    each backend and documented there.
    """

    async def get_provider_info(self) -> LendingProvider: ...

    async def get_current_lending_rates(
        self, asset_symbols: list[str]
    ) -> list[LendingAssetRates]: ...

    async def get_account_lending_contracts(
        self, request: AccountRequest
    ) -> list[AccountLendingContracts]: ...
