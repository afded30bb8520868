"""Aggregation service: dispatches lending queries to provider backends."""
from __future__ import annotations

import asyncio
import logging

from ..errors import UnknownProviderError
from ..interfaces.lending_backend import LendingBackend
from ..models import (
    AccountLendingContracts,
    AccountRequest,
    LendingAssetRates,
    LendingProvider,
    RatesRequest,
)
from ..registry import ProviderRegistry

logger = logging.getLogger(__name__)


class LendingService:
    """Resolves provider ids against the registry and delegates to backends.

    Listing is best effort: a failing backend is left out of the result and
    the listing itself never fails. Targeted rate and account queries pass
    backend errors through unchanged.
    """

    def __init__(self, registry: ProviderRegistry) -> None:
        self._registry = registry

    @property
    def registry(self) -> ProviderRegistry:
        return self._registry

    def _resolve(self, provider_id: str) -> LendingBackend:
        backend = self._registry.get(provider_id)
        if backend is None:
            raise UnknownProviderError(provider_id)
        return backend

    async def list_providers(self) -> list[LendingProvider]:
        """Query every backend concurrently and return the providers that answered."""
        ids = list(self._registry)
        results = await asyncio.gather(
            *(self._registry[pid].get_provider_info() for pid in ids),
            return_exceptions=True,
        )

        providers: list[LendingProvider] = []
        for provider_id, result in zip(ids, results):
            if isinstance(result, Exception):
                logger.warning(
                    "Provider '%s' left out of listing: %s", provider_id, result
                )
                continue
            if isinstance(result, BaseException):
                raise result
            if result.id != provider_id:
                logger.warning(
                    "Provider registered as '%s' reports id '%s'",
                    provider_id,
                    result.id,
                )
            providers.append(result)

        providers.sort(key=lambda p: p.id)
        return providers

    async def get_rates(
        self, provider_id: str, request: RatesRequest
    ) -> list[LendingAssetRates]:
        backend = self._resolve(provider_id)
        return await backend.get_current_lending_rates(list(request.assets))

    async def get_accounts(
        self, provider_id: str, request: AccountRequest
    ) -> list[AccountLendingContracts]:
        backend = self._resolve(provider_id)
        return await backend.get_account_lending_contracts(request)
