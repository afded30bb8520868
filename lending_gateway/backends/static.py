"""Static lending backend: serves a provider catalog straight from config."""
from __future__ import annotations

import logging

from ..config import ProviderConfig
from ..errors import InvalidAddressError, InvalidAssetError
from ..models import (
    AccountLendingContracts,
    AccountRequest,
    AssetInfo,
    LendingAssetRates,
    LendingContract,
    LendingProvider,
    LendingProviderInfo,
)

logger = logging.getLogger(__name__)


class StaticLendingBackend:
    """Backend whose assets, rates and positions are fixed at startup.

    Empty-input behaviour:

    * rates: an empty symbol list returns every catalog asset; an unknown
      symbol raises ``InvalidAssetError``.
    * accounts: an empty address list returns nothing; a blank address raises
      ``InvalidAddressError``; an empty asset list returns all positions and
      unknown symbols in the filter simply match nothing.

    Symbols are matched case-insensitively. Addresses are matched exactly as
    written in config, since some chains use case-sensitive encodings; an
    EVM address queried in a different case than configured has no positions.
    """

    def __init__(self, name: str, config: ProviderConfig) -> None:
        self._name = name
        self._provider = LendingProvider(
            id=name,
            info=LendingProviderInfo(
                id=name,
                description=config.info.description,
                image=config.info.image,
                website=config.info.website,
            ),
            type=config.type,
            assets=config.assets,
        )
        self._assets: dict[str, AssetInfo] = {a.symbol.upper(): a for a in config.assets}
        self._positions = config.positions

    def _lookup(self, symbol: str) -> AssetInfo:
        asset = self._assets.get(symbol.upper())
        if asset is None:
            raise InvalidAssetError(symbol, f"Asset {symbol!r} not supported by {self._name}")
        return asset

    async def get_provider_info(self) -> LendingProvider:
        return self._provider

    async def get_current_lending_rates(
        self, asset_symbols: list[str]
    ) -> list[LendingAssetRates]:
        if asset_symbols:
            assets = [self._lookup(s) for s in asset_symbols]
        else:
            assets = list(self._provider.assets)

        return [
            LendingAssetRates(
                symbol=a.symbol,
                apy=a.apy,
                yield_period=a.yield_period,
                yield_freq=a.yield_freq,
            )
            for a in assets
        ]

    def _contracts_for(
        self, address: str, wanted: set[str]
    ) -> tuple[LendingContract, ...]:
        contracts: list[LendingContract] = []
        for symbol, amount in self._positions.get(address, {}).items():
            if wanted and symbol.upper() not in wanted:
                continue
            asset = self._assets.get(symbol.upper())
            if asset is None:
                logger.warning(
                    "%s: position %s/%s has no catalog asset, skipping",
                    self._name, address, symbol,
                )
                continue
            contracts.append(LendingContract(asset=asset, current_amount=amount))
        return tuple(contracts)

    async def get_account_lending_contracts(
        self, request: AccountRequest
    ) -> list[AccountLendingContracts]:
        wanted = {s.upper() for s in request.assets}
        accounts: list[AccountLendingContracts] = []
        seen: set[str] = set()

        for address in request.addresses:
            if not address.strip():
                raise InvalidAddressError(address, "Address must not be blank")
            if address in seen:
                continue
            seen.add(address)
            accounts.append(
                AccountLendingContracts(
                    address=address, contracts=self._contracts_for(address, wanted)
                )
            )

        return accounts
