"""Shared test fixtures and sample data."""
from __future__ import annotations

import textwrap
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from lending_gateway.config import (
    AppConfig,
    ProviderConfig,
    ProviderInfoConfig,
    ServerConfig,
)
from lending_gateway.errors import ProviderUnavailableError
from lending_gateway.models import (
    AssetInfo,
    AssetMetaInfo,
    DefiAssetInfo,
    DefiTokenInfo,
    LendingAssetRates,
    LendingProvider,
    LendingProviderInfo,
    ProviderType,
)
from lending_gateway.registry import ProviderRegistry


# ---------------------------------------------------------------------------
# Model fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_defi_info() -> DefiAssetInfo:
    return DefiAssetInfo(
        asset_token=DefiTokenInfo(symbol="USDC", chain="ETH", contract_address="0xA0b8"),
        technical_token=DefiTokenInfo(symbol="cUSDC", chain="ETH", contract_address="0x39AA"),
    )


@pytest.fixture()
def sample_asset(sample_defi_info: DefiAssetInfo) -> AssetInfo:
    return AssetInfo(
        symbol="USDC",
        description="Compound USDC",
        apy=0.0412,
        yield_period=0,
        yield_freq=15,
        total_supply="412733201.551322",
        minimum_amount="0.000001",
        meta_info=AssetMetaInfo(defi_info=sample_defi_info),
    )


@pytest.fixture()
def plain_asset() -> AssetInfo:
    return AssetInfo(
        symbol="DAI",
        description="Compound Dai",
        apy=0.0375,
        yield_freq=15,
        total_supply="308115774.000000000000000001",
        minimum_amount="0",
    )


@pytest.fixture()
def sample_provider(sample_asset: AssetInfo, plain_asset: AssetInfo) -> LendingProvider:
    return _make_provider("compound", assets=(sample_asset, plain_asset))


def _make_provider(provider_id: str, assets: tuple[AssetInfo, ...] = ()) -> LendingProvider:
    return LendingProvider(
        id=provider_id,
        info=LendingProviderInfo(
            id=provider_id,
            description=f"{provider_id} protocol",
            image=f"https://{provider_id}.example.com/logo.png",
            website=f"https://{provider_id}.example.com",
        ),
        type=ProviderType.LENDING,
        assets=assets,
    )


# ---------------------------------------------------------------------------
# Backend fixtures
# ---------------------------------------------------------------------------


def _ok_backend(provider: LendingProvider) -> AsyncMock:
    backend = AsyncMock()
    backend.get_provider_info.return_value = provider
    backend.get_current_lending_rates.return_value = [
        LendingAssetRates(symbol=a.symbol, apy=a.apy) for a in provider.assets
    ]
    backend.get_account_lending_contracts.return_value = []
    return backend


def _failing_backend(provider_id: str) -> AsyncMock:
    backend = AsyncMock()
    error = ProviderUnavailableError(provider_id, "upstream down")
    backend.get_provider_info.side_effect = error
    backend.get_current_lending_rates.side_effect = error
    backend.get_account_lending_contracts.side_effect = error
    return backend


@pytest.fixture()
def mixed_registry() -> ProviderRegistry:
    return ProviderRegistry({"a": _ok_backend(_make_provider("a")), "b": _failing_backend("b")})


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def static_provider_config(sample_asset: AssetInfo, plain_asset: AssetInfo) -> ProviderConfig:
    return ProviderConfig(
        kind="static",
        type=ProviderType.LENDING,
        info=ProviderInfoConfig(
            description="Compound Decentralized Finance Protocol",
            image="https://compound.finance/logo.svg",
            website="https://compound.finance",
        ),
        assets=(sample_asset, plain_asset),
        positions={
            "0xABC": {"USDC": "1250.000001", "DAI": "3.5"},
            "0xDEF": {"DAI": "100"},
        },
    )


@pytest.fixture()
def remote_provider_config() -> ProviderConfig:
    return ProviderConfig(
        kind="remote",
        endpoints=(
            "https://lend1.example.com/api",
            "https://lend2.example.com/api/",
        ),
        timeout=5,
    )


@pytest.fixture()
def sample_app_config(
    static_provider_config: ProviderConfig, remote_provider_config: ProviderConfig
) -> AppConfig:
    return AppConfig(
        server=ServerConfig(host="0.0.0.0", port=9000),
        providers={"compound": static_provider_config, "upstream": remote_provider_config},
    )


# ---------------------------------------------------------------------------
# Config YAML fixture
# ---------------------------------------------------------------------------

SAMPLE_YAML = textwrap.dedent("""\
    server:
      host: 0.0.0.0
      port: 9000
    providers:
      compound:
        kind: static
        type: lending
        info:
          description: "Compound"
          website: "https://compound.finance"
        assets:
          - symbol: USDC
            apy: 0.04
            yield_freq: 15
            total_supply: "412733201.551322"
            minimum_amount: "0"
            meta_info:
              defi_info:
                asset_token: {symbol: USDC, chain: ETH, contract_address: "0xA0b8"}
                technical_token: {symbol: cUSDC, chain: ETH}
        positions:
          "0xABC": {USDC: "10.5"}
      tezos:
        kind: static
        type: staking
        assets:
          - symbol: XTZ
            apy: 0.056
            yield_freq: 172800
            total_supply: "0"
            minimum_amount: "1"
      upstream:
        kind: remote
        enabled: false
        endpoints: ["https://lend.example.com"]
        timeout: 10
""")


@pytest.fixture()
def sample_yaml_path(tmp_path: Path) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(SAMPLE_YAML)
    return cfg_file


@pytest.fixture()
def provider_factory():
    return _make_provider


@pytest.fixture()
def ok_backend_factory():
    return _ok_backend


@pytest.fixture()
def failing_backend_factory():
    return _failing_backend
