"""Unit tests for the JSON-shaped codec."""
from __future__ import annotations

import json

import pytest

from lending_gateway.codec import (
    decode_account,
    decode_asset,
    decode_provider,
    decode_rates,
    encode_account,
    encode_asset,
    encode_provider,
    encode_rates,
    encode_token,
)
from lending_gateway.models import (
    AccountLendingContracts,
    AssetInfo,
    DefiTokenInfo,
    LendingAssetRates,
    LendingContract,
    LendingProvider,
)


class TestOmission:
    def test_meta_info_omitted_without_defi_info(self, plain_asset: AssetInfo) -> None:
        encoded = encode_asset(plain_asset)
        assert "meta_info" not in encoded
        assert "defi_info" not in json.dumps(encoded)

    def test_meta_info_present_with_defi_info(self, sample_asset: AssetInfo) -> None:
        encoded = encode_asset(sample_asset)
        defi = encoded["meta_info"]["defi_info"]
        assert defi["asset_token"] == {
            "symbol": "USDC",
            "chain": "ETH",
            "contract_address": "0xA0b8",
        }
        assert defi["technical_token"]["symbol"] == "cUSDC"

    def test_contract_address_omitted_when_absent(self) -> None:
        assert encode_token(DefiTokenInfo(symbol="XTZ", chain="XTZ")) == {
            "symbol": "XTZ",
            "chain": "XTZ",
        }

    def test_provider_without_defi_round_trips_without_meta(
        self, provider_factory, plain_asset: AssetInfo
    ) -> None:
        provider = provider_factory("compound", assets=(plain_asset,))
        wire = json.dumps(encode_provider(provider))
        assert "meta_info" not in wire
        assert "null" not in wire
        decoded = decode_provider(json.loads(wire))
        assert decoded == provider
        assert decoded.assets[0].meta_info.defi_info is None


class TestDecimalStrings:
    def test_round_trip_byte_for_byte(self, sample_asset: AssetInfo) -> None:
        contract = LendingContract(asset=sample_asset, current_amount="0.100000000000000000000000001")
        account = AccountLendingContracts(address="0xABC", contracts=(contract,))

        wire = json.dumps(encode_account(account))
        decoded = decode_account(json.loads(wire))

        assert decoded == account
        assert decoded.contracts[0].current_amount == "0.100000000000000000000000001"
        assert decoded.contracts[0].asset.total_supply == "412733201.551322"
        assert '"current_amount": "0.100000000000000000000000001"' in wire

    def test_numeric_total_supply_rejected(self) -> None:
        with pytest.raises(ValueError, match="total_supply"):
            decode_asset({"symbol": "ETH", "total_supply": 1000.5})

    def test_numeric_current_amount_rejected(self, plain_asset: AssetInfo) -> None:
        raw = {
            "address": "0x1",
            "contracts": [{"asset": encode_asset(plain_asset), "current_amount": 12}],
        }
        with pytest.raises(ValueError, match="current_amount"):
            decode_account(raw)


class TestProviderCodec:
    def test_full_round_trip(self, sample_provider: LendingProvider) -> None:
        encoded = encode_provider(sample_provider)
        assert encoded["type"] == "lending"
        assert encoded["info"]["id"] == "compound"
        assert decode_provider(json.loads(json.dumps(encoded))) == sample_provider

    def test_unknown_type_rejected(self, sample_provider: LendingProvider) -> None:
        encoded = encode_provider(sample_provider)
        encoded["type"] = "farming"
        with pytest.raises(ValueError, match="Unknown provider type"):
            decode_provider(encoded)

    def test_missing_id_rejected(self) -> None:
        with pytest.raises(ValueError, match="Missing required field 'id'"):
            decode_provider({"info": {"id": "x"}})


class TestRatesCodec:
    def test_encode(self) -> None:
        assert encode_rates(LendingAssetRates(symbol="ETH", apy=0.05)) == {
            "symbol": "ETH",
            "apy": 0.05,
            "yield_period": 0,
            "yield_freq": 0,
        }

    def test_decode_requires_apy(self) -> None:
        with pytest.raises(ValueError, match="apy"):
            decode_rates({"symbol": "ETH"})
