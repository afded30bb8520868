"""JSON-shaped encoding of the domain model.

Optional parts are omitted rather than emitted as null: ``meta_info`` is
dropped when it carries no ``defi_info`` and ``contract_address`` is dropped
when empty. Decimal-string fields pass through untouched in both directions;
a JSON number in their place is rejected.
"""
from __future__ import annotations

from typing import Any

from .models import (
    AccountLendingContracts,
    AccountRequest,
    AssetInfo,
    AssetMetaInfo,
    DefiAssetInfo,
    DefiTokenInfo,
    LendingAssetRates,
    LendingContract,
    LendingProvider,
    LendingProviderInfo,
    ProviderType,
)


def _require(raw: dict[str, Any], key: str) -> Any:
    if not isinstance(raw, dict):
        raise ValueError(f"Expected an object, got {type(raw).__name__}")
    if key not in raw:
        raise ValueError(f"Missing required field '{key}'")
    return raw[key]


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


def encode_token(token: DefiTokenInfo) -> dict[str, Any]:
    out: dict[str, Any] = {"symbol": token.symbol, "chain": token.chain}
    if token.contract_address:
        out["contract_address"] = token.contract_address
    return out


def encode_asset(asset: AssetInfo) -> dict[str, Any]:
    out: dict[str, Any] = {
        "symbol": asset.symbol,
        "description": asset.description,
        "apy": asset.apy,
        "yield_period": asset.yield_period,
        "yield_freq": asset.yield_freq,
        "total_supply": asset.total_supply,
        "minimum_amount": asset.minimum_amount,
    }
    defi = asset.meta_info.defi_info
    if defi is not None:
        out["meta_info"] = {
            "defi_info": {
                "asset_token": encode_token(defi.asset_token),
                "technical_token": encode_token(defi.technical_token),
            }
        }
    return out


def encode_provider(provider: LendingProvider) -> dict[str, Any]:
    return {
        "id": provider.id,
        "info": {
            "id": provider.info.id,
            "description": provider.info.description,
            "image": provider.info.image,
            "website": provider.info.website,
        },
        "type": provider.type.value,
        "assets": [encode_asset(a) for a in provider.assets],
    }


def encode_rates(rates: LendingAssetRates) -> dict[str, Any]:
    return {
        "symbol": rates.symbol,
        "apy": rates.apy,
        "yield_period": rates.yield_period,
        "yield_freq": rates.yield_freq,
    }


def encode_contract(contract: LendingContract) -> dict[str, Any]:
    return {
        "asset": encode_asset(contract.asset),
        "current_amount": contract.current_amount,
    }


def encode_account(account: AccountLendingContracts) -> dict[str, Any]:
    return {
        "address": account.address,
        "contracts": [encode_contract(c) for c in account.contracts],
    }


def encode_account_request(request: AccountRequest) -> dict[str, Any]:
    return {"addresses": list(request.addresses), "assets": list(request.assets)}


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def decode_token(raw: dict[str, Any]) -> DefiTokenInfo:
    return DefiTokenInfo(
        symbol=_require(raw, "symbol"),
        chain=_require(raw, "chain"),
        contract_address=raw.get("contract_address") or None,
    )


def decode_meta_info(raw: dict[str, Any] | None) -> AssetMetaInfo:
    if not raw:
        return AssetMetaInfo()
    if not isinstance(raw, dict):
        raise ValueError("'meta_info' must be an object")
    if not raw.get("defi_info"):
        return AssetMetaInfo()
    defi = raw["defi_info"]
    return AssetMetaInfo(
        defi_info=DefiAssetInfo(
            asset_token=decode_token(_require(defi, "asset_token")),
            technical_token=decode_token(_require(defi, "technical_token")),
        )
    )


def decode_asset(raw: dict[str, Any]) -> AssetInfo:
    return AssetInfo(
        symbol=_require(raw, "symbol"),
        description=raw.get("description", ""),
        apy=float(raw.get("apy", 0.0)),
        yield_period=int(raw.get("yield_period", 0)),
        yield_freq=int(raw.get("yield_freq", 0)),
        total_supply=raw.get("total_supply", "0"),
        minimum_amount=raw.get("minimum_amount", "0"),
        meta_info=decode_meta_info(raw.get("meta_info")),
    )


def decode_provider(raw: dict[str, Any]) -> LendingProvider:
    info = _require(raw, "info")
    try:
        provider_type = ProviderType(raw.get("type", ProviderType.LENDING.value))
    except ValueError:
        raise ValueError(f"Unknown provider type {raw.get('type')!r}") from None
    return LendingProvider(
        id=_require(raw, "id"),
        info=LendingProviderInfo(
            id=_require(info, "id"),
            description=info.get("description", ""),
            image=info.get("image", ""),
            website=info.get("website", ""),
        ),
        type=provider_type,
        assets=tuple(decode_asset(a) for a in raw.get("assets") or []),
    )


def decode_rates(raw: dict[str, Any]) -> LendingAssetRates:
    return LendingAssetRates(
        symbol=_require(raw, "symbol"),
        apy=float(_require(raw, "apy")),
        yield_period=int(raw.get("yield_period", 0)),
        yield_freq=int(raw.get("yield_freq", 0)),
    )


def decode_contract(raw: dict[str, Any]) -> LendingContract:
    return LendingContract(
        asset=decode_asset(_require(raw, "asset")),
        current_amount=_require(raw, "current_amount"),
    )


def decode_account(raw: dict[str, Any]) -> AccountLendingContracts:
    return AccountLendingContracts(
        address=_require(raw, "address"),
        contracts=tuple(decode_contract(c) for c in raw.get("contracts") or []),
    )
