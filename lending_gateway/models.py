"""Data models: all frozen (immutable)."""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum


def check_decimal(name: str, value: str) -> None:
    """Raise ValueError unless ``value`` is a finite decimal string."""
    if not isinstance(value, str):
        raise ValueError(f"{name} must be a decimal string, got {type(value).__name__}")
    try:
        parsed = Decimal(value)
    except InvalidOperation:
        raise ValueError(f"{name} is not a valid decimal: {value!r}") from None
    if not parsed.is_finite():
        raise ValueError(f"{name} must be finite: {value!r}")


class ProviderType(str, Enum):
    LENDING = "lending"
    STAKING = "staking"


@dataclass(frozen=True)
class LendingProviderInfo:
    """Descriptive info shown to clients."""

    id: str
    description: str = ""
    image: str = ""
    website: str = ""


@dataclass(frozen=True)
class DefiTokenInfo:
    symbol: str
    chain: str
    contract_address: str | None = None


@dataclass(frozen=True)
class DefiAssetInfo:
    """On-chain token mechanics: the deposited asset and its receipt token."""

    asset_token: DefiTokenInfo
    technical_token: DefiTokenInfo


@dataclass(frozen=True)
class AssetMetaInfo:
    defi_info: DefiAssetInfo | None = None


@dataclass(frozen=True)
class AssetInfo:
    """A lendable asset and its current yield terms.

    ``yield_period`` is the validity of the current APY in seconds (0 for a
    variable APY); ``yield_freq`` is the interval between yield distributions.
    ``total_supply`` and ``minimum_amount`` are decimal strings.
    """

    symbol: str
    description: str = ""
    apy: float = 0.0
    yield_period: int = 0
    yield_freq: int = 0
    total_supply: str = "0"
    minimum_amount: str = "0"
    meta_info: AssetMetaInfo = field(default_factory=AssetMetaInfo)

    def __post_init__(self) -> None:
        check_decimal("total_supply", self.total_supply)
        check_decimal("minimum_amount", self.minimum_amount)


@dataclass(frozen=True)
class LendingProvider:
    id: str
    info: LendingProviderInfo
    type: ProviderType = ProviderType.LENDING
    assets: tuple[AssetInfo, ...] = ()


@dataclass(frozen=True)
class LendingAssetRates:
    """Current rate of one asset at one provider."""

    symbol: str
    apy: float
    yield_period: int = 0
    yield_freq: int = 0


@dataclass(frozen=True)
class LendingContract:
    """Amount deposited in one asset; ``current_amount`` is a decimal string."""

    asset: AssetInfo
    current_amount: str

    def __post_init__(self) -> None:
        check_decimal("current_amount", self.current_amount)


@dataclass(frozen=True)
class AccountLendingContracts:
    address: str
    contracts: tuple[LendingContract, ...] = ()


@dataclass(frozen=True)
class AccountRequest:
    addresses: tuple[str, ...] = ()
    assets: tuple[str, ...] = ()


@dataclass(frozen=True)
class RatesRequest:
    assets: tuple[str, ...] = ()
