"""Configuration loader: reads config.yaml, interpolates env vars, validates."""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from .codec import decode_asset
from .models import AssetInfo, ProviderType, check_decimal

logger = logging.getLogger(__name__)

BACKEND_KINDS = ("static", "remote")

# ---------------------------------------------------------------------------
# Frozen config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ServerConfig:
    host: str = "127.0.0.1"
    port: int = 8420


@dataclass(frozen=True)
class ProviderInfoConfig:
    description: str = ""
    image: str = ""
    website: str = ""


@dataclass(frozen=True)
class ProviderConfig:
    kind: str = "static"
    enabled: bool = True
    type: ProviderType = ProviderType.LENDING
    info: ProviderInfoConfig = field(default_factory=ProviderInfoConfig)
    assets: tuple[AssetInfo, ...] = ()
    # address -> {symbol: decimal amount}
    positions: dict[str, dict[str, str]] = field(default_factory=dict)
    endpoints: tuple[str, ...] = ()
    timeout: int = 30


@dataclass(frozen=True)
class AppConfig:
    server: ServerConfig = field(default_factory=ServerConfig)
    providers: dict[str, ProviderConfig] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Env interpolation
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)}")


def _interpolate_env(value: Any) -> Any:
    """Recursively replace ${VAR} references with environment variable values."""
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    return value


# ---------------------------------------------------------------------------
# YAML → dataclass builders
# ---------------------------------------------------------------------------


def _build_server(raw: dict[str, Any]) -> ServerConfig:
    return ServerConfig(
        host=raw.get("host", ServerConfig.host),
        port=int(raw.get("port", ServerConfig.port)),
    )


def _build_assets(name: str, raw: list[dict[str, Any]]) -> tuple[AssetInfo, ...]:
    assets: list[AssetInfo] = []
    for entry in raw:
        try:
            assets.append(decode_asset(entry))
        except (ValueError, TypeError) as e:
            raise ValueError(f"Provider '{name}' has an invalid asset entry: {e}") from e
    return tuple(assets)


def _build_positions(name: str, raw: dict[str, Any]) -> dict[str, dict[str, str]]:
    positions: dict[str, dict[str, str]] = {}
    for address, holdings in raw.items():
        # YAML reads an unquoted 0x... key as a hex integer.
        if not isinstance(address, str):
            raise ValueError(
                f"Provider '{name}' position address {address!r} must be a quoted string"
            )
        if not isinstance(holdings, dict):
            raise ValueError(f"Provider '{name}' positions for {address} must be a mapping")
        for symbol, amount in holdings.items():
            if not isinstance(symbol, str):
                raise ValueError(
                    f"Provider '{name}' position symbol {symbol!r} for {address} "
                    f"must be a string"
                )
            if not isinstance(amount, str):
                raise ValueError(
                    f"Provider '{name}' position {address}/{symbol} must be a quoted "
                    f"decimal string"
                )
            try:
                check_decimal("amount", amount)
            except ValueError as e:
                raise ValueError(f"Provider '{name}' position {address}/{symbol}: {e}") from e
        positions[address] = dict(holdings)
    return positions


def _build_providers(raw: dict[str, Any]) -> dict[str, ProviderConfig]:
    providers: dict[str, ProviderConfig] = {}
    for name, cfg in raw.items():
        cfg = cfg or {}
        try:
            provider_type = ProviderType(cfg.get("type", "lending"))
        except ValueError:
            raise ValueError(
                f"Provider '{name}' has unknown type '{cfg.get('type')}'"
            ) from None
        info = cfg.get("info") or {}
        providers[name] = ProviderConfig(
            kind=cfg.get("kind", "static"),
            enabled=bool(cfg.get("enabled", True)),
            type=provider_type,
            info=ProviderInfoConfig(
                description=info.get("description", ""),
                image=info.get("image", ""),
                website=info.get("website", ""),
            ),
            assets=_build_assets(name, cfg.get("assets") or []),
            positions=_build_positions(name, cfg.get("positions") or {}),
            endpoints=tuple(cfg.get("endpoints") or []),
            timeout=int(cfg.get("timeout", 30)),
        )
    return providers


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration from YAML + .env.

    Args:
        config_path: Path to config.yaml. Defaults to ``config.yaml`` in the
            project root (one level up from this package).
    """
    load_dotenv()

    if config_path is None:
        config_path = Path(__file__).resolve().parent.parent / "config.yaml"
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    raw = _interpolate_env(raw)

    cfg = AppConfig(
        server=_build_server(raw.get("server") or {}),
        providers=_build_providers(raw.get("providers") or {}),
    )

    _validate(cfg)
    logger.info("Configuration loaded from %s", config_path)
    return cfg


def _validate(cfg: AppConfig) -> None:
    """Raise on invalid configuration."""
    if not cfg.providers:
        raise ValueError("At least one provider must be configured")

    for name, provider in cfg.providers.items():
        if provider.kind not in BACKEND_KINDS:
            raise ValueError(
                f"Provider '{name}' references unknown backend kind '{provider.kind}'"
            )
        if provider.kind == "remote" and not provider.endpoints:
            raise ValueError(f"Remote provider '{name}' has no endpoints")
