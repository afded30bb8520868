"""Provider registry: provider id to backend, built once at startup."""
from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any, Callable

from .backends import RemoteLendingBackend, StaticLendingBackend
from .config import AppConfig, ProviderConfig
from .interfaces.lending_backend import LendingBackend

logger = logging.getLogger(__name__)

# Registry of backend factories keyed by backend kind.
_BACKEND_FACTORIES: dict[str, Callable[[str, ProviderConfig], Any]] = {
    "static": lambda name, cfg: StaticLendingBackend(name, cfg),
    "remote": lambda name, cfg: RemoteLendingBackend(name, cfg),
}


class ProviderRegistry(Mapping[str, LendingBackend]):
    """Read-only mapping of provider id to backend.

    The backing dict is copied on construction and exposed only through a
    mapping proxy, so the registry can be shared across requests without
    locking.
    """

    def __init__(self, backends: Mapping[str, LendingBackend] | None = None) -> None:
        self._backends: Mapping[str, LendingBackend] = MappingProxyType(
            dict(backends or {})
        )

    def __getitem__(self, provider_id: str) -> LendingBackend:
        return self._backends[provider_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._backends)

    def __len__(self) -> int:
        return len(self._backends)

    def get(self, provider_id: str, default: Any = None) -> Any:
        """Return the backend for ``provider_id``, or ``default`` when absent."""
        return self._backends.get(provider_id, default)

    def __repr__(self) -> str:
        return f"ProviderRegistry({sorted(self._backends)!r})"


def build_registry(config: AppConfig) -> ProviderRegistry:
    """Construct backends for every enabled provider in ``config``."""
    backends: dict[str, LendingBackend] = {}
    for name, provider_cfg in config.providers.items():
        if not provider_cfg.enabled:
            logger.info("Provider '%s' is disabled, skipping", name)
            continue
        factory = _BACKEND_FACTORIES.get(provider_cfg.kind)
        if factory:
            backends[name] = factory(name, provider_cfg)
        else:
            logger.warning(
                "No backend factory for kind '%s' (provider '%s')",
                provider_cfg.kind,
                name,
            )

    logger.info("Registered %d lending providers: %s", len(backends), ", ".join(sorted(backends)))
    return ProviderRegistry(backends)
