"""Remote lending backend: proxies to an upstream lending API with fallback."""
from __future__ import annotations

import dataclasses
import logging
import ssl
from typing import Any

import aiohttp
import certifi

from ..codec import (
    decode_account,
    decode_provider,
    decode_rates,
    encode_account_request,
)
from ..config import ProviderConfig
from ..errors import (
    InvalidAddressError,
    InvalidAssetError,
    LendingError,
    ProviderUnavailableError,
)
from ..models import (
    AccountLendingContracts,
    AccountRequest,
    LendingAssetRates,
    LendingProvider,
)

logger = logging.getLogger(__name__)


class RemoteLendingBackend:
    """Backend that forwards every call to an upstream HTTP service.

    Upstream routes are ``GET /info``, ``POST /rates`` and ``POST /accounts``
    under each configured base URL. Requests are forwarded unchanged, so the
    upstream decides how empty asset or address lists are treated. Endpoints
    are tried in order, starting from the last one that answered.
    """

    def __init__(self, name: str, config: ProviderConfig) -> None:
        self._name = name
        self.endpoints = [e.rstrip("/") for e in config.endpoints]
        self.timeout = config.timeout
        self.current_endpoint_index = 0

    def _client_error(self, status: int, body: Any) -> LendingError:
        """Map an upstream 4xx body to a typed error."""
        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict):
            code = error.get("code", "")
            message = error.get("message", "")
            value = error.get("value", "")
            if code == "invalid_asset":
                return InvalidAssetError(value, message)
            if code == "invalid_address":
                return InvalidAddressError(value, message)
        return ProviderUnavailableError(
            self._name, f"upstream rejected request (HTTP {status}): {error or body}"
        )

    async def _request(self, path: str, payload: dict[str, Any] | None = None) -> Any:
        """Call ``path`` on the first endpoint that answers; return the JSON docs."""
        if not self.endpoints:
            raise ProviderUnavailableError(self._name, "no endpoints configured")

        ssl_context = ssl.create_default_context(cafile=certifi.where())

        last_error: Exception | None = None
        for attempt in range(len(self.endpoints)):
            index = (self.current_endpoint_index + attempt) % len(self.endpoints)
            url = f"{self.endpoints[index]}{path}"

            try:
                connector = aiohttp.TCPConnector(ssl=ssl_context)
                timeout = aiohttp.ClientTimeout(total=self.timeout)
                async with aiohttp.ClientSession(connector=connector) as session:
                    if payload is None:
                        ctx = session.get(url, timeout=timeout)
                    else:
                        ctx = session.post(url, json=payload, timeout=timeout)
                    async with ctx as response:
                        if 400 <= response.status < 500:
                            body = await response.json(content_type=None)
                            raise self._client_error(response.status, body)
                        if response.status != 200:
                            raise RuntimeError(f"HTTP {response.status}")
                        data = await response.json(content_type=None)

                if index != self.current_endpoint_index:
                    logger.info("%s: switched to endpoint %s", self._name, self.endpoints[index])
                    self.current_endpoint_index = index

                if isinstance(data, dict) and "docs" in data:
                    return data["docs"]
                return data
            except LendingError:
                raise
            except Exception as e:
                last_error = e
                logger.warning("%s: endpoint %s failed: %s", self._name, url, e)
                if attempt < len(self.endpoints) - 1:
                    logger.info("Trying next endpoint...")
                continue

        raise ProviderUnavailableError(
            self._name, f"all endpoints failed, last error: {last_error}"
        )

    def _unusable(self, e: Exception) -> ProviderUnavailableError:
        return ProviderUnavailableError(self._name, f"unusable response: {e}")

    async def get_provider_info(self) -> LendingProvider:
        data = await self._request("/info")
        try:
            provider = decode_provider(data)
        except (ValueError, TypeError, AttributeError) as e:
            raise self._unusable(e) from e
        # The registry key is the provider id clients see, in both places.
        return dataclasses.replace(
            provider, id=self._name, info=dataclasses.replace(provider.info, id=self._name)
        )

    async def get_current_lending_rates(
        self, asset_symbols: list[str]
    ) -> list[LendingAssetRates]:
        data = await self._request("/rates", {"assets": list(asset_symbols)})
        try:
            return [decode_rates(item) for item in data]
        except (ValueError, TypeError, AttributeError) as e:
            raise self._unusable(e) from e

    async def get_account_lending_contracts(
        self, request: AccountRequest
    ) -> list[AccountLendingContracts]:
        data = await self._request("/accounts", encode_account_request(request))
        try:
            return [decode_account(item) for item in data]
        except (ValueError, TypeError, AttributeError) as e:
            raise self._unusable(e) from e
