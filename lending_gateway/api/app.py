"""HTTP API exposing the lending service.

Usage:
  lending-gateway serve --port 8420
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .. import __version__
from ..codec import encode_account, encode_provider, encode_rates
from ..errors import (
    InvalidAddressError,
    InvalidAssetError,
    LendingError,
    ProviderUnavailableError,
    UnknownProviderError,
)
from ..models import AccountRequest, RatesRequest
from ..services import LendingService

logger = logging.getLogger(__name__)

_ERROR_STATUS = {
    UnknownProviderError: 404,
    InvalidAssetError: 400,
    InvalidAddressError: 400,
    ProviderUnavailableError: 502,
}


class RatesRequestBody(BaseModel):
    assets: List[str] = Field(
        default_factory=list, description="Asset symbols; empty means provider default."
    )


class AccountRequestBody(BaseModel):
    addresses: List[str] = Field(default_factory=list, description="Account addresses.")
    assets: List[str] = Field(
        default_factory=list, description="Asset symbols to filter on; empty for all."
    )


router = APIRouter(prefix="/v1/lending", tags=["Lending"])


def _service(request: Request) -> LendingService:
    return request.app.state.service


@router.get("/providers")
async def providers(request: Request) -> Dict[str, Any]:
    """Lending providers, their info and supported assets."""
    result = await _service(request).list_providers()
    return {"docs": [encode_provider(p) for p in result]}


@router.post("/rates/{provider}")
async def rates(provider: str, payload: RatesRequestBody, request: Request) -> Dict[str, Any]:
    """Current lending rates of one provider for one or more assets."""
    result = await _service(request).get_rates(
        provider, RatesRequest(assets=tuple(payload.assets))
    )
    return {"docs": [encode_rates(r) for r in result]}


@router.post("/account/{provider}")
async def account(provider: str, payload: AccountRequestBody, request: Request) -> Dict[str, Any]:
    """Lending contracts held by one or more addresses at one provider."""
    result = await _service(request).get_accounts(
        provider,
        AccountRequest(addresses=tuple(payload.addresses), assets=tuple(payload.assets)),
    )
    return {"docs": [encode_account(a) for a in result]}


def _status_for(exc: Exception) -> int:
    for cls in type(exc).__mro__:
        if cls in _ERROR_STATUS:
            return _ERROR_STATUS[cls]
    return 500


async def _lending_error_handler(request: Request, exc: Exception) -> JSONResponse:
    status = _status_for(exc)
    if status >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status, content={"error": str(exc)})


def create_app(service: LendingService) -> FastAPI:
    """Build the FastAPI app around an already constructed service."""
    app = FastAPI(title="Lending Gateway API", version=__version__)
    app.state.service = service
    app.include_router(router)
    app.add_exception_handler(LendingError, _lending_error_handler)

    @app.get("/health")
    def health() -> Dict[str, object]:
        return {"ok": True, "providers": sorted(service.registry)}

    return app
