# src/pm_clearing/api/cron_router.py
"""Cron trigger for the settlement pass.

Call every 1–2 minutes from an external scheduler. The shared secret may be
sent as `Authorization: Bearer <secret>`, `X-Cron-Secret: <secret>` or
`?secret=<secret>`. Every non-success response still carries a zeroed
summary so the caller always sees the same shape.
"""
import hmac
import logging
from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from config.settings import Settings, settings
from src.pm_clearing.application.schemas import SettlementRunSummary
from src.pm_clearing.application.service import SettlementService
from src.pm_clearing.domain.config import SettlementConfig
from src.pm_common.database import async_session_factory
from src.pm_common.errors import (
    AppError,
    CronSecretNotConfiguredError,
    CronUnauthorizedError,
    PriceFeedNotConfiguredError,
    SettlementConfigError,
    SettlementRunError,
)
from src.pm_common.response import ApiResponse, error_response, success_response
from src.pm_pricing.infrastructure.coingecko_client import CoinGeckoPriceClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cron", tags=["cron"])

ServiceOpener = Callable[[Settings], AbstractAsyncContextManager[SettlementService]]


def get_cron_settings() -> Settings:
    return settings


@asynccontextmanager
async def open_settlement_service(cfg: Settings) -> AsyncIterator[SettlementService]:
    """Build the service with explicit config and a per-pass price client."""
    if not cfg.PRICE_API_KEY:
        raise PriceFeedNotConfiguredError()
    try:
        config = SettlementConfig.from_settings(cfg)
    except ValueError as exc:
        raise SettlementConfigError(str(exc)) from exc
    async with CoinGeckoPriceClient(
        cfg.PRICE_API_KEY, cfg.PRICE_API_BASE_URL, cfg.PRICE_API_TIMEOUT_SECONDS
    ) as prices:
        yield SettlementService(config, prices, async_session_factory)


def get_service_opener() -> ServiceOpener:
    return open_settlement_service


def _provided_secret(request: Request, query_secret: str | None) -> str | None:
    auth = request.headers.get("authorization")
    if auth:
        return auth.replace("Bearer ", "", 1).strip()
    return request.headers.get("x-cron-secret") or query_secret


def verify_cron_secret(cfg: Settings, provided: str | None) -> None:
    if not cfg.CRON_SECRET:
        logger.error("CRON_SECRET not set; rejecting settlement trigger")
        raise CronSecretNotConfiguredError()
    if not provided or not hmac.compare_digest(
        provided.encode("utf-8"), cfg.CRON_SECRET.encode("utf-8")
    ):
        raise CronUnauthorizedError()


@router.api_route("/check-price-markets", methods=["GET", "POST"], response_model=None)
async def check_price_markets(
    request: Request,
    cfg: Annotated[Settings, Depends(get_cron_settings)],
    open_service: Annotated[ServiceOpener, Depends(get_service_opener)],
    secret: Annotated[str | None, Query()] = None,
) -> ApiResponse | JSONResponse:
    request_id = getattr(request.state, "request_id", None)
    try:
        verify_cron_secret(cfg, _provided_secret(request, secret))
        async with open_service(cfg) as service:
            summary = await service.run_pass()
    except AppError as exc:
        logger.warning("Settlement trigger rejected: %d %s", exc.code, exc.message)
        return _error_json(exc, request_id)
    except Exception as exc:
        logger.exception("Settlement pass failed unexpectedly")
        return _error_json(SettlementRunError(str(exc) or type(exc).__name__), request_id)
    return success_response(summary.to_json(), request_id=request_id)


def _error_json(exc: AppError, request_id: str | None) -> JSONResponse:
    resp = error_response(
        exc.code, exc.message, data=SettlementRunSummary().to_json(), request_id=request_id
    )
    return JSONResponse(status_code=exc.http_status, content=resp.model_dump())
