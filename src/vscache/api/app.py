"""
HTTP surface for vscache.

A thin FastAPI dispatcher: every route calls one ExplorerCacheService method
and exception handlers translate the VSCacheError hierarchy to status codes.

Run with:
    vscache  # console script, reads PORT / VSCACHE_HOST
    uvicorn --factory vscache.api.app:create_app
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel

from vscache.core.config import Settings
from vscache.core.exceptions import (
    ConfigurationError,
    UpstreamRejectedError,
    UpstreamUnavailableError,
    ValidationError,
    VSCacheError,
)
from vscache.core.logging import configure_logging, get_logger
from vscache.service import ExplorerCacheService

logger = get_logger("api")

ROUTES = (
    "/",
    "/api/test",
    "/api/network",
    "/api/balance/{address}",
    "/api/transactions/{address}",
    "/api/token-balances/{address}",
    "/api/address/{address}",
    "/api/address/{address}/tokens",
    "/api/nft-info",
    "/api/vsg-info",
)


class NetworkSwitch(BaseModel):
    network: Any = None


def status_code_for(exc: VSCacheError) -> int:
    """HTTP status for a service error."""
    # UpstreamRejectedError subclasses UpstreamUnavailableError, check it first
    if isinstance(exc, UpstreamRejectedError):
        return 400
    if isinstance(exc, UpstreamUnavailableError):
        return 502
    if isinstance(exc, ValidationError):
        return 400
    if isinstance(exc, ConfigurationError):
        return 500
    return 502


def error_body(exc: VSCacheError) -> dict[str, Any]:
    if isinstance(exc, UpstreamRejectedError):
        return {"error": "API Error", "message": exc.message, "result": exc.result}
    if isinstance(exc, UpstreamUnavailableError):
        return {
            "error": "Failed to fetch upstream data",
            "details": {
                "status": exc.status_code,
                "message": exc.message,
                "body": exc.body,
                "timedOut": exc.timed_out,
            },
        }
    body: dict[str, Any] = {"error": exc.message}
    if exc.details:
        body["details"] = exc.details
    return body


def create_app(
    service: ExplorerCacheService | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        service: Service to dispatch to (default: built from ``settings``)
        settings: Used when ``service`` is not given (default: Settings.from_env())
    """
    if service is None:
        service = ExplorerCacheService(settings)
    settings = service.settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Serving on network {service.selector.get().value}; routes: {', '.join(ROUTES)}")
        yield
        await service.close()

    app = FastAPI(title="vscache", lifespan=lifespan)
    app.state.service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
        max_age=3600,
    )

    @app.exception_handler(VSCacheError)
    async def handle_service_error(request: Request, exc: VSCacheError) -> JSONResponse:
        status = status_code_for(exc)
        if status >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc}")
        else:
            logger.info(f"{request.method} {request.url.path} rejected: {exc}")
        return JSONResponse(error_body(exc), status_code=status)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse({"error": "Invalid request body"}, status_code=400)

    @app.get("/", response_class=PlainTextResponse)
    async def root() -> str:
        return "vscache is running"

    @app.get("/api/test")
    async def test_connection() -> dict[str, Any]:
        return await service.test_connection()

    @app.get("/api/network")
    async def get_network() -> dict[str, Any]:
        return service.get_network()

    @app.post("/api/network")
    async def set_network(body: NetworkSwitch) -> dict[str, Any]:
        return service.set_network(body.network)

    @app.get("/api/balance/{address}")
    async def get_balance(address: str) -> dict[str, Any]:
        return await service.get_balance(address)

    @app.get("/api/transactions/{address}")
    async def get_transactions(
        address: str, page: str | None = None, limit: str | None = None
    ) -> dict[str, Any]:
        return await service.get_transactions(address, page=page, limit=limit)

    @app.get("/api/token-balances/{address}")
    async def get_token_balances(address: str) -> dict[str, Any]:
        return await service.get_token_balances(address)

    @app.get("/api/address/{address}")
    async def get_address_info(address: str) -> dict[str, Any]:
        return await service.get_address_info(address)

    @app.get("/api/address/{address}/tokens")
    async def get_address_tokens(address: str) -> dict[str, Any]:
        return await service.get_address_tokens(address)

    @app.get("/api/nft-info")
    async def get_nft_info() -> dict[str, Any]:
        return await service.get_nft_info()

    @app.get("/api/vsg-info")
    async def get_market_info() -> dict[str, Any]:
        return await service.get_market_info()

    return app


def main() -> None:
    """Console entry point: run the API under uvicorn."""
    import uvicorn

    settings = Settings.from_env()
    configure_logging(settings)
    app = create_app(settings=settings)
    logger.info(f"Starting vscache on http://{settings.host}:{settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


__all__ = ["create_app", "error_body", "main", "status_code_for"]
