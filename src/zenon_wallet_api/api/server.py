# File: src/zenon_wallet_api/api/server.py
from contextlib import asynccontextmanager
from typing import Dict, List, Optional
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from .. import __version__
from ..config.settings import WalletApiConfig
from ..exceptions import WalletApiError
from .dependencies import WalletServices, build_services
from .routes import plasma_router, transfer_router, wallet_router

logger = logging.getLogger(__name__)

PROBLEM_JSON = "application/problem+json"

def _problem(status: int, title: str, detail: Optional[str] = None, **extra) -> JSONResponse:
    body = {
        "type": f"https://httpstatuses.io/{status}",
        "title": title,
        "status": status,
    }
    if detail:
        body["detail"] = detail
    body.update(extra)
    return JSONResponse(body, status_code=status, media_type=PROBLEM_JSON)

async def handle_wallet_error(request: Request, exc: WalletApiError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected ({exc.status_code}): {exc.message}")

    if exc.status_code == 401:
        return PlainTextResponse(exc.message, status_code=401, headers={"WWW-Authenticate": "Bearer"})
    if exc.status_code == 403:
        return PlainTextResponse(exc.message, status_code=403)
    return _problem(exc.status_code, exc.title, exc.message)

async def handle_validation_error(request: Request, exc: RequestValidationError):
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        errors.setdefault(location or "request", []).append(error.get("msg", "Invalid value"))
    return _problem(400, "One or more validation errors occurred.", errors=errors)

def create_app(
    config: Optional[WalletApiConfig] = None,
    services: Optional[WalletServices] = None
) -> FastAPI:
    if services is None:
        services = build_services(config or WalletApiConfig())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await services.wallet.load()
        try:
            yield
        finally:
            await services.wallet.close()
            await services.node.close()

    app = FastAPI(title="Zenon Wallet API", version=__version__, lifespan=lifespan)
    app.state.services = services
    
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(WalletApiError, handle_wallet_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    
    app.include_router(wallet_router)
    app.include_router(plasma_router)
    app.include_router(transfer_router)
    
    return app
