"""HTTP plumbing shared by every router: domain contexts and error rendering.

Marketplace errors are rendered as ``{"error": {"code": ..., "message": ...}}``
with the message localised from the request's Accept-Language header. Storage
errors and stack traces never reach the response body.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from shared.errors import (
    EmptyCart,
    InsufficientStock,
    InvalidTransition,
    MarketplaceError,
    OrderNotFound,
    ProductNotFound,
    ProductNotPurchasable,
    Unauthenticated,
    Unauthorized,
    Unavailable,
)
from shared.messages import localize, negotiate_language

logger = structlog.get_logger(__name__)

_STATUS_CODES = {
    EmptyCart: 400,
    ProductNotFound: 404,
    ProductNotPurchasable: 409,
    InsufficientStock: 409,
    Unavailable: 503,
    Unauthenticated: 401,
    Unauthorized: 403,
    OrderNotFound: 404,
    InvalidTransition: 409,
}


def status_code_for(error: MarketplaceError) -> int:
    for cls in type(error).__mro__:
        if cls in _STATUS_CODES:
            return _STATUS_CODES[cls]
    return 400


async def marketplace_error_handler(request: Request, exc: MarketplaceError) -> JSONResponse:
    status_code = status_code_for(exc)
    language = negotiate_language(request.headers.get("accept-language"))
    if status_code >= 500:
        logger.error("api.request_failed", path=request.url.path, code=exc.code)
    return JSONResponse(
        status_code=status_code,
        content={"error": {"code": exc.code, "message": localize(exc, language)}},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Install Protean's handlers plus the marketplace error handler."""
    register_exception_handlers(app)
    app.add_exception_handler(MarketplaceError, marketplace_error_handler)


def install_domain_context(app: FastAPI, route_domain_map: dict) -> None:
    """Push the Protean domain owning a URL prefix around each matching request."""

    def _resolve_domain(path: str):
        for prefix, domain in route_domain_map.items():
            if path.startswith(prefix):
                return domain
        return None

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        domain = _resolve_domain(request.url.path)
        if domain is not None:
            with domain.domain_context():
                response = await call_next(request)
            return response
        # No domain match, pass through (health check, docs, etc.)
        return await call_next(request)
