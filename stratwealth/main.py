"""
StratWealth investment platform - FastAPI application.
Wires the domain routers, correlation-id tracing and the global error barrier.
"""
from typing import Callable, Awaitable, Dict, Any
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
import time
from uuid import uuid4

from stratwealth.core.config import settings
from stratwealth.core.database import init_db
from stratwealth.core.errors import AppError
from stratwealth.core.logger import logger
from stratwealth.admin.router import router as admin_router
from stratwealth.auth.router import router as auth_router
from stratwealth.investments.router import (
    admin_router as investments_admin_router,
    market_router,
    router as investments_router,
)
from stratwealth.kyc.router import admin_router as kyc_admin_router, router as kyc_router
from stratwealth.notifications.router import router as notifications_router
from stratwealth.properties.router import admin_router as properties_admin_router, router as properties_router
from stratwealth.referrals.router import admin_router as referrals_admin_router, router as referrals_router
from stratwealth.terms.router import router as terms_router
from stratwealth.wallet.router import admin_router as wallet_admin_router, router as wallet_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle management (startup/shutdown hooks)."""
    # Startup
    logger.info(f"Initializing {settings.APP_NAME} v{settings.VERSION}")
    init_db()
    logger.info("Database initialized")

    yield

    # Shutdown
    logger.info("Shutting down application")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.VERSION,
    description=(
        "Investment platform API: fixed-term plans, property purchases with "
        "installment plans, wallets, KYC and referrals."
    ),
    lifespan=lifespan
)

# CORS Configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Middleware for distributed tracing and logging
@app.middleware("http")
async def add_correlation_id(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
    """
    Injects a Correlation ID into the request context and propagates it to the response headers.
    """
    correlation_id = request.headers.get("X-Correlation-ID", str(uuid4()))
    request.state.correlation_id = correlation_id

    start_time = time.time()

    logger.info(
        f"Request: {request.method} {request.url.path}",
        extra={"correlation_id": correlation_id}
    )

    response = await call_next(request)

    process_time = time.time() - start_time
    response.headers["X-Correlation-ID"] = correlation_id
    response.headers["X-Process-Time"] = str(process_time)

    logger.info(
        f"Response: {response.status_code} | {process_time:.3f}s",
        extra={"correlation_id": correlation_id}
    )

    return response


# Router Registration
app.include_router(auth_router, prefix="/auth", tags=["Auth"])
app.include_router(terms_router, prefix="/terms", tags=["Terms"])
app.include_router(wallet_router, prefix="/wallet", tags=["Wallet"])
app.include_router(kyc_router, prefix="/kyc", tags=["KYC"])
app.include_router(investments_router, prefix="/investments", tags=["Investments"])
app.include_router(market_router, prefix="/market-plans", tags=["Investments"])
app.include_router(properties_router, prefix="/properties", tags=["Properties"])
app.include_router(notifications_router, prefix="/notifications", tags=["Notifications"])
app.include_router(referrals_router, prefix="/referrals", tags=["Referrals"])

app.include_router(admin_router, prefix="/admin", tags=["Admin"])
app.include_router(wallet_admin_router, prefix="/admin", tags=["Admin"])
app.include_router(kyc_admin_router, prefix="/admin", tags=["Admin"])
app.include_router(investments_admin_router, prefix="/admin", tags=["Admin"])
app.include_router(properties_admin_router, prefix="/admin", tags=["Admin"])
app.include_router(referrals_admin_router, prefix="/admin", tags=["Admin"])


@app.get("/api-info", tags=["Health"])
def api_info() -> Dict[str, Any]:
    """
    Endpoint exposing API metadata and service discovery links.
    """
    return {
        "app": settings.APP_NAME,
        "version": settings.VERSION,
        "status": "online",
        "endpoints": {
            "register": "/auth/register",
            "login": "/auth/login",
            "terms_quote": "/terms/quote",
            "terms_schedule": "/terms/schedule",
            "investments": "/investments",
            "properties": "/properties",
            "wallet": "/wallet",
            "kyc": "/kyc/status",
            "docs": "/docs",
            "redoc": "/redoc"
        }
    }


@app.get("/health", tags=["Health"])
def health_check() -> Dict[str, str]:
    """
    Liveness probe endpoint for orchestration systems.
    """
    return {
        "status": "healthy",
        "app": settings.APP_NAME,
        "version": settings.VERSION
    }


def _unauthenticated_browser_redirect() -> RedirectResponse:
    response = RedirectResponse(url=settings.LOGIN_REDIRECT_URL, status_code=302)
    response.delete_cookie("access_token")
    return response


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    """
    Domain errors raised by services. The payload carries the error's status,
    detail and, for KYC failures, the `requires_kyc` flag.
    """
    correlation_id = getattr(request.state, "correlation_id", "N/A")
    accept = request.headers.get("accept", "")

    logger.info(
        f"{type(exc).__name__}: {exc.status_code} | {exc.detail}",
        extra={"correlation_id": correlation_id}
    )

    if exc.status_code == 401 and "text/html" in accept:
        return _unauthenticated_browser_redirect()

    content = exc.to_payload()
    content["correlation_id"] = correlation_id
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Handle HTTP exceptions, including 401 Unauthorized for browser redirects.
    """
    correlation_id = getattr(request.state, "correlation_id", "N/A")
    accept = request.headers.get("accept", "")

    logger.info(
        f"HTTPException: {exc.status_code} | Accept: {accept}",
        extra={"correlation_id": correlation_id}
    )

    # 401 from a browser goes to the configured landing page
    if exc.status_code == 401 and "text/html" in accept:
        logger.info(f"Redirecting to {settings.LOGIN_REDIRECT_URL}", extra={"correlation_id": correlation_id})
        return _unauthenticated_browser_redirect()

    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "correlation_id": correlation_id}
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Global exception barrier.
    Captures unhandled exceptions, logs stack traces with Correlation IDs,
    and returns a sanitized 500 Internal Server Error response.
    """
    correlation_id = getattr(request.state, "correlation_id", "N/A")

    logger.error(
        f"Unhandled exception: {str(exc)}",
        exc_info=True,
        extra={"correlation_id": correlation_id}
    )

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal Server Error",
            "correlation_id": correlation_id
        }
    )
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "stratwealth.main:app",
        host="0.0.0.0",  # nosec
        port=8000,
        reload=settings.DEBUG
    )
