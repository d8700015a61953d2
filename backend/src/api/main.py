"""FastAPI application entry point."""
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from api.routers import auth, health, market, preferences, spa, users, votes
from core.cache import TTLCache
from core.config import Settings, get_settings
from db.session import init_models
from services.exceptions import (
    AllProvidersFailedError,
    ConfigError,
    DuplicateEmailError,
    InvalidCredentialsError,
    NotFoundError,
    ValidationError,
)
from services.gateway import create_http_client
from services.insight_service import HuggingFaceChatProvider, InsightService
from services.news_service import NewsService
from services.price_service import PriceService

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def build_services(
    app: FastAPI,
    settings: Settings,
    http_client: httpx.AsyncClient,
) -> None:
    """Create the gateways (and their caches) and attach them to app.state."""
    app.state.price_service = PriceService(
        http_client,
        TTLCache(settings.prices_cache_ttl_seconds),
        base_url=settings.coingecko_base_url,
        api_key=settings.coingecko_api_key,
    )
    app.state.news_service = NewsService(
        http_client,
        TTLCache(settings.news_cache_ttl_seconds),
        base_url=settings.cryptopanic_base_url,
        api_key=settings.cryptopanic_key,
    )
    app.state.insight_service = InsightService([
        HuggingFaceChatProvider(
            http_client,
            url=settings.hf_router_url,
            token=settings.hf_token,
            model=model,
        )
        for model in settings.insight_models
    ])


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifespan - startup and shutdown."""
    app_settings = get_settings()
    configure_logging(app_settings.log_level)

    # Booleans only - never log secret values
    logger.info("JWT_SECRET configured: %s", bool(app_settings.jwt_secret))
    logger.info("CRYPTOPANIC_KEY configured: %s", bool(app_settings.cryptopanic_key))
    logger.info("HF_TOKEN configured: %s", bool(app_settings.hf_token))

    await init_models()

    http_client = create_http_client(app_settings.upstream_timeout_seconds)
    build_services(fastapi_app, app_settings, http_client)

    yield

    await http_client.aclose()


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        """Process request and add security headers to response."""
        response = await call_next(request)
        # Prevent MIME type sniffing
        response.headers["X-Content-Type-Options"] = "nosniff"
        # Prevent clickjacking
        response.headers["X-Frame-Options"] = "DENY"
        return response


app_settings = get_settings()

app = FastAPI(
    title="Crypto Dashboard API",
    description="Personalized crypto dashboard: prices, news, AI insight and memes.",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(
    _request: Request, exc: RequestValidationError,
) -> JSONResponse:
    """Report malformed request bodies as 400 with the first offending field."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = str(first.get("loc", ("", ""))[-1]) if first else ""
    if any(e.get("type") == "missing" for e in errors):
        detail = "Missing fields"
    else:
        detail = f"Invalid value for {field}" if field else "Invalid request"
    return JSONResponse(status_code=400, content={"detail": detail, "field": field})


@app.exception_handler(ValidationError)
async def validation_exception_handler(
    _request: Request, exc: ValidationError,
) -> JSONResponse:
    """Handle service-level validation failures."""
    content: dict = {"detail": exc.message, "field": exc.field}
    if exc.allowed is not None:
        content["allowed"] = exc.allowed
    return JSONResponse(status_code=400, content=content)


@app.exception_handler(DuplicateEmailError)
async def duplicate_email_exception_handler(
    _request: Request, exc: DuplicateEmailError,
) -> JSONResponse:
    """Handle registration with an existing email."""
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(InvalidCredentialsError)
async def invalid_credentials_exception_handler(
    _request: Request, exc: InvalidCredentialsError,
) -> JSONResponse:
    """Handle failed login (same response for unknown email and wrong password)."""
    return JSONResponse(status_code=401, content={"detail": str(exc)})


@app.exception_handler(NotFoundError)
async def not_found_exception_handler(
    _request: Request, exc: NotFoundError,
) -> JSONResponse:
    """Handle references to entities that no longer exist."""
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(ConfigError)
async def config_exception_handler(
    _request: Request, exc: ConfigError,
) -> JSONResponse:
    """Handle missing server-side configuration."""
    logger.error("Missing configuration: %s", exc.setting)
    return JSONResponse(status_code=500, content={"detail": str(exc)})


@app.exception_handler(AllProvidersFailedError)
async def all_providers_failed_exception_handler(
    _request: Request, exc: AllProvidersFailedError,
) -> JSONResponse:
    """Report every attempted model and the last upstream failure."""
    last_error = None
    if exc.last_error is not None:
        last_error = {
            "model": exc.last_model,
            "status": exc.last_error.status,
            "details": exc.last_error.details or str(exc.last_error),
        }
    return JSONResponse(
        status_code=502,
        content={
            "detail": {
                "error": "AI provider error",
                "tried_models": exc.tried,
                "last_error": last_error,
            },
        },
    )


# Security headers middleware (runs after CORS, adds headers to responses)
app.add_middleware(SecurityHeadersMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=app_settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(preferences.router)
app.include_router(votes.router)
app.include_router(market.router)
# Catch-all SPA route must be registered last
app.include_router(spa.router)


def run() -> None:
    """Run the server with uvicorn."""
    import uvicorn  # noqa: PLC0415

    uvicorn.run("api.main:app", host="0.0.0.0", port=3001)
