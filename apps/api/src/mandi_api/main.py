"""FastAPI application for the Mandi marketplace.

Provides:
- Vendor/buyer registration and login with JWT access + refresh tokens
- Access token refresh
- Logout (client-side token discard)
- Per-user language preference

Flow:
1. POST /api/auth/register - Create account, get tokens
2. POST /api/auth/login - Get tokens
3. POST /api/auth/refresh - Swap refresh token for a new access token
4. PUT /api/auth/language - Change preferred language (Bearer token)
"""

import logging
import os
import sys
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from dotenv import load_dotenv
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from mandi_api.auth.errors import UnknownServerError
from mandi_api.auth.routes import router as auth_router
from mandi_api.config import Settings
from mandi_api.db.database import create_engine, create_session_factory, init_db
from mandi_shared.schemas import format_error_list

logger = logging.getLogger("mandi-api")


def _error_body(error: str) -> dict:
    return {"success": False, "error": error}


# =============================================================================
# Exception Handlers
# =============================================================================


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Render HTTPExceptions in the same ``{success, error}`` shape as AuthResult."""
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed request bodies are a 400, not FastAPI's default 422."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(f"Invalid request data: {format_error_list(exc.errors())}"),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log the traceback, return a generic message."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(UnknownServerError.message),
    )


# =============================================================================
# App Factory
# =============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: str


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the API.

    Args:
        settings: Explicit configuration. Loaded from the environment when omitted,
            which fails fast in production if signing secrets are missing.
    """
    if settings is None:
        settings = Settings.from_env()
    else:
        settings.validate()

    engine = create_engine(settings.database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Create tables on startup, release connections on shutdown."""
        await init_db(engine)
        logger.info(f"Environment: {settings.environment}")
        yield
        await engine.dispose()

    app = FastAPI(
        title="Mandi Marketplace API",
        description="Multilingual marketplace for vendors and buyers",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(auth_router)

    @app.get("/health", response_model=HealthResponse)
    async def health_check():
        """Health check endpoint."""
        return HealthResponse(
            status="ok",
            timestamp=datetime.now(timezone.utc).isoformat(),
        )

    return app


def configure_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s  %(levelname)-8s  %(name)s - %(message)s",
        stream=sys.stdout,
    )


if __name__ == "__main__":
    import uvicorn

    load_dotenv(os.path.join(os.getcwd(), ".env.local"))
    load_dotenv()  # Also try default .env
    configure_logging()

    app_settings = Settings.from_env()
    uvicorn.run(create_app(app_settings), host="0.0.0.0", port=app_settings.port)
