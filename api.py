"""
Portfolio Admin API

Main entry point for the portfolio backend's admin authentication API.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Common library imports
from common.database import MongoDB, MongoStore, StoreError
from common.utils import APIException, error_response, success_response
from common.utils.logging_config import configure_logging

# App-specific imports
from portfolio.auth import build_auth_services
from portfolio.config import Settings, settings as default_settings
from portfolio.routers import auth_router

logger = logging.getLogger(__name__)

API_PREFIX = "/api"
VERSION = "1.0.0"


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    The lifespan connects to MongoDB and wires the auth services onto
    ``app.state.auth``. Tests that do not enter the lifespan set
    ``app.state.auth`` themselves.
    """
    settings = settings or default_settings
    main_db = MongoDB()

    # =========================================================================
    # Application Lifespan
    # =========================================================================
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Handles startup and shutdown: configuration checks, database
        connection and service initialization.
        """
        configure_logging(settings.LOG_LEVEL)
        logger.info("Starting Portfolio Admin API...")

        # Missing secrets are fatal; there are no fallback values
        settings.validate_required()

        await main_db.connect(
            uri=settings.MONGODB_URI,
            database_name=settings.MONGODB_DATABASE,
        )

        http_client = httpx.AsyncClient(timeout=settings.GEOIP_TIMEOUT_SECONDS)

        # Released even if startup fails past this point
        try:
            services = build_auth_services(MongoStore(main_db.db), settings, http_client)
            await services.admin_service.ensure_indexes()
            await services.session_manager.ensure_indexes()
            app.state.auth = services
            logger.info("Auth services initialized")

            yield

            logger.info("Shutting down Portfolio Admin API...")
        finally:
            await http_client.aclose()
            await main_db.disconnect()

    app = FastAPI(
        title="Portfolio Admin API",
        description="Admin authentication and session management for the portfolio site",
        version=VERSION,
        lifespan=lifespan,
        docs_url="/docs" if settings.is_development() else None,
        redoc_url="/redoc" if settings.is_development() else None,
    )

    # =========================================================================
    # CORS Middleware
    # =========================================================================
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # =========================================================================
    # Error Handlers
    # =========================================================================
    @app.exception_handler(APIException)
    async def api_exception_handler(request: Request, exc: APIException):
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.detail,
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=422,
            content=error_response(
                "Validation error",
                code="VALIDATION_ERROR",
                details={"errors": jsonable_encoder(exc.errors())},
            ),
        )

    @app.exception_handler(StoreError)
    async def store_exception_handler(request: Request, exc: StoreError):
        logger.error(f"Data store failure on {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=500,
            content=error_response("Server error", code="STORE_ERROR", error=str(exc)),
        )

    # =========================================================================
    # Routers
    # =========================================================================
    app.include_router(auth_router, prefix=API_PREFIX, tags=["Authentication"])

    # =========================================================================
    # Health Check Endpoint
    # =========================================================================
    @app.get("/health", tags=["Health"])
    async def health():
        """
        Health check endpoint.

        Returns the status of the API and database connection.
        """
        return success_response({
            "status": "ok",
            "version": VERSION,
            "database": main_db.is_connected,
        })

    return app


app = create_app()


# =============================================================================
# Run with Uvicorn
# =============================================================================
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api:app",
        host=default_settings.HOST,
        port=default_settings.PORT,
        reload=default_settings.is_development(),
    )
