import os
import sys
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# Ensure local imports resolve
sys.path.append(os.path.dirname(__file__))

# Core
from core.config import settings
from core.config_validator import validate_config_on_startup
from core.errors import AppError
from core.logging_config import logger
from core.scheduler import start_scheduler
from core.store import DocumentStore
from core.supabase_client import get_supabase_client

# -------------------------------------------------
# Routers
# -------------------------------------------------
from routers import (
    auth_router,
    users_router,
    apartments_router,
    agreements_router,
    coupons_router,
    announcements_router,
    payments_router,
    admin_router,
    health_router,
)


# -------------------------------------------------
# Create the Application
# -------------------------------------------------
def create_app(store: Optional[DocumentStore] = None) -> FastAPI:
    """
    Build the app. A pre-built store may be injected (tests);
    otherwise a Supabase-backed one is opened on startup.
    """
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version="1.0.0",
        description="Building management API: apartments, tenancy agreements, coupons",
    )
    app.state.store = store
    app.state.scheduler = None

    # -------------------------------------------------
    # CORS (cookies need credentials)
    # -------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -------------------------------------------------
    # Store lifecycle
    # -------------------------------------------------
    @app.on_event("startup")
    def on_startup():
        logger.info("Starting BMS API")
        validate_config_on_startup()

        if app.state.store is None:
            app.state.store = DocumentStore(get_supabase_client())
        if app.state.store.is_open:
            logger.info("Connected to BMS")

        app.state.scheduler = start_scheduler(app.state.store)

    @app.on_event("shutdown")
    def on_shutdown():
        if app.state.scheduler is not None:
            app.state.scheduler.shutdown(wait=False)
            app.state.scheduler = None
        if app.state.store is not None:
            app.state.store.close()

    # -------------------------------------------------
    # Error handling
    # -------------------------------------------------
    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError):
        if exc.status_code in (401, 403) or exc.status_code >= 500:
            logger.warning(f"HTTP {exc.status_code} at {request.url}: {exc}")
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

    @app.exception_handler(StarletteHTTPException)
    async def handle_http(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (401, 403, 500):
            logger.warning(
                f"HTTP {exc.status_code} at {request.url}: {exc.detail}"
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unhandled(request: Request, exc: Exception):
        logger.error("Unhandled error at %s", request.url, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    # -------------------------------------------------
    # Register Routers
    # -------------------------------------------------
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(apartments_router)
    app.include_router(agreements_router)
    app.include_router(coupons_router)
    app.include_router(announcements_router)
    app.include_router(payments_router)
    app.include_router(admin_router)
    app.include_router(health_router)

    @app.get("/", include_in_schema=False, response_class=PlainTextResponse)
    async def root():
        return "BMS Server is running"

    return app


# Create the global FastAPI instance
app = create_app()


def run() -> None:
    uvicorn.run("main:app", host="0.0.0.0", port=settings.PORT)


if __name__ == "__main__":
    run()
