# COMPONENT: FASTAPI APPLICATION ENTRY POINT
# REQUIREMENTS SATISFIED:
#   - API initialization and routing
#   - Middleware configuration (logging + CORS)
#   - AWS Lambda compatibility via Mangum
#   - Store construction and wiring
"""
coi_tracker/main.py

Primary application entry point for the COI tracker backend. This module
assembles the FastAPI application, builds the COI store and the debounced
search committer, registers middleware, mounts the API router and exposes
the AWS Lambda handler.

Execution Order (Intentional):
    1. Environment variables are loaded from .env (coi_tracker.config)
    2. The store is built from settings, loading the snapshot slot
    3. FastAPI app is created and the store is attached to app.state
    4. Request/response logging middleware is attached
    5. CORS middleware is configured with the frontend allowlist
    6. The API router is mounted under the /api prefix
    7. The Mangum handler is created for AWS Lambda deployment

Key Design Decisions:
    - `create_app` takes an optional prebuilt store so tests and embedding
      applications can inject their own; the module-level `app` is just the
      default wiring.
    - Middleware is added before routers to guarantee full request coverage.
"""
from typing import Optional

from fastapi import FastAPI
from mangum import Mangum
from starlette.middleware.cors import CORSMiddleware

from .api.middleware.log_requests import RequestLogger
from .api.routers.cois import router as cois_router
from .config import Settings
from .services.store import COIStore, create_store
from .utils.debounce import DebouncedSearch
from .utils.logging import get_logger

logger = get_logger("app")


def create_app(store: Optional[COIStore] = None, settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    store = store or create_store(settings)

    app = FastAPI(title="COI Tracker API")
    app.state.store = store
    app.state.search = DebouncedSearch(store, delay_ms=settings.search_debounce_ms)

    app.add_middleware(RequestLogger)

    if settings.allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.allowed_origins,
            allow_credentials=False,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.include_router(cois_router, prefix="/api")

    logger.info("COI tracker app ready with %d records", len(store.cois))
    return app


app = create_app()

handler = Mangum(app)
