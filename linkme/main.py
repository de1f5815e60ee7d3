"""
FastAPI application bootstrap with: \n
- Lifespan-managed schema creation \n
- Logging configured from settings \n
- CORS configured for the mobile/web frontend \n
- Liveness endpoint \n

Environment contract (from `settings`): \n
- INIT_MODE: if 'runtime', create missing tables during app startup. \n
- FRONTEND_URL: allowed CORS origin. \n
- LOG_LEVEL: root logging level. \n

Run with ``uvicorn linkme.main:app``.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from linkme.api.fast_api import router
from linkme.database.config.config import settings
from linkme.database.config.connection_engine import connection_engine, metadata

# registers every table on `metadata`
import linkme.database.entities  # noqa: F401

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("uvicorn")
"""Logger instance for capturing and emitting Uvicorn server logs."""


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    App lifespan manager.

    Notes
    ------------
    - On startup (before yielding):
        * If INIT_MODE == 'runtime': create any missing tables.
        * Otherwise the schema is expected to exist already.
    """
    if settings.INIT_MODE == "runtime":
        metadata.create_all(connection_engine)
        logger.info("Database schema ready (%s).", connection_engine.url.get_backend_name())
    else:
        logger.info("Skipping schema creation (INIT_MODE=%s).", settings.INIT_MODE)

    try:
        yield
    finally:
        connection_engine.dispose()
        logger.info("App shutting down.")


# Instantiate the FastAPI app with lifespan handler
app = FastAPI(title="LinkMe", lifespan=lifespan)

# -----------------------
# CORS configuration
# -----------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -----------------------
# API routes
# -----------------------
app.include_router(router)


@app.get("/health")
def health():
    """Liveness probe."""
    return {"status": "ok"}
