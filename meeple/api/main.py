"""
meeple.api.main — FastAPI application entry point
==================================================

Run with::

    uvicorn meeple.api.main:app --reload --port 8000
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

load_dotenv()

from meeple.api.deps import get_config, get_engine  # noqa: E402
from meeple.api.routes.assets import router as assets_router  # noqa: E402
from meeple.api.routes.posts import router as posts_router  # noqa: E402
from meeple.api.routes.reputation import router as reputation_router  # noqa: E402

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


def _cors_origins() -> list[str]:
    """Allowed CORS origins from ``CORS_ALLOW_ORIGINS`` (comma-separated)."""
    raw = os.getenv("CORS_ALLOW_ORIGINS", "").strip()
    if raw:
        return [origin.strip().rstrip("/") for origin in raw.split(",") if origin.strip()]
    return []


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle — warm the DB engine and config."""
    cfg = get_config()
    engine = get_engine()
    logger.info(
        "Meeple API started for %s — engine ready (%s)",
        cfg.community_name, engine.url.database,
    )
    yield
    logger.info("Meeple API shutting down")


app = FastAPI(
    title="Meeple Reputation API",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(reputation_router, prefix="/api")
app.include_router(posts_router, prefix="/api")
app.include_router(assets_router, prefix="/api")


@app.get("/api/health")
def health():
    return {"status": "ok"}
