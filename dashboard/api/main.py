"""
Funnel Dashboard — API Server
===============================

Serves week-over-week marketing and sales funnel metrics computed from the
cached funnel snapshot.

Route groups:
  /api/health    - Health check
  /api/funnel/*  - Weekly metrics, DM details, summary cards, inactive leads
"""

import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dashboard.api.routers.funnel import router as funnel_router
from scripts.lib.config import FUNNEL_DATA_PATH

load_dotenv()

logger = logging.getLogger(__name__)


# ─── Lifespan ─────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app):
    """Application startup and shutdown."""
    logger.info("Starting Funnel Dashboard...")
    if FUNNEL_DATA_PATH.exists():
        logger.info("Funnel snapshot: %s", FUNNEL_DATA_PATH)
    else:
        logger.warning("Funnel snapshot not found at %s", FUNNEL_DATA_PATH)
    yield
    logger.info("Shutting down Funnel Dashboard...")


# ─── App Setup ────────────────────────────────────────────────

cors_origins = os.getenv(
    "CORS_ORIGINS", "http://localhost:3000,http://localhost:8001"
).split(",")

app = FastAPI(
    title="Funnel Dashboard",
    version="1.0.0",
    description="Week-over-week marketing and sales funnel metrics",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(funnel_router)


@app.get("/api/health")
async def health():
    return {
        "status": "ok",
        "snapshot_available": FUNNEL_DATA_PATH.exists(),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
