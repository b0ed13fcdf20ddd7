"""
Funnel Dashboard — Funnel Router
==================================
Weekly funnel metrics computed from the cached funnel snapshot.

Endpoints:
  GET /api/funnel/metrics         - Every WoW metric series (optionally one)
  GET /api/funnel/dm-details      - LinkedIn DM breakdown per week
  GET /api/funnel/summary         - Last completed week summary cards
  GET /api/funnel/dashboard       - Series, DM details and cards in one payload
  GET /api/funnel/inactive-leads  - Deck-site visitors who never submitted
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from scripts.dm_details import calculate_dm_details
from scripts.funnel_summary import build_funnel_dashboard, build_summary_cards, compute_funnel_series
from scripts.inactive_leads import find_inactive_leads, parse_since, split_deck_sources
from scripts.lib.errors import DataError, DataFetchError, SchemaValidationError
from scripts.lib.funnel_data import load_funnel_data
from scripts.lib.logger import setup_logger

logger = setup_logger("funnel_router")

router = APIRouter(prefix="/api/funnel", tags=["funnel"])


def _load_tables():
    try:
        return load_funnel_data()
    except DataFetchError as e:
        logger.error("Funnel snapshot unavailable: %s", e)
        raise HTTPException(status_code=404, detail="Funnel snapshot not found")
    except SchemaValidationError as e:
        logger.error("Funnel snapshot malformed: %s", e)
        raise HTTPException(status_code=500, detail="Funnel snapshot is malformed")


@router.get("/metrics")
async def funnel_metrics(
    series: Optional[str] = Query(None, description="Return a single named series"),
):
    """All weekly metric series, oldest week first."""
    tables = _load_tables()
    try:
        computed = compute_funnel_series(tables)
    except Exception as e:
        logger.error("Funnel metrics computation failed: %s", e)
        raise HTTPException(status_code=500, detail="Failed to compute funnel metrics")

    if series:
        if series not in computed:
            raise HTTPException(status_code=404, detail=f"Unknown series: {series}")
        computed = {series: computed[series]}

    return {
        "last_updated": tables.get("lastUpdated"),
        "series": {
            name: [m.model_dump(exclude_none=True) for m in metrics]
            for name, metrics in computed.items()
        },
    }


@router.get("/dm-details")
async def dm_details():
    """Per-week LinkedIn DM conversation breakdown."""
    tables = _load_tables()
    details = calculate_dm_details(tables.get("linkedinDMLog") or [])
    return {"weeks": [d.model_dump(exclude_none=True) for d in details]}


@router.get("/summary")
async def funnel_summary():
    """Summary cards for the last completed week."""
    tables = _load_tables()
    try:
        series = compute_funnel_series(tables)
        cards = build_summary_cards(series, datetime.now())
    except Exception as e:
        logger.error("Funnel summary failed: %s", e)
        raise HTTPException(status_code=500, detail="Failed to build funnel summary")
    return {"last_updated": tables.get("lastUpdated"), "cards": cards}


@router.get("/inactive-leads")
async def inactive_leads(
    from_: Optional[str] = Query(
        None, alias="from", description="Start date, DD/MM/YYYY or YYYY-MM-DD"
    ),
):
    """Leads who visited a deck-analysis site since ``from`` but never submitted."""
    today = datetime.now().date()
    try:
        since = parse_since(from_, today)
    except DataError as e:
        raise HTTPException(status_code=400, detail=str(e))

    tables = _load_tables()
    try:
        primary, redemptive = split_deck_sources(tables.get("deckAnalysisInteractions") or [])
        result = find_inactive_leads(
            primary,
            redemptive,
            tables.get("deckReports") or [],
            tables.get("leadList") or [],
            since=since,
            today=today,
        )
    except Exception as e:
        logger.error("Inactive lead report failed: %s", e)
        raise HTTPException(status_code=500, detail="Failed to fetch inactive lead magnet leads")
    return result.model_dump(by_alias=True)


@router.get("/dashboard")
async def funnel_dashboard():
    """Every series, the DM breakdown and the summary cards in one payload."""
    tables = _load_tables()
    try:
        return build_funnel_dashboard(tables, datetime.now())
    except Exception as e:
        logger.error("Funnel dashboard build failed: %s", e)
        raise HTTPException(status_code=500, detail="Failed to build funnel dashboard")
