"""
Funnel Dashboard — Server Entry Point
=======================================

Serves the funnel API over the cached snapshot.

Run: python main.py
"""

import os

from dotenv import load_dotenv

from scripts.lib.config import FUNNEL_DATA_PATH
from scripts.lib.logger import setup_logger

load_dotenv()

logger = setup_logger("funnel-dashboard")

HOST = os.getenv("DASHBOARD_HOST", "0.0.0.0")
PORT = int(os.getenv("DASHBOARD_PORT", "8001"))

if __name__ == "__main__":
    import uvicorn

    logger.info("Funnel Dashboard on http://%s:%d (docs at /docs)", HOST, PORT)
    logger.info("Snapshot: %s", FUNNEL_DATA_PATH)

    uvicorn.run(
        "dashboard.api.main:app",
        host=HOST,
        port=PORT,
        reload=os.getenv("DEBUG", "false").lower() == "true",
    )
