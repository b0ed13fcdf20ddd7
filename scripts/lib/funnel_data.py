"""
Funnel snapshot loader.
Reads the cached funnel snapshot (one JSON document holding every source
table) and hands each table to the aggregators as a list of records.

Each table degrades independently: a missing or malformed table becomes
an empty list so the remaining tables still render.

Usage:
    from scripts.lib.funnel_data import load_funnel_data
    tables = load_funnel_data()
    tables["sentEmailLog"]  # -> List[dict]
"""
import json
from pathlib import Path
from typing import Any, Dict, Optional

from scripts.lib.config import FUNNEL_DATA_PATH
from scripts.lib.errors import DataFetchError, SchemaValidationError
from scripts.lib.logger import setup_logger

logger = setup_logger(__name__)

TABLE_KEYS = (
    "sentEmailLog",
    "emailInteractions",
    "linkedinDMLog",
    "leadList",
    "deckAnalysisInteractions",
    "deckReports",
    "ffInteractions",
    "bookACall",
)


def normalize_tables(payload: Any) -> Dict[str, Any]:
    """
    Coerce a raw snapshot into ``{table: [records]}`` plus ``lastUpdated``.

    Args:
        payload: Decoded snapshot JSON.

    Returns:
        Dict with every key in TABLE_KEYS mapped to a list of dicts.
    """
    if not isinstance(payload, dict):
        logger.error("Funnel snapshot is not an object (%s)", type(payload).__name__)
        payload = {}

    tables: Dict[str, Any] = {}
    for key in TABLE_KEYS:
        value = payload.get(key)
        if value is None:
            logger.error("Funnel snapshot has no %s table; using empty list", key)
            tables[key] = []
        elif not isinstance(value, list):
            logger.error(
                "Funnel snapshot table %s is %s, not a list; using empty list",
                key, type(value).__name__,
            )
            tables[key] = []
        else:
            tables[key] = [r for r in value if isinstance(r, dict)]

    tables["lastUpdated"] = payload.get("lastUpdated")
    return tables


def load_funnel_data(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load the cached funnel snapshot from disk.

    Args:
        path: Snapshot file (default: FUNNEL_DATA_PATH).

    Returns:
        Normalized tables (see normalize_tables).

    Raises:
        DataFetchError: if the file is missing or is not valid JSON.
        SchemaValidationError: if the document is not a JSON object.
    """
    snapshot_path = Path(path) if path else FUNNEL_DATA_PATH
    if not snapshot_path.exists():
        raise DataFetchError(
            f"Funnel snapshot not found: {snapshot_path}", source=str(snapshot_path)
        )

    try:
        with open(snapshot_path, "r", encoding="utf-8") as f:
            payload = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise DataFetchError(
            f"Failed to read funnel snapshot {snapshot_path}: {e}", source=str(snapshot_path)
        )

    if not isinstance(payload, dict):
        raise SchemaValidationError(
            f"Funnel snapshot {snapshot_path} is {type(payload).__name__}, not an object",
            field="<root>",
        )

    tables = normalize_tables(payload)
    logger.info(
        "Loaded funnel snapshot %s (last updated %s)",
        snapshot_path, tables.get("lastUpdated") or "unknown",
    )
    return tables
