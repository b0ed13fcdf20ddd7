"""
Configuration for the Funnel Dashboard.
Loads .env from the project root and exposes settings as module constants.

Usage:
    from scripts.lib.config import DEFAULT_CONFIG, FUNNEL_DATA_PATH, SELF_ALIASES
"""
import os
from pathlib import Path
from typing import Any, Dict, Tuple

from dotenv import load_dotenv

from scripts.lib.errors import ConfigError

# Load .env from project root
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
load_dotenv(PROJECT_ROOT / ".env")

DATA_DIR = PROJECT_ROOT / "data"

# Substrings in a DM "Sender" value that identify our own account.
DEFAULT_SELF_ALIASES: Tuple[str, ...] = ("jay", "jda", "fundraising flywheel")


def parse_aliases(raw: str) -> Tuple[str, ...]:
    """Split a comma-separated alias list into lower-cased, non-empty entries."""
    if not raw:
        return DEFAULT_SELF_ALIASES
    aliases = tuple(a.strip().lower() for a in raw.split(",") if a.strip())
    return aliases or DEFAULT_SELF_ALIASES


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name, "")
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}", setting=name)


FUNNEL_DATA_PATH = Path(
    os.environ.get("FUNNEL_DATA_PATH", "") or DATA_DIR / "funnel-data.json"
)
SELF_ALIASES = parse_aliases(os.environ.get("DM_SELF_ALIASES", ""))

DEFAULT_CONFIG: Dict[str, Any] = {
    # Session length above which a lead counts as "high interest"
    "high_interest_seconds": _int_env("HIGH_INTEREST_SECONDS", 20),
    # Sessions shorter than this (and non-zero) count as a bounce
    "bounce_seconds": _int_env("BOUNCE_SECONDS", 10),
    # Default window for the inactive-lead report when no 'from' is given
    "inactive_lookback_days": _int_env("INACTIVE_LOOKBACK_DAYS", 7),
}
