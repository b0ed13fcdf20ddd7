"""
Custom error classes for the Funnel Dashboard.
Structured error handling with error codes across all modules.

Hierarchy:
    FunnelError
    └── DataError
        ├── ConfigError
        ├── SchemaValidationError
        ├── WeekKeyError
        └── DataFetchError

The aggregation core never raises for malformed records; these errors
surface from the explicit parse API, the snapshot loader and the config.
"""


class FunnelError(Exception):
    """Base exception for all Funnel Dashboard errors."""

    def __init__(self, message: str, code: str = "UNKNOWN", details: dict = None):
        self.code = code
        self.details = details or {}
        super().__init__(f"[{code}] {message}")


# --- Data Errors ---

class DataError(FunnelError):
    """Base class for data processing errors."""
    pass


class ConfigError(DataError):
    """Configuration value error."""

    def __init__(self, message: str, setting: str = None):
        super().__init__(
            message, code="CONFIG_ERROR",
            details={"setting": setting},
        )


class SchemaValidationError(DataError):
    """Data doesn't match expected schema."""

    def __init__(self, message: str, field: str = None):
        super().__init__(
            message, code="SCHEMA_INVALID", details={"field": field},
        )


class WeekKeyError(DataError):
    """A week key or date string is not in DD/MM/YYYY form."""

    def __init__(self, value, expected: str = "DD/MM/YYYY"):
        self.value = value
        super().__init__(
            f"Invalid week key {value!r} (expected {expected})",
            code="WEEK_KEY_INVALID",
            details={"value": value, "expected": expected},
        )


class DataFetchError(DataError):
    """Failed to fetch or load data from storage."""

    def __init__(self, message: str, source: str = None):
        super().__init__(
            message, code="DATA_FETCH_FAILED", details={"source": source},
        )
