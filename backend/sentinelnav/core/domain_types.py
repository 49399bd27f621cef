"""Domain Types — identity aliases, enums and fixed values shared across the codebase.

Invariants:
    - All valid states encoded as Enums — no raw string matching
    - DEFAULT_CATEGORY_ID names the category every store seeds and never deletes
    - Timestamps are integer milliseconds since the epoch (0 = never)

Design Decisions:
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

SiteId = NewType("SiteId", str)
CategoryId = NewType("CategoryId", str)


# ─── Enums ───────────────────────────────────────────────────────

class SiteStatus(str, Enum):
    """Reachability of a site. CHECKING is ephemeral (probe in flight)."""
    ONLINE = "online"
    OFFLINE = "offline"
    CHECKING = "checking"
    UNKNOWN = "unknown"


class Theme(str, Enum):
    """Global dashboard theme — one value for every viewer."""
    VIBE = "vibe"
    SUNSET = "sunset"
    OCEAN = "ocean"
    MINIMAL = "minimal"


class Role(str, Enum):
    ADMIN = "admin"
    GUEST = "guest"


class StoreBackend(str, Enum):
    """Persistence backends selectable through configuration."""
    MEMORY = "memory"
    FILE = "file"
    SQL = "sql"
    REDIS = "redis"
    BLOB = "blob"


# ─── Fixed Values ────────────────────────────────────────────────

DEFAULT_CATEGORY_ID = CategoryId("default")
DEFAULT_CATEGORY_NAME = "General"
DEFAULT_THEME = Theme.MINIMAL

DEFAULT_PROBE_TIMEOUT_MS = 5_000
DEFAULT_SWEEP_INTERVAL_SECONDS = 2 * 60 * 60

SESSION_TTL_MS = 24 * 60 * 60 * 1000
CHALLENGE_TTL_MS = 5 * 60 * 1000
CHALLENGE_OPERAND_MAX = 9
