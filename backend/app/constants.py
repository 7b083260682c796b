"""Application-wide constants."""
from enum import Enum


class UserRole(str, Enum):
    """Global dashboard roles."""
    ADMIN = "admin"
    DEVELOPER = "developer"


class ProjectRole(str, Enum):
    """Membership roles inside a single project."""
    CONTRIBUTOR = "contributor"
    ADMIN = "admin"


class EventType(str, Enum):
    """Telemetry event types accepted from the SDK."""
    SESSION_START = "session_start"
    SESSION_END = "session_end"
    INSTALL = "install"
    UNINSTALL = "uninstall"
    CUSTOM = "custom"


class MetricType(str, Enum):
    """Pre-aggregated metric kinds."""
    DAU = "dau"
    MAU = "mau"
    NEW_USERS = "new_users"
    SESSION_COUNT = "session_count"
    SESSION_LENGTH = "session_length"
    EVENT_COUNT = "event_count"
    RETENTION_RATE = "retention_rate"


class PeriodType(str, Enum):
    """Aggregation period granularity."""
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    TOTAL = "total"


API_V1_PREFIX = "/api/v1"
API_KEY_HEADER = "X-Kogase-API-Key"
API_KEY_PREFIX = "kog_"

# Pagination for analytics queries
DEFAULT_PAGE_LIMIT = 100
MAX_PAGE_LIMIT = 1000

MIN_PASSWORD_LENGTH = 6
MAX_PASSWORD_BYTES = 72  # bcrypt input limit
INSTALLATION_EVENT_NAME = "installation"
