from .notification import (
    AlertCreate,
    AlertExistsResponse,
    AlertRead,
    DeduplicateResponse,
    MarkAllReadResponse,
    NotificationCreate,
    NotificationKind,
    NotificationRead,
    NotificationSummary,
)
from .programming import (
    ProgrammingCheckResponse,
    ProgrammingRefreshResponse,
    TickReportRead,
)

__all__ = [
    "AlertCreate",
    "AlertExistsResponse",
    "AlertRead",
    "DeduplicateResponse",
    "MarkAllReadResponse",
    "NotificationCreate",
    "NotificationKind",
    "NotificationRead",
    "NotificationSummary",
    "ProgrammingCheckResponse",
    "ProgrammingRefreshResponse",
    "TickReportRead",
]
