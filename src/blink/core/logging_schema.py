"""Logging field schema - v1.0

Standard fields (added to all logs):
- schema_version: Log schema version
- service: Service name (blink-api)
- event: Event type (login_succeeded, access_denied, etc.)
- trace_id: Request trace ID (X-Trace-ID)
- duration_ms: Duration in milliseconds

High cardinality fields (OK in logs, NOT in metric labels):
- user_id: User ID
- session_id: Session ID
- workspace_id: Workspace ID
- redirect_id: Blink redirect ID
"""

from enum import StrEnum


class LogEvent(StrEnum):
    """Standard log event types.

    Use these event types in the 'event' extra field for consistent
    log filtering and analysis.
    """

    # Auth events
    LOGIN_SUCCEEDED = "login_succeeded"
    LOGIN_FAILED = "login_failed"
    TOKEN_REFRESHED = "token_refreshed"
    TOKEN_REJECTED = "token_rejected"
    SESSION_CREATED = "session_created"
    SESSION_REVOKED = "session_revoked"

    # Authorization events
    ACCESS_DENIED = "access_denied"

    # Domain events
    USER_REGISTERED = "user_registered"
    USER_DELETED = "user_deleted"
    WORKSPACE_DELETED = "workspace_deleted"
    MEMBER_REMOVED = "member_removed"
    REDIRECT_ID_COLLISION = "redirect_id_collision"
    REDIRECT_ID_EXHAUSTED = "redirect_id_exhausted"

    # Lifecycle events
    APP_STARTED = "app_started"
    APP_STOPPED = "app_stopped"
    DB_CONNECTED = "db_connected"
    DB_ERROR = "db_error"

    # API events
    REQUEST_COMPLETE = "request_complete"
    REQUEST_FAILED = "request_failed"
    REQUEST_SLOW = "request_slow"
    UNHANDLED_ERROR = "unhandled_error"
