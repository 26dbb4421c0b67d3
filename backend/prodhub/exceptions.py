"""
AI Productivity Hub Backend — Custom Exception Hierarchy
=========================================================

What:  Application-specific exceptions for the error scenarios of this service.
Why:   Targeted handling with the right HTTP status and a stable JSON envelope,
       without leaking internal details (SQL, secrets) to the caller.
How:   Each exception carries a message and an optional context dict. Global
       handlers registered in main.py convert them into
       `{"ok": false, "error": <message>}` responses.

Exception Hierarchy:
    ProdHubError (base)          → 500
    ├── UnauthorizedError        → 401 (missing/invalid credential, no retry)
    ├── NotFoundError            → 404 (admin read of an unknown user)
    ├── ConfigurationError       → 500 (required secret absent; fatal at startup)
    └── UpstreamError            → 500 (hosted database call failed)

Not every failure becomes an exception: usage metering reports upstream
failures as a MeterOutcome value instead (see services/usage.py), and the job
runner turns job failures into a JobOutcome.
"""

from typing import Any, Dict, Optional


class ProdHubError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  Caller-facing error description (safe to return in a response)
        context:  Additional debug info (logged, NOT returned to the client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class UnauthorizedError(ProdHubError):
    """
    Raised by the authentication gate when a credential is missing or wrong.

    HTTP:    401 Unauthorized, body {"ok": false, "error": "Unauthorized"}
    Context: which gate rejected the call ("cron" or "admin"); never the secret.
    """

    def __init__(
        self,
        gate: str = "cron",
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["gate"] = gate
        super().__init__(message="Unauthorized", context=ctx)
        self.gate = gate


class NotFoundError(ProdHubError):
    """
    Raised when an admin read targets a row that does not exist.

    HTTP:    404, body {"ok": false, "error": "User not found."}
    Why:     SQLAlchemy returns None for a missing row; the service layer
             converts that into this exception so the route stays HTTP-free.
    """

    def __init__(
        self,
        resource: str = "user",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=f"{resource.capitalize()} not found.", context=ctx)


class ConfigurationError(ProdHubError):
    """
    Raised when a required setting is absent.

    At startup this aborts the application. If a protected endpoint is reached
    anyway (settings built without validation), the request fails with 500
    rather than being let through.
    """

    def __init__(
        self,
        message: str = "Server misconfigured",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class UpstreamError(ProdHubError):
    """
    Raised when the hosted database (or another external service) fails.

    HTTP:    500, body {"ok": false, "error": <message>}
    The message is generic; the driver error is kept in context for the logs.
    """

    def __init__(
        self,
        message: str = "Upstream service call failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
