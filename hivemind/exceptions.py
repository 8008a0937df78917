"""
Hivemind — Custom Exception Hierarchy
=====================================

What:  Application-specific exceptions for the failure modes of a request.
How:   Each exception carries a message and an optional context dict.
       Global handlers (registered in main.py) map them to HTTP status codes.
       Responses never carry an error body: the status code is the report.
Who:   Raised by schemas, stores and routes; caught by the global handlers.

Exception Hierarchy:
    HivemindError (base)          → 500
    ├── DecodeError               → 500 (malformed POST body)
    ├── EncodeError               → 500
    ├── ValidationError           → 400 (malformed PUT body, strict mode only)
    └── StoreError                → 500 (I/O, serialization, store not open)

There is no not-found exception: a missing key is a normal store result
(None), and the resource handler turns it into a 404 itself.
"""

from typing import Any, Dict, Optional


class HivemindError(Exception):
    """
    Base exception for all Hivemind application errors.

    Attributes:
        message:  Human-readable description (logged)
        context:  Additional debug info (logged, never returned to the client)
    """

    status_code = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class DecodeError(HivemindError):
    """
    Raised when a request body cannot be decoded into an entity.

    When:    POST body is not a JSON object, or a field has the wrong type.
    HTTP:    500 Internal Server Error (legacy contract, kept as is)
    """

    def __init__(
        self,
        message: str = "Request body could not be decoded",
        kind: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if kind:
            ctx["kind"] = kind
        super().__init__(message=message, context=ctx)
        self.kind = kind


class EncodeError(HivemindError):
    """Raised when an entity or collection cannot be serialized to JSON."""

    def __init__(
        self,
        message: str = "Response could not be encoded",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ValidationError(HivemindError):
    """
    Raised when client input is rejected and the client can fix it.

    When:    PUT with an undecodable body while `strict_put` is enabled.
    HTTP:    400 Bad Request
    """

    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class StoreError(HivemindError):
    """
    Raised when the persistence layer fails.

    What:    A read or write against the backing store did not complete.
    When:    Disk I/O error, locked database, corrupt stored value, store used
             before open() or after close().
    HTTP:    500 Internal Server Error

    Never raised for domain conditions: an absent key is not an error, and an
    upsert over an existing key is not a conflict.
    """

    def __init__(
        self,
        message: str = "A storage error occurred",
        bucket: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if bucket:
            ctx["bucket"] = bucket
        super().__init__(message=message, context=ctx)
        self.bucket = bucket
