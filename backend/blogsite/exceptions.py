"""
Blogsite Backend — Custom Exception Hierarchy
==============================================

What:  Defines application-specific exceptions for the error kinds the API reports.
Why:   Services raise typed errors; the HTTP layer maps each kind to a fixed status.
How:   Each exception carries a message (written verbatim into the response body),
       an optional context dict (logged only) and an HTTP status code.
       Global exception handlers (registered in main.py) render them.
Who:   Raised by the database gateway, the blog service and route handlers.

Exception Hierarchy:
    BlogsiteError (base)
    ├── ValidationError          → 400 Bad Request (missing fields, nothing to update)
    ├── InvalidArgumentError     → 400 Bad Request (malformed id, missing query param)
    ├── NotFoundError            → 404 Not Found
    ├── MethodNotAllowedError    → 405 Method Not Allowed
    ├── StorageError             → 500 Internal Server Error
    │   ├── RecordDecodeError    → 500 (stored document does not fit the record model)
    │   └── DatabaseConnectionError (startup only; fatal)
    └── FrontendNotFoundError    → 500 (static directory missing)

Wire compatibility:
    The site's JavaScript parses the exact error bodies: some routes answer a
    plain sentence, others a JSON literal such as
    {"error":"invalid id"}. Routes therefore build the final message themselves
    and the handler writes it unchanged.
"""

from typing import Any, Dict, Optional


class BlogsiteError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:      Response body text (safe to return to the client)
        context:      Additional debug info (logged but NOT returned)
        status_code:  HTTP status used by the global handler
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ):
        self.message = message
        self.context = context or {}
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ValidationError(BlogsiteError):
    """
    Raised when a record or update payload fails business validation.

    When:    A required field is empty on create, or an update has no usable fields.
    HTTP:    400 Bad Request (the create route reports it as a failed insert, 500)
    """

    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx, status_code=status_code)
        self.field = field


class InvalidArgumentError(BlogsiteError):
    """
    Raised when a request argument is missing or malformed.

    When:    Identifier is not a 24-char hex ObjectId, or `q` is empty.
    HTTP:    400 Bad Request
    """

    status_code = 400


class NotFoundError(BlogsiteError):
    """
    Raised when no record matches the requested identifier.

    HTTP:    404 Not Found
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        if message is None:
            message = f"The requested {resource} was not found"
            if resource_id:
                message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class MethodNotAllowedError(BlogsiteError):
    """Wrong HTTP verb for a route. HTTP 405."""

    status_code = 405


class StorageError(BlogsiteError):
    """
    Raised when a database operation fails.

    What:    Connection, query, decode or write failure at the MongoDB layer,
             including an operation cut off by its deadline.
    HTTP:    500 Internal Server Error
    Message: The driver's error text; routes prefix it with what was attempted.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "A database error occurred",
        context: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message=message, context=context, status_code=status_code)


class RecordDecodeError(StorageError):
    """A stored document could not be decoded into a record."""


class DatabaseConnectionError(StorageError):
    """
    Raised when the gateway cannot connect at startup.

    When:    Empty URI, unreachable server, or failed ping.
    Effect:  Fatal. The lifespan re-raises it and the process exits.
    """


class FrontendNotFoundError(BlogsiteError):
    """The configured static directory does not exist. HTTP 500."""

    status_code = 500

    def __init__(self, message: str = "frontend not found", context: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, context=context)
