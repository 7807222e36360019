"""
Restaurants API - Custom Exception Hierarchy
=============================================

What:  Application-specific exceptions for the three failure families of the
       service: bad client input, store failures, and lifecycle failures.
How:   Each exception class carries a message and an optional context dict.
       Global exception handlers (registered in main.py) turn request-time
       exceptions into responses. Lifecycle errors are raised to whoever
       called `start()` / `stop()`.

Exception Hierarchy:
    RestaurantsAPIError (base)
    ├── ValidationError              → 400 Bad Request, JSON {"message"}
    │   └── MissingFieldError        → 400 Bad Request, plain text message
    ├── StoreError                   → 500 Internal Server Error (generic body)
    │   └── RestaurantNotFoundError  → 500 as well (not-found is a store failure)
    └── LifecycleError               → propagated from start()/stop()

Security Note:
    `context` is logged server-side only. For StoreError the message is not
    returned either: the client always sees "Internal server error".
"""

from typing import Any, Dict, Optional


class RestaurantsAPIError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  Human-readable error description
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(RestaurantsAPIError):
    """
    Raised when a request fails a precondition the client can fix.

    When:    Path and body ids differ on update, the body is not a JSON object,
             or a field value cannot be cast to its stored type.
    HTTP:    400 Bad Request with {"message": ...}
    """

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


class MissingFieldError(ValidationError):
    """
    Raised when a create request lacks a required field.

    HTTP:    400 Bad Request, message sent as text/plain
    Example: Missing `borough` in request body
    """

    def __init__(self, field: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=f"Missing `{field}` in request body",
            field=field,
            context=context,
        )


class StoreError(RestaurantsAPIError):
    """
    Raised when a restaurants store operation fails.

    What:    Any failure of the document store during a request: query errors,
             lost connections, failed commits, or a lookup that found nothing.
    HTTP:    500 Internal Server Error, body {"message": "Internal server error"}
    """

    def __init__(
        self,
        message: str = "A store error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RestaurantNotFoundError(StoreError):
    """
    Raised when a lookup by id finds no restaurant.

    Deliberately a StoreError: GET /restaurants/{id} on a missing id answers
    500, the same as any other store failure.
    """

    def __init__(self, restaurant_id: str, context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        ctx["restaurant_id"] = restaurant_id
        super().__init__(
            message=f"restaurant with ID '{restaurant_id}' was not found",
            context=ctx,
        )
        self.restaurant_id = restaurant_id


class LifecycleError(RestaurantsAPIError):
    """
    Raised when the server cannot start or stop.

    When:    Store connection fails, the listening socket cannot be bound, or
             uvicorn aborts before it starts accepting connections.
    Handling: Not caught internally. The process exits or the test fails.
    """

    def __init__(
        self,
        message: str = "Server lifecycle operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
