"""
Error taxonomy shared by the engine, services and API.

Each error carries the HTTP status the API answers with and the message
that is safe to show to a client.
"""
from typing import Any, Optional


class TradeNavigatorError(Exception):
    """Base class for all handled errors."""

    status_code = 500

    def __init__(self, message: str, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(message)


class ValidationError(TradeNavigatorError):
    """Input field is missing, has the wrong type or is out of range."""

    status_code = 400


class MalformedRequestError(TradeNavigatorError):
    """Request body cannot be decoded into the expected shape."""

    status_code = 400

    def __init__(self, message: str = "Invalid request format", details: Optional[Any] = None):
        super().__init__(message, details)


class AuthenticationError(TradeNavigatorError):
    """Missing or unknown session."""

    status_code = 401

    def __init__(self, message: str = "Authentication required", details: Optional[Any] = None):
        super().__init__(message, details)


class InternalError(TradeNavigatorError):
    """Unexpected failure; the message is generic and details are only logged."""

    status_code = 500
