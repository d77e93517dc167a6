"""Burn through JSON so fast, you'll need to REST."""

from .client import RestClient
from .config import get_settings
from .exceptions import JsonR8rError, ResponseParseError, TransportError, UnsupportedMethodError
from .models import Method, Request, Response

__all__ = [
    "RestClient",
    "Method",
    "Request",
    "Response",
    "get_settings",
    "JsonR8rError",
    "ResponseParseError",
    "TransportError",
    "UnsupportedMethodError",
]
