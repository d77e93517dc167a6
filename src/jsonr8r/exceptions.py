"""Custom exception types for the client."""

from __future__ import annotations


class JsonR8rError(RuntimeError):
    """Base class for errors raised by :mod:`jsonr8r`."""


class TransportError(JsonR8rError):
    """Raised when the HTTP exchange itself fails (connection refused, timeout)."""


class ResponseParseError(JsonR8rError, ValueError):
    """Raised when a response body cannot be parsed as JSON."""

    def __init__(self, message: str, text: str) -> None:
        super().__init__(message)
        self.text = text


class UnsupportedMethodError(JsonR8rError, NotImplementedError):
    """Raised when a request carries a method the client cannot dispatch."""
