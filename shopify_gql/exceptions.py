"""
Exception hierarchy for shopify_gql.

Every failure the client can originate or relay is a subclass of
:class:`ShopifyGQLError`. Builder misuse and cycle rejection are raised by the
query builders themselves; decode errors come from the response envelope
decoder and the scalar codec; transport, configuration and remote errors are
relayed from the collaborators around the core.
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional

import aiohttp


class ShopifyGQLError(Exception):
    """
    Base exception for all shopify_gql operations.

    Attributes:
        message: Human-readable error message
        details: Additional error details as keyword arguments
    """

    def __init__(self, message: str, **kwargs: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details = kwargs


class InvalidIdentifier(ShopifyGQLError):
    """Raised when an identifier payload is not a non-empty string of digits."""

    def __init__(self, raw: str) -> None:
        super().__init__(f"Invalid identifier: {raw!r}", raw=raw)
        self.raw = raw


class BuilderMisuse(ShopifyGQLError):
    """
    Raised when a builder method is called on the wrong kind of builder.

    Calling an ``update_*`` method on a read or connection builder, or
    embedding an update builder as a nested selection, ends up here.

    Attributes:
        operation: Operation kind of the builder that received the call
        attempted_call: Name of the offending method
    """

    def __init__(
        self, operation: str, attempted_call: str, reason: Optional[str] = None
    ) -> None:
        message = f"Cannot call {attempted_call}() on a {operation} builder"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, operation=operation, attempted_call=attempted_call)
        self.operation = operation
        self.attempted_call = attempted_call


class InvalidConnection(BuilderMisuse):
    """Raised when a connection does not carry exactly one positive first/last count."""

    def __init__(self, first: Any, last: Any) -> None:
        super().__init__(
            "connection",
            "Connection",
            reason=f"exactly one positive count is required (first={first!r}, last={last!r})",
        )
        self.first = first
        self.last = last


class CycleRejected(ShopifyGQLError):
    """Raised when a nested selection re-introduces the entity kind embedding it."""

    def __init__(self, entity_kind: str) -> None:
        super().__init__(
            f"Nested selection selects back into {entity_kind}",
            entity_kind=entity_kind,
        )
        self.entity_kind = entity_kind


class DecodeError(ShopifyGQLError):
    """Base class for failures turning a reply into typed values."""

    pass


class InvalidScalar(DecodeError):
    """Raised when a scalar wire value cannot be parsed."""

    def __init__(self, raw: Any, scalar_type: Optional[str] = None) -> None:
        label = scalar_type or "scalar"
        super().__init__(f"Invalid {label} value: {raw!r}", raw=raw)
        self.raw = raw
        self.scalar_type = scalar_type


class ResponseShapeMismatch(DecodeError):
    """Raised when a reply matches a known shape other than the expected one."""

    def __init__(self, expected: str, actual: str) -> None:
        super().__init__(
            f"Expected a {expected!r} reply but received {actual!r}",
            expected=expected,
            actual=actual,
        )
        self.expected = expected
        self.actual = actual


class TransportDecodeError(DecodeError):
    """Raised when reply bytes match none of the known reply shapes."""

    def __init__(self, raw_body: bytes, reason: Optional[str] = None) -> None:
        message = "Unable to parse response"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, raw_body=raw_body)
        self.raw_body = raw_body


class RemoteError(ShopifyGQLError):
    """
    Raised when the remote API signals a request-level failure.

    Attributes:
        errors: The ``errors`` value of the reply, verbatim
    """

    def __init__(self, errors: Any) -> None:
        super().__init__(f"Remote error: {_summarize_errors(errors)}", errors=errors)
        self.errors = errors

    @property
    def messages(self) -> list[str]:
        """Get the individual error messages."""
        if isinstance(self.errors, list):
            return [
                e.get("message", "Unknown error") if isinstance(e, dict) else str(e)
                for e in self.errors
            ]
        return [_summarize_errors(self.errors)]


class ConfigurationError(ShopifyGQLError):
    """Raised when the client configuration is missing or invalid."""

    pass


class AuthenticationError(ShopifyGQLError):
    """Raised when authentication headers cannot be produced."""

    pass


class TransportError(ShopifyGQLError):
    """
    Raised for network failures while sending a document.

    Attributes:
        url: Endpoint that was being called
    """

    def __init__(self, message: str, url: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(message, url=url, **kwargs)
        self.url = url


class TransportTimeoutError(TransportError):
    """Raised when a request exceeds the configured timeout."""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        timeout_value: Optional[float] = None,
    ) -> None:
        super().__init__(message, url, timeout_value=timeout_value)
        self.timeout_value = timeout_value


def _summarize_errors(errors: Any) -> str:
    if isinstance(errors, list):
        parts = []
        for error in errors:
            if isinstance(error, dict):
                parts.append(str(error.get("message", "Unknown error")))
            else:
                parts.append(str(error))
        return "; ".join(parts) if parts else "empty error list"
    if isinstance(errors, dict):
        return str(errors.get("message", errors))
    return str(errors)


class ErrorHandler:
    """Converts aiohttp exceptions into :class:`TransportError` subclasses."""

    @staticmethod
    def handle_aiohttp_error(
        error: Exception,
        url: Optional[str] = None,
        timeout_value: Optional[float] = None,
    ) -> TransportError:
        """
        Convert an aiohttp exception to a TransportError.

        Args:
            error: The original exception
            url: The URL that caused the error
            timeout_value: Configured timeout, reported on timeouts

        Returns:
            Appropriate TransportError subclass
        """
        if isinstance(error, asyncio.TimeoutError):
            return TransportTimeoutError(
                f"Request timed out: {error}", url=url, timeout_value=timeout_value
            )

        elif isinstance(error, aiohttp.ClientConnectorError):
            return TransportError(f"Connector error: {error}", url=url)

        elif isinstance(error, aiohttp.ClientConnectionError):
            return TransportError(f"Connection error: {error}", url=url)

        elif isinstance(error, aiohttp.ClientPayloadError):
            return TransportError(f"Payload error: {error}", url=url)

        else:
            return TransportError(f"Unexpected network error: {error}", url=url)
