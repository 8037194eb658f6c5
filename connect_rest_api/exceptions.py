"""
Exceptions Module.

This module defines the errors raised by the REST API connector. Transport
and HTTP status errors come straight from httpx and are re-exported here
under their connector names; they are never wrapped.
"""

import httpx


class ConnectRestApiError(Exception):
    """Base class for errors raised by the connector itself."""


class InvalidArgumentError(ConnectRestApiError, ValueError):
    """Raised for an unsupported method, a malformed URL, missing credentials
    or an unknown request option. Always raised before any network I/O."""


class ConfigurationError(ConnectRestApiError):
    """Raised when the configuration fails validation at startup.

    Attributes:
        keys: The configuration keys that failed validation.
    """

    def __init__(self, message: str, keys=None):
        super().__init__(message)
        self.keys = list(keys or [])


# Network-level faults (DNS, connection refused, timeout)
TransportFailure = httpx.TransportError

# Responses outside 2xx, when the client is configured to raise on them
HttpFailure = httpx.HTTPStatusError
