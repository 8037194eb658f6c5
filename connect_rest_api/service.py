"""
REST API Service Module.

This module provides ConnectRestApiService, which sends requests to REST APIs
with HTTP Basic Authentication. Credentials are read from the configuration
provider on every call and layered, together with JSON headers and a default
timeout, onto the options handed to the HTTP client.
"""

import ipaddress
import json
import logging
import re
from typing import Any, Dict, Mapping, Optional, Protocol, Tuple
from urllib.parse import urlsplit

from connect_rest_api.client import HttpClient, redact_url
from connect_rest_api.exceptions import InvalidArgumentError


logger = logging.getLogger(__name__)

SUPPORTED_METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS")
BODY_METHODS = ("POST", "PUT", "PATCH")

USERNAME_KEY = "connect_rest_api.username"
PASSWORD_KEY = "connect_rest_api.password"

DEFAULT_TIMEOUT = 30

_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")
# Unreserved, reserved and percent characters (RFC 3986)
_URL_CHARS_RE = re.compile(r"^[A-Za-z0-9\-._~:/?#\[\]@!$&'()*+,;=%]+$")
_LABEL_RE = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9\-]{0,61}[A-Za-z0-9])?$")


class ConfigProvider(Protocol):
    """Source of configuration values, looked up by dotted key."""

    def get(self, key: str, default: Any = None) -> Any:
        ...


def _is_valid_host(host: str) -> bool:
    """Check that a host is an IP literal or a name made of letter-digit-hyphen labels."""
    try:
        ipaddress.ip_address(host)
        return True
    except ValueError:
        pass

    if host.endswith("."):
        host = host[:-1]
    if not host or len(host) > 253:
        return False
    return all(_LABEL_RE.match(label) for label in host.split("."))


def is_valid_url(url: str) -> bool:
    """Check that a string is a well-formed absolute URL.

    The URL may only contain ASCII characters allowed by RFC 3986, needs a
    scheme and a host, and the host must be an IP address or a valid hostname.
    """
    if not url or not isinstance(url, str):
        return False
    if not _URL_CHARS_RE.match(url):
        return False
    try:
        parts = urlsplit(url)
        # Raises ValueError on a malformed port
        parts.port
    except ValueError:
        return False
    if not _SCHEME_RE.match(parts.scheme or ""):
        return False
    if not parts.hostname:
        return False
    return _is_valid_host(parts.hostname)


class ConnectRestApiService:
    """Service for connecting to REST APIs with Basic Authentication.

    The service holds no state of its own besides its two collaborators, so a
    single instance can be shared as long as the HTTP client can be.

    Attributes:
        client: HTTP client capability that performs the request.
        config: Configuration provider holding the credentials.
    """

    def __init__(self, client: HttpClient, config: ConfigProvider):
        self.client = client
        self.config = config

    def _credentials(self) -> Tuple[str, str]:
        """Read the REST API credentials from the configuration provider.

        Returns:
            Tuple[str, str]: The (username, password) pair.

        Raises:
            InvalidArgumentError: If either value is missing or empty.
        """
        username = self.config.get(USERNAME_KEY)
        password = self.config.get(PASSWORD_KEY)

        if not username or not password:
            raise InvalidArgumentError(
                "REST API credentials are not configured. Check the "
                "CONNECT_REST_API_USERNAME and CONNECT_REST_API_PASSWORD environment variables."
            )
        return str(username), str(password)

    def dispatch(
        self,
        method: str,
        url: str,
        data: Optional[Mapping[str, Any]] = None,
        options: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """Send an HTTP request to an endpoint with Basic Authentication.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE, PATCH, HEAD, OPTIONS),
                case-insensitive.
            url: Absolute URL of the endpoint.
            data: Payload for POST, PUT and PATCH. Ignored for other methods.
            options: Extra request options. They override the defaults, except
                for "body" when a payload is sent.

        Returns:
            The HTTP client's response, unchanged.

        Raises:
            InvalidArgumentError: If the method or URL is invalid, or the
                credentials are missing.
            httpx.TransportError: On network errors.
            httpx.HTTPStatusError: If the client is set to raise on error responses.
        """
        method = str(method).strip().upper()
        if method not in SUPPORTED_METHODS:
            raise InvalidArgumentError(
                f"Unsupported HTTP method: {method}. "
                f"Supported methods are: {', '.join(SUPPORTED_METHODS)}"
            )

        if not is_valid_url(url):
            raise InvalidArgumentError(f"Invalid URL: {url}")

        username, password = self._credentials()

        request_options: Dict[str, Any] = {
            "auth_basic": (username, password),
            "headers": {
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            "timeout": DEFAULT_TIMEOUT,
        }
        request_options.update(options or {})

        if method in BODY_METHODS and data is not None:
            request_options["body"] = json.dumps(data, ensure_ascii=False)

        logger.debug(f"Dispatching {method} {redact_url(url)}")
        return self.client.request(method, url, request_options)

    # Older callers use connector()
    connector = dispatch

    def get(self, url: str, options: Optional[Mapping[str, Any]] = None) -> Any:
        """Send a GET request."""
        return self.dispatch("GET", url, None, options)

    def post(self, url: str, data: Mapping[str, Any], options: Optional[Mapping[str, Any]] = None) -> Any:
        """Send a POST request with a JSON payload."""
        return self.dispatch("POST", url, data, options)

    def put(self, url: str, data: Mapping[str, Any], options: Optional[Mapping[str, Any]] = None) -> Any:
        """Send a PUT request with a JSON payload."""
        return self.dispatch("PUT", url, data, options)

    def delete(self, url: str, options: Optional[Mapping[str, Any]] = None) -> Any:
        """Send a DELETE request."""
        return self.dispatch("DELETE", url, None, options)

    def patch(self, url: str, data: Mapping[str, Any], options: Optional[Mapping[str, Any]] = None) -> Any:
        """Send a PATCH request with a JSON payload."""
        return self.dispatch("PATCH", url, data, options)
