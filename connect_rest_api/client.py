"""
HTTP Client Module.

This module provides the HTTP client capability used by the REST API
service. The service hands over a method, a URL and a mapping of request
options; HttpxClient translates those options into an httpx request.
"""

import logging
from typing import Any, Dict, Mapping, Optional, Protocol, Tuple, Union
from urllib.parse import urlsplit, urlunsplit

import httpx

from connect_rest_api.exceptions import InvalidArgumentError


logger = logging.getLogger(__name__)

SUPPORTED_OPTIONS = (
    "auth_basic",
    "auth_bearer",
    "headers",
    "query",
    "body",
    "json",
    "timeout",
    "max_redirects",
)


class HttpClient(Protocol):
    """Anything that can send a request described by an option mapping."""

    def request(self, method: str, url: str, options: Mapping[str, Any]) -> Any:
        ...


def redact_url(url: Any) -> str:
    """Return the URL with any user:password@ part removed, for logging."""
    text = str(url)
    try:
        parts = urlsplit(text)
    except ValueError:
        return text
    if "@" not in parts.netloc:
        return text
    return urlunsplit(parts._replace(netloc=parts.netloc.rpartition("@")[2]))


def _basic_auth(value: Union[str, Tuple[str, str], list]) -> httpx.BasicAuth:
    """Build basic auth from a (username, password) pair or a "username:password" string."""
    if isinstance(value, str):
        username, _, password = value.partition(":")
        return httpx.BasicAuth(username, password)
    if isinstance(value, (tuple, list)) and len(value) in (1, 2):
        username = value[0]
        password = value[1] if len(value) == 2 else ""
        return httpx.BasicAuth(str(username), str(password))
    raise InvalidArgumentError(
        f'Option "auth_basic" must be a string or an array of 1 or 2 elements, {type(value).__name__} given.'
    )


class HttpxClient:
    """HTTP client capability backed by httpx.

    Attributes:
        raise_for_status: When True, responses outside the 2xx range raise
            httpx.HTTPStatusError instead of being returned.
    """

    def __init__(
        self,
        client: Optional[httpx.Client] = None,
        raise_for_status: bool = False,
        verify: bool = True,
    ):
        """Initialize the client.

        Args:
            client: An existing httpx.Client to send requests through. A new one
                is created (and owned) when omitted.
            raise_for_status: Raise on non-2xx responses.
            verify: Verify the peer's TLS certificate. Only used when the
                client is created here.
        """
        self._owns_client = client is None
        self._client = client or httpx.Client(follow_redirects=True, verify=verify)
        self.raise_for_status = raise_for_status

    def _build_kwargs(self, options: Mapping[str, Any]) -> Dict[str, Any]:
        """Translate connector request options into httpx request arguments.

        Raises:
            InvalidArgumentError: If an option is unknown or malformed.
        """
        unknown = [key for key in options if key not in SUPPORTED_OPTIONS]
        if unknown:
            raise InvalidArgumentError(
                f'Unsupported option "{unknown[0]}" passed to HttpxClient, '
                f'did you mean one of: {", ".join(SUPPORTED_OPTIONS)}?'
            )

        kwargs: Dict[str, Any] = {}
        headers = dict(options.get("headers") or {})

        if options.get("auth_basic") is not None:
            if options.get("auth_bearer") is not None:
                raise InvalidArgumentError(
                    'Define either the "auth_basic" or the "auth_bearer" option, setting both is not supported.'
                )
            kwargs["auth"] = _basic_auth(options["auth_basic"])
        elif options.get("auth_bearer") is not None:
            headers["Authorization"] = f"Bearer {options['auth_bearer']}"

        if headers:
            kwargs["headers"] = headers

        if options.get("query"):
            kwargs["params"] = options["query"]

        body = options.get("body")
        if body is not None:
            if "json" in options and options["json"] is not None:
                raise InvalidArgumentError('Define either the "json" or the "body" option, setting both is not supported.')
            if isinstance(body, Mapping):
                kwargs["data"] = dict(body)
            elif isinstance(body, (str, bytes)):
                kwargs["content"] = body
            else:
                raise InvalidArgumentError(
                    f'Option "body" must be a string, bytes or a mapping, {type(body).__name__} given.'
                )
        elif options.get("json") is not None:
            kwargs["json"] = options["json"]

        if options.get("timeout") is not None:
            kwargs["timeout"] = float(options["timeout"])

        return kwargs

    @staticmethod
    def _max_redirects(options: Mapping[str, Any]) -> Optional[int]:
        """Read the max_redirects option.

        Returns:
            Optional[int]: The redirect limit, or None to use the client's own.

        Raises:
            InvalidArgumentError: If the value is not a non-negative integer.
        """
        value = options.get("max_redirects")
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise InvalidArgumentError(f'Option "max_redirects" must be a non-negative integer, {value!r} given.')
        return value

    def _send(self, method: str, url: str, kwargs: Dict[str, Any], max_redirects: Optional[int]) -> httpx.Response:
        """Send the request, following at most max_redirects redirects.

        When the limit is reached the last redirect response is returned
        rather than raising httpx.TooManyRedirects.
        """
        if max_redirects is None:
            return self._client.request(method, url, **kwargs)

        response = self._client.request(method, url, follow_redirects=False, **kwargs)
        redirects = 0
        while response.next_request is not None and redirects < max_redirects:
            next_request = response.next_request
            response.close()
            response = self._client.send(next_request, follow_redirects=False)
            redirects += 1
        return response

    def request(self, method: str, url: str, options: Mapping[str, Any]) -> httpx.Response:
        """Send a request.

        Args:
            method: HTTP method.
            url: Absolute URL.
            options: Request options (see SUPPORTED_OPTIONS).

        Returns:
            httpx.Response: The response, unchanged.

        Raises:
            InvalidArgumentError: If the options cannot be translated.
            httpx.TransportError: On network-level faults.
            httpx.HTTPStatusError: On non-2xx responses when raise_for_status is set.
        """
        kwargs = self._build_kwargs(options)
        max_redirects = self._max_redirects(options)
        response = self._send(method, url, kwargs, max_redirects)
        logger.debug(f"{method} {redact_url(url)} -> {response.status_code}")
        if self.raise_for_status:
            response.raise_for_status()
        return response

    def close(self) -> None:
        """Close the underlying httpx client if it was created here."""
        if self._owns_client:
            self._client.close()
            logger.debug("HTTP client closed.")

    def __enter__(self) -> "HttpxClient":
        """Use the client as a context manager.

        Returns:
            HttpxClient: This client.
        """
        return self

    def __exit__(self, *exc_info) -> None:
        """Close the client when leaving the context."""
        self.close()
