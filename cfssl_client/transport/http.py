"""HTTP transport implementations.

A transport delivers a request to one CFSSL route and hands back the raw
reply body. It never looks inside the body: interpreting the envelope is
the response processor's job, so replies are returned whatever their HTTP
status (CFSSL reports failures as 4xx/5xx with a normal envelope).
"""

from __future__ import annotations

import ssl
from typing import TYPE_CHECKING, Any, Protocol

import httpx
import pydantic_core

from cfssl_client.exceptions import TransportError

if TYPE_CHECKING:
    from collections.abc import Mapping
    from types import TracebackType

    from cfssl_client.config import TransportConfig


class Transport(Protocol):
    """Protocol for delivering requests to the CFSSL API."""

    def get(self, route: str, params: Mapping[str, Any]) -> str | bytes:
        """Issue a GET to ``route`` with query parameters, return the body."""
        ...

    def post(self, route: str, body: Mapping[str, Any]) -> str | bytes:
        """Issue a POST to ``route`` with a JSON body, return the body."""
        ...


def encode_body(body: Mapping[str, Any]) -> bytes:
    """Serialize a request body to JSON.

    Value objects such as DName or KeyConfig are serialized by Pydantic,
    with unset (None) fields left out.
    """
    return pydantic_core.to_json(body, exclude_none=True)


class HttpxTransport:
    """Transport backed by an ``httpx.Client``."""

    def __init__(self, client: httpx.Client, api_prefix: str = "/api/v1/cfssl") -> None:
        """Initialize with an HTTP client and the API path prefix.

        Args:
            client: Client whose ``base_url`` points at the CFSSL server.
            api_prefix: Path prepended to every route.
        """
        self._client = client
        self._api_prefix = api_prefix.rstrip("/")

    @classmethod
    def from_config(cls, config: TransportConfig) -> HttpxTransport:
        """Create transport from configuration."""
        verify: bool | ssl.SSLContext
        if isinstance(config.verify, bool):
            verify = config.verify
        else:
            # Path to a CA bundle for verifying the CFSSL server
            verify = ssl.create_default_context(cafile=str(config.verify))
        client = httpx.Client(
            base_url=config.base_url,
            timeout=config.timeout,
            verify=verify,
            headers=config.headers,
        )
        return cls(client, api_prefix=config.api_prefix)

    def get(self, route: str, params: Mapping[str, Any]) -> bytes:
        """Issue a GET to ``route`` with query parameters."""
        query = {name: value for name, value in params.items() if value is not None}
        return self._send("GET", route, params=query)

    def post(self, route: str, body: Mapping[str, Any]) -> bytes:
        """Issue a POST to ``route`` with a JSON body."""
        return self._send(
            "POST",
            route,
            content=encode_body(body),
            headers={"Content-Type": "application/json"},
        )

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def __enter__(self) -> HttpxTransport:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _url(self, route: str) -> str:
        return f"{self._api_prefix}/{route.lstrip('/')}"

    def _send(self, method: str, route: str, **kwargs: Any) -> bytes:
        """Send one request, translating HTTP-layer failures.

        Raises:
            TransportError: If the request could not be completed.
        """
        url = self._url(route)
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            raise TransportError.timeout(url=url, reason=str(e)) from e
        except httpx.ConnectError as e:
            raise TransportError.connection_failed(url=url, reason=str(e)) from e
        except httpx.HTTPError as e:
            raise TransportError.request_failed(url=url, reason=str(e)) from e
        return response.content

