import ssl
from typing import Any

import httpx
import truststore

from mwrest import __url__, __version__

__all__ = ["DEFAULT_USER_AGENT", "HTTPXAsyncClient"]

DEFAULT_USER_AGENT = f"mediawiki-rest/{__version__} ({__url__}) httpx/{httpx.__version__}"


def _get_limits(
    *,
    max_connections: int,
    keepalive_expiry: int,
) -> httpx.Limits:
    return httpx.Limits(
        max_connections=max_connections,
        max_keepalive_connections=None,  # always allow keep-alive
        keepalive_expiry=keepalive_expiry,
    )


def _get_headers(
    headers: dict[str, str] | None = None,
) -> dict[str, str]:
    headers = dict(headers or {})
    headers.setdefault("User-Agent", DEFAULT_USER_AGENT)
    return headers


def _get_ssl_context() -> ssl.SSLContext:
    # system certificate store via truststore, TLS 1.2 or newer only
    ssl_context = truststore.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    ssl_context.minimum_version = ssl.TLSVersion.TLSv1_2
    return ssl_context


def HTTPXAsyncClient(
    *,
    headers: dict[str, str] | None = None,
    timeout: float | httpx.Timeout = 60,
    retries: int = 0,
    max_connections: int = 100,
    keepalive_expiry: int = 60,
    transport: httpx.AsyncBaseTransport | None = None,
    **kwargs: Any,
) -> httpx.AsyncClient:
    """
    Creates an :py:class:`httpx.AsyncClient` instance with the default
    parameters of the library.

    ``retries`` is passed to :py:class:`httpx.AsyncHTTPTransport`, i.e. it
    applies only to failed connection attempts, never to requests which reached
    the server.
    """
    if not isinstance(timeout, httpx.Timeout):
        # disable timeout for waiting for a connection from the pool
        timeout = httpx.Timeout(timeout, pool=None)

    if transport is None:
        transport = httpx.AsyncHTTPTransport(retries=retries)

    return httpx.AsyncClient(
        transport=transport,
        verify=_get_ssl_context(),
        headers=_get_headers(headers),
        timeout=timeout,
        limits=_get_limits(
            max_connections=max_connections,
            keepalive_expiry=keepalive_expiry,
        ),
        **kwargs,
    )
