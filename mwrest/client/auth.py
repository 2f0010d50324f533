"""
The :py:mod:`mwrest.client.auth` module holds the credentials of a client: an
optional OAuth 2 access token sent as a bearer token with every request, and
the short-lived `edit token`_ required by mutating endpoints.

.. _`edit token`: https://www.mediawiki.org/wiki/API:Tokens
"""

import asyncio
import json
import logging
import time
from typing import Awaitable, Callable

import httpx

from .errors import ConfigError, UnauthorizedError

logger = logging.getLogger(__name__)

__all__ = ["AuthContext", "EditTokenFetcher"]

EditTokenFetcher = Callable[[], Awaitable[str]]


class AuthContext:
    """
    Credentials of one client instance.

    :param str access_token: OAuth 2 access token, or ``None`` for anonymous
        access (only read operations are possible)
    :param float edit_token_ttl: number of seconds after which a cached edit
        token is considered expired and fetched again
    """

    def __init__(self, access_token: str | None = None, *, edit_token_ttl: float = 3600):
        if access_token is not None:
            access_token = access_token.strip()
            if not access_token:
                raise ConfigError("the access token must not be empty")
        if edit_token_ttl <= 0:
            raise ConfigError(f"edit token TTL must be positive, got {edit_token_ttl}")
        self.access_token = access_token
        self.edit_token_ttl = edit_token_ttl
        self._edit_token: str | None = None
        self._edit_token_expiry: float | None = None
        # the single in-flight refresh shared by concurrent callers
        self._refresh: asyncio.Task[str] | None = None

    def __repr__(self) -> str:
        token = "set" if self.access_token else "none"
        return f"<AuthContext access_token={token} edit_token_cached={self.has_edit_token}>"

    def with_access_token(self, token: str) -> "AuthContext":
        """
        Returns a new context carrying the bearer ``token``. The token is not
        validated until the first authenticated call. The cached edit token is
        not carried over, it belongs to the previous identity.
        """
        return type(self)(token, edit_token_ttl=self.edit_token_ttl)

    @property
    def is_authenticated(self) -> bool:
        return self.access_token is not None

    @property
    def has_edit_token(self) -> bool:
        """``True`` if a cached edit token exists and has not expired."""
        if self._edit_token is None or self._edit_token_expiry is None:
            return False
        return time.monotonic() < self._edit_token_expiry

    @property
    def token_expiry(self) -> float | None:
        """:py:func:`time.monotonic` deadline of the cached edit token."""
        return self._edit_token_expiry

    def headers(self) -> dict[str, str]:
        if self.access_token is None:
            return {}
        return {"Authorization": f"Bearer {self.access_token}"}

    def invalidate_edit_token(self) -> None:
        """Drops the cached edit token, the next mutating call fetches a new one."""
        if self._edit_token is not None:
            logger.debug("Invalidating the cached edit token")
        self._edit_token = None
        self._edit_token_expiry = None

    async def _refresh_edit_token(self, fetch: EditTokenFetcher) -> str:
        try:
            logger.debug("Requesting new edit token...")
            token = await fetch()
            self._edit_token = token
            self._edit_token_expiry = time.monotonic() + self.edit_token_ttl
            return token
        finally:
            self._refresh = None

    async def edit_token(self, fetch: EditTokenFetcher) -> str:
        """
        Returns the cached edit token, or fetches a new one using ``fetch`` if
        it is absent or expired. Concurrent callers share one refresh: only the
        first one calls ``fetch``, the others await its result.
        """
        if self.has_edit_token:
            assert self._edit_token is not None
            return self._edit_token
        # no await between the check and the assignment, so the slot cannot
        # be taken by another task in the meantime
        if self._refresh is None:
            self._refresh = asyncio.get_running_loop().create_task(
                self._refresh_edit_token(fetch)
            )
        # shield the shared task from the cancellation of a single waiter
        return await asyncio.shield(self._refresh)

    async def sign(
        self,
        request: httpx.Request,
        fetch_edit_token: EditTokenFetcher | None = None,
        *,
        mutating: bool = False,
    ) -> httpx.Request:
        """
        Attaches the credentials to ``request`` and returns the signed request.

        The ``Authorization`` header is added if an access token is present.
        For mutating requests, a valid edit token is additionally put into the
        JSON body as the ``token`` field, which requires a new
        :py:class:`httpx.Request` object to be built.

        :raises UnauthorizedError:
            for mutating requests without an access token; no network call is
            made in this case
        """
        if mutating and self.access_token is None:
            raise UnauthorizedError(
                f"an access token is required for {request.method} requests",
                url=str(request.url),
            )
        request.headers.update(self.headers())
        if not mutating:
            return request

        if fetch_edit_token is None:
            raise ValueError("fetch_edit_token must be given for mutating requests")
        token = await self.edit_token(fetch_edit_token)

        body = json.loads(request.content) if request.content else {}
        if not isinstance(body, dict):
            raise ValueError("mutating requests must have a JSON object body")
        body["token"] = token

        headers = request.headers.copy()
        headers.pop("Content-Length", None)
        return httpx.Request(
            request.method,
            request.url,
            headers=headers,
            json=body,
            extensions=request.extensions,
        )
