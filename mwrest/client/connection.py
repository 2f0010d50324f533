"""
The :py:mod:`mwrest.client.connection` module provides a low-level interface
for connections to the REST API of a wiki. The :py:class:`httpx.AsyncClient`
class from the :py:mod:`httpx` library is used to manage the connection pool
and making HTTP requests, the credentials are attached by an
:py:class:`AuthContext <mwrest.client.auth.AuthContext>`.
"""

import argparse
import logging
import os
from typing import Any, Self

import httpx

from ..utils import DEFAULT_USER_AGENT, HTTPXAsyncClient
from .auth import AuthContext
from .endpoint import Endpoint
from .errors import (
    ConfigError,
    MalformedResponseError,
    UnauthorizedError,
    decode_json,
    error_from_exception,
    error_from_response,
    unexpected_structure,
)

logger = logging.getLogger(__name__)

__all__ = ["Connection", "ACCESS_TOKEN_ENV"]

# environment variable used when --access-token is not given
ACCESS_TOKEN_ENV = "MWREST_ACCESS_TOKEN"

# the edit token returned by the Action API to anonymous users
ANONYMOUS_TOKEN = "+\\"


def _serialize_params(params: dict[str, Any] | None) -> dict[str, str]:
    """
    Converts query parameters to strings. ``None`` values are dropped and
    booleans are passed as ``"true"`` or ``"false"``.
    """
    result = {}
    for key, value in (params or {}).items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        result[key] = str(value)
    return result


class Connection:
    """
    The base object handling connection between a wiki and scripts.

    :param Endpoint endpoint: location of the wiki's REST API
    :param httpx.AsyncClient session: session created by :py:meth:`make_session`
    :param AuthContext auth: credentials, anonymous if not given
    :param int api_version: version of the core REST API
    :param float timeout: request timeout in seconds
    """

    def __init__(
        self,
        endpoint: Endpoint,
        session: httpx.AsyncClient,
        *,
        auth: AuthContext | None = None,
        api_version: int = 1,
        timeout: float = 60,
    ):
        if api_version < 1:
            raise ConfigError(f"invalid REST API version: {api_version}")
        self.endpoint = endpoint
        self.session = session
        self.auth = auth if auth is not None else AuthContext()
        self.api_version = api_version
        self.timeout = timeout

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Closes the underlying HTTP session."""
        await self.session.aclose()

    @staticmethod
    def make_session(
        user_agent: str = DEFAULT_USER_AGENT,
        max_retries: int = 0,
        timeout: float = 60,
    ) -> httpx.AsyncClient:
        """
        Creates a :py:class:`httpx.AsyncClient` object for the connection.

        :param str user_agent: string sent as ``User-Agent`` header to the web server
        :param int max_retries:
            Maximum number of retries for each connection. Applies only to
            failed DNS lookups, socket connections and connection timeouts, never
            to requests where data has made it to the server.
        :param float timeout: default timeout of the session in seconds
        :returns: :py:class:`httpx.AsyncClient` object
        """
        headers = {"User-Agent": user_agent}
        return HTTPXAsyncClient(
            headers=headers,
            timeout=timeout,
            retries=max_retries,
            follow_redirects=True,
        )

    @staticmethod
    def set_argparser(argparser: argparse.ArgumentParser) -> None:
        """
        Add arguments for constructing a :py:class:`Connection` object to an
        instance of :py:class:`argparse.ArgumentParser`.

        See also the :py:mod:`mwrest.config` module.

        :param argparser: an instance of :py:class:`argparse.ArgumentParser`
        """
        group = argparser.add_argument_group(title="Connection parameters")
        group.add_argument(
            "--rest-url",
            metavar="URL",
            help="the URL to the wiki's rest.php (takes precedence over --wiki)",
        )
        group.add_argument(
            "--wiki",
            metavar="ID",
            help="identifier of a Wikimedia wiki, e.g. 'wikipedia:en', 'en.wikipedia' or 'commons'",
        )
        group.add_argument(
            "--api-version",
            default=1,
            type=int,
            help="version of the core REST API (default: %(default)s)",
        )
        group.add_argument(
            "--access-token",
            metavar="TOKEN",
            default=os.environ.get(ACCESS_TOKEN_ENV),
            help=f"OAuth 2 access token (default: the value of ${ACCESS_TOKEN_ENV})",
        )
        group.add_argument(
            "--connection-max-retries",
            default=0,
            type=int,
            help="maximum number of retries for failed connection attempts (default: %(default)s)",
        )
        group.add_argument(
            "--connection-timeout",
            default=60,
            type=float,
            help="connection timeout in seconds (default: %(default)s)",
        )
        group.add_argument(
            "--edit-token-ttl",
            default=3600,
            type=float,
            help="number of seconds after which a cached edit token is refreshed (default: %(default)s)",
        )

    @classmethod
    def from_argparser(cls, args: argparse.Namespace) -> Self:
        """
        Construct a :py:class:`Connection` object from arguments parsed by
        :py:class:`argparse.ArgumentParser`.

        :param args: an instance of :py:class:`argparse.Namespace`.
        :returns: an instance of :py:class:`Connection`
        """
        if args.rest_url:
            endpoint = Endpoint.from_url(args.rest_url)
        elif args.wiki:
            endpoint = Endpoint.from_wiki_id(args.wiki)
        else:
            raise ConfigError("either --rest-url or --wiki must be specified")
        auth = AuthContext(args.access_token or None, edit_token_ttl=args.edit_token_ttl)
        session = Connection.make_session(
            max_retries=args.connection_max_retries, timeout=args.connection_timeout
        )
        return cls(
            endpoint,
            session,
            auth=auth,
            api_version=args.api_version,
            timeout=args.connection_timeout,
        )

    def url(self, path: str) -> str:
        """Absolute URL of a REST ``path`` for the configured API version."""
        return self.endpoint.url(path, self.api_version)

    async def _send(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        accept: str = "application/json",
        mutating: bool = False,
    ) -> httpx.Response:
        request = self.session.build_request(
            method,
            url,
            params=_serialize_params(params),
            json=json,
            headers={"Accept": accept},
            timeout=self.timeout,
        )
        # raises UnauthorizedError before any I/O for anonymous mutations
        request = await self.auth.sign(request, self.fetch_edit_token, mutating=mutating)

        try:
            response = await self.session.send(request)
        except httpx.RequestError as e:
            logger.debug(f"{method} {request.url} failed: {e!r}")
            raise error_from_exception(e) from e

        logger.debug(f"{method} {request.url} -> {response.status_code}")
        if response.is_success:
            return response

        error = error_from_response(response)
        if mutating and isinstance(error, UnauthorizedError) and "badtoken" in (error.error_key or ""):
            # the next mutating call fetches a new token
            self.auth.invalidate_edit_token()
        raise error

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        accept: str = "application/json",
        mutating: bool = False,
    ) -> httpx.Response:
        """
        Sends one request to the REST API and returns the successful response.

        :param str method: HTTP method
        :param str path: path relative to the versioned REST root, e.g. ``/page/Foo``
        :param dict params: query parameters, ``None`` values are skipped
        :param json: JSON request body
        :param str accept: value of the ``Accept`` header
        :param bool mutating:
            ``True`` for calls modifying the wiki; the edit token is attached
            to the body and an access token is required
        :raises RestApiError: the classified failure, see :py:mod:`mwrest.client.errors`
        """
        return await self._send(
            method, self.url(path), params=params, json=json, accept=accept, mutating=mutating
        )

    async def call_rest(self, method: str, path: str, **kwargs: Any) -> Any:
        """Like :py:meth:`request`, but returns the decoded JSON body."""
        response = await self.request(method, path, **kwargs)
        return decode_json(response)

    async def call_rest_text(self, method: str, path: str, **kwargs: Any) -> str:
        """Like :py:meth:`request`, but returns the body as text."""
        response = await self.request(method, path, **kwargs)
        return response.text

    async def call_action_api(self, **params: Any) -> dict[str, Any]:
        """
        Calls the ``api.php`` entry point of the wiki with a ``GET`` request.
        Only used for queries the REST API does not cover.

        :raises MalformedResponseError: if the response contains an ``error``
        """
        params["format"] = "json"
        url = self.endpoint.action_api_url
        response = await self._send("GET", url, params=params)
        result = decode_json(response)
        if not isinstance(result, dict):
            raise MalformedResponseError(
                "unexpected Action API response", status=response.status_code, body=result, url=url
            )
        if "error" in result:
            raise MalformedResponseError(
                f"Action API error: {result['error']}",
                status=response.status_code,
                body=result,
                url=url,
            )
        return result

    async def fetch_edit_token(self) -> str:
        """
        Requests a new CSRF token for the current identity. It is not cached
        here, see :py:meth:`AuthContext.edit_token <mwrest.client.auth.AuthContext.edit_token>`.
        """
        result = await self.call_action_api(action="query", meta="tokens", type="csrf")
        with unexpected_structure(self.endpoint.action_api_url, result):
            token = result["query"]["tokens"]["csrftoken"]
            if not isinstance(token, str):
                raise TypeError(f"csrftoken is not a string: {token!r}")
        if token == ANONYMOUS_TOKEN:
            raise UnauthorizedError(
                "the access token was not accepted, got an anonymous edit token",
                body=result,
                url=self.endpoint.action_api_url,
            )
        return token

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.endpoint.rest_url} v{self.api_version}>"


