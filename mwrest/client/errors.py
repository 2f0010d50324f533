"""
The :py:mod:`mwrest.client.errors` module defines the errors raised by the
client and the mapping of HTTP responses onto them.

Every failure is reported by raising exactly one subclass of
:py:exc:`RestApiError`. The variant is also exposed as the
:py:attr:`RestApiError.kind` attribute, so callers can either catch specific
classes:

.. code-block:: python

    try:
        snapshot = await api.pages.edit(handle, request)
    except ConflictError as e:
        # refetch e.latest_revision_id and try again
        ...

or dispatch on the kind:

.. code-block:: python

    except RestApiError as e:
        if e.kind is ErrorKind.RATE_LIMITED:
            ...
"""

import contextlib
import datetime
import email.utils
import enum
import json
import logging
from typing import Any, Iterator

import httpx

logger = logging.getLogger(__name__)

__all__ = [
    "ErrorKind",
    "RestApiError",
    "ConfigError",
    "UnauthorizedError",
    "NotFoundError",
    "ConflictError",
    "RateLimitedError",
    "MalformedResponseError",
    "TransportError",
    "error_from_response",
    "error_from_exception",
    "check_response",
    "decode_json",
    "unexpected_structure",
]


class ErrorKind(enum.Enum):
    CONFIG = "config"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not found"
    CONFLICT = "conflict"
    RATE_LIMITED = "rate limited"
    MALFORMED = "malformed"
    TRANSPORT = "transport"


class RestApiError(Exception):
    """
    Base class of all errors raised by the client.

    :param str message: human readable description
    :param int status: HTTP status code of the response, if there was one
    :param body: decoded response body (:py:obj:`dict` for JSON bodies,
        :py:obj:`str` otherwise, ``None`` when the body was empty)
    :param str url: URL of the request
    """

    kind: ErrorKind

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        body: Any = None,
        url: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.status = status
        self.body = body
        self.url = url

    @property
    def error_key(self) -> str | None:
        """The ``errorKey`` of a MediaWiki REST error body, if present."""
        if isinstance(self.body, dict):
            key = self.body.get("errorKey")
            if isinstance(key, str):
                return key
        return None

    def __str__(self) -> str:
        parts = [self.message]
        if self.status is not None:
            parts.append(f"(HTTP {self.status})")
        if self.url is not None:
            parts.append(f"[{self.url}]")
        return " ".join(parts)


class ConfigError(RestApiError):
    """Raised for invalid endpoints and invalid argument values."""

    kind = ErrorKind.CONFIG


class UnauthorizedError(RestApiError):
    """HTTP 401 or 403, or a mutating call attempted without credentials."""

    kind = ErrorKind.UNAUTHORIZED


class NotFoundError(RestApiError):
    kind = ErrorKind.NOT_FOUND


class ConflictError(RestApiError):
    """
    HTTP 409: the base revision of an edit is not the latest revision of the
    page. :py:attr:`latest_revision_id` holds the current latest revision when
    the server returns it.
    """

    kind = ErrorKind.CONFLICT

    def __init__(self, message: str, *, latest_revision_id: int | None = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.latest_revision_id = latest_revision_id


class RateLimitedError(RestApiError):
    """
    HTTP 429. The client never retries; :py:attr:`retry_after` is the number of
    seconds suggested by the ``Retry-After`` header, if it was sent.
    """

    kind = ErrorKind.RATE_LIMITED

    def __init__(self, message: str, *, retry_after: float | None = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.retry_after = retry_after


class MalformedResponseError(RestApiError):
    """A response body was received, but it is an error or has unexpected shape."""

    kind = ErrorKind.MALFORMED


class TransportError(RestApiError):
    """Connection-level failure or a response without any body."""

    kind = ErrorKind.TRANSPORT


STATUS_ERRORS: dict[int, type[RestApiError]] = {
    401: UnauthorizedError,
    403: UnauthorizedError,
    404: NotFoundError,
    409: ConflictError,
    429: RateLimitedError,
}


def _decode_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def _describe(response: httpx.Response, body: Any) -> str:
    message = response.reason_phrase or "HTTP error"
    if isinstance(body, dict):
        translations = body.get("messageTranslations")
        if isinstance(translations, dict) and translations:
            text = translations.get("en") or next(iter(translations.values()))
            return f"{message}: {text}"
        for key in ("message", "errorKey", "httpReason"):
            if isinstance(body.get(key), str):
                return f"{message}: {body[key]}"
    return message


def _latest_revision_id(body: Any) -> int | None:
    if not isinstance(body, dict):
        return None
    latest = body.get("latest")
    if isinstance(latest, dict):
        latest = latest.get("id")
    if latest is None:
        latest = body.get("latest_revision_id")
    if isinstance(latest, int) and not isinstance(latest, bool):
        return latest
    if isinstance(latest, str) and latest.isdigit():
        return int(latest)
    return None


def _retry_after(value: str | None) -> float | None:
    if value is None:
        return None
    value = value.strip()
    if value.isdigit():
        return float(value)
    try:
        date = email.utils.parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    delta = date - datetime.datetime.now(datetime.UTC)
    return max(delta.total_seconds(), 0.0)


def error_from_response(response: httpx.Response) -> RestApiError:
    """
    Maps a non-success response onto exactly one error variant:

    - 401 and 403 to :py:exc:`UnauthorizedError`
    - 404 to :py:exc:`NotFoundError`
    - 409 to :py:exc:`ConflictError`
    - 429 to :py:exc:`RateLimitedError`
    - anything else to :py:exc:`MalformedResponseError` if a body was received
      or to :py:exc:`TransportError` if the body is empty
    """
    body = _decode_body(response)
    kwargs: dict[str, Any] = {
        "status": response.status_code,
        "body": body,
        "url": str(response.request.url),
    }
    message = _describe(response, body)
    cls = STATUS_ERRORS.get(response.status_code)
    if cls is ConflictError:
        return ConflictError(message, latest_revision_id=_latest_revision_id(body), **kwargs)
    if cls is RateLimitedError:
        return RateLimitedError(
            message, retry_after=_retry_after(response.headers.get("Retry-After")), **kwargs
        )
    if cls is not None:
        return cls(message, **kwargs)
    if body is None:
        return TransportError(f"{message} (empty response body)", **kwargs)
    return MalformedResponseError(message, **kwargs)


def error_from_exception(exc: httpx.RequestError) -> TransportError:
    """Wraps an :py:mod:`httpx` request failure into :py:exc:`TransportError`."""
    try:
        url = str(exc.request.url)
    except RuntimeError:
        # the request is not set on exceptions raised outside of a client call
        url = None
    message = str(exc) or type(exc).__name__
    return TransportError(message, url=url)


def check_response(response: httpx.Response) -> httpx.Response:
    """Returns the response if its status is 2xx, otherwise raises the mapped error."""
    if response.is_success:
        return response
    raise error_from_response(response)


def decode_json(response: httpx.Response) -> Any:
    """
    Decodes the JSON body of a successful response. An empty body raises
    :py:exc:`TransportError`, an undecodable one :py:exc:`MalformedResponseError`.
    """
    url = str(response.request.url)
    if not response.content:
        raise TransportError(
            "empty response body", status=response.status_code, url=url
        )
    try:
        return response.json()
    except (ValueError, json.JSONDecodeError) as e:
        raise MalformedResponseError(
            f"failed to decode JSON response: {e}",
            status=response.status_code,
            body=response.text,
            url=url,
        ) from e


@contextlib.contextmanager
def unexpected_structure(url: str | None = None, body: Any = None) -> Iterator[None]:
    """
    Context manager translating errors raised while converting a decoded body
    into typed models into :py:exc:`MalformedResponseError`.
    """
    try:
        yield
    except (KeyError, TypeError, ValueError, AttributeError, ConfigError) as e:
        logger.debug(f"unexpected response structure for {url}: {e!r}")
        raise MalformedResponseError(
            f"unexpected response structure: {e!r}", body=body, url=url
        ) from e
