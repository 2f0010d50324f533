import logging
from typing import Any, Callable

import httpx
import pytest
import pytest_httpx

import mwrest
from mwrest.client import API, AuthContext, Endpoint

# set up the global logger
logging.basicConfig()
logging.getLogger().setLevel(logging.DEBUG)

REST_URL = "https://en.wikipedia.org/w/rest.php"
TOKEN_URL = "https://en.wikipedia.org/w/api.php?action=query&meta=tokens&type=csrf&format=json"
ACCESS_TOKEN = "test-access-token"
EDIT_TOKEN = "0123456789abcdef+\\"


@pytest.fixture(autouse=True)
def disable_rate_limiting(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(mwrest, "_tests_are_running", True, raising=False)


@pytest.fixture(scope="function")
def endpoint() -> Endpoint:
    return Endpoint.from_url(REST_URL)


@pytest.fixture(scope="function")
def anon_api(endpoint: Endpoint) -> API:
    """API without an access token."""
    return API(endpoint, API.make_session())


@pytest.fixture(scope="function")
def api(endpoint: Endpoint) -> API:
    """API with an access token."""
    return API(endpoint, API.make_session(), auth=AuthContext(ACCESS_TOKEN))


@pytest.fixture(scope="function")
def mock_edit_token(httpx_mock: pytest_httpx.HTTPXMock) -> Callable[..., None]:
    """Registers the Action API response with a CSRF token."""

    def add_response(token: str = EDIT_TOKEN, **kwargs: Any) -> None:
        httpx_mock.add_response(
            method="GET",
            url=TOKEN_URL,
            json={"batchcomplete": True, "query": {"tokens": {"csrftoken": token}}},
            **kwargs,
        )

    return add_response


@pytest.fixture(scope="function")
def token_requests(httpx_mock: pytest_httpx.HTTPXMock) -> Callable[[], list[httpx.Request]]:
    """Returns the requests sent to the Action API so far."""

    def requests() -> list[httpx.Request]:
        return [r for r in httpx_mock.get_requests() if r.url.path == "/w/api.php"]

    return requests


def _page_json(
    title: str = "Earth",
    revid: int = 1234,
    source: str | None = "'''Earth''' is a planet.",
) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": 9228,
        "key": title.replace(" ", "_"),
        "title": title,
        "latest": {"id": revid, "timestamp": "2024-05-01T12:34:56Z"},
        "content_model": "wikitext",
        "license": {
            "url": "https://creativecommons.org/licenses/by-sa/4.0/deed.en",
            "title": "Creative Commons Attribution-Share Alike 4.0",
        },
    }
    if source is not None:
        data["source"] = source
    return data


@pytest.fixture(scope="function")
def page_json() -> Callable[..., dict[str, Any]]:
    """Factory of page objects as returned by the /page endpoints."""
    return _page_json
