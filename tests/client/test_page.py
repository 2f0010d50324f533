import asyncio
import datetime
import json

import pytest

from mwrest.client import (
    ConfigError,
    ConflictError,
    EditRequest,
    ErrorKind,
    HistoryCountType,
    HistoryFilter,
    MalformedResponseError,
    NotFoundError,
    PageSnapshot,
    UnauthorizedError,
)

ROOT = "https://en.wikipedia.org/w/rest.php/v1"
EDIT_TOKEN = "0123456789abcdef+\\"


class test_get:
    def test_snapshot(self, anon_api, httpx_mock, page_json):
        httpx_mock.add_response(method="GET", url=f"{ROOT}/page/Earth?redirect=false", json=page_json())

        snapshot = asyncio.run(anon_api.pages.get("Earth"))

        assert snapshot == PageSnapshot(
            title="Earth",
            latest_revision_id=1234,
            wikitext_source="'''Earth''' is a planet.",
            content_model="wikitext",
            timestamp=datetime.datetime(2024, 5, 1, 12, 34, 56, tzinfo=datetime.UTC),
            page_id=9228,
            key="Earth",
            license=snapshot.license,
        )
        assert snapshot.license.title == "Creative Commons Attribution-Share Alike 4.0"
        request = httpx_mock.get_request()
        assert request.headers["Accept"] == "application/json"
        assert request.headers["User-Agent"].startswith("mediawiki-rest/")
        assert "Authorization" not in request.headers

    def test_bearer_header(self, api, httpx_mock, page_json):
        httpx_mock.add_response(method="GET", url=f"{ROOT}/page/Earth?redirect=false", json=page_json())
        asyncio.run(api.get("Earth"))
        assert httpx_mock.get_request().headers["Authorization"] == "Bearer test-access-token"

    def test_title_is_encoded(self, anon_api, httpx_mock, page_json):
        httpx_mock.add_response(
            url=f"{ROOT}/page/Talk%3AFoo_bar%2FBaz?redirect=true",
            json=page_json("Talk:Foo bar/Baz"),
        )
        snapshot = asyncio.run(anon_api.pages.get("Talk:Foo bar/Baz", redirect=True))
        assert snapshot.key == "Talk:Foo_bar/Baz"

    def test_bare(self, anon_api, httpx_mock, page_json):
        data = page_json(source=None)
        data["html_url"] = f"{ROOT}/page/Earth/html"
        httpx_mock.add_response(url=f"{ROOT}/page/Earth/bare?redirect=false", json=data)

        snapshot = asyncio.run(anon_api.pages.get("Earth", with_source=False))
        assert snapshot.wikitext_source is None
        assert snapshot.html_url == f"{ROOT}/page/Earth/html"

    def test_not_found(self, anon_api, httpx_mock):
        httpx_mock.add_response(
            url=f"{ROOT}/page/Nope?redirect=false",
            status_code=404,
            json={"errorKey": "rest-nonexistent-title", "httpCode": 404, "httpReason": "Not Found"},
        )
        with pytest.raises(NotFoundError) as excinfo:
            asyncio.run(anon_api.pages.get("Nope"))
        assert excinfo.value.error_key == "rest-nonexistent-title"

    def test_malformed(self, anon_api, httpx_mock):
        httpx_mock.add_response(url=f"{ROOT}/page/Earth?redirect=false", json={"title": "Earth"})
        with pytest.raises(MalformedResponseError):
            asyncio.run(anon_api.pages.get("Earth"))

    def test_empty_title(self, anon_api):
        with pytest.raises(ConfigError):
            asyncio.run(anon_api.pages.get(""))


class test_get_variants:
    def test_html(self, anon_api, httpx_mock):
        httpx_mock.add_response(
            url=f"{ROOT}/page/Earth/html?redirect=false&stash=false&flavor=fragment",
            text="<p>Earth</p>",
        )
        html = asyncio.run(anon_api.pages.get_html("Earth", flavor="fragment"))
        assert html == "<p>Earth</p>"
        assert httpx_mock.get_request().headers["Accept"] == "text/html"

    def test_with_html(self, anon_api, httpx_mock, page_json):
        data = page_json(source=None)
        data["html"] = "<p>Earth</p>"
        httpx_mock.add_response(url=f"{ROOT}/page/Earth/with_html?redirect=false&stash=false", json=data)
        snapshot, html = asyncio.run(anon_api.pages.get_with_html("Earth"))
        assert snapshot.latest_revision_id == 1234
        assert html == "<p>Earth</p>"

    def test_links_language(self, anon_api, httpx_mock):
        httpx_mock.add_response(url=f"{ROOT}/page/Earth/links/language", json=[
            {"code": "de", "name": "Deutsch", "key": "Erde", "title": "Erde"},
        ])
        links = asyncio.run(anon_api.pages.get_links_language("Earth"))
        assert [link.code for link in links] == ["de"]
        assert links[0].title == "Erde"

    def test_links_media(self, anon_api, httpx_mock):
        httpx_mock.add_response(url=f"{ROOT}/page/Earth/links/media", json={"files": [{
            "title": "Earth.jpg",
            "file_description_url": "//commons.wikimedia.org/wiki/File:Earth.jpg",
            "latest": {"timestamp": "2020-01-01T00:00:00Z", "user": {"id": 1, "name": "Someone"}},
            "preferred": {"mediatype": "BITMAP", "url": "//upload.wikimedia.org/Earth.jpg", "width": 640, "height": 480},
            "original": None,
        }]})
        media = asyncio.run(anon_api.pages.get_links_media("Earth"))
        assert media.files[0].preferred.width == 640
        assert media.files[0].latest.user.name == "Someone"

    def test_lint(self, anon_api, httpx_mock):
        httpx_mock.add_response(url=f"{ROOT}/page/Earth/lint?redirect=false", json=[
            {"type": "missing-end-tag", "dsr": [10, 20, 3, 0], "params": {"name": "b"}},
        ])
        lints = asyncio.run(anon_api.pages.get_lint("Earth"))
        assert lints[0].type_name == "missing-end-tag"
        assert lints[0].params == {"name": "b"}


class test_history:
    def test_history(self, anon_api, httpx_mock):
        httpx_mock.add_response(url=f"{ROOT}/page/Earth/history?filter=bot&older_than=100", json={
            "revisions": [
                {"id": 99, "timestamp": "2024-01-02T00:00:00Z", "minor": False, "size": 10,
                 "comment": "fix", "user": {"id": 5, "name": "Bot"}, "delta": 2},
            ],
            "latest": f"{ROOT}/page/Earth/history",
            "older": f"{ROOT}/page/Earth/history?older_than=99",
        })
        history = asyncio.run(anon_api.pages.get_history("Earth", filter=HistoryFilter.BOT, older_than=100))
        assert history.revisions[0].id == 99
        assert history.revisions[0].user.name == "Bot"
        assert history.older.endswith("older_than=99")
        assert history.newer is None

    def test_history_both_bounds(self, anon_api):
        with pytest.raises(ConfigError):
            asyncio.run(anon_api.pages.get_history("Earth", older_than=1, newer_than=2))

    def test_counts(self, anon_api, httpx_mock):
        httpx_mock.add_response(url=f"{ROOT}/page/Earth/history/counts/edits?from=1&to=5", json={"count": 4})
        counts = asyncio.run(anon_api.pages.get_history_counts("Earth", "edits", from_id=1, to_id=5))
        assert counts.count == 4
        assert counts.limit is False

    def test_counts_range_not_supported(self, anon_api):
        with pytest.raises(ConfigError):
            asyncio.run(anon_api.pages.get_history_counts("Earth", HistoryCountType.BOT, from_id=1))


class test_edit:
    def test_without_access_token(self, anon_api, httpx_mock):
        request = EditRequest(1234, "new text", "summary")
        with pytest.raises(UnauthorizedError) as excinfo:
            asyncio.run(anon_api.pages.edit("Earth", request))
        assert excinfo.value.kind is ErrorKind.UNAUTHORIZED
        assert httpx_mock.get_requests() == []

    def test_create_without_access_token(self, anon_api, httpx_mock):
        with pytest.raises(UnauthorizedError):
            asyncio.run(anon_api.pages.create("Earth", "text", "summary"))
        assert httpx_mock.get_requests() == []

    def test_edit(self, api, httpx_mock, mock_edit_token, page_json):
        mock_edit_token()
        httpx_mock.add_response(method="PUT", url=f"{ROOT}/page/Earth", json=page_json(revid=1235, source="new text"))

        snapshot = asyncio.run(api.pages.edit("Earth", EditRequest(1234, "new text", "summary")))

        assert snapshot.latest_revision_id == 1235
        assert snapshot.wikitext_source == "new text"
        put = httpx_mock.get_request(method="PUT")
        assert put.headers["Authorization"] == "Bearer test-access-token"
        assert json.loads(put.content) == {
            "source": "new text",
            "comment": "summary",
            "latest": {"id": 1234},
            "token": EDIT_TOKEN,
        }

    def test_conflict(self, api, httpx_mock, mock_edit_token):
        mock_edit_token()
        httpx_mock.add_response(
            method="PUT",
            url=f"{ROOT}/page/Earth",
            status_code=409,
            json={
                "errorKey": "rest-update-mismatch",
                "latest": {"id": 1240, "timestamp": "2024-05-02T00:00:00Z"},
                "httpCode": 409,
                "httpReason": "Conflict",
            },
        )
        with pytest.raises(ConflictError) as excinfo:
            asyncio.run(api.edit("Earth", 1234, "new text", "summary"))
        assert excinfo.value.kind is ErrorKind.CONFLICT
        assert excinfo.value.latest_revision_id == 1240
        assert excinfo.value.status == 409

    def test_concurrent_edits_refresh_token_once(self, api, httpx_mock, mock_edit_token, token_requests, page_json):
        mock_edit_token()
        for title in ["A", "B", "C"]:
            httpx_mock.add_response(method="PUT", url=f"{ROOT}/page/{title}", json=page_json(title, revid=2000))

        async def run():
            return await asyncio.gather(*(
                api.pages.edit(title, EditRequest(1999, f"text of {title}", "summary"))
                for title in ["A", "B", "C"]
            ))

        snapshots = asyncio.run(run())
        assert [s.title for s in snapshots] == ["A", "B", "C"]
        assert len(token_requests()) == 1
        for put in httpx_mock.get_requests(method="PUT"):
            assert json.loads(put.content)["token"] == EDIT_TOKEN

    def test_token_is_reused(self, api, httpx_mock, mock_edit_token, token_requests, page_json):
        mock_edit_token()
        httpx_mock.add_response(method="PUT", url=f"{ROOT}/page/Earth", json=page_json(), is_reusable=True)
        request = EditRequest(1234, "text", "summary")
        asyncio.run(api.pages.edit("Earth", request))
        asyncio.run(api.pages.edit("Earth", request))
        assert len(token_requests()) == 1

    def test_badtoken_invalidates_cache(self, api, httpx_mock, mock_edit_token):
        mock_edit_token()
        httpx_mock.add_response(
            method="PUT",
            url=f"{ROOT}/page/Earth",
            status_code=403,
            json={"errorKey": "rest-badtoken", "httpCode": 403, "httpReason": "Forbidden"},
        )
        with pytest.raises(UnauthorizedError):
            asyncio.run(api.pages.edit("Earth", EditRequest(1234, "text", "summary")))
        assert api.auth.has_edit_token is False

    def test_anonymous_edit_token(self, api, httpx_mock, mock_edit_token):
        mock_edit_token("+\\")
        with pytest.raises(UnauthorizedError):
            asyncio.run(api.pages.edit("Earth", EditRequest(1234, "text", "summary")))
        assert httpx_mock.get_requests(method="PUT") == []

    def test_invalid_request(self):
        with pytest.raises(ConfigError):
            EditRequest(0, "text", "summary")
        with pytest.raises(ConfigError):
            EditRequest(1234, "text", "")
        with pytest.raises(ConfigError):
            EditRequest("1234", "text", "summary")


class test_create:
    def test_create(self, api, httpx_mock, mock_edit_token, page_json):
        mock_edit_token()
        httpx_mock.add_response(method="POST", url=f"{ROOT}/page", status_code=201, json=page_json("New page", revid=1))

        snapshot = asyncio.run(api.create("New page", "content", "create", content_model="wikitext"))

        assert snapshot.title == "New page"
        assert json.loads(httpx_mock.get_request(method="POST").content) == {
            "source": "content",
            "title": "New page",
            "comment": "create",
            "content_model": "wikitext",
            "token": EDIT_TOKEN,
        }

    def test_already_exists(self, api, httpx_mock, mock_edit_token):
        mock_edit_token()
        httpx_mock.add_response(
            method="POST", url=f"{ROOT}/page", status_code=409,
            json={"errorKey": "rest-article-exists", "httpCode": 409, "httpReason": "Conflict"},
        )
        with pytest.raises(ConflictError) as excinfo:
            asyncio.run(api.pages.create("Earth", "content", "create"))
        assert excinfo.value.latest_revision_id is None

    def test_empty_comment(self, api):
        with pytest.raises(ConfigError):
            asyncio.run(api.pages.create("Earth", "content", ""))


class test_history_since:
    def revision(self, revid, timestamp):
        return {"id": revid, "timestamp": timestamp, "minor": False, "size": 1, "comment": "",
                "user": {"id": 1, "name": "Someone"}, "delta": 0}

    def test_follows_older_segments(self, anon_api, httpx_mock):
        httpx_mock.add_response(url=f"{ROOT}/page/Earth/history", json={
            "revisions": [self.revision(30, "2024-03-01T00:00:00Z"), self.revision(20, "2024-02-01T00:00:00Z")],
            "latest": f"{ROOT}/page/Earth/history",
            "older": f"{ROOT}/page/Earth/history?older_than=20",
        })
        httpx_mock.add_response(url=f"{ROOT}/page/Earth/history?older_than=20", json={
            "revisions": [self.revision(10, "2024-01-15T00:00:00Z"), self.revision(5, "2023-12-01T00:00:00Z")],
            "latest": f"{ROOT}/page/Earth/history",
            "older": f"{ROOT}/page/Earth/history?older_than=5",
        })

        since = datetime.datetime(2024, 1, 1, tzinfo=datetime.UTC)
        revisions = asyncio.run(anon_api.pages.history_since("Earth", since))

        assert [r.id for r in revisions] == [30, 20, 10]

    def test_last_segment(self, anon_api, httpx_mock):
        httpx_mock.add_response(url=f"{ROOT}/page/Earth/history", json={
            "revisions": [self.revision(2, "2024-03-01T00:00:00Z")],
            "latest": f"{ROOT}/page/Earth/history",
        })
        since = datetime.datetime(2000, 1, 1, tzinfo=datetime.UTC)
        assert [r.id for r in asyncio.run(anon_api.pages.history_since("Earth", since))] == [2]

    def test_naive_since_is_utc(self, anon_api, httpx_mock):
        httpx_mock.add_response(url=f"{ROOT}/page/Earth/history", json={
            "revisions": [self.revision(7, "2024-05-02T00:00:00Z"), self.revision(6, "2024-04-01T00:00:00Z")],
            "latest": f"{ROOT}/page/Earth/history",
            "older": f"{ROOT}/page/Earth/history?older_than=6",
        })
        since = datetime.datetime(2024, 5, 1)
        assert [r.id for r in asyncio.run(anon_api.pages.history_since("Earth", since))] == [7]
