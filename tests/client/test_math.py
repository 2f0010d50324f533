import asyncio

import pytest

from mwrest.client import ConfigError, MalformedResponseError


class test_math:
    url = "https://en.wikipedia.org/w/rest.php/math/v0/popup/html/12345"

    @pytest.mark.parametrize("qid", [12345, "12345", "Q12345"])
    def test_popup_html(self, anon_api, httpx_mock, qid):
        httpx_mock.add_response(url=self.url, json={
            "title": "Count von Count",
            "extract": "<p>formula</p>",
            "canonicalurl": "https://www.wikidata.org/wiki/Q12345",
            "contentmodel": "wikibase-item",
        })
        popup = asyncio.run(anon_api.math.popup_html(qid))
        assert popup.title == "Count von Count"
        assert popup.canonical_url == "https://www.wikidata.org/wiki/Q12345"

    def test_api_version_does_not_apply(self, endpoint, httpx_mock):
        from mwrest.client import API

        api = API(endpoint, API.make_session(), api_version=2)
        httpx_mock.add_response(url=self.url, json={"title": "x"})
        assert asyncio.run(api.math.popup_html(12345)).title == "x"

    def test_malformed(self, anon_api, httpx_mock):
        httpx_mock.add_response(url=self.url, json={"extract": "no title"})
        with pytest.raises(MalformedResponseError):
            asyncio.run(anon_api.math.popup_html(12345))

    @pytest.mark.parametrize("qid", [0, "Qfoo", None])
    def test_invalid(self, anon_api, qid):
        with pytest.raises(ConfigError):
            asyncio.run(anon_api.math.popup_html(qid))
