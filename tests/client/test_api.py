from mwrest.client import API, PageHandle
from mwrest.client.file import Files
from mwrest.client.math import Math
from mwrest.client.page import Pages
from mwrest.client.revision import Revisions
from mwrest.client.search import Search
from mwrest.client.transform import Transform


class test_api:
    def test_resource_clients(self, anon_api):
        assert isinstance(anon_api.pages, Pages)
        assert isinstance(anon_api.revisions, Revisions)
        assert isinstance(anon_api.files, Files)
        assert isinstance(anon_api.math, Math)
        assert isinstance(anon_api.search, Search)
        assert isinstance(anon_api.transform, Transform)

    def test_resource_clients_are_cached(self, anon_api):
        assert anon_api.pages is anon_api.pages
        assert anon_api.pages.connection is anon_api

    def test_page_handle(self, anon_api):
        assert anon_api.Page("Foo bar") == PageHandle("Foo bar")

    def test_repr(self, anon_api):
        assert repr(anon_api) == "<API https://en.wikipedia.org/w/rest.php v1>"
