import logging

from ..utils import LazyProperty
from .connection import Connection
from .file import Files
from .math import Math
from .models import EditRequest, PageHandle
from .page import Pages
from .revision import Revisions
from .search import Search
from .transform import Transform

logger = logging.getLogger(__name__)

__all__ = ["API"]


class API(Connection):
    """
    Simple interface to the MediaWiki REST API. The resource clients are
    created lazily on the first access of the corresponding attribute.

    :param args: any positional arguments of the Connection object
    :param kwargs: any keyword arguments of the Connection object
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)

    @LazyProperty
    def pages(self):
        """
        A :py:class:`mwrest.client.page.Pages` instance for the current wiki.
        """
        return Pages(self)

    @LazyProperty
    def revisions(self):
        """
        A :py:class:`mwrest.client.revision.Revisions` instance for the current wiki.
        """
        return Revisions(self)

    @LazyProperty
    def files(self):
        """
        A :py:class:`mwrest.client.file.Files` instance for the current wiki.
        """
        return Files(self)

    @LazyProperty
    def math(self):
        return Math(self)

    @LazyProperty
    def search(self):
        """
        A :py:class:`mwrest.client.search.Search` instance for the current wiki.
        """
        return Search(self)

    @LazyProperty
    def transform(self):
        """
        A :py:class:`mwrest.client.transform.Transform` instance for the current wiki.
        """
        return Transform(self)

    def Page(self, title):
        """
        :param str title: page title
        :returns: a :py:class:`mwrest.client.models.PageHandle` object
        """
        return PageHandle(title)

    async def get(self, title, **kwargs):
        """Shortcut for :py:meth:`Pages.get <mwrest.client.page.Pages.get>`."""
        return await self.pages.get(title, **kwargs)

    async def edit(self, title, base_revision_id, text, comment, **kwargs):
        """
        Shortcut for :py:meth:`Pages.edit <mwrest.client.page.Pages.edit>`.

        :param str title: the title of the page
        :param int base_revision_id: ID of the revision the new text is based on
        :param str text: new page content
        :param str comment: edit summary
        :param kwargs: other fields of :py:class:`EditRequest <mwrest.client.models.EditRequest>`
        """
        request = EditRequest(base_revision_id, text, comment, **kwargs)
        return await self.pages.edit(title, request)

    async def create(self, title, text, comment, **kwargs):
        """Shortcut for :py:meth:`Pages.create <mwrest.client.page.Pages.create>`."""
        return await self.pages.create(title, text, comment, **kwargs)

    async def wikitext2html(self, wikitext, title=None):
        return await self.transform.wikitext_to_html(wikitext, title)

    async def html2wikitext(self, html, title=None):
        return await self.transform.html_to_wikitext(html, title)
