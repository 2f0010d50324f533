"""
Interface to the ``/page`` endpoints of the REST API: reading pages in various
representations, their history and metadata, and creating and editing pages.

See `API:REST API/Reference#Pages`_ for the description of the endpoints.

.. _`API:REST API/Reference#Pages`: https://www.mediawiki.org/wiki/API:REST_API/Reference#Pages
"""

import logging

from ..utils import RateLimited, as_utc, format_date
from .errors import ConfigError, RestApiError, unexpected_structure
from .models import (
    EditRequest,
    History,
    HistoryCountType,
    HistoryCounts,
    HistoryFilter,
    HtmlFlavor,
    LanguageLink,
    Lint,
    MediaLinks,
    PageHandle,
    PageSnapshot,
)

logger = logging.getLogger(__name__)

__all__ = ["Pages"]


class Pages:
    """
    :param connection: a :py:class:`mwrest.client.connection.Connection` instance
    """

    def __init__(self, connection):
        self.connection = connection

    async def _get_json(self, path, params=None):
        url = self.connection.url(path)
        data = await self.connection.call_rest("GET", path, params=params)
        return url, data

    async def get(self, handle, *, with_source=True, redirect=False):
        """
        Fetches the latest revision of a page.

        :param handle: a :py:class:`PageHandle` or a title
        :param bool with_source:
            if ``False``, the ``/bare`` variant is requested which omits the
            wikitext and includes the URL of the HTML representation instead
        :param bool redirect: follow wiki redirects
        :returns: a :py:class:`PageSnapshot`
        """
        handle = PageHandle.of(handle)
        path = f"/page/{handle.path}"
        if not with_source:
            path += "/bare"
        url, data = await self._get_json(path, {"redirect": redirect})
        with unexpected_structure(url, data):
            return PageSnapshot.from_json(data)

    async def get_html(self, handle, *, redirect=False, stash=False, flavor=None):
        """
        Fetches the rendered HTML of the latest revision of a page.

        :param HtmlFlavor flavor: the HTML flavor, ``view`` by default
        :returns: HTML as :py:obj:`str`
        """
        handle = PageHandle.of(handle)
        params = {"redirect": redirect, "stash": stash}
        if flavor is not None:
            params["flavor"] = HtmlFlavor(flavor).value
        return await self.connection.call_rest_text(
            "GET", f"/page/{handle.path}/html", params=params, accept="text/html"
        )

    async def get_with_html(self, handle, *, redirect=False, stash=False, flavor=None):
        """
        Fetches the page metadata and its rendered HTML in one request.

        :returns: a tuple ``(PageSnapshot, html)``
        """
        handle = PageHandle.of(handle)
        params = {"redirect": redirect, "stash": stash}
        if flavor is not None:
            params["flavor"] = HtmlFlavor(flavor).value
        url, data = await self._get_json(f"/page/{handle.path}/with_html", params)
        with unexpected_structure(url, data):
            return PageSnapshot.from_json(data), data["html"]

    async def get_links_language(self, handle):
        handle = PageHandle.of(handle)
        url, data = await self._get_json(f"/page/{handle.path}/links/language")
        with unexpected_structure(url, data):
            return [LanguageLink.from_json(link) for link in data]

    async def get_links_media(self, handle):
        handle = PageHandle.of(handle)
        url, data = await self._get_json(f"/page/{handle.path}/links/media")
        with unexpected_structure(url, data):
            return MediaLinks.from_json(data)

    async def get_lint(self, handle, *, redirect=False):
        """Returns the list of lint errors of the latest revision of a page."""
        handle = PageHandle.of(handle)
        url, data = await self._get_json(f"/page/{handle.path}/lint", {"redirect": redirect})
        with unexpected_structure(url, data):
            return [Lint.from_json(lint) for lint in data]

    async def get_history(self, handle, *, filter=None, older_than=None, newer_than=None):
        """
        Fetches one segment of the page history (up to 20 revisions).

        :param HistoryFilter filter: return only revisions of the given kind
        :param int older_than: return revisions older than this revision ID
        :param int newer_than: return revisions newer than this revision ID
        :returns: a :py:class:`History`
        """
        if older_than is not None and newer_than is not None:
            raise ConfigError("older_than and newer_than cannot be used at the same time")
        handle = PageHandle.of(handle)
        params = {
            "filter": HistoryFilter(filter).value if filter is not None else None,
            "older_than": older_than,
            "newer_than": newer_than,
        }
        url, data = await self._get_json(f"/page/{handle.path}/history", params)
        with unexpected_structure(url, data):
            return History.from_json(data)

    async def get_history_counts(self, handle, count_type, *, from_id=None, to_id=None):
        """
        Counts the revisions of the given type in the page history. ``from_id``
        and ``to_id`` limit the count to a range of revisions and are only
        supported by the ``edits`` and ``editors`` types.
        """
        count_type = HistoryCountType(count_type)
        if (from_id is not None or to_id is not None) and count_type not in {
            HistoryCountType.EDITS,
            HistoryCountType.EDITORS,
        }:
            raise ConfigError(f"revision range is not supported for '{count_type}' counts")
        handle = PageHandle.of(handle)
        params = {"from": from_id, "to": to_id}
        url, data = await self._get_json(
            f"/page/{handle.path}/history/counts/{count_type.value}", params
        )
        with unexpected_structure(url, data):
            return HistoryCounts.from_json(data)

    @RateLimited(1, 3)
    async def create(self, handle, wikitext, comment, *, content_model=None):
        """
        Creates a new page. This method is rate-limited with the
        :py:class:`@RateLimited <mwrest.utils.rate.RateLimited>` decorator to
        allow 1 call per 3 seconds.

        :param handle: a :py:class:`PageHandle` or a title
        :param str wikitext: content of the new page
        :param str comment: edit summary
        :param str content_model: content model of the page, wiki default if ``None``
        :returns: a :py:class:`PageSnapshot` of the created page
        :raises ConflictError: if the page already exists
        """
        handle = PageHandle.of(handle)
        if not comment:
            raise ConfigError("edit summary is mandatory")
        body = {"source": wikitext, "title": handle.title, "comment": comment}
        if content_model is not None:
            body["content_model"] = content_model

        logger.info(f"Creating page [[{handle.title}]] ...")

        url = self.connection.url("/page")
        try:
            data = await self.connection.call_rest("POST", "/page", json=body, mutating=True)
        except RestApiError as e:
            logger.error(f"Failed to create page [[{handle.title}]] due to {type(e).__name__} ({e})")
            raise
        with unexpected_structure(url, data):
            return PageSnapshot.from_json(data)

    @RateLimited(1, 3)
    async def edit(self, handle, edit_request: EditRequest):
        """
        Replaces the content of an existing page. This method is rate-limited
        with the :py:class:`@RateLimited <mwrest.utils.rate.RateLimited>`
        decorator to allow 1 call per 3 seconds.

        :param handle: a :py:class:`PageHandle` or a title
        :param EditRequest edit_request: the new content and its base revision
        :returns: a :py:class:`PageSnapshot` of the edited page
        :raises ConflictError:
            if the base revision is no longer the latest revision of the page
        """
        handle = PageHandle.of(handle)
        if not isinstance(edit_request, EditRequest):
            raise ConfigError(f"expected an EditRequest, got {type(edit_request).__name__}")
        path = f"/page/{handle.path}"

        logger.info(f"Editing page [[{handle.title}]] ...")

        url = self.connection.url(path)
        try:
            data = await self.connection.call_rest(
                "PUT", path, json=edit_request.to_json(), mutating=True
            )
        except RestApiError as e:
            logger.error(f"Failed to edit page [[{handle.title}]] due to {type(e).__name__} ({e})")
            raise
        with unexpected_structure(url, data):
            return PageSnapshot.from_json(data)

    async def history_since(self, handle, since):
        """
        Returns the revisions of the page newer than the :py:class:`datetime`
        ``since``, following the ``older`` links of the history segments.
        """
        handle = PageHandle.of(handle)
        since = as_utc(since)
        logger.debug(f"Fetching history of [[{handle.title}]] since {format_date(since)}")
        revisions = []
        older_than = None
        while True:
            history = await self.get_history(handle, older_than=older_than)
            for revision in history.revisions:
                if revision.timestamp is not None and revision.timestamp <= since:
                    return revisions
                revisions.append(revision)
            if history.older is None or not history.revisions:
                return revisions
            older_than = history.revisions[-1].id
