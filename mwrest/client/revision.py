"""
Interface to the ``/revision`` endpoints of the REST API.

.. _`API:REST API/Reference#Revisions`: https://www.mediawiki.org/wiki/API:REST_API/Reference#Revisions
"""

import logging

from .errors import ConfigError, unexpected_structure
from .models import Diff, HtmlFlavor, Lint, RevisionInfo

logger = logging.getLogger(__name__)

__all__ = ["Revisions"]


def _revision_path(revid):
    if isinstance(revid, bool) or not isinstance(revid, int) or revid <= 0:
        raise ConfigError(f"invalid revision ID: {revid!r}")
    return f"/revision/{revid}"


class Revisions:
    """
    Reads individual revisions, see `API:REST API/Reference#Revisions`_.

    :param connection: a :py:class:`mwrest.client.connection.Connection` instance
    """

    def __init__(self, connection):
        self.connection = connection

    async def _get_info(self, path, params=None):
        data = await self.connection.call_rest("GET", path, params=params)
        with unexpected_structure(self.connection.url(path), data):
            return RevisionInfo.from_json(data)

    async def get(self, revid):
        """Revision metadata including the wikitext ``source``."""
        return await self._get_info(_revision_path(revid))

    async def get_bare(self, revid):
        """Revision metadata with ``html_url`` instead of the source."""
        return await self._get_info(_revision_path(revid) + "/bare")

    async def get_html(self, revid, *, stash=False, flavor=None):
        params = {"stash": stash}
        if flavor is not None:
            params["flavor"] = HtmlFlavor(flavor).value
        return await self.connection.call_rest_text(
            "GET", _revision_path(revid) + "/html", params=params, accept="text/html"
        )

    async def get_with_html(self, revid, *, stash=False, flavor=None):
        """
        :returns: a tuple ``(RevisionInfo, html)``
        """
        path = _revision_path(revid) + "/with_html"
        params = {"stash": stash}
        if flavor is not None:
            params["flavor"] = HtmlFlavor(flavor).value
        data = await self.connection.call_rest("GET", path, params=params)
        with unexpected_structure(self.connection.url(path), data):
            return RevisionInfo.from_json(data), data["html"]

    async def get_lint(self, revid):
        path = _revision_path(revid) + "/lint"
        data = await self.connection.call_rest("GET", path)
        with unexpected_structure(self.connection.url(path), data):
            return [Lint.from_json(lint) for lint in data]

    async def compare(self, from_revid, to_revid):
        """
        Compares two revisions of the same page.

        :returns: a :py:class:`Diff`
        """
        _revision_path(to_revid)
        path = f"{_revision_path(from_revid)}/compare/{to_revid}"
        logger.debug(f"Comparing revisions {from_revid} and {to_revid}")
        data = await self.connection.call_rest("GET", path)
        with unexpected_structure(self.connection.url(path), data):
            return Diff.from_json(data)
