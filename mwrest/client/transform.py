"""
Interface to the ``/transform`` endpoints of the REST API, i.e. conversion of
wikitext to HTML and back by the Parsoid service of the wiki. Nothing is
rendered locally.
"""

import logging

from ..parser_helpers.wikicode import wikitext_equivalent
from .errors import unexpected_structure
from .models import Lint, PageHandle

logger = logging.getLogger(__name__)

__all__ = ["Transform"]


class Transform:
    """
    :param connection: a :py:class:`mwrest.client.connection.Connection` instance
    """

    def __init__(self, connection):
        self.connection = connection

    @staticmethod
    def _path(source, target, title):
        path = f"/transform/{source}/to/{target}"
        if title is not None:
            # the title gives context to the conversion, e.g. for relative links
            path += "/" + PageHandle.of(title).path
        return path

    async def wikitext_to_html(self, wikitext, title=None):
        """
        Renders wikitext into HTML.

        :param str wikitext: the wikitext
        :param title: optional title of the page the wikitext belongs to
        :returns: HTML as :py:obj:`str`
        """
        path = self._path("wikitext", "html", title)
        return await self.connection.call_rest_text(
            "POST", path, json={"wikitext": wikitext}, accept="text/html"
        )

    async def html_to_wikitext(self, html, title=None):
        """
        Converts Parsoid HTML back into wikitext.

        :param str html: the HTML
        :param title: optional title of the page the HTML belongs to
        :returns: wikitext as :py:obj:`str`
        """
        path = self._path("html", "wikitext", title)
        return await self.connection.call_rest_text(
            "POST", path, json={"html": html}, accept="text/plain"
        )

    async def wikitext_to_lint(self, wikitext, title=None):
        """Returns the list of lint errors found in the wikitext."""
        path = self._path("wikitext", "lint", title)
        data = await self.connection.call_rest("POST", path, json={"wikitext": wikitext})
        with unexpected_structure(self.connection.url(path), data):
            return [Lint.from_json(lint) for lint in data]

    async def roundtrip(self, wikitext, title=None):
        """
        Converts the wikitext to HTML and back and checks that the result is
        equivalent to the input (see
        :py:func:`mwrest.parser_helpers.wikicode.wikitext_equivalent`).

        :returns: ``True`` if the wikitext survived the round-trip
        """
        html = await self.wikitext_to_html(wikitext, title)
        result = await self.html_to_wikitext(html, title)
        equivalent = wikitext_equivalent(wikitext, result)
        if not equivalent:
            logger.warning(f"Wikitext changed during round-trip: {wikitext!r} -> {result!r}")
        return equivalent
