"""
Interface to the ``/search`` endpoints of the REST API.
"""

import logging

from .errors import ConfigError, unexpected_structure
from .models import SearchResults

logger = logging.getLogger(__name__)

__all__ = ["Search"]

# maximum value of the limit parameter accepted by the API
MAX_LIMIT = 100


class Search:
    """
    Full-text search in page content and prefix search in page titles.

    :param connection: a :py:class:`mwrest.client.connection.Connection` instance
    """

    def __init__(self, connection):
        self.connection = connection

    async def _search(self, kind, query, limit):
        if not query or not query.strip():
            raise ConfigError("the search query must not be empty")
        if limit is not None and not 1 <= limit <= MAX_LIMIT:
            raise ConfigError(f"the search limit must be between 1 and {MAX_LIMIT}, got {limit}")
        path = f"/search/{kind}"
        logger.debug(f"Searching {kind}s for {query!r}")
        data = await self.connection.call_rest("GET", path, params={"q": query, "limit": limit})
        with unexpected_structure(self.connection.url(path), data):
            return SearchResults.from_json(data)

    async def page(self, query, limit=None):
        """Searches the content of pages. Returns :py:class:`SearchResults`."""
        return await self._search("page", query, limit)

    async def title(self, query, limit=None):
        """Searches page titles by prefix. Returns :py:class:`SearchResults`."""
        return await self._search("title", query, limit)
