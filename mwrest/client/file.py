"""
Interface to the ``/file`` endpoint of the REST API.
"""

import logging

from .errors import ConfigError, unexpected_structure
from .models import FileInfo, PageHandle

logger = logging.getLogger(__name__)

__all__ = ["Files"]


class Files:
    """
    :param connection: a :py:class:`mwrest.client.connection.Connection` instance
    """

    def __init__(self, connection):
        self.connection = connection

    async def get(self, title):
        """
        Fetches the metadata of a file and the URLs of its preferred, original
        and thumbnail versions.

        :param str title: the file name, with or without the ``File:`` prefix
        :returns: a :py:class:`FileInfo`
        """
        if isinstance(title, PageHandle):
            title = title.title
        name = (title or "").strip()
        prefix, sep, rest = name.partition(":")
        if sep and prefix.strip().lower() in {"file", "image"}:
            name = rest.strip()
        if not name:
            raise ConfigError(f"invalid file name: {title!r}")
        path = f"/file/{PageHandle(name).path}"
        data = await self.connection.call_rest("GET", path)
        with unexpected_structure(self.connection.url(path), data):
            return FileInfo.from_json(data)
