"""
Interface to the popup endpoint of the `Math extension`_. Its REST module has
its own version in the path, so it is not affected by the core API version of
the connection.

.. _`Math extension`: https://www.mediawiki.org/wiki/Extension:Math
"""

from .errors import ConfigError, unexpected_structure
from .models import PopupInfo

__all__ = ["Math"]


class Math:
    def __init__(self, connection):
        self.connection = connection

    async def popup_html(self, qid):
        """
        Fetches the popup information of a Wikidata item describing a formula.

        :param qid: the numeric part of the item ID, or the whole ID (``"Q35875"``)
        :returns: a :py:class:`PopupInfo`
        """
        if isinstance(qid, str) and qid[:1] in {"Q", "q"}:
            qid = qid[1:]
        try:
            qid = int(qid)
        except (TypeError, ValueError):
            raise ConfigError(f"invalid Wikidata item ID: {qid!r}") from None
        if qid <= 0:
            raise ConfigError(f"invalid Wikidata item ID: {qid!r}")
        path = f"/math/v0/popup/html/{qid}"
        data = await self.connection.call_rest("GET", path)
        with unexpected_structure(self.connection.url(path), data):
            return PopupInfo.from_json(data)
