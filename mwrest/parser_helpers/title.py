import re

from .encodings import urlencode

__all__ = ["canonicalize", "title_key", "title_path"]


def _strip_direction_marks(title):
    # left-to-right and right-to-left marks
    return title.replace("\u200e", "").replace("\u200f", "").strip()


def canonicalize(title):
    """
    Return a canonical form of the title, that is:

    - underscores are replaced with spaces,
    - leading and trailing whitespace is stripped,
    - consecutive spaces are squashed,
    - first letter is capitalized.

    .. note::
        The namespace prefix is not split, canonicalization is applied to the
        passed title as a whole. Wikis with case-sensitive first letters (e.g.
        Wiktionary) must not rely on this function for identity.

    :param title: a :py:obj:`str` or :py:class:`mwparserfromhell.wikicode.Wikicode` object
    :returns: a :py:obj:`str` object
    """
    title = _strip_direction_marks(str(title).replace("_", " "))
    title = re.sub("( )+", r"\g<1>", title)
    if title == "":
        return ""
    return title[0].upper() + title[1:]


def title_key(title):
    """
    The form of the title used as the ``key`` by the REST API: spaces are
    replaced with underscores, the case of the letters is preserved and
    leading or trailing underscores are dropped.
    """
    return re.sub("[ _]+", "_", _strip_direction_marks(str(title))).strip("_")


def title_path(title):
    """
    Percent-encoded :py:func:`title_key`, usable as a single URL path segment
    (slashes of subpages are encoded as ``%2F``).
    """
    return urlencode(title_key(title))
