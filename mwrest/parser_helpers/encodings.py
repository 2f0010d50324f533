import string

__all__ = ["encode", "urlencode"]

_URL_UNRESERVED = string.ascii_letters + string.digits + "-_.~"


def encode(
    str_: str,
    escape_char: str = "%",
    skip_chars: str = "",
    special_map: dict[str, str] | None = None,
    charset: str = "utf-8",
) -> str:
    """
    Generalized implementation of a `percent encoding`_ algorithm.

    .. _`percent encoding`: https://en.wikipedia.org/wiki/Percent-encoding

    :param str_: the string to be encoded
    :param escape_char: character to be used as escape (by default '%')
    :param skip_chars: characters which are left as they are
    :param special_map: a mapping overriding the default encoding of some
        characters (applied after ``skip_chars``)
    :param charset: character set used to encode non-ASCII characters to byte
        sequence with :py:meth:`str.encode()`
    """
    parts = []
    for char in str_:
        if char in skip_chars:
            parts.append(char)
        elif special_map is not None and char in special_map:
            parts.append(special_map[char])
        else:
            parts.extend(f"{escape_char}{byte:02X}" for byte in char.encode(charset))
    return "".join(parts)


def urlencode(str_: str) -> str:
    """
    Standard URL encoding of a path segment: every character except the
    unreserved ones is percent-encoded, including ``/`` and ``:``. This is
    the form expected for page titles in the REST API paths.
    """
    return encode(str_, skip_chars=_URL_UNRESERVED)

