import datetime

__all__ = ["as_utc", "parse_date", "format_date"]


def as_utc(date: datetime.datetime) -> datetime.datetime:
    """
    Returns ``date`` as an aware :py:class:`datetime.datetime` in UTC; naive
    values are taken as UTC.
    """
    if date.tzinfo is None:
        return date.replace(tzinfo=datetime.UTC)
    return date.astimezone(datetime.UTC)


def parse_date(date: str) -> datetime.datetime:
    """
    Converts an ISO 8601 timestamp as returned by the MediaWiki REST API (e.g.
    ``2014-08-25T14:26:59Z``) into an aware :py:class:`datetime.datetime`
    object in UTC.
    """
    return as_utc(datetime.datetime.fromisoformat(date))


def format_date(date: datetime.datetime) -> str:
    """
    Inverse function to :py:func:`parse_date`; naive values are taken as UTC.
    """
    return as_utc(date).strftime("%Y-%m-%dT%H:%M:%SZ")
