"""
Typed values exchanged with the REST API.

The ``from_json`` factories expect the decoded JSON structures documented in
the `REST API reference`_; missing mandatory fields raise :py:exc:`KeyError`,
which the resource clients translate into
:py:exc:`MalformedResponseError <mwrest.client.errors.MalformedResponseError>`.

.. _`REST API reference`: https://www.mediawiki.org/wiki/API:REST_API/Reference
"""

import datetime
import enum
from dataclasses import dataclass, field
from typing import Any

from ..parser_helpers.title import title_key, title_path
from ..utils import parse_date
from .errors import ConfigError

__all__ = [
    "HtmlFlavor",
    "HistoryFilter",
    "HistoryCountType",
    "License",
    "RevisionTimestamp",
    "UserInfo",
    "PageHandle",
    "PageSnapshot",
    "EditRequest",
    "LanguageLink",
    "MediaType",
    "FileRevision",
    "FileInfo",
    "MediaLinks",
    "Lint",
    "RevisionInfo",
    "Diff",
    "HistoryRevision",
    "History",
    "HistoryCounts",
    "SearchResult",
    "SearchResults",
    "PopupInfo",
]


def _timestamp(value: str | None) -> datetime.datetime | None:
    if value is None:
        return None
    return parse_date(value)


class HtmlFlavor(enum.StrEnum):
    VIEW = "view"
    STASH = "stash"
    FRAGMENT = "fragment"
    EDIT = "edit"


class HistoryFilter(enum.StrEnum):
    REVERTED = "reverted"
    ANONYMOUS = "anonymous"
    BOT = "bot"
    MINOR = "minor"


class HistoryCountType(enum.StrEnum):
    ANONYMOUS = "anonymous"
    BOT = "bot"
    EDITORS = "editors"
    EDITS = "edits"
    MINOR = "minor"
    REVERTED = "reverted"


@dataclass(frozen=True)
class License:
    url: str
    title: str

    @classmethod
    def from_json(cls, data: dict[str, Any] | None) -> "License | None":
        if not data:
            return None
        return cls(url=data["url"], title=data["title"])


@dataclass(frozen=True)
class RevisionTimestamp:
    id: int
    timestamp: datetime.datetime | None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "RevisionTimestamp":
        return cls(id=int(data["id"]), timestamp=_timestamp(data.get("timestamp")))


@dataclass(frozen=True)
class UserInfo:
    # anonymous and hidden users have no id
    id: int | None
    name: str | None

    @classmethod
    def from_json(cls, data: dict[str, Any] | None) -> "UserInfo | None":
        if data is None:
            return None
        return cls(id=data.get("id"), name=data.get("name"))


@dataclass(frozen=True)
class PageHandle:
    """
    Identifies a page on the wiki. It is only a name, not fetched data.
    """

    title: str

    def __post_init__(self) -> None:
        if not isinstance(self.title, str) or not title_key(self.title):
            raise ConfigError(f"invalid page title: {self.title!r}")

    @property
    def key(self) -> str:
        """The title with spaces replaced by underscores."""
        return title_key(self.title)

    @property
    def path(self) -> str:
        """The title encoded as a single URL path segment."""
        return title_path(self.title)

    @classmethod
    def of(cls, title_or_handle: "str | PageHandle") -> "PageHandle":
        if isinstance(title_or_handle, cls):
            return title_or_handle
        return cls(title_or_handle)  # type: ignore[arg-type]


@dataclass(frozen=True)
class PageSnapshot:
    """
    A page as returned by a read or a successful edit. Snapshots are never
    mutated; each edit produces a new one.

    ``wikitext_source`` is ``None`` if the source was not requested and
    ``html_url`` is set only by the bare variant of the read.
    """

    title: str
    latest_revision_id: int
    wikitext_source: str | None
    content_model: str
    timestamp: datetime.datetime | None
    page_id: int
    key: str
    license: License | None = None
    html_url: str | None = None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "PageSnapshot":
        latest = RevisionTimestamp.from_json(data["latest"])
        return cls(
            title=data["title"],
            latest_revision_id=latest.id,
            wikitext_source=data.get("source"),
            content_model=data["content_model"],
            timestamp=latest.timestamp,
            page_id=int(data["id"]),
            key=data["key"],
            license=License.from_json(data.get("license")),
            html_url=data.get("html_url"),
        )

    @property
    def handle(self) -> PageHandle:
        return PageHandle(self.title)


@dataclass(frozen=True)
class EditRequest:
    """
    Parameters of one edit. ``base_revision_id`` is the revision the new text
    was based on; the server rejects the edit with HTTP 409 if it is no longer
    the latest revision of the page.
    """

    base_revision_id: int
    new_wikitext: str
    comment: str
    content_model: str | None = None

    def __post_init__(self) -> None:
        if isinstance(self.base_revision_id, bool) or not isinstance(self.base_revision_id, int):
            raise ConfigError(f"base revision ID must be an integer, got {self.base_revision_id!r}")
        if self.base_revision_id <= 0:
            raise ConfigError(f"base revision ID must be positive, got {self.base_revision_id}")
        if not isinstance(self.new_wikitext, str):
            raise ConfigError("the new wikitext must be a string")
        if not self.comment:
            raise ConfigError("edit comment is mandatory")

    def to_json(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "source": self.new_wikitext,
            "comment": self.comment,
            "latest": {"id": self.base_revision_id},
        }
        if self.content_model is not None:
            body["content_model"] = self.content_model
        return body


@dataclass(frozen=True)
class LanguageLink:
    code: str
    name: str
    key: str
    title: str

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "LanguageLink":
        return cls(code=data["code"], name=data["name"], key=data["key"], title=data["title"])


@dataclass(frozen=True)
class MediaType:
    mediatype: str
    url: str
    size: int | None = None
    width: int | None = None
    height: int | None = None
    duration: float | None = None

    @classmethod
    def from_json(cls, data: dict[str, Any] | None) -> "MediaType | None":
        if data is None:
            return None
        return cls(
            mediatype=data["mediatype"],
            url=data["url"],
            size=data.get("size"),
            width=data.get("width"),
            height=data.get("height"),
            duration=data.get("duration"),
        )


@dataclass(frozen=True)
class FileRevision:
    timestamp: datetime.datetime | None
    user: UserInfo | None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "FileRevision":
        return cls(timestamp=_timestamp(data.get("timestamp")), user=UserInfo.from_json(data.get("user")))


@dataclass(frozen=True)
class FileInfo:
    title: str
    file_description_url: str
    latest: FileRevision
    preferred: MediaType | None
    original: MediaType | None
    thumbnail: MediaType | None = None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "FileInfo":
        return cls(
            title=data["title"],
            file_description_url=data["file_description_url"],
            latest=FileRevision.from_json(data["latest"]),
            preferred=MediaType.from_json(data.get("preferred")),
            original=MediaType.from_json(data.get("original")),
            thumbnail=MediaType.from_json(data.get("thumbnail")),
        )


@dataclass(frozen=True)
class MediaLinks:
    files: list[FileInfo]

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "MediaLinks":
        return cls(files=[FileInfo.from_json(f) for f in data["files"]])


@dataclass(frozen=True)
class Lint:
    type_name: str
    dsr: list[int | None] = field(default_factory=list)
    params: dict[str, Any] = field(default_factory=dict)
    template_name: str | None = None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "Lint":
        template_info = data.get("templateInfo") or {}
        return cls(
            type_name=data["type"],
            dsr=list(data.get("dsr", [])),
            params=dict(data.get("params", {})),
            template_name=template_info.get("name"),
        )


@dataclass(frozen=True)
class RevisionInfo:
    """
    A revision as returned by the ``/revision/{id}`` endpoints. ``source`` and
    ``html_url`` are set only by the endpoints which return them.
    """

    id: int
    page: PageHandle
    page_id: int
    size: int
    minor: bool
    timestamp: datetime.datetime | None
    content_model: str | None
    user: UserInfo | None
    comment: str | None
    license: License | None = None
    source: str | None = None
    html_url: str | None = None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "RevisionInfo":
        page = data["page"]
        return cls(
            id=int(data["id"]),
            page=PageHandle(page["title"]),
            page_id=int(page["id"]),
            size=int(data["size"]),
            minor=bool(data.get("minor", False)),
            timestamp=_timestamp(data.get("timestamp")),
            content_model=data.get("content_model"),
            user=UserInfo.from_json(data.get("user")),
            comment=data.get("comment"),
            license=License.from_json(data.get("license")),
            source=data.get("source"),
            html_url=data.get("html_url"),
        )


@dataclass(frozen=True)
class Diff:
    from_revision_id: int | None
    to_revision_id: int | None
    from_sections: list[dict[str, Any]]
    to_sections: list[dict[str, Any]]
    diff: list[dict[str, Any]]

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "Diff":
        from_ = data["from"]
        to = data["to"]
        return cls(
            from_revision_id=from_.get("id"),
            to_revision_id=to.get("id"),
            from_sections=list(from_.get("sections", [])),
            to_sections=list(to.get("sections", [])),
            diff=list(data["diff"]),
        )


@dataclass(frozen=True)
class HistoryRevision:
    id: int
    timestamp: datetime.datetime | None
    minor: bool
    size: int | None
    comment: str | None
    user: UserInfo | None
    delta: int | None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "HistoryRevision":
        return cls(
            id=int(data["id"]),
            timestamp=_timestamp(data.get("timestamp")),
            minor=bool(data.get("minor", False)),
            size=data.get("size"),
            comment=data.get("comment"),
            user=UserInfo.from_json(data.get("user")),
            delta=data.get("delta"),
        )


@dataclass(frozen=True)
class History:
    """
    One segment of a page history (at most 20 revisions). ``older`` and
    ``newer`` are the API URLs of the adjacent segments, if any.
    """

    revisions: list[HistoryRevision]
    latest: str | None
    older: str | None = None
    newer: str | None = None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "History":
        return cls(
            revisions=[HistoryRevision.from_json(r) for r in data["revisions"]],
            latest=data.get("latest"),
            older=data.get("older"),
            newer=data.get("newer"),
        )


@dataclass(frozen=True)
class HistoryCounts:
    count: int
    # set when the count exceeded the server-side limit
    limit: bool = False

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "HistoryCounts":
        return cls(count=int(data["count"]), limit=bool(data.get("limit", False)))


@dataclass(frozen=True)
class SearchResult:
    id: int
    key: str
    title: str
    excerpt: str | None = None
    description: str | None = None
    matched_title: str | None = None
    thumbnail: dict[str, Any] | None = None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "SearchResult":
        return cls(
            id=int(data["id"]),
            key=data["key"],
            title=data["title"],
            excerpt=data.get("excerpt"),
            description=data.get("description"),
            matched_title=data.get("matched_title"),
            thumbnail=data.get("thumbnail"),
        )


@dataclass(frozen=True)
class SearchResults:
    pages: list[SearchResult]

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "SearchResults":
        return cls(pages=[SearchResult.from_json(p) for p in data["pages"]])


@dataclass(frozen=True)
class PopupInfo:
    title: str
    extract: str | None = None
    canonical_url: str | None = None
    content_model: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "PopupInfo":
        return cls(
            title=data["title"],
            extract=data.get("extract"),
            canonical_url=data.get("canonicalurl"),
            content_model=data.get("contentmodel"),
            raw=dict(data),
        )
