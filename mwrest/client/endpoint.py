"""
Resolution of wiki identifiers and URLs into canonical REST API roots.

All functions in this module are pure, they never touch the network.
"""

import re
from dataclasses import dataclass

import httpx

from .errors import ConfigError

__all__ = ["Endpoint", "LANGUAGE_PROJECTS", "SINGLE_HOST_WIKIS", "CORE_MODULES"]

# Wikimedia projects with one wiki per language
LANGUAGE_PROJECTS = frozenset({
    "wikipedia",
    "wiktionary",
    "wikivoyage",
    "wikibooks",
    "wikinews",
    "wikisource",
    "wikiversity",
    "wikiquote",
})

# Wikimedia wikis with a single host
SINGLE_HOST_WIKIS = {
    "commons": "commons.wikimedia.org",
    "wikidata": "www.wikidata.org",
    "wikispecies": "species.wikimedia.org",
    "meta": "meta.wikimedia.org",
}

_LANGUAGE_CODE = re.compile(r"^[a-z][a-z0-9-]*$")

# modules of the core REST API, their paths are prefixed with /v{version}
CORE_MODULES = frozenset({"page", "revision", "file", "search", "transform"})

# extension modules such as /math/v0/... carry their own version
_MODULE_VERSION = re.compile(r"^v\d+(/|$)")

# rest.php as a whole path segment, the preceding path is the base path
_REST_PHP = re.compile(r"^(.*?)/rest\.php(/|$)")


@dataclass(frozen=True)
class Endpoint:
    """
    The location of a wiki's REST API.

    :param str scheme: ``http`` or ``https``
    :param str host: host name, optionally with a port
    :param str base_path: path preceding ``/rest.php`` (e.g. ``/w``), may be empty
    :param str wiki_id: identifier of the wiki, used in log messages
    """

    scheme: str
    host: str
    base_path: str = "/w"
    wiki_id: str | None = None

    def __post_init__(self) -> None:
        if self.scheme not in {"http", "https"}:
            raise ConfigError(f"unsupported URL scheme: '{self.scheme}'")
        if not self.host:
            raise ConfigError("the host of the endpoint must not be empty")
        if self.base_path and not self.base_path.startswith("/"):
            raise ConfigError(f"base path must start with '/': '{self.base_path}'")
        if self.base_path.endswith("/"):
            object.__setattr__(self, "base_path", self.base_path.rstrip("/"))

    @property
    def rest_url(self) -> str:
        """URL of the ``rest.php`` entry point."""
        return f"{self.scheme}://{self.host}{self.base_path}/rest.php"

    @property
    def action_api_url(self) -> str:
        """URL of the ``api.php`` entry point next to ``rest.php``."""
        return f"{self.scheme}://{self.host}{self.base_path}/api.php"

    def root(self, version: int = 1) -> str:
        """Versioned root of the core REST API, e.g. ``.../rest.php/v1``."""
        return f"{self.rest_url}/v{version}"

    def url(self, path: str, version: int = 1) -> str:
        """
        Absolute URL for a REST path. Paths carrying their own module version
        (e.g. ``/math/v0/popup/html/1``) are appended to :py:attr:`rest_url`
        verbatim, other paths to :py:meth:`root`.
        """
        if not path.startswith("/"):
            path = "/" + path
        module, _, rest = path[1:].partition("/")
        if module not in CORE_MODULES and _MODULE_VERSION.match(rest):
            return self.rest_url + path
        return self.root(version) + path

    @classmethod
    def from_url(cls, url: str) -> "Endpoint":
        """
        Creates an endpoint from any URL pointing into ``rest.php``; everything
        after ``rest.php`` is dropped.
        """
        url = url.strip() if url else ""
        if not url:
            raise ConfigError("the REST API URL must not be empty")
        try:
            parsed = httpx.URL(url)
        except httpx.InvalidURL as e:
            raise ConfigError(f"invalid REST API URL '{url}': {e}") from e
        if not parsed.is_absolute_url or not parsed.host:
            raise ConfigError(f"the REST API URL must be absolute: '{url}'")
        match = _REST_PHP.match(parsed.path)
        if match is None:
            raise ConfigError(f"the REST API URL must point to 'rest.php': '{url}'")
        base = match.group(1)
        host = parsed.host
        if ":" in host:
            host = f"[{host}]"
        if parsed.port is not None:
            host = f"{host}:{parsed.port}"
        return cls(parsed.scheme, host, base, wiki_id=host)

    @classmethod
    def for_project(cls, project: str, language: str) -> "Endpoint":
        """
        Endpoint of a language edition of a Wikimedia project, e.g.
        ``Endpoint.for_project("wikipedia", "en")``.
        """
        project = (project or "").strip().lower()
        language = (language or "").strip().lower()
        if not project:
            raise ConfigError("the project identifier must not be empty")
        if not language:
            raise ConfigError("the language code must not be empty")
        if project not in LANGUAGE_PROJECTS:
            raise ConfigError(
                f"unknown project '{project}' (known projects are: {sorted(LANGUAGE_PROJECTS)})"
            )
        if not _LANGUAGE_CODE.match(language):
            raise ConfigError(f"invalid language code: '{language}'")
        return cls("https", f"{language}.{project}.org", "/w", wiki_id=f"{language}.{project}")

    @classmethod
    def for_wiki(cls, name: str) -> "Endpoint":
        """
        Endpoint of a single-host Wikimedia wiki (``commons``, ``wikidata``,
        ``wikispecies`` or ``meta``).
        """
        name = (name or "").strip().lower()
        if not name:
            raise ConfigError("the wiki identifier must not be empty")
        try:
            host = SINGLE_HOST_WIKIS[name]
        except KeyError:
            raise ConfigError(
                f"unknown wiki '{name}' (known wikis are: {sorted(SINGLE_HOST_WIKIS)})"
            ) from None
        return cls("https", host, "/w", wiki_id=name)

    @classmethod
    def from_wiki_id(cls, wiki_id: str) -> "Endpoint":
        """
        Parses a wiki identifier: ``"wikipedia:en"``, ``"en.wikipedia"`` or the
        name of a single-host wiki.
        """
        wiki_id = (wiki_id or "").strip()
        if not wiki_id:
            raise ConfigError("the wiki identifier must not be empty")
        if ":" in wiki_id:
            project, _, language = wiki_id.partition(":")
            return cls.for_project(project, language)
        if "." in wiki_id:
            language, _, project = wiki_id.partition(".")
            return cls.for_project(project, language)
        return cls.for_wiki(wiki_id)
