#! /usr/bin/env python3

import argparse
import asyncio
import logging
import sys
from typing import Self

from mwrest.client import API, RestApiError
from mwrest.config import argtype_dirname_must_exist

logger = logging.getLogger(__name__)


class FetchPage:
    def __init__(self, api: API, args: argparse.Namespace):
        self.api = api
        self.title = args.title
        self.html = args.html
        self.redirect = args.redirect
        self.output = args.output

    @staticmethod
    def set_argparser(argparser: argparse.ArgumentParser) -> None:
        # first try to set options for objects we depend on
        present_groups = [group.title for group in argparser._action_groups]
        if "Connection parameters" not in present_groups:
            API.set_argparser(argparser)

        argparser.add_argument("title", metavar="TITLE", help="title of the page to fetch")
        argparser.add_argument("--html", action="store_true",
                help="print the rendered HTML instead of the wikitext")
        argparser.add_argument("--redirect", action="store_true",
                help="follow wiki redirects")
        argparser.add_argument("-o", "--output", type=argtype_dirname_must_exist, metavar="PATH",
                help="write the text to a file instead of the standard output")

    @classmethod
    def from_argparser(cls, args: argparse.Namespace, api: API | None = None) -> Self:
        if api is None:
            api = API.from_argparser(args)
        return cls(api, args)

    async def fetch(self) -> str:
        async with self.api:
            if self.html:
                return await self.api.pages.get_html(self.title, redirect=self.redirect)
            snapshot = await self.api.pages.get(self.title, redirect=self.redirect)
            logger.info(f"Fetched [[{snapshot.title}]] at revision {snapshot.latest_revision_id}")
            return snapshot.wikitext_source or ""

    def run(self) -> int:
        try:
            text = asyncio.run(self.fetch())
        except RestApiError as e:
            logger.error(f"Failed to fetch page [[{self.title}]]: {e}")
            return 1
        if not text.endswith("\n"):
            text += "\n"
        if self.output is not None:
            self.output.write_text(text)
            logger.info(f"Saved [[{self.title}]] to {self.output}")
        else:
            sys.stdout.write(text)
        return 0


if __name__ == "__main__":
    import mwrest.config

    script = mwrest.config.object_from_argparser(
        FetchPage,
        description="Print the wikitext or HTML of a page",
        usage="%(prog)s [options] TITLE",
    )
    sys.exit(script.run())
