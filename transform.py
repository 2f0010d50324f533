#! /usr/bin/env python3

import argparse
import asyncio
import logging
import sys
from typing import Self

from mwrest.client import API, RestApiError

logger = logging.getLogger(__name__)


class TransformText:
    """
    Converts the standard input with the Parsoid service of the wiki and
    prints the result.
    """

    def __init__(self, api: API, args: argparse.Namespace):
        self.api = api
        self.direction = args.direction
        self.title = args.title

    @staticmethod
    def set_argparser(argparser: argparse.ArgumentParser) -> None:
        # first try to set options for objects we depend on
        present_groups = [group.title for group in argparser._action_groups]
        if "Connection parameters" not in present_groups:
            API.set_argparser(argparser)

        argparser.add_argument("direction", choices=["wikitext2html", "html2wikitext"],
                help="the direction of the conversion")
        argparser.add_argument("--title", metavar="TITLE",
                help="title of the page the input belongs to")

    @classmethod
    def from_argparser(cls, args: argparse.Namespace, api: API | None = None) -> Self:
        if api is None:
            api = API.from_argparser(args)
        return cls(api, args)

    async def convert(self, text: str) -> str:
        async with self.api:
            if self.direction == "wikitext2html":
                return await self.api.wikitext2html(text, self.title)
            return await self.api.html2wikitext(text, self.title)

    def run(self) -> int:
        text = sys.stdin.read()
        try:
            result = asyncio.run(self.convert(text))
        except RestApiError as e:
            logger.error(f"Conversion failed: {e}")
            return 1
        sys.stdout.write(result)
        return 0


if __name__ == "__main__":
    import mwrest.config

    script = mwrest.config.object_from_argparser(
        TransformText,
        description="Convert wikitext to HTML or HTML to wikitext",
        usage="%(prog)s [options] {wikitext2html,html2wikitext} < input",
    )
    sys.exit(script.run())
