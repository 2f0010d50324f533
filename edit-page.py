#! /usr/bin/env python3

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Self

from mwrest.client import API, ConflictError, EditRequest, NotFoundError, RestApiError
from mwrest.config import argtype_bool

logger = logging.getLogger(__name__)


class EditPage:
    def __init__(self, api: API, args: argparse.Namespace):
        self.api = api
        self.title = args.title
        self.file = args.file
        self.comment = args.comment
        self.create = args.create

    @staticmethod
    def set_argparser(argparser: argparse.ArgumentParser) -> None:
        # first try to set options for objects we depend on
        present_groups = [group.title for group in argparser._action_groups]
        if "Connection parameters" not in present_groups:
            API.set_argparser(argparser)

        argparser.add_argument("title", metavar="TITLE", help="title of the page to edit")
        argparser.add_argument("--file", type=Path, metavar="PATH", required=True,
                help="file with the new content of the page")
        argparser.add_argument("--comment", metavar="TEXT", required=True,
                help="edit summary")
        argparser.add_argument("--create", type=argtype_bool, default=True, metavar="BOOL",
                help="create the page if it does not exist (default: %(default)s)")

    @classmethod
    def from_argparser(cls, args: argparse.Namespace, api: API | None = None) -> Self:
        if api is None:
            api = API.from_argparser(args)
        return cls(api, args)

    async def save(self, text: str):
        async with self.api:
            try:
                snapshot = await self.api.pages.get(self.title)
            except NotFoundError:
                if not self.create:
                    raise
                return await self.api.pages.create(self.title, text, self.comment)

            if snapshot.wikitext_source == text:
                logger.info(f"Page [[{snapshot.title}]] is up to date, nothing to do")
                return snapshot
            request = EditRequest(snapshot.latest_revision_id, text, self.comment)
            return await self.api.pages.edit(self.title, request)

    def run(self) -> int:
        text = self.file.read_text()
        try:
            snapshot = asyncio.run(self.save(text))
        except ConflictError as e:
            latest = e.latest_revision_id if e.latest_revision_id is not None else "unknown"
            logger.error(f"Edit conflict on [[{self.title}]], the latest revision is {latest}. Try again.")
            return 2
        except RestApiError as e:
            logger.error(f"Failed to save page [[{self.title}]]: {e}")
            return 1
        logger.info(f"Page [[{snapshot.title}]] is at revision {snapshot.latest_revision_id}")
        return 0


if __name__ == "__main__":
    import mwrest.config

    script = mwrest.config.object_from_argparser(
        EditPage,
        description="Replace the content of a page with the content of a file",
        usage="%(prog)s [options] TITLE --file PATH --comment TEXT",
    )
    sys.exit(script.run())
