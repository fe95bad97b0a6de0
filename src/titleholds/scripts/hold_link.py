from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from typing import TextIO

from dependency_injector import providers

from titleholds.holds.data import ActionToken
from titleholds.holds.holdings import HoldingsCache
from titleholds.holds.logic import HoldResult
from titleholds.holds.mode import PolicyMode
from titleholds.holds.snapshot import CatalogSnapshot, SnapshotCatalogConnection
from titleholds.scripts.base import Script
from titleholds.util.datetime_helpers import utc_now
from titleholds.util.json import json_serializer
from titleholds.util.log import elapsed_time_logging, pluralize


class HoldLinkScript(Script):
    """Work out which hold link, if any, each record would get."""

    name = "Check title hold links against a catalog snapshot."

    @classmethod
    def arg_parser(cls) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(description=cls.__doc__)
        parser.add_argument(
            "snapshot",
            help="JSON file with the catalog data to decide against.",
        )
        parser.add_argument(
            "ids",
            nargs="+",
            help="Bibliographic record ids to check.",
        )
        parser.add_argument(
            "--mode",
            choices=[mode.value for mode in PolicyMode],
            help="Use this title holds mode instead of the one in the snapshot.",
        )
        return parser

    @staticmethod
    def describe(id: str, result: HoldResult) -> dict[str, object]:
        entry: dict[str, object] = {"id": id, "checked_at": utc_now()}
        if isinstance(result, ActionToken):
            entry["hold"] = result.to_dict()
        elif result is False:
            entry["hold"] = False
        else:
            entry["hold"] = {"link": result}
        return entry

    def do_run(
        self,
        cmd_args: Sequence[str] | None = None,
        output: TextIO = sys.stdout,
    ) -> None:
        args = self.parse_command_line(cmd_args=cmd_args)
        catalog = SnapshotCatalogConnection(CatalogSnapshot.from_file(args.snapshot))
        self.services.catalog.override(providers.Object(catalog))
        self.services.authenticator.override(providers.Object(catalog))
        title_holds = self.services.holds.title_holds()

        # One cache for the whole run, the way a single search results page
        # would share one.
        cache: HoldingsCache = {}
        with elapsed_time_logging(
            log_method=self.log.info,
            message_prefix=f"Checking {pluralize(len(args.ids), 'record')}",
        ):
            for id in args.ids:
                result = title_holds.get_hold(
                    id, mode=args.mode, holdings_cache=cache
                )
                output.write(json_serializer(self.describe(id, result)))
                output.write("\n")


def main() -> None:
    HoldLinkScript().run()
