from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from titleholds.holds.catalog import CatalogConnection
from titleholds.holds.data import HoldingItem
from titleholds.util.log import LoggerMixin

HoldingsCache = dict[str, tuple[HoldingItem, ...]]
"""Holdings already fetched during one evaluation, keyed by record id.

A new cache is made for every incoming request. Sharing one across
requests would serve stale availability data.
"""


class HoldingsAccessor(LoggerMixin):
    """Fetch holdings for a record at most once per evaluation."""

    def __init__(
        self, catalog: CatalogConnection, cache: HoldingsCache | None = None
    ) -> None:
        self.catalog = catalog
        self.cache: HoldingsCache = {} if cache is None else cache

    def fetch(self, id: str) -> tuple[HoldingItem, ...]:
        if id not in self.cache:
            # Any catalog failure propagates, and nothing is cached for the id.
            raw = self.catalog.get_holding(id)
            self.cache[id] = self._normalise(id, raw or ())
        return self.cache[id]

    def _normalise(self, id: str, raw: Iterable[Any]) -> tuple[HoldingItem, ...]:
        items = []
        for entry in raw:
            item = HoldingItem.from_catalog(entry)
            if item is None:
                self.log.warning(
                    f"Ignoring unreadable holding for record {id}: {entry!r}"
                )
                continue
            items.append(item)
        return tuple(items)
