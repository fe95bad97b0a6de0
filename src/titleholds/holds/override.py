from __future__ import annotations

from collections.abc import Iterable

from titleholds.holds.data import HoldingItem
from titleholds.holds.holdings import HoldingsAccessor
from titleholds.holds.mode import PolicyMode


def all_holds_disabled(holdings: Iterable[HoldingItem]) -> bool:
    """True if every copy carries holdOverride=disabled, or there are no copies."""
    return all(item.hold_disabled for item in holdings)


def resolve_mode(
    id: str,
    configured_mode: PolicyMode,
    override_enabled: bool,
    holdings: HoldingsAccessor,
) -> PolicyMode:
    """
    Apply per-item catalog overrides to the configured mode.

    When overrides are enabled and the catalog has marked every copy of the
    record as not holdable, holds are disabled for the whole title. Holdings
    are only fetched when overrides are enabled.
    """
    if not override_enabled:
        return configured_mode
    if all_holds_disabled(holdings.fetch(id)):
        return PolicyMode.disabled
    return configured_mode
