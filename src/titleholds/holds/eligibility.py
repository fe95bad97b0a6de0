from __future__ import annotations

import dataclasses
from collections.abc import Callable, Iterable

from typing_extensions import assert_never

from titleholds.holds.data import (
    CapabilityDescriptor,
    HoldingItem,
    HoldRequestDescriptor,
)
from titleholds.holds.holdings import HoldingsAccessor
from titleholds.holds.mode import PolicyMode


@dataclasses.dataclass(frozen=True)
class NoOffer:
    """Don't show a hold action for this record."""

    reason: str


@dataclasses.dataclass(frozen=True)
class DelegateToCatalog:
    """The catalog builds the hold link itself."""

    request: HoldRequestDescriptor


@dataclasses.dataclass(frozen=True)
class OfferLocal:
    """We build the hold link, signing `signed_keys` of the request."""

    request: HoldRequestDescriptor
    signed_keys: tuple[str, ...]


HoldOutcome = NoOffer | DelegateToCatalog | OfferLocal


def any_available(
    holdings: Iterable[HoldingItem], hidden_locations: frozenset[str]
) -> bool:
    """
    Is there a copy a patron could walk up and take?

    Copies at hidden locations never count, and an item without a
    location can't match a hidden one.
    """
    return any(
        item.available
        and (item.location is None or item.location not in hidden_locations)
        for item in holdings
    )


def should_offer(
    mode: PolicyMode,
    holdings: Iterable[HoldingItem],
    hidden_locations: frozenset[str],
) -> bool:
    """Whether the mode allows a locally decided hold offer for these holdings.

    Driver mode is decided by the catalog, never here.
    """
    match mode:
        case PolicyMode.disabled | PolicyMode.driver:
            return False
        case PolicyMode.always:
            return True
        case PolicyMode.availability:
            return not any_available(holdings, hidden_locations)
        case _:
            assert_never(mode)


class EligibilityEvaluator:
    """Turn a resolved mode into an outcome for one hold request."""

    def __init__(self, hidden_locations: Iterable[str] = ()) -> None:
        self.hidden_locations = frozenset(hidden_locations)

    def evaluate(
        self,
        mode: PolicyMode,
        capability: CapabilityDescriptor | None,
        request: HoldRequestDescriptor,
        holdings: HoldingsAccessor,
    ) -> HoldOutcome:
        if mode is PolicyMode.disabled:
            return NoOffer("holds disabled")
        if capability is None:
            return NoOffer("catalog does not support holds")

        # Only availability mode needs to look at the copies.
        items: Iterable[HoldingItem] = (
            holdings.fetch(request.id) if mode is PolicyMode.availability else ()
        )
        if not should_offer(mode, items, self.hidden_locations):
            return NoOffer(f"{mode} mode does not offer a hold")
        if capability.delegates_link:
            return DelegateToCatalog(request)
        return OfferLocal(request, capability.signed_keys)

    def evaluate_driver(
        self,
        capability: CapabilityDescriptor | None,
        request: HoldRequestDescriptor,
        is_valid: Callable[[], bool],
    ) -> HoldOutcome:
        """
        Driver mode: the catalog validates the request and chooses which keys
        to sign. The link is always built and signed locally.

        is_valid is only called when the catalog supports holds.
        """
        if capability is None:
            return NoOffer("catalog does not support holds")
        if not is_valid():
            return NoOffer("catalog rejected the hold request")
        return OfferLocal(request, capability.signed_keys)
