from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

from titleholds.holds.data import CapabilityDescriptor, HoldingItem
from titleholds.holds.mode import PolicyMode

HOLDS_FUNCTION = "Holds"

Patron = Any
"""Opaque credentials from the authentication store. We only check presence."""


@runtime_checkable
class CatalogConnection(Protocol):
    """
    The parts of the ILS connection the holds engine depends on.

    Implementations own all network traffic and may raise whatever their
    transport raises; those exceptions reach the caller untouched.
    """

    def get_title_holds_mode(self) -> PolicyMode | str | None:
        """The title holds mode configured for this catalog."""
        ...

    def get_holding(self, id: str) -> Sequence[HoldingItem | Mapping[str, Any]]:
        """Every copy of the record, in catalog order."""
        ...

    def check_function(
        self, function: str
    ) -> CapabilityDescriptor | Mapping[str, Any] | bool | None:
        """Whether the catalog supports `function`, and how.

        A falsy result means the function is unsupported.
        """
        ...

    def check_request_is_valid(
        self, id: str, data: Mapping[str, str], patron: Patron
    ) -> bool:
        """Ask the catalog whether `patron` may place the request in `data`."""
        ...

    def get_hold_link(self, id: str, data: Mapping[str, str]) -> str:
        """A complete catalog-native URL for placing the hold."""
        ...


@runtime_checkable
class CatalogAuthenticator(Protocol):
    def stored_catalog_login(self) -> Patron | None:
        """The logged in patron's catalog credentials, or a falsy value."""
        ...
