from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator

from titleholds.holds.catalog import HOLDS_FUNCTION
from titleholds.holds.data import CapabilityDescriptor, HoldingItem
from titleholds.holds.mode import PolicyMode
from titleholds.util.log import LoggerMixin


class CatalogSnapshot(BaseModel):
    """
    Catalog data captured to a JSON file, for checking hold decisions offline.

    {
        "mode": "availability",
        "capability": {"function": "placeHold", "HMACKeys": ["id", "level"]},
        "patron": {"cat_username": "alice"},
        "valid_requests": ["123"],
        "hold_link": "https://opac.example.org/hold?id={id}",
        "holdings": {"123": [{"availability": false, "location": "Stacks"}]}
    }
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    mode: PolicyMode | None = None
    capability: CapabilityDescriptor | None = None
    patron: dict[str, Any] | None = None
    # None accepts every driver mode request.
    valid_requests: list[str] | None = None
    hold_link: str = "{id}"
    holdings: dict[str, list[dict[str, Any]]] = Field(default_factory=dict)

    @field_validator("capability", mode="before")
    @classmethod
    def _no_capability(cls, v: Any) -> Any:
        # Catalogs report a missing capability as false.
        return v or None

    @classmethod
    def from_file(cls, path: Path | str) -> Self:
        return cls.model_validate_json(Path(path).read_text(encoding="utf-8"))


class SnapshotCatalogConnection(LoggerMixin):
    """A CatalogConnection and CatalogAuthenticator answering from a CatalogSnapshot."""

    def __init__(self, snapshot: CatalogSnapshot) -> None:
        self.snapshot = snapshot

    def get_title_holds_mode(self) -> PolicyMode | None:
        return self.snapshot.mode

    def get_holding(self, id: str) -> list[HoldingItem]:
        self.log.debug(f"Reading holdings for record {id} from snapshot.")
        return [
            HoldingItem.model_validate(entry)
            for entry in self.snapshot.holdings.get(id, [])
        ]

    def check_function(self, function: str) -> CapabilityDescriptor | None:
        if function != HOLDS_FUNCTION:
            return None
        return self.snapshot.capability

    def check_request_is_valid(
        self, id: str, data: Mapping[str, str], patron: Any
    ) -> bool:
        valid = self.snapshot.valid_requests
        return valid is None or id in valid

    def get_hold_link(self, id: str, data: Mapping[str, str]) -> str:
        # Only {field} placeholders naming request fields are filled in; any
        # other braces in the URL are left alone.
        link = self.snapshot.hold_link
        for key, value in data.items():
            link = link.replace(f"{{{key}}}", value)
        return link

    def stored_catalog_login(self) -> dict[str, Any] | None:
        return self.snapshot.patron
