from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, ClassVar, Literal, Self

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from titleholds.core.exceptions import TitleHoldsValueError
from titleholds.util.log import logger_for_cls

HOLD_OVERRIDE_DISABLED = "disabled"

# Query field carrying the signature of a hold action.
HASH_KEY = "hashKey"

_TRUE_STRINGS = frozenset({"1", "true", "yes", "y", "on", "available"})


class HoldingItem(BaseModel):
    """
    A single copy of a bibliographic record, as reported by the catalog.

    Catalog responses are often only partially populated. Rather than
    rejecting an incomplete item, missing or unreadable fields fall back
    to the value that makes a hold least likely to be suppressed by
    this item: not available, and at no known location.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    available: bool = Field(
        default=False,
        validation_alias=AliasChoices("available", "availability"),
    )
    location: str | None = None
    hold_override: str | None = Field(
        default=None,
        validation_alias=AliasChoices("hold_override", "holdOverride"),
    )

    @field_validator("available", mode="before")
    @classmethod
    def _available_fail_closed(cls, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, int | float):
            return value > 0
        if isinstance(value, str):
            return value.strip().lower() in _TRUE_STRINGS
        return False

    @field_validator("location", "hold_override", mode="before")
    @classmethod
    def _optional_str(cls, value: Any) -> str | None:
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, int | float):
            return str(value)
        return None

    @classmethod
    def from_catalog(cls, entry: Any) -> Self | None:
        """Build an item from a catalog entry, or None if the entry is not a mapping."""
        if isinstance(entry, cls):
            return entry
        if isinstance(entry, Mapping):
            return cls.model_validate(entry)
        return None

    @property
    def hold_disabled(self) -> bool:
        return self.hold_override == HOLD_OVERRIDE_DISABLED


@dataclasses.dataclass(frozen=True)
class HoldRequestDescriptor:
    """What is being requested: a title level hold on a record, plus
    any extra fields the caller wants to carry along."""

    id: str
    level: str = "title"
    extra: Mapping[str, str] = dataclasses.field(default_factory=dict)

    def __post_init__(self) -> None:
        reserved = {"id", "level", HASH_KEY} & set(self.extra)
        if reserved:
            raise TitleHoldsValueError(
                f"Extra hold request fields may not replace {', '.join(sorted(reserved))}."
            )
        object.__setattr__(self, "extra", MappingProxyType(dict(self.extra)))

    @classmethod
    def title(cls, record_id: str, **extra: str) -> Self:
        return cls(id=record_id, extra=extra)

    def as_dict(self) -> dict[str, str]:
        return {"id": self.id, "level": self.level, **self.extra}


class CapabilityDescriptor(BaseModel):
    """
    The catalog's answer to "can holds be placed, and how".

    function names the catalog method that builds the hold link. When it is
    getHoldLink the catalog builds the whole URL itself; otherwise, including
    when the catalog leaves it out, we build and sign the link, covering
    signed_keys.
    """

    GET_HOLD_LINK: ClassVar[str] = "getHoldLink"

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    function: str = ""
    signed_keys: tuple[str, ...] = Field(
        default=(),
        validation_alias=AliasChoices("signed_keys", "HMACKeys", "hmac_keys"),
    )

    @field_validator("signed_keys", mode="before")
    @classmethod
    def _ordered_unique(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = [value]
        if isinstance(value, list | tuple):
            return tuple(dict.fromkeys(value))
        return value

    @classmethod
    def from_catalog(cls, value: Any) -> Self | None:
        """Normalise a check_function("Holds") result; falsy means no capability."""
        if not value:
            return None
        if isinstance(value, cls):
            return value
        try:
            return cls.model_validate(value)
        except ValidationError as e:
            # A capability we can't read offers no hold.
            logger_for_cls(cls).warning(
                f"Ignoring unreadable holds capability {value!r}: "
                f"{e.error_count()} validation error(s)."
            )
            return None

    @property
    def delegates_link(self) -> bool:
        return self.function == self.GET_HOLD_LINK


class ActionToken(BaseModel):
    """A signed hold action, ready to be turned into a link by the presentation layer."""

    model_config = ConfigDict(frozen=True)

    action: Literal["Hold"] = "Hold"
    record: str
    query: str
    anchor: Literal["#tabnav"] = "#tabnav"

    def to_dict(self) -> dict[str, str]:
        return self.model_dump()
