from __future__ import annotations

import hashlib
from typing import Annotated

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import NoDecode, SettingsConfigDict

from titleholds.holds.mode import PolicyMode
from titleholds.holds.signature import hmac_digest_supported
from titleholds.service.configuration.service_configuration import (
    ServiceConfiguration,
)


class HoldsConfiguration(ServiceConfiguration):
    # Holdings at these locations are never shown, so they can't make
    # a record look available in availability mode. Set as a comma
    # separated list, e.g. TITLEHOLDS_HOLDS_HIDE_HOLDINGS="Stacks,Storage".
    hide_holdings: Annotated[list[str], NoDecode] = []

    # Let per-item holdOverride flags from the catalog disable holds for a title.
    allow_holds_override: bool = False

    # Used when the catalog does not report a title holds mode of its own.
    title_holds_mode: PolicyMode = PolicyMode.disabled

    hmac_key: SecretStr = Field(min_length=1)
    hmac_digest: str = "sha256"

    @field_validator("hide_holdings", mode="before")
    @classmethod
    def split_hide_holdings(cls, v: object) -> object:
        if isinstance(v, str):
            return [location.strip() for location in v.split(",") if location.strip()]
        return v

    @field_validator("title_holds_mode", mode="before")
    @classmethod
    def parse_title_holds_mode(cls, v: object) -> object:
        if isinstance(v, str):
            return PolicyMode.parse(v) or PolicyMode.disabled
        return v

    @field_validator("hmac_digest")
    @classmethod
    def validate_hmac_digest(cls, v: str) -> str:
        if not hmac_digest_supported(v):
            supported = sorted(
                digest
                for digest in hashlib.algorithms_available
                if hmac_digest_supported(digest)
            )
            raise ValueError(
                f"Invalid digest: {v}. Digest must be one of: {', '.join(supported)}."
            )
        return v

    model_config = SettingsConfigDict(env_prefix="TITLEHOLDS_HOLDS_")
