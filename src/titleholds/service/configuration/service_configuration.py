from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from pydantic import ValidationError
from pydantic_core import ErrorDetails
from pydantic_settings import BaseSettings, SettingsConfigDict

from titleholds.core.config import CannotLoadConfiguration


class ServiceConfiguration(BaseSettings):
    """
    Settings for one part of the engine, read from the environment.

    Subclasses declare their settings as pydantic fields and set their own
    env_prefix, so TITLEHOLDS_HOLDS_HMAC_KEY fills HoldsConfiguration.hmac_key.
    Settings can also come from a .env file in the working directory.
    """

    model_config = SettingsConfigDict(
        env_prefix="TITLEHOLDS_",
        str_strip_whitespace=True,
        # Loaded once at startup.
        frozen=True,
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
    )

    def __init__(self, *args: Any, **kwargs: Any):
        try:
            super().__init__(*args, **kwargs)
        except ValidationError as e:
            raise CannotLoadConfiguration(
                self._describe_errors(e.errors())
            ) from e

    @classmethod
    def _env_var(cls, location: Sequence[int | str]) -> str:
        """Name the environment variable an operator has to fix for an error location."""
        delimiter = cls.model_config.get("env_nested_delimiter") or "__"
        field, *nested = (str(part) for part in location)
        if field in cls.model_fields:
            field = f"{cls.model_config.get('env_prefix', '')}{field}"
        return delimiter.join(part.upper() for part in (field, *nested))

    @classmethod
    def _describe_errors(cls, errors: Sequence[ErrorDetails]) -> str:
        lines = ["Error loading settings from environment:"]
        for error in errors:
            if error["loc"]:
                lines.append(f"  {cls._env_var(error['loc'])}:  {error['msg']}")
            else:
                lines.append(f"  {error['msg']}")
        return "\n".join(lines)
