from __future__ import annotations

from enum import StrEnum, auto

from titleholds.util.log import logger_for_cls


class PolicyMode(StrEnum):
    """
    How title-level holds are offered for a record.

    disabled: never offer a hold.
    driver: the catalog decides, after validating the request for the
        logged in patron.
    always: offer a hold whenever the catalog supports holds.
    availability: offer a hold only when no visible copy is available.
    """

    disabled = auto()
    driver = auto()
    always = auto()
    availability = auto()

    @classmethod
    def parse(cls, value: PolicyMode | str | None) -> PolicyMode | None:
        """
        Normalise a mode reported by the catalog or the configuration.

        Returns None for a missing value. Any value we don't recognise
        is treated as disabled, so a misconfigured catalog can never
        cause a hold link to appear.
        """
        if value is None or isinstance(value, cls):
            return value
        normalised = str(value).strip().lower()
        if not normalised:
            return None
        try:
            return cls(normalised)
        except ValueError:
            logger_for_cls(cls).warning(
                f"Unknown title holds mode {value!r}, treating it as {cls.disabled}."
            )
            return cls.disabled
