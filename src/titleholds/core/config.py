from __future__ import annotations

from titleholds.core.exceptions import IntegrationException


class CannotLoadConfiguration(IntegrationException):
    """The current configuration of the holds engine, or of one of the
    services it is wired to, is in an incomplete or inconsistent state.

    This is more specific than a base IntegrationException because it
    assumes the problem is evident just by looking at the current
    configuration, with no need to actually talk to the catalog.
    """
