from __future__ import annotations

from titleholds.core.exceptions import BaseTitleHoldsException


class InvalidHoldTokenException(BaseTitleHoldsException):
    """A hold query coming back from the client failed verification.

    Either the signature is missing or wrong, or the query carries
    fields that were never signed.
    """
