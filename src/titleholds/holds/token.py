from __future__ import annotations

import hmac
import urllib.parse
from collections.abc import Sequence

from titleholds.holds.data import HASH_KEY, ActionToken, HoldRequestDescriptor
from titleholds.holds.exceptions import InvalidHoldTokenException
from titleholds.holds.signature import SignatureService
from titleholds.util.log import LoggerMixin


class SecureTokenGenerator(LoggerMixin):
    """
    Build hold actions that can safely make a round trip through the client.

    Only the fields named in signed_keys are put in the query, followed by a
    signature over exactly those fields. Anything else in the request is
    dropped, so it cannot be recovered from the token.
    """

    def __init__(self, signer: SignatureService) -> None:
        self.signer = signer

    def sign(
        self, request: HoldRequestDescriptor, signed_keys: Sequence[str]
    ) -> ActionToken:
        data = request.as_dict()
        keys = [key for key in dict.fromkeys(signed_keys) if key in data]
        signature = self.signer.generate(keys, data)

        params = [(key, data[key]) for key in keys]
        params.append((HASH_KEY, signature))
        query = urllib.parse.urlencode(params)

        dropped = data.keys() - set(keys)
        if dropped:
            self.log.debug(
                f"Left unsigned fields out of the hold token for record {request.id}: "
                f"{', '.join(sorted(dropped))}"
            )
        return ActionToken(record=request.id, query=query)

    def verify(self, query: str, signed_keys: Sequence[str]) -> dict[str, str]:
        """
        Check a query produced by sign and return its signed fields.

        :raises InvalidHoldTokenException: when the signature is missing or
            wrong, a field appears twice, or a field was never signed.
        """
        try:
            pairs = urllib.parse.parse_qsl(
                query, keep_blank_values=True, strict_parsing=True
            )
        except ValueError as e:
            raise InvalidHoldTokenException(f"Malformed hold query: {e}") from e

        received: dict[str, str] = {}
        for key, value in pairs:
            if key in received:
                raise InvalidHoldTokenException(f"Duplicate field in hold query: {key}")
            received[key] = value

        signature = received.pop(HASH_KEY, None)
        if signature is None:
            raise InvalidHoldTokenException("Hold query is not signed.")

        allowed = list(dict.fromkeys(signed_keys))
        unsigned = received.keys() - set(allowed)
        if unsigned:
            raise InvalidHoldTokenException(
                f"Hold query contains unsigned fields: {', '.join(sorted(unsigned))}"
            )

        keys = [key for key in allowed if key in received]
        expected = self.signer.generate(keys, received)
        if not hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8")):
            raise InvalidHoldTokenException("Hold query signature does not match.")
        return {key: received[key] for key in keys}
