from __future__ import annotations

import hmac
import urllib.parse
from collections.abc import Mapping, Sequence
from typing import Protocol, runtime_checkable

from pydantic import SecretStr

from titleholds.core.exceptions import TitleHoldsValueError


@runtime_checkable
class SignatureService(Protocol):
    def generate(self, ordered_keys: Sequence[str], data: Mapping[str, str]) -> str:
        """Sign the values of `ordered_keys` in `data`, in that order."""
        ...


def signing_message(ordered_keys: Sequence[str], data: Mapping[str, str]) -> bytes:
    """
    The bytes covered by a signature.

    Each key present in data contributes key=value with the value url
    encoded, so neither keys nor values can run into their neighbours.
    Keys missing from data are skipped.
    """
    return "&".join(
        f"{key}={urllib.parse.quote_plus(str(data[key]))}"
        for key in ordered_keys
        if key in data
    ).encode("utf-8")


def hmac_digest_supported(digest: str) -> bool:
    """
    True if hmac can sign with this hashlib digest.

    hashlib also lists digests hmac can't use, such as the variable length
    shake_128 and shake_256, so we try one signature rather than trust the list.
    """
    try:
        hmac.new(b"", msg=b"", digestmod=digest).hexdigest()
    except (TypeError, ValueError):
        return False
    return True


class HmacSignatureService:
    """Keyed hash signatures using a secret that never leaves the server."""

    def __init__(self, secret: SecretStr | str, digest: str = "sha256") -> None:
        if isinstance(secret, str):
            secret = SecretStr(secret)
        if not secret.get_secret_value():
            raise TitleHoldsValueError("The HMAC secret may not be empty.")
        if not hmac_digest_supported(digest):
            raise TitleHoldsValueError(f"Unknown HMAC digest: {digest}")
        self._secret = secret
        self.digest = digest

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} digest={self.digest}>"

    def generate(self, ordered_keys: Sequence[str], data: Mapping[str, str]) -> str:
        return hmac.new(
            self._secret.get_secret_value().encode("utf-8"),
            msg=signing_message(ordered_keys, data),
            digestmod=self.digest,
        ).hexdigest()
