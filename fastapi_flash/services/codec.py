"""Signed cookie codec for flash message lists"""

import binascii
import logging
from collections.abc import Iterable

from fastapi_flash.models import FlashMessage
from fastapi_flash.services.cookies import MAX_AGE
from fastapi_flash.services.keys import SigningKey
from itsdangerous import BadData, TimestampSigner
from itsdangerous.encoding import base64_decode, base64_encode, want_bytes
from pydantic import TypeAdapter, ValidationError

logger = logging.getLogger(__name__)

SALT = "fastapi-flash.cookie"

_messages_adapter = TypeAdapter(list[FlashMessage])


class FlashCodec:
    """Turns message lists into signed cookie values and back"""

    def __init__(self, key: SigningKey) -> None:
        """Initialize codec with the signing key.

        Args:
            key: Key used to sign and verify cookie values
        """
        self.signer = TimestampSigner(key.secret, salt=SALT)

    def encode(self, messages: Iterable[FlashMessage]) -> str:
        """Serialize and sign a list of messages.

        The JSON payload is base64url encoded before signing, so the result
        only contains ``[A-Za-z0-9_.-]`` and can be stored as a cookie value
        without further escaping.

        Args:
            messages: Messages in display order

        Returns:
            Signed cookie value
        """
        payload = _messages_adapter.dump_json(list(messages), by_alias=True)
        signed = self.signer.sign(base64_encode(payload))
        return signed.decode("ascii")

    def decode(self, value: str | None) -> list[FlashMessage]:
        """Verify and deserialize a cookie value.

        Any invalid input (bad signature, expired timestamp, broken encoding,
        unexpected JSON shape) yields an empty list.

        Args:
            value: Raw cookie value, or None if the cookie was absent

        Returns:
            Decoded messages, or an empty list
        """
        if not value or not isinstance(value, str):
            return []

        try:
            raw = value.encode("ascii")
            if not self._is_canonical(raw):
                raise BadData("Non-canonical signature encoding")
            encoded = self.signer.unsign(raw, max_age=MAX_AGE)
            return _messages_adapter.validate_json(base64_decode(encoded))
        except (BadData, binascii.Error, UnicodeError, ValidationError) as exc:
            logger.debug("Discarding flash cookie: %s", type(exc).__name__)
            return []

    def _is_canonical(self, raw: bytes) -> bool:
        # base64 ignores trailing pad bits, so equal signatures can have
        # several spellings; only the one we emit is accepted.
        sep = want_bytes(self.signer.sep)
        if sep not in raw:
            return False
        signature = raw.rsplit(sep, 1)[1]
        try:
            return base64_encode(base64_decode(signature)) == signature
        except BadData:
            return False


def encode(messages: Iterable[FlashMessage], key: SigningKey) -> str:
    """Sign ``messages`` with ``key``. See ``FlashCodec.encode``."""
    return FlashCodec(key).encode(messages)


def decode(value: str | None, key: SigningKey) -> list[FlashMessage]:
    """Verify ``value`` with ``key``. See ``FlashCodec.decode``."""
    return FlashCodec(key).decode(value)
