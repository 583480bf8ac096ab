"""Signing key material and per-request key resolution"""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from fastapi import HTTPException

if TYPE_CHECKING:
    from fastapi_flash.config import Settings
    from starlette.requests import Request

logger = logging.getLogger(__name__)

MISSING_KEY_DETAIL = (
    "`SigningKey` missing. Did you forget to add `FlashMiddleware` "
    "to your application?"
)

# Attribute names used on request.state / app.state
CONFIG_STATE_KEY = "flash_config"
SECURE_OVERRIDE_STATE_KEY = "flash_use_secure_cookies"


class MissingSigningKeyError(HTTPException):
    """Raised when flash state is used without a configured signing key.

    This is a wiring defect, so it surfaces as a 500 rather than an empty
    message list.
    """

    def __init__(self) -> None:
        super().__init__(status_code=500, detail=MISSING_KEY_DETAIL)


class SigningKey:
    """Symmetric key used to sign flash cookies. Never rendered in output."""

    __slots__ = ("_secret",)

    def __init__(self, secret: bytes | str) -> None:
        if isinstance(secret, str):
            secret = secret.encode("utf-8")
        if not secret:
            raise ValueError("Signing key must not be empty")
        self._secret = bytes(secret)

    @classmethod
    def generate(cls) -> SigningKey:
        """Create a key from 64 random bytes."""
        return cls(secrets.token_bytes(64))

    @property
    def secret(self) -> bytes:
        return self._secret

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SigningKey):
            return NotImplemented
        return secrets.compare_digest(self._secret, other._secret)

    def __hash__(self) -> int:
        return hash(self._secret)

    def __repr__(self) -> str:
        return "SigningKey(<redacted>)"

    __str__ = __repr__


@dataclass(frozen=True)
class FlashConfig:
    """Process-wide flash configuration shared read-only by every request"""

    key: SigningKey
    use_secure_cookies: bool = True

    def with_secure_cookies(self, use_secure_cookies: bool) -> FlashConfig:
        """Return a copy with the ``Secure`` cookie flag changed.

        Browsers may refuse secure cookies over plain http, so local
        development setups usually turn this off.
        """
        return replace(self, use_secure_cookies=use_secure_cookies)

    @classmethod
    def from_settings(cls, settings: Settings) -> FlashConfig:
        """Build a config from application settings.

        Args:
            settings: Loaded application settings

        Returns:
            FlashConfig with the configured key and secure flag

        Raises:
            ValueError: If FLASH_SECRET_KEY is not set
        """
        if settings.flash_secret_key is None:
            raise ValueError("FLASH_SECRET_KEY not configured")
        secret = settings.flash_secret_key.get_secret_value()
        return cls(
            key=SigningKey(secret),
            use_secure_cookies=settings.flash_secure_cookies,
        )


class KeyProvider:
    """Resolves the flash configuration for a request.

    Subclasses only decide where the config lives; resolution, the
    per-request secure override and the missing-key failure are shared.
    """

    def lookup(self, request: Request) -> FlashConfig | None:
        raise NotImplementedError

    def resolve_config(self, request: Request) -> FlashConfig:
        """Return the flash config for this request.

        Raises:
            MissingSigningKeyError: If no config is reachable from the request
        """
        config = self.lookup(request)
        if config is None:
            logger.error(
                "Flash signing key unavailable for %s %s",
                request.method,
                request.url.path,
            )
            raise MissingSigningKeyError()
        return config

    def resolve(self, request: Request) -> SigningKey:
        return self.resolve_config(request).key

    def use_secure_cookies(self, request: Request) -> bool:
        """Resolve the ``Secure`` flag, honouring a request-scoped override."""
        override = getattr(request.state, SECURE_OVERRIDE_STATE_KEY, None)
        if override is not None:
            return bool(override)
        return self.resolve_config(request).use_secure_cookies


class RequestStateKeyProvider(KeyProvider):
    """Config injected on ``request.state`` by ``FlashMiddleware``"""

    def lookup(self, request: Request) -> FlashConfig | None:
        return getattr(request.state, CONFIG_STATE_KEY, None)


class AppStateKeyProvider(KeyProvider):
    """Config stored on ``app.state`` at startup"""

    def __init__(self, attribute: str = CONFIG_STATE_KEY) -> None:
        self.attribute = attribute

    def lookup(self, request: Request) -> FlashConfig | None:
        return getattr(request.app.state, self.attribute, None)


class StaticKeyProvider(KeyProvider):
    """Config captured once at construction"""

    def __init__(self, config: FlashConfig | None) -> None:
        self.config = config

    def lookup(self, request: Request) -> FlashConfig | None:
        return self.config
