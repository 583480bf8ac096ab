"""Per-request flash message objects.

``Flash`` collects messages to send with the current response.
``IncomingFlashes`` holds the messages the client brought back from the
previous response and takes care of deleting the cookie once they have been
read.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterator

from fastapi_flash.models import FlashMessage, Level
from fastapi_flash.services.codec import FlashCodec
from fastapi_flash.services.cookies import (
    COOKIE_NAME,
    build_cookie,
    build_removal_cookie,
    discard_cookie,
    response_sets_cookie,
)
from fastapi_flash.services.keys import SigningKey
from starlette.requests import HTTPConnection
from starlette.responses import Response

logger = logging.getLogger(__name__)


class Flash:
    """Outgoing flash messages for one response"""

    def __init__(self, key: SigningKey, use_secure_cookies: bool = True) -> None:
        """Initialize an empty accumulator.

        Args:
            key: Key used to sign the outgoing cookie
            use_secure_cookies: Whether to mark the cookie ``Secure``
        """
        self._key = key
        self.use_secure_cookies = use_secure_cookies
        self._messages: list[FlashMessage] = []

    def push(self, level: Level | int, text: str) -> Flash:
        """Queue a message.

        Args:
            level: Message level
            text: Message text

        Returns:
            This accumulator, so calls can be chained

        Raises:
            ValueError: If level is not a known Level, or text cannot be
                encoded as UTF-8 (e.g. lone surrogates)
            TypeError: If text is not a string
        """
        if not isinstance(text, str):
            raise TypeError(f"Flash message text must be str, not {type(text).__name__}")
        try:
            text.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise ValueError("Flash message text must be valid UTF-8") from exc
        self._messages.append(FlashMessage(level=Level(level), text=text))
        return self

    def debug(self, text: str) -> Flash:
        return self.push(Level.DEBUG, text)

    def info(self, text: str) -> Flash:
        return self.push(Level.INFO, text)

    def success(self, text: str) -> Flash:
        return self.push(Level.SUCCESS, text)

    def warning(self, text: str) -> Flash:
        return self.push(Level.WARNING, text)

    def error(self, text: str) -> Flash:
        return self.push(Level.ERROR, text)

    @property
    def messages(self) -> tuple[FlashMessage, ...]:
        return tuple(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __bool__(self) -> bool:
        return bool(self._messages)

    def write_to(self, response: Response) -> bool:
        """Attach the signed flash cookie to ``response``.

        Nothing is written when no messages were queued. Any flash cookie
        already on the response is replaced so it carries a single one.

        Returns:
            True if a cookie was written
        """
        if not self._messages:
            return False
        value = FlashCodec(self._key).encode(self._messages)
        discard_cookie(response, COOKIE_NAME)
        build_cookie(value, self.use_secure_cookies).apply(response)
        logger.debug("Queued %d flash message(s)", len(self._messages))
        return True

    def __repr__(self) -> str:
        return (
            f"Flash(messages={self._messages!r}, "
            f"use_secure_cookies={self.use_secure_cookies!r}, key=<redacted>)"
        )


class IncomingFlashes:
    """Flash messages received with the current request"""

    def __init__(
        self,
        messages: list[FlashMessage],
        use_secure_cookies: bool = True,
        cookie_present: bool = False,
    ) -> None:
        self._messages = deque(messages)
        self.use_secure_cookies = use_secure_cookies
        self.cookie_present = cookie_present

    @classmethod
    def from_request(
        cls,
        request: HTTPConnection,
        key: SigningKey,
        use_secure_cookies: bool = True,
    ) -> IncomingFlashes:
        """Read and verify the flash cookie sent with ``request``.

        A missing, tampered, expired or malformed cookie gives an empty set of
        messages.

        Args:
            request: Incoming request
            key: Key the cookie was signed with
            use_secure_cookies: Secure flag for the removal cookie

        Returns:
            IncomingFlashes for this request
        """
        raw = request.cookies.get(COOKIE_NAME)
        messages = FlashCodec(key).decode(raw)
        return cls(
            messages,
            use_secure_cookies=use_secure_cookies,
            cookie_present=bool(raw),
        )

    @property
    def messages(self) -> tuple[FlashMessage, ...]:
        return tuple(self._messages)

    def __iter__(self) -> Iterator[tuple[Level, str]]:
        for message in self._messages:
            yield message.level, message.text

    def __len__(self) -> int:
        return len(self._messages)

    def __bool__(self) -> bool:
        return bool(self._messages)

    def is_empty(self) -> bool:
        return not self._messages

    def consume(self) -> Iterator[tuple[Level, str]]:
        """Yield each message once, removing it from this object."""
        while self._messages:
            message = self._messages.popleft()
            yield message.level, message.text

    def write_to(self, response: Response) -> bool:
        """Attach a removal cookie to ``response`` if one is needed.

        The cookie is only removed when the request carried one and nothing
        else on the response already sets the flash cookie (new messages
        replace the old cookie by themselves).

        Returns:
            True if a removal cookie was written
        """
        if not self.cookie_present:
            return False
        if response_sets_cookie(response, COOKIE_NAME):
            return False
        build_removal_cookie(self.use_secure_cookies).apply(response)
        return True

    def __repr__(self) -> str:
        return (
            f"IncomingFlashes(messages={self._messages!r}, "
            f"use_secure_cookies={self.use_secure_cookies!r})"
        )
