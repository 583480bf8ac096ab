"""Cookie attribute policy for flash cookies"""

from dataclasses import dataclass

from starlette.responses import Response

COOKIE_NAME = "axum-flash"
MAX_AGE = 10 * 60  # seconds


@dataclass(frozen=True)
class FlashCookie:
    """A flash cookie with its fixed security attributes"""

    value: str
    secure: bool
    max_age: int = MAX_AGE
    name: str = COOKIE_NAME
    http_only: bool = True
    same_site: str = "Strict"
    path: str = "/"

    @property
    def is_removal(self) -> bool:
        return self.max_age == 0

    def apply(self, response: Response) -> None:
        """Append this cookie as a ``Set-Cookie`` header on ``response``."""
        response.set_cookie(
            key=self.name,
            value=self.value,
            max_age=self.max_age,
            path=self.path,
            secure=self.secure,
            httponly=self.http_only,
            samesite=self.same_site,
        )


def build_cookie(value: str, use_secure_cookies: bool) -> FlashCookie:
    """Build the live cookie carrying a signed message list."""
    return FlashCookie(value=value, secure=use_secure_cookies)


def build_removal_cookie(use_secure_cookies: bool) -> FlashCookie:
    """Build a cookie that tells the client to drop the flash cookie now."""
    return FlashCookie(value="", secure=use_secure_cookies, max_age=0)


def _set_cookie_name(header_value: bytes) -> str:
    return header_value.split(b";", 1)[0].split(b"=", 1)[0].strip().decode("latin-1")


def response_sets_cookie(response: Response, name: str = COOKIE_NAME) -> bool:
    """Whether ``response`` already carries a ``Set-Cookie`` for ``name``."""
    return any(
        key.lower() == b"set-cookie" and _set_cookie_name(value) == name
        for key, value in response.raw_headers
    )


def discard_cookie(response: Response, name: str = COOKIE_NAME) -> None:
    """Drop every ``Set-Cookie`` header for ``name`` from ``response``."""
    response.raw_headers[:] = [
        (key, value)
        for key, value in response.raw_headers
        if not (key.lower() == b"set-cookie" and _set_cookie_name(value) == name)
    ]
