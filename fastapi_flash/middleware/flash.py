"""Flash message middleware for FastAPI"""

from typing import Any, Callable

from fastapi_flash.dependencies import write_flash_cookies
from fastapi_flash.services.keys import (
    CONFIG_STATE_KEY,
    SECURE_OVERRIDE_STATE_KEY,
    FlashConfig,
)
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp


class FlashMiddleware(BaseHTTPMiddleware):  # type: ignore[misc]
    """Provides the signing key to each request and writes flash cookies.

    Cookies are written on every response that comes back from the
    application, including error responses rendered by exception handlers.
    A request that fails with an unhandled exception writes none.
    """

    def __init__(
        self,
        app: ASGIApp,
        config: FlashConfig | None = None,
        use_secure_cookies: bool | None = None,
    ) -> None:
        """Initialize the middleware.

        Args:
            app: Wrapped ASGI application
            config: Flash config to expose on request.state; leave unset when
                the key is looked up elsewhere (e.g. app.state)
            use_secure_cookies: Per-request override of the config's
                Secure flag
        """
        super().__init__(app)
        self.config = config
        self.use_secure_cookies = use_secure_cookies

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Any]
    ) -> Response:
        if self.config is not None:
            setattr(request.state, CONFIG_STATE_KEY, self.config)
        if self.use_secure_cookies is not None:
            setattr(request.state, SECURE_OVERRIDE_STATE_KEY, self.use_secure_cookies)

        response = await call_next(request)

        write_flash_cookies(request, response)
        return response
