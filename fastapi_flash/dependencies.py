"""FastAPI dependencies for flash messages"""

from fastapi import Request
from fastapi_flash.services.flash import Flash, IncomingFlashes
from fastapi_flash.services.keys import KeyProvider, RequestStateKeyProvider
from starlette.responses import Response

# request.state attributes picked up by write_flash_cookies
OUTGOING_STATE_KEY = "flash_outgoing"
INCOMING_STATE_KEY = "flash_incoming"


class FlashDependencies:
    """Builds per-request flash objects from a key provider"""

    def __init__(self, provider: KeyProvider | None = None) -> None:
        """Initialize with the provider used to find the signing key.

        Args:
            provider: Key lookup strategy; defaults to the config injected
                by ``FlashMiddleware``
        """
        self.provider = provider or RequestStateKeyProvider()

    async def flash(self, request: Request) -> Flash:
        """Dependency returning the outgoing flash accumulator.

        Raises:
            MissingSigningKeyError: 500 if no signing key is configured
        """
        existing = getattr(request.state, OUTGOING_STATE_KEY, None)
        if existing is not None:
            return existing

        flash = Flash(
            self.provider.resolve(request),
            use_secure_cookies=self.provider.use_secure_cookies(request),
        )
        setattr(request.state, OUTGOING_STATE_KEY, flash)
        return flash

    async def incoming(self, request: Request) -> IncomingFlashes:
        """Dependency returning the flash messages sent with this request.

        Raises:
            MissingSigningKeyError: 500 if no signing key is configured
        """
        existing = getattr(request.state, INCOMING_STATE_KEY, None)
        if existing is not None:
            return existing

        incoming = IncomingFlashes.from_request(
            request,
            self.provider.resolve(request),
            use_secure_cookies=self.provider.use_secure_cookies(request),
        )
        setattr(request.state, INCOMING_STATE_KEY, incoming)
        return incoming


def write_flash_cookies(request: Request, response: Response) -> None:
    """Write the flash cookies registered on ``request`` to ``response``.

    New messages are written first so that a consumed cookie is overwritten
    rather than removed.
    """
    flash: Flash | None = getattr(request.state, OUTGOING_STATE_KEY, None)
    incoming: IncomingFlashes | None = getattr(request.state, INCOMING_STATE_KEY, None)

    if flash is not None:
        flash.write_to(response)
    if incoming is not None:
        incoming.write_to(response)


_default = FlashDependencies()

get_flash = _default.flash
get_incoming_flashes = _default.incoming
