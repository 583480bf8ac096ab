"""Flash messages demo application"""

import logging

from fastapi import Depends, FastAPI
from fastapi.responses import PlainTextResponse, RedirectResponse
from fastapi_flash.config import Settings, settings as default_settings
from fastapi_flash.dependencies import get_flash, get_incoming_flashes
from fastapi_flash.logging import configure_logging
from fastapi_flash.middleware.flash import FlashMiddleware
from fastapi_flash.models import Level
from fastapi_flash.services.flash import Flash, IncomingFlashes
from fastapi_flash.services.keys import FlashConfig, SigningKey

logger = logging.getLogger(__name__)


def load_flash_config(settings: Settings) -> FlashConfig:
    """Build the flash config, generating a throwaway key outside production.

    Raises:
        ValueError: If no key is configured in production
    """
    if settings.flash_secret_key is not None:
        return FlashConfig.from_settings(settings)

    if settings.environment == "production":
        raise ValueError(
            "FLASH_SECRET_KEY must be set in production. "
            "Generate a secure key with: python -c 'import secrets; print(secrets.token_urlsafe(64))'"
        )

    logger.warning(
        "FLASH_SECRET_KEY not set, using a random key; "
        "flash cookies will not survive a restart"
    )
    return FlashConfig(
        key=SigningKey.generate(),
        use_secure_cookies=settings.flash_secure_cookies,
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create the demo application."""
    settings = settings or default_settings
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Flash Messages",
        description="One-time notifications carried in a signed cookie",
        version="0.1.0",
    )
    app.add_middleware(FlashMiddleware, config=load_flash_config(settings))

    @app.get("/", response_class=PlainTextResponse)
    async def root(flashes: IncomingFlashes = Depends(get_incoming_flashes)) -> str:
        """Show the flash messages queued by the previous response."""
        return ", ".join(f"{level.label}: {text}" for level, text in flashes)

    @app.get("/set-flash")
    async def set_flash(
        message: str = "Hi from flash!",
        level: Level = Level.DEBUG,
        flash: Flash = Depends(get_flash),
    ) -> RedirectResponse:
        """Queue one message and redirect to the page that shows it."""
        flash.push(level, message)
        return RedirectResponse(url="/", status_code=303)

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy"}

    return app
