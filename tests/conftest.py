"""Pytest configuration and shared fixtures"""

import pytest
from fastapi import Depends, FastAPI
from fastapi.responses import PlainTextResponse, RedirectResponse
from fastapi_flash.dependencies import get_flash, get_incoming_flashes
from fastapi_flash.middleware.flash import FlashMiddleware
from fastapi_flash.services.cookies import COOKIE_NAME
from fastapi_flash.services.flash import Flash, IncomingFlashes
from fastapi_flash.services.keys import FlashConfig, SigningKey


@pytest.fixture
def signing_key():
    """A fresh random signing key"""
    return SigningKey.generate()


@pytest.fixture
def flash_config(signing_key):
    """Flash config usable over plain http in tests"""
    return FlashConfig(key=signing_key, use_secure_cookies=False)


def build_flash_app(config: FlashConfig | None, **middleware_options) -> FastAPI:
    """Small app mirroring a typical post/redirect/get flow"""
    app = FastAPI()
    app.add_middleware(FlashMiddleware, config=config, **middleware_options)

    @app.get("/", response_class=PlainTextResponse)
    async def root(flashes: IncomingFlashes = Depends(get_incoming_flashes)) -> str:
        return ", ".join(f"{level.label}: {text}" for level, text in flashes)

    @app.get("/set-flash")
    async def set_flash(flash: Flash = Depends(get_flash)) -> RedirectResponse:
        flash.debug("Hi from flash!")
        return RedirectResponse(url="/", status_code=303)

    @app.get("/read-and-set", response_class=PlainTextResponse)
    async def read_and_set(
        flashes: IncomingFlashes = Depends(get_incoming_flashes),
        flash: Flash = Depends(get_flash),
    ) -> str:
        seen = ", ".join(text for _, text in flashes)
        flash.info("Second message")
        return seen

    @app.get("/read-only-set", response_class=PlainTextResponse)
    async def read_and_set_nothing(
        flashes: IncomingFlashes = Depends(get_incoming_flashes),
        flash: Flash = Depends(get_flash),
    ) -> str:
        return str(len(flashes))

    @app.get("/ignore", response_class=PlainTextResponse)
    async def ignore() -> str:
        return "nothing read"

    return app


def flash_set_cookies(response) -> list[str]:
    """All Set-Cookie headers on a response that target the flash cookie"""
    return [
        header
        for header in response.headers.get_list("set-cookie")
        if header.startswith(f"{COOKIE_NAME}=")
    ]


def cookie_value(set_cookie_header: str) -> str:
    """Value part of a Set-Cookie header"""
    return set_cookie_header.split(";", 1)[0].split("=", 1)[1]


def cookie_attributes(set_cookie_header: str) -> list[str]:
    """Attribute parts of a Set-Cookie header, lowercased"""
    return [part.strip().lower() for part in set_cookie_header.split(";")[1:]]
