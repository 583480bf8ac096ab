"""Tests for the flash cookie attribute policy"""

from fastapi_flash.services.cookies import (
    COOKIE_NAME,
    MAX_AGE,
    build_cookie,
    build_removal_cookie,
    discard_cookie,
    response_sets_cookie,
)
from starlette.responses import Response
from tests.conftest import cookie_attributes, cookie_value


def written_cookies(response: Response) -> list[str]:
    return response.headers.getlist("set-cookie")


class TestBuildCookie:
    """Tests for build_cookie and build_removal_cookie"""

    def test_live_cookie_attributes(self):
        cookie = build_cookie("signed-value", use_secure_cookies=True)

        assert cookie.name == COOKIE_NAME == "axum-flash"
        assert cookie.value == "signed-value"
        assert cookie.secure is True
        assert cookie.http_only is True
        assert cookie.same_site == "Strict"
        assert cookie.path == "/"
        assert cookie.max_age == MAX_AGE == 600
        assert not cookie.is_removal

    def test_secure_flag_follows_setting(self):
        assert build_cookie("v", use_secure_cookies=False).secure is False
        assert build_removal_cookie(use_secure_cookies=False).secure is False
        assert build_removal_cookie(use_secure_cookies=True).secure is True

    def test_removal_cookie_attributes(self):
        cookie = build_removal_cookie(use_secure_cookies=True)

        assert cookie.name == COOKIE_NAME
        assert cookie.value == ""
        assert cookie.max_age == 0
        assert cookie.http_only is True
        assert cookie.same_site == "Strict"
        assert cookie.path == "/"
        assert cookie.is_removal


class TestApplyCookie:
    """Tests for writing cookies onto a Starlette response"""

    def test_live_cookie_header(self):
        response = Response()
        build_cookie("abc.def.ghi", use_secure_cookies=True).apply(response)

        [header] = written_cookies(response)
        assert header.startswith("axum-flash=abc.def.ghi;")
        attributes = cookie_attributes(header)
        assert "httponly" in attributes
        assert "samesite=strict" in attributes
        assert "path=/" in attributes
        assert "max-age=600" in attributes
        assert "secure" in attributes

    def test_insecure_cookie_header(self):
        response = Response()
        build_cookie("abc", use_secure_cookies=False).apply(response)

        [header] = written_cookies(response)
        assert "secure" not in cookie_attributes(header)

    def test_removal_cookie_header(self):
        response = Response()
        build_removal_cookie(use_secure_cookies=True).apply(response)

        [header] = written_cookies(response)
        assert header.startswith("axum-flash=")
        assert cookie_value(header) in ("", '""')
        attributes = cookie_attributes(header)
        assert "max-age=0" in attributes
        assert "httponly" in attributes
        assert "samesite=strict" in attributes
        assert "path=/" in attributes


class TestHeaderHelpers:
    """Tests for response_sets_cookie and discard_cookie"""

    def test_response_sets_cookie(self):
        response = Response()
        assert not response_sets_cookie(response)

        response.set_cookie("session", "abc")
        assert not response_sets_cookie(response)

        build_cookie("v", use_secure_cookies=True).apply(response)
        assert response_sets_cookie(response)

    def test_similar_names_do_not_match(self):
        response = Response()
        response.set_cookie("axum-flash-old", "abc")
        assert not response_sets_cookie(response)

    def test_discard_cookie_keeps_other_cookies(self):
        response = Response()
        response.set_cookie("session", "abc")
        build_cookie("v", use_secure_cookies=True).apply(response)

        discard_cookie(response)

        headers = written_cookies(response)
        assert len(headers) == 1
        assert headers[0].startswith("session=abc")
        assert not response_sets_cookie(response)
