"""FastAPI dependencies exposing the cookie state set up by CookieMiddleware."""
from typing import Dict
from fastapi import Path, Request

from signed_cookies.services.cookie_jar import CookieJar
from signed_cookies.utils.cookie_codec import COOKIE_NAME_RE
from signed_cookies.utils.errors import CookieConfigurationError, InvalidCookieNameError


def _state(request: Request, attr: str):
    value = getattr(request.state, attr, None)
    if value is None:
        raise CookieConfigurationError("CookieMiddleware is not installed on this application.")
    return value


def get_cookies(request: Request) -> Dict[str, str]:
    return _state(request, "cookies")


def get_cookie_jar(request: Request) -> CookieJar:
    return _state(request, "cookie_jar")


def valid_cookie_name(name: str = Path(..., description="Cookie name")) -> str:
    """Cookie name from the path; a non-token name is the client's error."""
    if not COOKIE_NAME_RE.match(name):
        raise InvalidCookieNameError(name, status_code=400)
    return name
