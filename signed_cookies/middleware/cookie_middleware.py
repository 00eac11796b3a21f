"""
Cookie Middleware
Parses the Cookie header once per request and writes queued cookies
back as Set-Cookie headers.
"""

import logging
from typing import Optional
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from signed_cookies.services.cookie_service import CookieService, get_cookie_service

logger = logging.getLogger(__name__)


def is_connection_secure(request: Request, trust_forwarded_proto: bool = False) -> bool:
    """
    True for TLS connections. X-Forwarded-Proto is client-controlled, so it
    only counts when a proxy in front of the app is trusted to set it.
    """
    if request.url.scheme in ("https", "wss"):
        return True
    if not trust_forwarded_proto:
        return False
    return request.headers.get("x-forwarded-proto", "").split(",")[0].strip().lower() == "https"


class CookieMiddleware(BaseHTTPMiddleware):
    """
    Exposes ``request.state.cookies`` (parsed, unsigned strings) and
    ``request.state.cookie_jar`` (cookies to send back).
    """

    def __init__(self, app, service: Optional[CookieService] = None, trust_forwarded_proto: bool = False):
        super().__init__(app)
        self.service = service
        self.trust_forwarded_proto = trust_forwarded_proto

    async def dispatch(self, request: Request, call_next):
        service = self.service or get_cookie_service()

        cookies = service.parse_cookie(request.headers.get("cookie"))
        jar = service.new_jar(is_secure=is_connection_secure(request, self.trust_forwarded_proto))
        request.state.cookies = cookies
        request.state.cookie_jar = jar
        logger.debug(f"{request.method} {request.url.path} carried {len(cookies)} cookie(s)")

        response = await call_next(request)

        if len(jar):
            for header in jar.headers():
                response.headers.append("set-cookie", header)
            logger.debug(f"{request.method} {request.url.path} set {len(jar)} cookie(s)")
        return response
