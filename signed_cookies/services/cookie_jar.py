"""
Per-response cookie jar.
Collects cookies to set or clear while a request is handled, then hands
them to the host as Set-Cookie headers.
"""

from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from signed_cookies.models.cookie import UnsignResult
from signed_cookies.utils.cookie_codec import OptionsInput

if TYPE_CHECKING:
    from signed_cookies.services.cookie_service import CookieService

CookieKey = Tuple[str, Optional[str], str]


class CookieJar:
    """
    Pending Set-Cookie headers for one response.

    A cookie is identified by (name, domain, path); setting the same
    identity twice keeps only the latest header, so a clear after a set
    (or the reverse) sends a single header. Headers are rendered when the
    cookie is queued, so an invalid name or option fails inside the
    handler that asked for it.
    """

    def __init__(self, service: "CookieService", is_secure: bool = False):
        self.service = service
        self.is_secure = is_secure
        self._pending: Dict[CookieKey, str] = {}

    def __len__(self) -> int:
        return len(self._pending)

    def __contains__(self, name: str) -> bool:
        return any(key[0] == name for key in self._pending)

    def _put(self, key: CookieKey, header: str) -> None:
        self._pending.pop(key, None)
        self._pending[key] = header

    def set_cookie(self, name: str, value: str, options: OptionsInput = None) -> "CookieJar":
        """Queue a cookie; options are merged over the service defaults."""
        opts = self.service.codec.options(options)
        header = self.service.serialize_cookie(name, value, opts, is_secure=self.is_secure)
        self._put((name, opts.domain, opts.path or "/"), header)
        return self

    def clear_cookie(self, name: str, options: OptionsInput = None) -> "CookieJar":
        """Queue an expired, empty cookie so the browser evicts ``name``."""
        opts = self.service.codec.options(options)
        header = self.service.clear_cookie(name, opts, is_secure=self.is_secure)
        self._put((name, opts.domain, opts.path or "/"), header)
        return self

    def sign_cookie(self, value: str) -> str:
        return self.service.sign_cookie(value)

    def unsign_cookie(self, value: str) -> UnsignResult:
        return self.service.unsign_cookie(value)

    def headers(self) -> List[str]:
        return list(self._pending.values())
