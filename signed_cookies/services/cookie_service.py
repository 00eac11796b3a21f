"""
Cookie Service

Composes a signer and a cookie codec into one signed-cookie engine.
The host hands raw header strings in and gets mappings and Set-Cookie
strings back; nothing here depends on the web framework.
"""

import logging
from functools import lru_cache
from typing import Any, Dict, Mapping, Optional, Union

from signed_cookies.core.config import Settings, settings as app_settings
from signed_cookies.models.cookie import CookiePluginOptions, UnsignResult
from signed_cookies.services.cookie_jar import CookieJar
from signed_cookies.utils.cookie_codec import CookieCodec, OptionsInput, serialize_cookie
from signed_cookies.utils.errors import SignerNotConfiguredError
from signed_cookies.utils.signer import Signer, SignerBase

logger = logging.getLogger(__name__)


def build_signer(secret: Any, algorithm: str) -> Optional[SignerBase]:
    """
    Resolve the configured secret into a signer.

    Args:
        secret: None, a secret, an ordered list of secrets, or a signer object
        algorithm: hashlib digest name, ignored for signer objects

    Returns:
        Signer instance, or None when signing is disabled
    """
    if secret is None:
        return None
    if isinstance(secret, (str, bytes, list, tuple)):
        return Signer(secret, algorithm)
    if isinstance(secret, SignerBase):
        return secret
    raise TypeError(f"Unsupported secret type: {type(secret).__name__}")


class CookieService:
    """
    Signed-cookie engine: parse, sign, unsign and serialize.
    """

    def __init__(self, options: Optional[Union[CookiePluginOptions, Mapping[str, Any]]] = None):
        if options is None:
            options = CookiePluginOptions()
        elif not isinstance(options, CookiePluginOptions):
            options = CookiePluginOptions.model_validate(dict(options))

        self.signer = build_signer(options.secret, options.algorithm)
        self.codec = CookieCodec(options.parse_options)
        logger.info(
            f"Cookie service ready (signing={'on' if self.signer else 'off'}, "
            f"algorithm={options.algorithm})"
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "CookieService":
        secrets = settings.cookie_secret_list
        return cls(CookiePluginOptions(
            secret=secrets or None,
            algorithm=settings.cookie_algorithm,
            parse_options=settings.parse_options(),
        ))

    def _require_signer(self) -> SignerBase:
        if self.signer is None:
            raise SignerNotConfiguredError()
        return self.signer

    def parse_cookie(self, header: Optional[str]) -> Dict[str, str]:
        return self.codec.parse(header)

    def sign_cookie(self, value: str) -> str:
        return self._require_signer().sign(value)

    def unsign_cookie(self, value: str) -> UnsignResult:
        return self._require_signer().unsign(value)

    def serialize_cookie(
        self,
        name: str,
        value: str,
        options: OptionsInput = None,
        *,
        is_secure: bool = False,
    ) -> str:
        """Serialize one cookie, signing the value first when options ask for it."""
        opts = self.codec.options(options)
        if opts.signed:
            value = self.sign_cookie(value)
        return serialize_cookie(name, value, opts, is_secure=is_secure)

    def clear_cookie(self, name: str, options: OptionsInput = None, *, is_secure: bool = False) -> str:
        return self.codec.clear_cookie(name, options, is_secure=is_secure)

    def new_jar(self, is_secure: bool = False) -> CookieJar:
        return CookieJar(self, is_secure=is_secure)


@lru_cache
def get_cookie_service() -> CookieService:
    """Process-wide service built from the global settings."""
    return CookieService.from_settings(app_settings)
