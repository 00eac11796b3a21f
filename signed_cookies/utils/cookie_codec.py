"""
Cookie Codec
Parses raw Cookie request headers and builds Set-Cookie response headers.

Parsing policy:
- pairs are separated by ';' and trimmed
- a pair without '=' is kept as a name with an empty value
- duplicate names: the last occurrence wins
- values are percent-decoded; a value that fails to decode is kept raw

Set-Cookie attributes are always emitted in the same order:
value, Expires or Max-Age, Domain, Path, HttpOnly, Secure, SameSite, Priority.
"""

import logging
import math
import re
import warnings
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Union
from urllib.parse import quote, unquote

from pydantic import ValidationError

from signed_cookies.models.cookie import CookieSerializeOptions
from signed_cookies.utils.errors import (
    CookieSizeWarning,
    InvalidCookieNameError,
    InvalidCookieOptionError,
    InvalidCookieValueError,
)

logger = logging.getLogger(__name__)

# RFC 7230 token
COOKIE_NAME_RE = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")
# Header field content without ';'
FIELD_CONTENT_RE = re.compile(r"^[\t\x20-\x3a\x3c-\x7e\x80-\xff]*$")
# encodeURIComponent leaves these unescaped besides alphanumerics and -_.
URI_COMPONENT_SAFE = "!~*'()"

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

SAME_SITE_VALUES = {"lax": "Lax", "strict": "Strict", "none": "None"}
PRIORITY_VALUES = {"low": "Low", "medium": "Medium", "high": "High"}

OptionsInput = Optional[Union[CookieSerializeOptions, Mapping[str, Any]]]


def encode_uri_component(value: str) -> str:
    return quote(value, safe=URI_COMPONENT_SAFE)


def _try_decode(name: str, value: str, decode: Callable[[str], str]) -> str:
    """Decode a cookie value, keeping the raw value when decoding fails."""
    if decode is _strict_unquote:
        try:
            return decode(value)
        except (UnicodeDecodeError, ValueError):
            return value

    # Host decoders may raise anything
    try:
        return decode(value)
    except Exception as e:
        logger.debug(f"Cookie '{name}' could not be decoded ({type(e).__name__}), keeping raw value")
        return value


def _strict_unquote(value: str) -> str:
    return unquote(value, errors="strict")


def parse_cookie(header: Optional[str], decode: Optional[Callable[[str], str]] = None) -> Dict[str, str]:
    """
    Parse a raw Cookie header into a name -> value mapping.

    Args:
        header: Raw header value, e.g. ``"a=1; b=%20x"``
        decode: Optional value decoder, defaults to strict percent-decoding

    Returns:
        Mapping of cookie names to decoded values
    """
    cookies: Dict[str, str] = {}
    if not header:
        return cookies

    decoder = decode or _strict_unquote
    for pair in header.split(";"):
        pair = pair.strip()
        if not pair:
            continue

        name, sep, value = pair.partition("=")
        name = name.strip()
        if not name:
            continue
        if not sep:
            cookies[name] = ""
            continue

        value = value.strip()
        if len(value) >= 2 and value[0] == '"' and value[-1] == '"':
            value = value[1:-1]

        if decode is None and "%" not in value:
            cookies[name] = value
        else:
            cookies[name] = _try_decode(name, value, decoder)

    return cookies


def coerce_options(options: OptionsInput) -> CookieSerializeOptions:
    """Validate a mapping of options, passing models through untouched."""
    if options is None:
        return CookieSerializeOptions()
    if isinstance(options, CookieSerializeOptions):
        return options
    try:
        return CookieSerializeOptions.model_validate(dict(options))
    except ValidationError as e:
        errors = e.errors()
        option = ".".join(str(loc) for loc in errors[0]["loc"]) if errors else "options"
        raise InvalidCookieOptionError(option, details=str(e)) from e


def merge_options(defaults: CookieSerializeOptions, options: OptionsInput) -> CookieSerializeOptions:
    """Overlay explicitly set caller options on top of instance defaults."""
    if options is None:
        return defaults.model_copy()
    overrides = coerce_options(options)
    return defaults.model_copy(update=overrides.model_dump(exclude_unset=True))


def format_http_date(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return format_datetime(value.astimezone(timezone.utc), usegmt=True)


def _validate_attribute(option: str, value: str) -> str:
    if not FIELD_CONTENT_RE.match(value):
        raise InvalidCookieOptionError(option, details=f"{option}={value!r}")
    return value


def serialize_cookie(
    name: str,
    value: str,
    options: OptionsInput = None,
    *,
    is_secure: bool = False,
) -> str:
    """
    Build a Set-Cookie header value.

    Args:
        name: Cookie name, must be an RFC 7230 token
        value: Cookie value (already signed if signing is wanted)
        options: Attribute set, model or mapping
        is_secure: Whether the connection is encrypted; resolves secure="auto"

    Returns:
        Header string; an oversized result also emits CookieSizeWarning

    Raises:
        InvalidCookieNameError: If the name is not a token
        InvalidCookieValueError: If the encoded value is not header-safe
        InvalidCookieOptionError: If an attribute value is invalid
    """
    opts = coerce_options(options)

    if not isinstance(value, str):
        raise TypeError("Cookie value must be provided as a string.")
    if not isinstance(name, str) or not COOKIE_NAME_RE.match(name):
        raise InvalidCookieNameError(str(name))

    encoded = opts.encode(value) if opts.encode else encode_uri_component(value)
    if not isinstance(encoded, str) or not FIELD_CONTENT_RE.match(encoded):
        raise InvalidCookieValueError(name)

    secure = opts.secure
    same_site = opts.same_site
    if secure == "auto":
        secure = bool(is_secure)
        if not secure:
            same_site = "lax"

    parts: List[str] = [f"{name}={encoded}"]

    if opts.expires is not None:
        parts.append(f"Expires={format_http_date(opts.expires)}")
    elif opts.max_age is not None:
        if not math.isfinite(opts.max_age):
            raise InvalidCookieOptionError("max_age", details=f"max_age={opts.max_age!r}")
        parts.append(f"Max-Age={math.floor(opts.max_age)}")

    if opts.domain:
        parts.append(f"Domain={_validate_attribute('domain', opts.domain)}")
    if opts.path:
        parts.append(f"Path={_validate_attribute('path', opts.path)}")
    if opts.http_only:
        parts.append("HttpOnly")
    if secure:
        parts.append("Secure")

    if same_site is True:
        parts.append("SameSite=Strict")
    elif same_site:
        parts.append(f"SameSite={SAME_SITE_VALUES[same_site]}")

    if opts.priority:
        parts.append(f"Priority={PRIORITY_VALUES[opts.priority]}")

    header = "; ".join(parts)

    size = len(header.encode("utf-8"))
    if opts.enable_warn_on_safe_limit and size > opts.warn_on_safe_limit:
        message = (
            f"Cookie '{name}' is {size} bytes, above the safe limit of "
            f"{opts.warn_on_safe_limit} bytes; user agents may drop it"
        )
        logger.warning(message)
        warnings.warn(message, CookieSizeWarning, stacklevel=2)

    return header


def clear_cookie(name: str, options: OptionsInput = None, *, is_secure: bool = False) -> str:
    """Build a Set-Cookie header that makes the browser drop ``name``."""
    opts = coerce_options(options).model_copy(
        update={"expires": EPOCH, "max_age": None, "signed": False}
    )
    return serialize_cookie(name, "", opts, is_secure=is_secure)


class CookieCodec:
    """
    Cookie parsing and serialization bound to instance-level defaults.
    Per-call options are merged over the defaults; only fields the caller
    set explicitly take precedence.
    """

    def __init__(self, defaults: OptionsInput = None, decode: Optional[Callable[[str], str]] = None):
        self.defaults = coerce_options(defaults)
        self.decode = decode

    def options(self, options: OptionsInput = None) -> CookieSerializeOptions:
        return merge_options(self.defaults, options)

    def parse(self, header: Optional[str]) -> Dict[str, str]:
        return parse_cookie(header, self.decode)

    def serialize(self, name: str, value: str, options: OptionsInput = None, *, is_secure: bool = False) -> str:
        return serialize_cookie(name, value, self.options(options), is_secure=is_secure)

    def clear_cookie(self, name: str, options: OptionsInput = None, *, is_secure: bool = False) -> str:
        return clear_cookie(name, self.options(options), is_secure=is_secure)
