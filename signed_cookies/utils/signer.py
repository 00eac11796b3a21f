"""
HMAC cookie signer.
Tamper detection only: the value stays readable, the signature proves
it was produced by a holder of one of the secrets.
"""

import base64
import hashlib
import hmac
import logging
from typing import Protocol, Sequence, Tuple, Union, runtime_checkable

from signed_cookies.models.cookie import UnsignResult
from signed_cookies.utils.errors import CookieConfigurationError

logger = logging.getLogger(__name__)

SEPARATOR = "."
DEFAULT_ALGORITHM = "sha256"

SecretType = Union[str, bytes]
Secrets = Union[SecretType, Sequence[SecretType]]


@runtime_checkable
class SignerBase(Protocol):
    """Anything that can sign and unsign cookie values."""

    def sign(self, value: str) -> str:
        ...

    def unsign(self, signed_value: str) -> UnsignResult:
        ...


def b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _normalize_secrets(secrets: Secrets) -> Tuple[bytes, ...]:
    if isinstance(secrets, (str, bytes)):
        secrets = [secrets]
    normalized = []
    for secret in secrets:
        if isinstance(secret, str):
            secret = secret.encode("utf-8")
        elif not isinstance(secret, bytes):
            raise CookieConfigurationError(
                "Secret key must be a string or bytes.",
                details=f"got {type(secret).__name__}"
            )
        if not secret:
            raise CookieConfigurationError("Secret key must not be empty.")
        normalized.append(secret)
    if not normalized:
        raise CookieConfigurationError("At least one secret key is required.")
    return tuple(normalized)


def _validate_algorithm(algorithm: str) -> str:
    if not isinstance(algorithm, str) or not algorithm:
        raise CookieConfigurationError("Algorithm must be a non-empty string.")
    try:
        hmac.new(b"probe", digestmod=algorithm)
    except (ValueError, TypeError) as e:
        raise CookieConfigurationError(
            f"Algorithm {algorithm} is not supported.",
            details=str(e)
        ) from e
    return algorithm


class Signer:
    """
    Signs values with the first secret and verifies against every secret
    in order, so older secrets keep working during a rotation.

    Rotation means building a new Signer with the new secret first; an
    instance never changes after construction.
    """

    __slots__ = ("_secrets", "_algorithm")

    def __init__(self, secrets: Secrets, algorithm: str = DEFAULT_ALGORITHM) -> None:
        self._secrets = _normalize_secrets(secrets)
        self._algorithm = _validate_algorithm(algorithm)

    @property
    def algorithm(self) -> str:
        return self._algorithm

    @property
    def secret_count(self) -> int:
        return len(self._secrets)

    def _digest(self, secret: bytes, value: bytes) -> str:
        mac = hmac.new(secret, value, self._algorithm).digest()
        return b64url(mac)

    def sign(self, value: str) -> str:
        """
        Sign a cookie value.

        Args:
            value: Plain cookie value

        Returns:
            ``value`` followed by the separator and the base64url signature

        Raises:
            TypeError: If value is not a string
        """
        if not isinstance(value, str):
            raise TypeError("Cookie value must be provided as a string.")
        return f"{value}{SEPARATOR}{self._digest(self._secrets[0], value.encode('utf-8'))}"

    def unsign(self, signed_value: str) -> UnsignResult:
        """
        Verify a signed cookie value.

        A missing separator, text that is not encodable as UTF-8 (lone
        surrogates) or a signature that matches no secret is a normal
        outcome and yields ``UnsignResult.invalid()``.

        Raises:
            TypeError: If signed_value is not a string
        """
        if not isinstance(signed_value, str):
            raise TypeError("Signed cookie string must be provided.")

        value, sep, signature = signed_value.rpartition(SEPARATOR)
        if not sep:
            return UnsignResult.invalid()

        try:
            payload = value.encode("utf-8")
            actual = signature.encode("utf-8")
        except UnicodeEncodeError:
            logger.debug("Signed cookie is not valid UTF-8 text")
            return UnsignResult.invalid()

        for index, secret in enumerate(self._secrets):
            expected = self._digest(secret, payload).encode("ascii")
            if hmac.compare_digest(expected, actual):
                if index:
                    logger.debug(f"Cookie verified with rotated secret #{index}")
                return UnsignResult(valid=True, renew=index != 0, value=value)

        logger.debug("Cookie signature did not match any secret")
        return UnsignResult.invalid()

    def __setattr__(self, name, value):
        if hasattr(self, name):
            raise AttributeError(f"{type(self).__name__} is immutable")
        super().__setattr__(name, value)

    def __repr__(self) -> str:
        return f"Signer(secrets=<{len(self._secrets)}>, algorithm={self._algorithm!r})"


def signer_factory(secrets: Secrets, algorithm: str = DEFAULT_ALGORITHM) -> Signer:
    return Signer(secrets, algorithm)


def sign(value: str, secret: Secrets, algorithm: str = DEFAULT_ALGORITHM) -> str:
    """One-shot helper: sign ``value`` with ``secret``."""
    return Signer(secret, algorithm).sign(value)


def unsign(signed_value: str, secret: Secrets, algorithm: str = DEFAULT_ALGORITHM) -> UnsignResult:
    """One-shot helper: verify ``signed_value`` against ``secret``."""
    return Signer(secret, algorithm).unsign(signed_value)
