"""Cookie models: serialize options, unsign results and engine options."""
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
from typing import Any, Callable, List, Literal, Optional, Union
from datetime import datetime, timedelta

SAFE_SIZE_LIMIT = 4096

SameSite = Union[bool, Literal["lax", "strict", "none"]]
Priority = Literal["low", "medium", "high"]
Secure = Union[bool, Literal["auto"]]


class CookieSerializeOptions(BaseModel):
    """
    Attribute set applied when serializing a Set-Cookie header.
    Field names are snake_case; camelCase aliases (httpOnly, sameSite,
    maxAge, ...) are accepted as well.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )

    domain: Optional[str] = Field(None, description="Domain attribute")
    encode: Optional[Callable[[str], str]] = Field(None, description="Custom value encoder, used verbatim")
    expires: Optional[datetime] = Field(None, description="Absolute expiry; wins over max_age")
    max_age: Optional[float] = Field(None, description="Relative expiry in seconds")
    http_only: bool = Field(True, description="HttpOnly attribute")
    path: Optional[str] = Field("/", description="Path attribute")
    priority: Optional[Priority] = Field(None, description="Priority attribute")
    same_site: Optional[SameSite] = Field(None, description="SameSite attribute")
    secure: Secure = Field(True, description="Secure attribute, or 'auto' to follow the transport")
    signed: bool = Field(False, description="Sign the value before serializing")
    enable_warn_on_safe_limit: bool = Field(True, description="Warn when the header exceeds the safe-size limit")
    warn_on_safe_limit: int = Field(SAFE_SIZE_LIMIT, gt=0, description="Safe-size limit in bytes")

    @field_validator("same_site", "priority", "secure", mode="before")
    @classmethod
    def _lowercase(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("max_age", mode="before")
    @classmethod
    def _max_age_seconds(cls, v: Any) -> Any:
        if isinstance(v, timedelta):
            return v.total_seconds()
        return v


class UnsignResult(BaseModel):
    """Outcome of verifying a signed value. Never raised, always returned."""
    model_config = ConfigDict(frozen=True)

    valid: bool
    renew: bool = False
    value: Optional[str] = None

    @model_validator(mode="after")
    def _invalid_carries_nothing(self) -> "UnsignResult":
        if not self.valid and (self.renew or self.value is not None):
            raise ValueError("an invalid result has no value and never renews")
        return self

    @classmethod
    def invalid(cls) -> "UnsignResult":
        return cls(valid=False, renew=False, value=None)


class CookiePluginOptions(BaseModel):
    """Options used to build a CookieService."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )

    secret: Optional[Any] = Field(None, description="Secret, ordered list of secrets, or a signer object")
    algorithm: str = Field("sha256", description="hashlib digest name used for HMAC")
    parse_options: CookieSerializeOptions = Field(default_factory=CookieSerializeOptions)


class CookieSetRequest(BaseModel):
    """Request body for setting a cookie through the API."""
    value: str = Field(..., description="Cookie value")
    signed: bool = Field(False, description="Sign the value with the current secret")
    max_age: Optional[int] = Field(None, ge=0, description="Lifetime in seconds")


class CookieSetResponse(BaseModel):
    """Response body for cookie mutation endpoints."""
    name: str
    signed: bool = False
    headers: List[str] = Field(default_factory=list)
