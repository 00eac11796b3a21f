"""
Application Configuration
Cookie secrets and default Set-Cookie attributes, read from the environment.
"""

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Literal, Optional, Union
import os
from dotenv import load_dotenv

from signed_cookies.models.cookie import SAFE_SIZE_LIMIT, CookieSerializeOptions
from signed_cookies.utils.errors import CookieConfigurationError

load_dotenv()


class Settings(BaseSettings):
    """Application settings with proper validation and defaults."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Application settings
    app_name: str = os.getenv("APP_NAME", "Signed Cookies")
    app_version: str = os.getenv("APP_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "False").lower() == "true"

    # Signing: comma separated, first secret signs, the rest only verify
    cookie_secret: str = os.getenv("COOKIE_SECRET", "")
    cookie_algorithm: str = os.getenv("COOKIE_ALGORITHM", "sha256")

    # Default Set-Cookie attributes
    cookie_domain: Optional[str] = None
    cookie_path: str = "/"
    cookie_secure: Union[bool, Literal["auto"]] = True
    cookie_http_only: bool = True
    cookie_same_site: Optional[str] = None
    cookie_priority: Optional[str] = None

    # Safe-size warning
    cookie_enable_warn_on_safe_limit: bool = True
    cookie_warn_on_safe_limit: int = SAFE_SIZE_LIMIT

    # Honor X-Forwarded-Proto for secure="auto"; enable only behind a proxy that overwrites it
    cookie_trust_forwarded_proto: bool = False

    @field_validator("cookie_secure", mode="before")
    @classmethod
    def _secure_lower(cls, v):
        return v.strip().lower() if isinstance(v, str) else v

    @property
    def cookie_secret_list(self) -> List[str]:
        return [s.strip() for s in self.cookie_secret.split(",") if s.strip()]

    def parse_options(self) -> CookieSerializeOptions:
        """Instance-level defaults merged under every serialize call."""
        options = {
            "path": self.cookie_path,
            "secure": self.cookie_secure,
            "http_only": self.cookie_http_only,
            "enable_warn_on_safe_limit": self.cookie_enable_warn_on_safe_limit,
            "warn_on_safe_limit": self.cookie_warn_on_safe_limit,
        }
        if self.cookie_domain:
            options["domain"] = self.cookie_domain
        if self.cookie_same_site:
            options["same_site"] = self.cookie_same_site
        if self.cookie_priority:
            options["priority"] = self.cookie_priority
        try:
            return CookieSerializeOptions.model_validate(options)
        except ValidationError as e:
            raise CookieConfigurationError("Cookie attribute settings are invalid.", details=str(e)) from e


# Global settings instance
settings = Settings()
