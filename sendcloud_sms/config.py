"""Centralized configuration via pydantic-settings.

Override any value via environment variable (e.g., ``SMS_COUNTRY=HK``).
``SMS_TEMPLATES`` is a JSON list::

    SMS_TEMPLATES='[{"templateId": "101", "kind": "code", "country": "CN"}]'
"""

import logging
from functools import lru_cache

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings

from .countries import get_country
from .params import MsgTypeSource
from .signature import SignatureScheme
from .templates import Template

DEFAULT_ENDPOINT = "https://www.sendcloud.net/smsapi/send"


class Settings(BaseSettings):
    """SMS client settings loaded from environment variables."""

    # --- Account ---
    SENDCLOUD_SMS_USER: str = ""
    SENDCLOUD_SMS_KEY: SecretStr = SecretStr("")

    # --- Routing ---
    SMS_COUNTRY: str = "CN"  # Domestic country; blank falls back to CN
    SMS_TEMPLATES: list[Template] = []
    SMS_ENDPOINT: str = DEFAULT_ENDPOINT  # Used when a template has no endPoint
    SMS_MSG_TYPE_SOURCE: MsgTypeSource = MsgTypeSource.RAW
    SMS_SIGNATURE_SCHEME: SignatureScheme = SignatureScheme.DOUBLE_MD5

    # --- Transport ---
    SMS_TIMEOUT_SECONDS: float = 10.0

    # --- Observability ---
    LOG_LEVEL: str = "INFO"

    model_config = {"env_prefix": "", "case_sensitive": True}

    @field_validator("SMS_COUNTRY")
    @classmethod
    def validate_country(cls, v: str) -> str:
        """Upper-case the id and reject countries missing from the registry."""
        v = v.strip().upper() or "CN"
        if get_country(v) is None:
            raise ValueError(f"SMS_COUNTRY {v!r} is not a supported country")
        return v

    @field_validator("SMS_TIMEOUT_SECONDS")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("SMS_TIMEOUT_SECONDS must be positive")
        return v


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()


def configure_logging(settings: Settings | None = None) -> None:
    """Configure root logging for applications embedding the client."""
    settings = settings or get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
