# discovery_intake/core/settings.py
import json
from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    ENVIRONMENT: str = "local"  # local | development | production
    LOG_LEVEL: str = "INFO"

    # --- HubSpot ---
    HUBSPOT_TOKEN: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("HUBSPOT_TOKEN", "HUBSPOT_API_KEY"),
        description="Private app token, sent as Bearer",
    )
    HUBSPOT_BASE_URL: str = "https://api.hubapi.com"
    HUBSPOT_TIMEOUT_SECONDS: float = Field(10.0, gt=0)

    HUBSPOT_CONTACTS_PATH: str = "/crm/v3/objects/contacts"
    HUBSPOT_CONTACT_PATH: str = "/crm/v3/objects/contacts/{contact_id}"
    HUBSPOT_FILES_PATH: str = "/files/v3/files"
    HUBSPOT_NOTES_PATH: str = "/crm/v3/objects/notes"

    # Note -> Contact (HUBSPOT_DEFINED)
    HUBSPOT_NOTE_ASSOCIATION_TYPE_ID: int = 202
    HUBSPOT_PROPERTY_PREFIX: str = "wearthy_"
    HUBSPOT_FILES_FOLDER_PATH: str = "/discovery-call-photos"
    HUBSPOT_FILES_ACCESS: str = "PRIVATE"

    # Custom properties apart en vertraagd patchen (HubSpot indexing lag)
    HUBSPOT_DELAYED_UPDATE_ENABLED: bool = False
    HUBSPOT_DELAYED_UPDATE_SECONDS: float = Field(2.0, ge=0, le=10)
    HUBSPOT_DELAYED_UPDATE_ATTEMPTS: int = Field(1, ge=1, le=3)

    # --- Photos ---
    PHOTO_FILENAME_PREFIX: str = "discovery-call-photo"
    PHOTO_UPLOAD_CONCURRENCY: int = Field(1, ge=1, le=8)
    MAX_PHOTOS: int = Field(10, ge=0)
    # Starlette default is 1 MB per form field; data-URL foto's zijn groter
    FORM_MAX_PART_BYTES: int = Field(16 * 1024 * 1024, gt=0)

    # --- Copy ---
    NOTE_BODY: str = "Discovery call photos submitted via website form"
    SUCCESS_MESSAGE: str = "Thank you! Please select a time below to speak with Flora."

    # --- HTTP surface ---
    ALLOWED_ORIGINS: str = "*"
    RATE_LIMIT_INTAKE: str = "10/minute"
    SENTRY_DSN: Optional[str] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def allowed_origins(self) -> list[str]:
        """Comma-separated string or a JSON list."""
        raw = self.ALLOWED_ORIGINS.strip()
        if raw.startswith("["):
            return [str(o).strip() for o in json.loads(raw) if str(o).strip()]
        return [o.strip() for o in raw.split(",") if o.strip()]

    @property
    def has_token(self) -> bool:
        return bool(self.HUBSPOT_TOKEN and self.HUBSPOT_TOKEN.strip())

    def property_name(self, suffix: str) -> str:
        return f"{self.HUBSPOT_PROPERTY_PREFIX}{suffix}"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Singleton Settings instance (leest .env)."""
    s = Settings()
    if s.ENVIRONMENT.lower() == "development":
        s.LOG_LEVEL = "DEBUG"
    return s
