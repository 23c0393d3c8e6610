from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from messaging.types import DEFAULT_API_VERSION, GRAPH_API_BASE_URL


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Core
    SERVICE_NAME: str = Field(default="whatsapp-templates")
    LOG_LEVEL: str = Field(default="INFO")

    # WhatsApp Cloud API (Meta Business Manager -> WhatsApp -> API Setup)
    WHATSAPP_PHONE_NUMBER_ID: str = Field(default="")
    WHATSAPP_ACCESS_TOKEN: str = Field(default="")  # system user token, whatsapp_business_messaging
    WHATSAPP_API_VERSION: str = Field(default=DEFAULT_API_VERSION)
    WHATSAPP_API_BASE_URL: str = Field(default=GRAPH_API_BASE_URL)


settings = Settings()
