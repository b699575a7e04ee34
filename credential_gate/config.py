# credential_gate/config.py
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from credential_gate.models import DEFAULT_REALM_MESSAGE


class Settings(BaseSettings):
    SERVICE_NAME: str = "Credential Gate"
    LOG_LEVEL: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    SERVICE_PORT: int = Field(default=8080, validation_alias="SERVICE_PORT")

    # Empty when unset; create_app refuses to start without them
    GATE_USERNAME: str = Field(default="", validation_alias="GATE_USERNAME")
    GATE_PASSWORD: str = Field(default="", validation_alias="GATE_PASSWORD")
    GATE_REALM: str = Field(default=DEFAULT_REALM_MESSAGE, validation_alias="GATE_REALM")
    GATE_REJECTION_MESSAGE: str = Field(default="", validation_alias="GATE_REJECTION_MESSAGE")

    @field_validator('LOG_LEVEL', mode='before')
    @classmethod
    def normalize_log_level(cls, v: Any) -> str:
        if isinstance(v, str) and v.strip():
            return v.strip().upper()
        return "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


def get_settings() -> Settings:
    return Settings()
