import json
import os
from typing import Annotated, Any, Dict, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


def _build_default_database_url() -> str:
    host = os.getenv("POSTGRES_HOST", "localhost")
    port = os.getenv("POSTGRES_PORT", "5432")
    db = os.getenv("POSTGRES_DB", "gmpanel")
    user = os.getenv("POSTGRES_USER", "postgres")
    password = os.getenv("POSTGRES_PASSWORD", "postgres")
    return f"postgresql+psycopg2://{user}:{password}@{host}:{port}/{db}"


def _default_audit_storage() -> Dict[str, Any]:
    return {"class": "db", "table_name": "audit", "limit": 1000}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    PROJECT_NAME: str = "GM Panel API"
    API_V1_STR: str = "/api/v1"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    TIMEZONE: str = "UTC"

    SECRET_KEY: str = "dev-secret-change-me"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    SEED_ENABLED: bool = True
    MASTER_USERNAME: str = "admin"
    MASTER_PASSWORD: str = "admin123"
    MASTER_CALL_NAME: str = "Administrator"
    MASTER_ROLES: str = "ADMIN"

    DATABASE_URL: str = Field(default_factory=_build_default_database_url)
    CORS_ORIGINS: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: [
            "http://localhost:5174",
            "http://127.0.0.1:5174",
        ]
    )

    AUDIT_ENABLED: bool = True
    AUDIT_SECTIONS: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: ["user", "controller", "module", "device", "request"]
    )
    # overrides the attribute list of a section, e.g. {"user": ["userId"]}
    AUDIT_PROPERTIES: Dict[str, List[str]] = Field(default_factory=dict)
    AUDIT_STORAGE: Dict[str, Any] = Field(default_factory=_default_audit_storage)

    @field_validator("CORS_ORIGINS", "AUDIT_SECTIONS", mode="before")
    @classmethod
    def _split_comma_list(cls, value):
        if isinstance(value, str):
            if value.strip().startswith("["):
                return json.loads(value)
            return [v.strip() for v in value.split(",") if v.strip()]
        return value

    @field_validator("AUDIT_STORAGE", "AUDIT_PROPERTIES", mode="before")
    @classmethod
    def _parse_json_mapping(cls, value):
        if isinstance(value, str):
            return json.loads(value) if value.strip() else {}
        return value

    @field_validator("SECRET_KEY")
    @classmethod
    def _validate_secret_key(cls, value, info):
        env = str(info.data.get("ENV", "dev")).lower()
        if env != "dev" and (not value or value == "dev-secret-change-me"):
            raise ValueError("SECRET_KEY must be set in non-dev environments")
        return value

    @field_validator("SEED_ENABLED")
    @classmethod
    def _validate_seed_enabled(cls, value, info):
        env = str(info.data.get("ENV", "dev")).lower()
        if env != "dev" and value:
            raise ValueError("SEED_ENABLED must be false in non-dev environments")
        return value


settings = Settings()
