"""Application configuration loaded from config.yaml + environment variables.

Precedence, highest first: environment, `.env`, config.yaml, field defaults.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings

_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.yaml"

DEFAULT_JWT_SECRET = "change-me-in-production-please-0123456789"


def _load_yaml() -> dict:
    if _CONFIG_PATH.exists():
        with open(_CONFIG_PATH) as f:
            return yaml.safe_load(f) or {}
    return {}


_yaml = _load_yaml()


class _Section(BaseSettings):
    """Base for config sections: YAML values arrive as init kwargs and rank below env and .env."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @classmethod
    def settings_customise_sources(
        cls, settings_cls, init_settings, env_settings, dotenv_settings, file_secret_settings,
    ):
        return env_settings, dotenv_settings, init_settings, file_secret_settings


class JWTConfig(_Section):
    secret_key: str = DEFAULT_JWT_SECRET
    algorithm: str = "HS256"
    expire_minutes: int = 60 * 24

    model_config = {"env_prefix": "JWT_"}


class VerificationConfig(_Section):
    code_length: int = 6
    valid_seconds: int = 60 * 3
    cleanup_interval_seconds: int = 60 * 60

    model_config = {"env_prefix": "VERIFICATION_"}


class S3Config(_Section):
    bucket: str = "our-company-lunch"
    region: str = "ap-northeast-2"
    endpoint_url: str = ""
    access_key_id: str = ""
    secret_access_key: str = ""
    public_base_url: str = ""
    diner_max_image_count: int = 10
    thumbnail_size: tuple[int, int] = (320, 240)

    model_config = {"env_prefix": "S3_"}


class EmailConfig(_Section):
    resend_api_key: str = ""
    sender: str = "Our Company Lunch <noreply@ourcompanylunch.com>"

    model_config = {"env_prefix": "EMAIL_"}


class Settings(_Section):
    database_url: str = "sqlite+aiosqlite:///data/lunch.db"
    log_level: str = "INFO"
    jwt: JWTConfig = Field(default_factory=JWTConfig)
    verification: VerificationConfig = Field(default_factory=VerificationConfig)
    s3: S3Config = Field(default_factory=S3Config)
    email: EmailConfig = Field(default_factory=EmailConfig)


def load_settings(y: dict | None = None) -> Settings:
    """Build Settings from YAML defaults (config.yaml unless given) and env overrides."""
    y = _yaml if y is None else y
    kwargs = {
        "jwt": JWTConfig(**y.get("jwt", {})),
        "verification": VerificationConfig(**y.get("verification", {})),
        "s3": S3Config(**y.get("s3", {})),
        "email": EmailConfig(**y.get("email", {})),
    }
    db_url = (y.get("database") or {}).get("url")
    if db_url:
        kwargs["database_url"] = db_url
    if y.get("log_level"):
        kwargs["log_level"] = y["log_level"]
    return Settings(**kwargs)


@lru_cache
def get_settings() -> Settings:
    return load_settings()
