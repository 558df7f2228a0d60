from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000)
    environment: Literal["production", "development", "test"] = Field(default="production")
    log_level: str = Field(default="INFO")
    cors_origins: str = Field(default="*")

    # Admin bootstrap
    admin_username: str = Field(default="admin")
    admin_password: Optional[str] = Field(default=None)
    secret_key: str = Field(...)  # Required, signs session tokens

    # JWT
    jwt_algorithm: str = Field(default="HS256")
    jwt_access_token_expire_minutes: int = Field(default=60 * 24)  # 24 hours

    # Passwords / 2FA
    bcrypt_rounds: int = Field(default=10, ge=10, le=16)
    totp_issuer: str = Field(default="Comet Admin")
    totp_valid_window: int = Field(default=2, ge=0, le=10)

    # Rate limiting
    rate_limit_window: int = Field(default=15 * 60)  # seconds
    rate_limit_max: int = Field(default=100)
    # Reverse proxies in front of the app that append to X-Forwarded-For
    trusted_proxy_count: int = Field(default=0, ge=0)

    # Database
    database_url: str = Field(default="sqlite+aiosqlite:///./data/comet_admin.db")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore"
    }

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
