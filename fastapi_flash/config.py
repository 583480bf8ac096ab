"""Configuration management"""

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):  # type: ignore[misc]
    """Application settings"""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Flash cookies
    flash_secret_key: SecretStr | None = None  # Required in production
    flash_secure_cookies: bool = True  # Disable for local development over http

    # Logging
    log_level: str = "INFO"

    environment: str = "development"  # development, production


settings = Settings()
