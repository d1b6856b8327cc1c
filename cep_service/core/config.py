from functools import lru_cache
from typing import Any
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import os
from dotenv import load_dotenv


class Settings(BaseSettings):
    """Application configuration settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # API settings
    PROJECT_NAME: str = "CEP Race Service"

    # Server settings
    HOST: str = "0.0.0.0"
    PORT: int = 8080

    # Logging settings
    LOG_LEVEL: str = "INFO"
    ENABLE_STRUCTURED_LOGGING: bool = True

    # Upstream provider settings
    VIACEP_BASE_URL: str = "https://viacep.com.br"
    APICEP_BASE_URL: str = "https://cdn.apicep.com"

    # Socket-level bound for detached provider calls; the race deadline is separate
    UPSTREAM_SOCKET_TIMEOUT: float = 10.0  # seconds

    @field_validator("VIACEP_BASE_URL", "APICEP_BASE_URL", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: Any) -> str:
        """Store base URLs without a trailing slash so templates can append paths."""
        if isinstance(v, str):
            return v.rstrip("/")
        raise ValueError(v)


def load_env_file(env_file: str = ".env") -> None:
    """
    Load environment variables from specified .env file.

    Args:
        env_file: Path to the .env file. Defaults to ".env".
    """
    env_path = os.path.join(os.getcwd(), env_file)
    if os.path.exists(env_path):
        load_dotenv(env_path)


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings with caching for efficiency.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
