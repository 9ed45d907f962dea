"""
Application configuration using Pydantic Settings
"""

from typing import List
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Upstream club REST API
    api_base_url: str = "http://localhost:8080/api"
    api_timeout_seconds: float = 10.0

    # Retry policy (linear backoff: backoff * attempt)
    retry_attempts: int = 3
    retry_backoff_seconds: float = 1.0

    # Polling
    floor_plan_poll_seconds: float = 15.0
    kitchen_poll_seconds: float = 15.0

    # Booking
    default_table_capacity: int = 4
    member_search_debounce_seconds: float = 0.3
    member_search_min_length: int = 1

    # Toasts
    toast_duration_seconds: float = 4.0
    toast_instruction_duration_seconds: float = 8.0

    # Auth
    login_path: str = "/login"

    # API Server
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_debug: bool = False
    cors_origins: str = "http://localhost:5173"

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
