"""
Guardian Autopilot - Configuration Management
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings"""

    # FastAPI
    fastapi_env: str = "development"
    fastapi_host: str = "0.0.0.0"
    fastapi_port: int = 8000

    # Remote ticket system
    guardian_base_url: str = ""
    guardian_api_key: str = ""
    guardian_requests_endpoint: str = "/api/tickets/open"
    guardian_respond_endpoint: str = "/api/tickets/respond"
    guardian_resolve_endpoint: str = "/api/tickets/resolve"
    guardian_request_timeout: float = 30.0

    # Automation
    guardian_auto_responder_enabled: bool = True
    guardian_auto_resolve: bool = False
    guardian_max_parallel: int = 1  # accepted, never used for fan-out

    # Activity log
    activity_log_size: int = 50

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False
    )

    @property
    def remote_configured(self) -> bool:
        """Whether a remote ticket system base URL is set"""
        return bool(self.guardian_base_url.strip())


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
