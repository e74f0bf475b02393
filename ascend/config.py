"""
Ascend Goals API - Configuration
Application, database pool, logging, metrics and security settings.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ==========================================
    # APPLICATION
    # ==========================================
    env: str = "dev"  # dev | prod
    port: int = 3001
    frontend_dist: Optional[str] = None  # built frontend to serve at "/"
    seed_demo_data: bool = False

    # ==========================================
    # DATABASE
    # ==========================================
    db_url: str = "sqlite+aiosqlite:///./ascend.db"
    max_connections: int = 10
    connection_timeout_ms: int = 60_000
    query_timeout_ms: int = 30_000

    # ==========================================
    # LOGGING
    # ==========================================
    log_level: str = "INFO"
    log_file: str = "logs/app.log"  # only written in prod

    # ==========================================
    # MONITORING
    # ==========================================
    enable_metrics: bool = False
    metrics_port: int = 9090

    # ==========================================
    # SECURITY
    # ==========================================
    cors_origins: list[str] = ["http://localhost:3000"]
    rate_limit_enabled: bool = True
    rate_limit_window_ms: int = 15 * 60 * 1000  # 15 minutes
    rate_limit_max_requests: int = 100

    @property
    def is_production(self) -> bool:
        return self.env == "prod"


@lru_cache()
def get_settings() -> Settings:
    """Settings read once from the environment."""
    return Settings()
