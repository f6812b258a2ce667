from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    # ─────────── APP ───────────
    app_name: str = "Quote Broker"
    environment: str = "dev"
    log_level: str = "INFO"

    # ─────────── API ───────────
    api_prefix: str = "/api/v1"
    request_id_header: str = "X-Request-Id"
    cors_origins: List[str] = ["*"]

    # ─────────── DATABASE ───────────
    # Required, but checked per request so a missing value yields a 500
    database_url: Optional[str] = None

    # ─────────── JWT / AUTH ───────────
    jwt_secret_key: Optional[str] = None
    jwt_algorithm: str = "HS256"
    jwt_access_token_minutes: int = 1440  # 24 hours

    # ─────────── NOTIFICATIONS ───────────
    resend_api_key: Optional[str] = None
    resend_api_url: str = "https://api.resend.com/emails"
    notification_sender: str = "Quote Broker <notifications@quotebroker.local>"
    notification_timeout_seconds: float = 10.0
    app_base_url: str = "http://localhost:3000"

    # ─────────── STORAGE ───────────
    storage_dir: str = "storage/quotes"
    max_quote_file_bytes: int = 5 * 1024 * 1024

    # ─────────── SEED ───────────
    admin_email: Optional[str] = None
    admin_password: Optional[str] = None

    def missing_service_config(self) -> List[str]:
        required = {
            "DATABASE_URL": self.database_url,
            "JWT_SECRET_KEY": self.jwt_secret_key,
            "RESEND_API_KEY": self.resend_api_key,
        }
        return [name for name, value in required.items() if not value]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
