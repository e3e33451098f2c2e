import os
from typing import Optional
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel


load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):
    # KeyCRM
    keycrm_api_base_url: str = os.getenv("KEYCRM_API_BASE_URL", "https://openapi.keycrm.app/v1")
    keycrm_api_key: Optional[str] = os.getenv("KEYCRM_API_KEY")
    keycrm_page_size: int = int(os.getenv("KEYCRM_PAGE_SIZE", "50"))
    keycrm_timeout_seconds: float = float(os.getenv("KEYCRM_TIMEOUT_SECONDS", "30"))

    # Rate limits (KeyCRM allows 60 requests per minute)
    keycrm_rate_limit_requests: int = int(os.getenv("KEYCRM_RATE_LIMIT_REQUESTS", "60"))
    keycrm_rate_limit_window_seconds: int = int(os.getenv("KEYCRM_RATE_LIMIT_WINDOW_SECONDS", "60"))
    rate_limit_backend: str = os.getenv("RATE_LIMIT_BACKEND", "memory")

    # Supabase
    supabase_url: str | None = os.getenv("SUPABASE_URL")
    supabase_service_role_key: str | None = os.getenv("SUPABASE_SERVICE_ROLE_KEY")

    # Catalog tables
    catalog_variant_table: str = os.getenv("CATALOG_VARIANT_TABLE", "product_attribute")
    catalog_product_table: str = os.getenv("CATALOG_PRODUCT_TABLE", "product")
    catalog_stock_table: str = os.getenv("CATALOG_STOCK_TABLE", "stock_available")
    sync_config_table: str = os.getenv("SYNC_CONFIG_TABLE", "sync_config")

    # Sync trigger
    sync_cron_key: Optional[str] = os.getenv("SYNC_CRON_KEY")
    sync_enabled: bool = _env_bool("SYNC_ENABLED", "true")
    sync_schedule_minutes: int = int(os.getenv("SYNC_SCHEDULE_MINUTES", "15"))
    sync_lock_enabled: bool = _env_bool("SYNC_LOCK_ENABLED", "true")
    sync_lock_ttl_seconds: int = int(os.getenv("SYNC_LOCK_TTL_SECONDS", "600"))
    stock_clamp_negative: bool = _env_bool("STOCK_CLAMP_NEGATIVE", "false")
    public_base_url: str = os.getenv("PUBLIC_BASE_URL", "http://localhost:8000")

    # Redis
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")

    # Celery
    celery_broker_url: str = os.getenv("CELERY_BROKER_URL", os.getenv("REDIS_URL", "redis://localhost:6379/0"))
    celery_result_backend: str = os.getenv("CELERY_RESULT_BACKEND", os.getenv("REDIS_URL", "redis://localhost:6379/0"))

    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def stocks_url(self) -> str:
        """Get the KeyCRM offer stocks endpoint."""
        return f"{self.keycrm_api_base_url.rstrip('/')}/offers/stocks"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = Settings()
