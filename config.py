from pydantic_settings import BaseSettings
from functools import lru_cache

class Settings(BaseSettings):
    SHOP_URL: str
    SHOPIFY_ACCESS_TOKEN: str
    SHOPIFY_API_KEY: str = ""
    SHOPIFY_API_SECRET: str = ""
    SHOPIFY_API_VERSION: str = "2025-01"

    SUPABASE_URL: str = ""
    SUPABASE_SERVICE_ROLE_KEY: str = ""
    USERS_SCHEMA: str = "public"
    USERS_TABLE: str = "users"

    # Upper bounds per lookup so a stalled upstream can't hold a request open
    REMOTE_TIMEOUT_SECONDS: float = 10.0
    STORE_TIMEOUT_SECONDS: float = 5.0

    VERIFY_APP_PROXY_SIGNATURE: bool = False
    CORS_ALLOW_ORIGINS: list[str] = ["*"]
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

# Cache the settings instance for reuse
@lru_cache()
def get_settings() -> Settings:
    return Settings()
