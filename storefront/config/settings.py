from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Required for catalog writes when RLS is enabled
    products_table: str = "skincare_products"

    # Local storage
    storage_backend: str = "file"  # file | memory
    storage_dir: str = "data"
    client_cookie_name: str = "storefront_client"
    max_client_contexts: int = 1000  # Least recently used contexts are evicted past this

    # Session tokens
    token_ttl_seconds: int = 24 * 60 * 60
    reset_token_ttl_seconds: int = 60 * 60
    token_secret: str = "SECRET_KEY"  # Mixed into the signature segment; not a MAC key
    password_salt: str = "SALT_STRING"

    # Checkout
    free_shipping_threshold: float = 100.0
    shipping_cost: float = 10.0

    # App
    app_name: str = "storefront"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:4200,http://127.0.0.1:4200,http://localhost:3000"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"
    auth_rate_limit: str = "20/minute"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
