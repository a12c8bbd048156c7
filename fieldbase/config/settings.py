from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""  # anon key
    supabase_service_role_key: Optional[str] = None  # Store access and RPCs; required once RLS is enabled

    # App
    app_name: str = "fieldbase"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"
    auth_rate_limit: str = "20/minute"
    app_base_url: str = "http://localhost:3000"  # Used to build invitation links

    # Invitations
    invitation_ttl_days: int = 7

    # Records pagination
    records_default_page_size: int = 50
    records_max_page_size: int = 500

    # Sign-up: profiles are created asynchronously by an auth trigger
    profile_poll_attempts: int = 15
    profile_poll_delay_ms: int = 300

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
