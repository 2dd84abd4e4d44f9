from typing import List, Optional
from pydantic_settings import BaseSettings


DEFAULT_TOKEN_SECRET = "change-me-in-production"


class Settings(BaseSettings):
    # -------------------------------------------------
    # General
    # -------------------------------------------------
    PROJECT_NAME: str = "BMS API"
    ENV: str = "development"
    PORT: int = 5000

    # -------------------------------------------------
    # Frontend origins (comma separated)
    # -------------------------------------------------
    FRONTEND_ORIGINS: str = "http://localhost:5173"

    # -------------------------------------------------
    # Supabase (document store)
    # -------------------------------------------------
    SUPABASE_URL: Optional[str] = None
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = None

    # -------------------------------------------------
    # Bearer tokens
    # -------------------------------------------------
    ACCESS_TOKEN_SECRET: str = DEFAULT_TOKEN_SECRET
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    TOKEN_COOKIE_NAME: str = "token"

    # -------------------------------------------------
    # Listings
    # -------------------------------------------------
    APARTMENTS_PAGE_SIZE: int = 6

    # -------------------------------------------------
    # Reconciliation job (0 disables the schedule)
    # -------------------------------------------------
    RECONCILE_INTERVAL_MINUTES: int = 0

    # -------------------------------------------------
    # Model Config
    # -------------------------------------------------
    class Config:
        case_sensitive = True
        env_file = ".env"
        extra = "ignore"

    @property
    def is_production(self) -> bool:
        return self.ENV.lower() == "production"

    @property
    def cors_origins(self) -> List[str]:
        origins = [o.strip().rstrip("/") for o in self.FRONTEND_ORIGINS.split(",")]
        return sorted(set(o for o in origins if o))


# Instantiate settings
settings = Settings()
