"""Configuration settings for the workout tracker API."""
import os
from typing import List, Literal


EnvironmentType = Literal["development", "staging", "production"]


class Settings:
    """Application settings."""

    # Environment
    ENVIRONMENT: EnvironmentType = "development"
    LOG_LEVEL: str = "INFO"

    # Supabase
    SUPABASE_URL: str | None = None
    SUPABASE_KEY: str | None = None
    SUPABASE_JWT_SECRET: str | None = None

    # Stripe
    STRIPE_SECRET_KEY: str | None = None
    STRIPE_WEBHOOK_SECRET: str | None = None

    # Public URL of the web app, used for checkout redirects
    APP_URL: str = "http://localhost:3000"
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    def __init__(self):
        # Environment
        env = os.getenv("ENVIRONMENT", "development").lower()
        if env in ("development", "staging", "production"):
            self.ENVIRONMENT = env  # type: ignore
        else:
            self.ENVIRONMENT = "development"
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

        # Supabase
        self.SUPABASE_URL = os.getenv("SUPABASE_URL")
        self.SUPABASE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY") or os.getenv("SUPABASE_ANON_KEY")
        self.SUPABASE_JWT_SECRET = os.getenv("SUPABASE_JWT_SECRET")

        # Stripe
        self.STRIPE_SECRET_KEY = os.getenv("STRIPE_SECRET_KEY")
        self.STRIPE_WEBHOOK_SECRET = os.getenv("STRIPE_WEBHOOK_SECRET")

        self.APP_URL = os.getenv("APP_URL", "http://localhost:3000").rstrip("/")
        origins = os.getenv("CORS_ORIGINS", "")
        self.CORS_ORIGINS = [o.strip() for o in origins.split(",") if o.strip()] or [self.APP_URL]


settings = Settings()
