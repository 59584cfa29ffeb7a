from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # App
    APP_NAME: str = "Policy Desk"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "postgresql://policydesk_user:policydesk_pass@db:5432/policydesk_db"

    # Frontend origin allowed through CORS (in addition to local dev)
    FRONTEND_URL: Optional[str] = None

    # Policy health: due within this many days counts as "due soon"
    DUE_SOON_DAYS: int = 7

    # Customer list badges
    HIGH_VALUE_PREMIUM: int = 50000
    NEW_CUSTOMER_DAYS: int = 30

    # Reports
    TREND_MONTHS: int = 6
    RECENT_ACTIVITY_LIMIT: int = 5

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
