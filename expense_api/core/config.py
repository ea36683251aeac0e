# expense_api/core/config.py

from pathlib import Path
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Get the project root directory (where .env should be located)
BASE_DIR = Path(__file__).resolve().parent.parent.parent

DEFAULT_SECRET_KEY = "dev-secret-change"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(BASE_DIR / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # App Configuration
    APP_NAME: str = "Expense Tracker API"
    VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Database Configuration
    DATABASE_URL: str = f"sqlite+aiosqlite:///{BASE_DIR / 'data' / 'expense_app.db'}"
    DATABASE_ECHO: bool = False

    # JWT / Security Configuration
    SECRET_KEY: str = DEFAULT_SECRET_KEY
    ALGORITHM: str = "HS256"
    # One lifetime for password and Google sign-ins (10080 minutes = 7 days)
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 10080
    OAUTH_SIGNUP_TICKET_MINUTES: int = 15

    # CORS / frontend
    FRONTEND_ORIGIN: str = "http://localhost:5173"
    CORS_ORIGINS: str = ""

    # Google OAuth Configuration
    GOOGLE_CLIENT_ID: str = ""
    GOOGLE_CLIENT_SECRET: str = ""
    GOOGLE_REDIRECT_URI: str = ""
    GOOGLE_HTTP_TIMEOUT: float = 10.0

    # Profile defaults
    DEFAULT_CURRENCY: str = "INR"

    @field_validator("DEFAULT_CURRENCY")
    @classmethod
    def currency_upper(cls, value: str) -> str:
        return value.strip().upper()

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    @property
    def google_configured(self) -> bool:
        return bool(self.GOOGLE_CLIENT_ID and self.GOOGLE_CLIENT_SECRET and self.GOOGLE_REDIRECT_URI)

    @property
    def cors_origins(self) -> List[str]:
        origins = [self.FRONTEND_ORIGIN]
        origins.extend(o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip())
        # Preserve order, drop duplicates
        return list(dict.fromkeys(origins))


# Create a global settings instance
settings = Settings()
